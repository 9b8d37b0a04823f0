"""Shared test fixtures for journey map tests."""

import asyncio
from typing import Any

import pytest

from journeymap.config import Config
from journeymap.db import JourneyMapDB
from journeymap.models import GenerationContext, JobToBeDone, JourneyMapCreate, JourneyStep


class FakeGenerator:
    """Generation service double. Optionally waits on `gate` before answering."""

    def __init__(
        self,
        payload: Any = None,
        error: BaseException | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.payload = payload
        self.error = error
        self.gate = gate
        self.calls = 0

    async def generate(self, context: GenerationContext) -> Any:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture()
def config(tmp_path):
    return Config(db_path=str(tmp_path / "test.db"))


@pytest.fixture()
def tmp_db(config):
    """Create a JourneyMapDB backed by a temp file."""
    db = JourneyMapDB(config)
    db.init_db()
    yield db
    db.close()


@pytest.fixture()
def three_steps():
    """Unsaved steps on days 0, 7, 14."""
    return [
        JourneyStep(order=1, title="Notice problem", timeline_day=0,
                    negative_experience=2, positive_experience=3),
        JourneyStep(order=2, title="Search options", timeline_day=7,
                    negative_experience=4, positive_experience=4),
        JourneyStep(order=3, title="Give up", timeline_day=14,
                    negative_experience=5, positive_experience=2,
                    pain_point_note="Nothing fits"),
    ]


@pytest.fixture()
def saved_map(tmp_db):
    """A persisted 4-step map for idea-1. Returns its ID."""
    steps = [
        JourneyStep(id=f"step-{c}", order=i, title=f"Step {c}", timeline_day=(i - 1) * 7)
        for i, c in enumerate("abcd", start=1)
    ]
    return tmp_db.create(JourneyMapCreate(
        idea_id="idea-1", title="Onboarding", subtitle="First week", steps=steps,
    ))


@pytest.fixture()
def job_context():
    return GenerationContext(
        job=JobToBeDone(
            customer="Small bakery owner",
            progress="Take online orders",
            circumstance="When walk-in traffic drops",
        ),
        idea_title="Order page",
        idea_description="A simple ordering page",
    )


@pytest.fixture()
def generated_draft():
    """A raw generated draft with out-of-range values."""
    return {
        "title": "Bakery goes online",
        "subtitle": "From first idea to first order",
        "steps": [
            {"order": 7, "title": "Realise sales dip", "timelineDay": 0,
             "negativeExperience": -2, "positiveExperience": 8},
            {"order": 3, "title": "Compare tools", "timelineDay": 5,
             "negativeExperience": 4, "positiveExperience": 4,
             "painPointNote": "Too many options"},
        ],
    }


@pytest.fixture()
def fake_generator():
    return FakeGenerator
