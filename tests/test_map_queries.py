"""Tests for the shared journey map query helpers."""

import asyncio

import pytest

from journeymap.errors import GenerationFailed, ValidationError
from journeymap.models import JourneyMapCreate, JourneyStep
from journeymap.output import map_queries as mq


class TestListJourneyMaps:
    def test_summaries(self, tmp_db, saved_map):
        maps = mq.list_journey_maps("idea-1", tmp_db)
        assert len(maps) == 1
        summary = maps[0]
        assert summary["id"] == saved_map
        assert summary["step_count"] == 4
        assert summary["span_days"] == 21
        assert summary["max_pain"] == 3

    def test_unknown_idea(self, tmp_db):
        assert mq.list_journey_maps("nope", tmp_db) == []

    def test_span_with_out_of_order_days(self, tmp_db):
        steps = [
            JourneyStep(order=1, title="Late", timeline_day=30),
            JourneyStep(order=2, title="Early", timeline_day=2),
            JourneyStep(order=3, title="Middle", timeline_day=10),
        ]
        tmp_db.create(JourneyMapCreate(idea_id="idea-2", title="Jumbled", steps=steps))
        assert mq.list_journey_maps("idea-2", tmp_db)[0]["span_days"] == 28


class TestGetJourneyMap:
    def test_wire_format(self, tmp_db, saved_map):
        data = mq.get_journey_map(saved_map, tmp_db)
        assert data["ideaId"] == "idea-1"
        assert [s["order"] for s in data["steps"]] == [1, 2, 3, 4]
        assert "timelineDay" in data["steps"][0]

    def test_not_found(self, tmp_db):
        with pytest.raises(ValidationError, match="not found"):
            mq.get_journey_map("nope", tmp_db)


class TestGetJourneyChart:
    def test_chart(self, tmp_db, saved_map, config):
        chart = mq.get_journey_chart(saved_map, tmp_db, config)
        assert chart["width"] == 640
        assert chart["midline"] == 200
        assert [p["x"] for p in chart["points"]] == [80, 240, 400, 560]
        assert chart["positive_polyline"] == "80,120 240,120 400,120 560,120"
        assert chart["negative_area"].startswith("80,200 ")


class TestRenderJourneyChart:
    def test_png(self, tmp_db, saved_map, config, tmp_path):
        path = mq.render_journey_chart(saved_map, tmp_db, config, output_dir=tmp_path)
        assert path == tmp_path / f"{saved_map}_journey.png"
        assert path.exists()


class TestDeleteJourneyMap:
    def test_delete(self, tmp_db, saved_map):
        result = mq.delete_journey_map(saved_map, tmp_db)
        assert result["status"] == "ok"
        assert "Onboarding" in result["message"]
        assert tmp_db.get(saved_map) is None


class TestGenerateJourneyMap:
    def test_generate_and_save(self, tmp_db, config, job_context, generated_draft, fake_generator):
        session = asyncio.run(mq.generate_journey_map(
            "idea-9", job_context, tmp_db, config, fake_generator(payload=generated_draft),
        ))
        saved = tmp_db.get(session.map_id)
        assert saved.idea_id == "idea-9"
        assert saved.ordered_steps[0].positive_experience == 5
        assert all(s.id for s in saved.steps)

    def test_dry_run(self, tmp_db, config, job_context, generated_draft, fake_generator):
        session = asyncio.run(mq.generate_journey_map(
            "idea-9", job_context, tmp_db, config,
            fake_generator(payload=generated_draft), save=False,
        ))
        assert session.map_id is None
        assert tmp_db.list_by_idea_id("idea-9") == []

    def test_failure_saves_nothing(self, tmp_db, config, job_context, fake_generator):
        with pytest.raises(GenerationFailed):
            asyncio.run(mq.generate_journey_map(
                "idea-9", job_context, tmp_db, config,
                fake_generator(error=RuntimeError("boom")),
            ))
        assert tmp_db.list_by_idea_id("idea-9") == []
