"""Editing session — owns one in-memory journey map draft until save.

All edits are synchronous. `generate` and `save` are the suspending
operations; they share a lock so a save waits for an in-flight generation
and at most one generation runs per draft. The chart projection is
recomputed after every mutation.
"""

import asyncio
import logging
from typing import Any

from journeymap import sequence
from journeymap.chart import ChartLayout, ChartProjection, project_chart
from journeymap.commit import assign_step_ids, validate_for_save
from journeymap.config import Config
from journeymap.db import JourneyMapDB
from journeymap.errors import (
    GenerationFailed,
    GenerationInProgress,
    PersistenceFailed,
    ValidationError,
)
from journeymap.generation import GenerationService
from journeymap.merger import merge_draft
from journeymap.models import (
    GenerationContext,
    JourneyMap,
    JourneyMapCreate,
    JourneyStep,
    MergedDraft,
)

logger = logging.getLogger(__name__)


class EditingSession:
    """A single-author editing context for one journey map draft."""

    def __init__(
        self,
        db: JourneyMapDB,
        idea_id: str,
        *,
        config: Config | None = None,
        generator: GenerationService | None = None,
        title: str = "",
        subtitle: str | None = None,
        steps: list[JourneyStep] | None = None,
        map_id: str | None = None,
        archetype_id: str | None = None,
        created_by: str | None = None,
    ) -> None:
        self.db = db
        self.config = config or Config()
        self.generator = generator
        self.idea_id = idea_id
        self.title = title
        self.subtitle = subtitle
        self.map_id = map_id
        self.archetype_id = archetype_id
        self.created_by = created_by
        self.layout = ChartLayout.from_config(self.config.chart)

        ordered = sorted(steps or [], key=lambda s: s.order)
        self._saved_ids: list[str] = [s.id or "" for s in ordered] if map_id else []
        self._lock = asyncio.Lock()
        self._generating = False
        self._saving = False
        self._steps: list[JourneyStep] = []
        self._chart: ChartProjection
        self._set_steps(sequence.reindex(ordered))

    @classmethod
    def open(
        cls,
        db: JourneyMapDB,
        map_id: str,
        *,
        config: Config | None = None,
        generator: GenerationService | None = None,
    ) -> "EditingSession":
        """Start editing an existing map."""
        journey_map = db.get(map_id)
        if journey_map is None:
            raise ValidationError(f"Journey map not found: {map_id}")
        return cls.from_map(journey_map, db, config=config, generator=generator)

    @classmethod
    def from_map(
        cls,
        journey_map: JourneyMap,
        db: JourneyMapDB,
        *,
        config: Config | None = None,
        generator: GenerationService | None = None,
    ) -> "EditingSession":
        return cls(
            db,
            journey_map.idea_id,
            config=config,
            generator=generator,
            title=journey_map.title,
            subtitle=journey_map.subtitle,
            steps=journey_map.ordered_steps,
            map_id=journey_map.id,
            archetype_id=journey_map.archetype_id,
            created_by=journey_map.created_by,
        )

    # --- State ---

    @property
    def steps(self) -> tuple[JourneyStep, ...]:
        return tuple(self._steps)

    @property
    def chart(self) -> ChartProjection:
        return self._chart

    @property
    def generating(self) -> bool:
        return self._generating

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def is_new(self) -> bool:
        return self.map_id is None

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the draft."""
        return {
            "map_id": self.map_id,
            "idea_id": self.idea_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "steps": [s.model_dump(by_alias=True) for s in self._steps],
        }

    def _set_steps(self, steps: list[JourneyStep]) -> None:
        self._steps = steps
        self._chart = project_chart(self._steps, self.layout)

    # --- Edits ---

    def add_step(self) -> JourneyStep:
        self._set_steps(sequence.add_step(self._steps, self.config.editor.cadence_days))
        return self._steps[-1]

    def remove_step(self, index: int) -> None:
        self._set_steps(sequence.remove_step(self._steps, index))

    def update_step(self, index: int, **fields: Any) -> JourneyStep:
        self._set_steps(sequence.update_step(self._steps, index, **fields))
        return self._steps[index]

    def set_title(self, title: str, subtitle: str | None = None) -> None:
        self.title = title
        self.subtitle = subtitle

    # --- Generation ---

    async def generate(self, context: GenerationContext) -> MergedDraft:
        """Replace the draft with a generated one.

        On any failure the draft is left exactly as it was and
        GenerationFailed is raised with the cause attached.
        """
        if self.generator is None:
            raise ValidationError("No generation service configured")
        if self._lock.locked():
            raise GenerationInProgress("A generation or save is already in progress for this draft")

        async with self._lock:
            self._generating = True
            try:
                try:
                    payload = await self.generator.generate(context)
                except (GenerationFailed, ValidationError):
                    raise
                except Exception as e:
                    raise GenerationFailed(f"Failed to generate journey map: {e}", cause=e) from e
                merged = merge_draft(payload, self.config.editor.cadence_days)
            except GenerationFailed as e:
                logger.warning("Generation failed, draft unchanged: %s", e)
                raise
            finally:
                self._generating = False

            self.title = merged.title
            self.subtitle = merged.subtitle
            self._set_steps(merged.steps)
            logger.info("Draft replaced by generated map with %d steps", len(merged.steps))
            return merged

    # --- Persistence ---

    async def save(self) -> str:
        """Commit the draft as a whole. Returns the map ID.

        Waits for any in-flight generation. On PersistenceFailed the draft
        is kept as-is so no edits are lost.
        """
        async with self._lock:
            validate_for_save(self.title, self.idea_id)
            steps = assign_step_ids(sequence.reindex(self._steps), self._saved_ids)
            title = self.title.strip()
            subtitle = self.subtitle or None

            self._saving = True
            try:
                if self.map_id is None:
                    map_id = self.db.create(JourneyMapCreate(
                        idea_id=self.idea_id,
                        title=title,
                        subtitle=subtitle,
                        steps=steps,
                        archetype_id=self.archetype_id,
                        created_by=self.created_by,
                    ))
                else:
                    map_id = self.map_id
                    self.db.update(
                        map_id,
                        title=title,
                        subtitle=subtitle,
                        steps=steps,
                        archetype_id=self.archetype_id,
                    )
            except PersistenceFailed:
                logger.error("Save failed, keeping unsaved draft")
                raise
            finally:
                self._saving = False

            self.map_id = map_id
            self.title = title
            self.subtitle = subtitle
            self._saved_ids = [s.id or "" for s in steps]
            self._set_steps(steps)
            return map_id

    def delete(self) -> None:
        if self.map_id is None:
            raise ValidationError("Journey map has not been saved")
        self.db.delete(self.map_id)
        self.map_id = None
        self._saved_ids = []
