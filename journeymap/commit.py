"""Commit helpers — id assignment and save-time validation.

Ids are matched by position against the previously saved sequence: a step
keeps its id only if the saved sequence had that same id at the same
position. Anything else gets a newly minted id, so a removal or insertion
mid-sequence reassigns ids for every later step. This is not per-step
identity tracking.
"""

import logging
import uuid
from collections.abc import Callable, Sequence

from journeymap.errors import ValidationError
from journeymap.models import JourneyStep

logger = logging.getLogger(__name__)


def mint_step_id() -> str:
    return f"step-{uuid.uuid4().hex}"


def assign_step_ids(
    steps: Sequence[JourneyStep],
    previous_ids: Sequence[str] = (),
    id_factory: Callable[[], str] = mint_step_id,
) -> list[JourneyStep]:
    """Return steps with an id at every position."""
    result: list[JourneyStep] = []
    minted = 0
    for i, step in enumerate(steps):
        if step.id and i < len(previous_ids) and previous_ids[i] == step.id:
            result.append(step)
            continue
        result.append(step.model_copy(update={"id": id_factory()}))
        minted += 1
    logger.debug("Assigned ids to %d steps (%d minted)", len(result), minted)
    return result


def validate_for_save(title: str, idea_id: str | None) -> None:
    """Reject a save that would persist an unusable map."""
    if not title or not title.strip():
        raise ValidationError("Journey map title is required")
    if not idea_id:
        raise ValidationError("Journey map must reference an idea")
