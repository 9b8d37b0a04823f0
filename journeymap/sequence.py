"""Sequence editor — structural edits over an ordered list of steps.

Every operation returns a new list and leaves its input untouched. After any
structural edit the explicit `reindex` pass renumbers `order` to the 1-based
array position; `timeline_day` is never renumbered.
"""

import logging
from collections.abc import Sequence
from typing import Any

import pydantic

from journeymap.errors import IndexOutOfRange, ValidationError
from journeymap.models import JourneyStep
from journeymap.steps import DEFAULT_CADENCE_DAYS, new_step

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "title",
    "description",
    "outcome",
    "timeline_day",
    "negative_experience",
    "positive_experience",
    "pain_point_note",
})


def reindex(sequence: Sequence[JourneyStep]) -> list[JourneyStep]:
    """Renumber every step's order to its 1-based position."""
    return [
        step if step.order == i else step.model_copy(update={"order": i})
        for i, step in enumerate(sequence, start=1)
    ]


def _check_index(sequence: Sequence[JourneyStep], index: int) -> None:
    if index < 0 or index >= len(sequence):
        raise IndexOutOfRange(index, len(sequence))


def add_step(
    sequence: Sequence[JourneyStep],
    cadence_days: int = DEFAULT_CADENCE_DAYS,
) -> list[JourneyStep]:
    """Append a default step at the end."""
    step = new_step(sequence, cadence_days)
    logger.debug("Adding step %d (day %d)", step.order, step.timeline_day)
    return reindex([*sequence, step])


def remove_step(sequence: Sequence[JourneyStep], index: int) -> list[JourneyStep]:
    """Remove the step at `index` and renumber the rest."""
    _check_index(sequence, index)
    remaining = [step for i, step in enumerate(sequence) if i != index]
    logger.debug("Removed step at index %d, %d remaining", index, len(remaining))
    return reindex(remaining)


def update_step(
    sequence: Sequence[JourneyStep],
    index: int,
    **fields: Any,
) -> list[JourneyStep]:
    """Edit fields of one step. Identity and order are not editable.

    Raises ValidationError for unknown fields or out-of-range values, in
    which case nothing changes.
    """
    _check_index(sequence, index)
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

    current = sequence[index]
    try:
        updated = JourneyStep.model_validate({**current.model_dump(), **fields})
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid step values: {e.errors()[0]['msg']}") from e

    result = list(sequence)
    result[index] = updated
    return result
