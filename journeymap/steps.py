"""Step model helpers — construction defaults and invariant checks."""

from collections.abc import Sequence

from journeymap.models import MAX_EXPERIENCE, MIN_EXPERIENCE, JourneyStep

DEFAULT_CADENCE_DAYS = 7


def clamp_experience(value: int) -> int:
    """Clamp an experience score into [1, 5]."""
    return max(MIN_EXPERIENCE, min(MAX_EXPERIENCE, value))


def is_valid_step(step: JourneyStep) -> bool:
    return (
        MIN_EXPERIENCE <= step.negative_experience <= MAX_EXPERIENCE
        and MIN_EXPERIENCE <= step.positive_experience <= MAX_EXPERIENCE
        and step.order >= 1
        and step.timeline_day >= 0
    )


def next_timeline_day(
    sequence: Sequence[JourneyStep],
    cadence_days: int = DEFAULT_CADENCE_DAYS,
) -> int:
    """Day for a step appended after the last one: previous + cadence, or 0."""
    if not sequence:
        return 0
    return sequence[-1].timeline_day + cadence_days


def new_step(
    sequence: Sequence[JourneyStep],
    cadence_days: int = DEFAULT_CADENCE_DAYS,
) -> JourneyStep:
    """Build the default step that would follow `sequence`.

    Does not append; the caller owns the sequence.
    """
    return JourneyStep(
        order=len(sequence) + 1,
        timeline_day=next_timeline_day(sequence, cadence_days),
    )
