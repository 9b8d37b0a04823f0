"""Generation merger — turns an untrusted generated draft into editable steps.

`sanitize_steps` never raises: values are coerced, clamped or defaulted so
nothing out of range reaches the sequence editor. Only the envelope check in
`merge_draft` can fail, and it fails before any state is touched.
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from journeymap.errors import GenerationFailed
from journeymap.models import DEFAULT_EXPERIENCE, JourneyStep, MergedDraft
from journeymap.steps import DEFAULT_CADENCE_DAYS, clamp_experience

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _strip_json_fences(raw: str) -> str:
    """Strip markdown code fences from LLM JSON output."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    return raw


def parse_generation_text(text: str) -> dict[str, Any]:
    """Pull the JSON object out of raw model output."""
    match = _JSON_OBJECT_RE.search(_strip_json_fences(text or ""))
    if not match:
        raise GenerationFailed("Failed to parse journey map data: no JSON object found in response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationFailed(f"Failed to parse journey map data: {e}", cause=e) from e
    if not isinstance(data, dict):
        raise GenerationFailed("Failed to parse journey map data: top-level value is not an object")
    return data


# --- Value coercion ---


def _coerce_int(value: Any) -> int | None:
    """Best-effort integer from untrusted input. None when unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(round(value))
    return None


def _coerce_experience(value: Any) -> int:
    number = _coerce_int(value)
    if number is None:
        return DEFAULT_EXPERIENCE
    return clamp_experience(number)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _coerce_note(value: Any) -> str | None:
    text = _coerce_text(value).strip()
    return text or None


def sanitize_steps(
    raw_steps: list[Any],
    cadence_days: int = DEFAULT_CADENCE_DAYS,
) -> list[JourneyStep]:
    """Convert draft steps to valid JourneySteps in received order.

    Draft `order` values are ignored; order is the received position.
    Non-mapping entries become default steps.
    """
    steps: list[JourneyStep] = []
    for index, raw in enumerate(raw_steps):
        draft: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
        if not isinstance(raw, Mapping):
            logger.warning("Draft step %d is not an object, using defaults", index)

        day = _coerce_int(draft.get("timelineDay"))
        if day is None:
            day = steps[-1].timeline_day + cadence_days if steps else 0
        day = max(0, day)

        steps.append(JourneyStep(
            order=index + 1,
            title=_coerce_text(draft.get("title")),
            description=_coerce_text(draft.get("description")),
            outcome=_coerce_text(draft.get("outcome")),
            timeline_day=day,
            negative_experience=_coerce_experience(draft.get("negativeExperience")),
            positive_experience=_coerce_experience(draft.get("positiveExperience")),
            pain_point_note=_coerce_note(draft.get("painPointNote")),
        ))
    return steps


def merge_draft(
    payload: Any,
    cadence_days: int = DEFAULT_CADENCE_DAYS,
) -> MergedDraft:
    """Validate a generated draft envelope and sanitize its steps.

    Raises GenerationFailed when the payload is not an object, has no
    title, or has no `steps` list.
    """
    if not isinstance(payload, Mapping):
        raise GenerationFailed("Invalid journey map format: expected an object")
    raw_steps = payload.get("steps")
    if not isinstance(raw_steps, list):
        raise GenerationFailed("Invalid journey map format: missing steps")

    title = _coerce_text(payload.get("title")).strip()
    if not title:
        raise GenerationFailed("Invalid journey map format: missing title")

    merged = MergedDraft(
        title=title,
        subtitle=_coerce_note(payload.get("subtitle")),
        steps=sanitize_steps(raw_steps, cadence_days),
    )
    logger.info("Merged generated draft %r with %d steps", merged.title, len(merged.steps))
    return merged
