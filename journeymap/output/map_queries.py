"""Read/edit helpers shared by the CLI and MCP server. Return plain dicts."""

import logging
from pathlib import Path

from journeymap.chart import ChartLayout, project_chart
from journeymap.config import Config
from journeymap.db import JourneyMapDB
from journeymap.errors import ValidationError
from journeymap.generation import GenerationService
from journeymap.models import GenerationContext, JourneyMap
from journeymap.output.chart_image import render_chart_png
from journeymap.session import EditingSession

logger = logging.getLogger(__name__)


def _require_map(map_id: str, db: JourneyMapDB) -> JourneyMap:
    journey_map = db.get(map_id)
    if journey_map is None:
        raise ValidationError(f"Journey map not found: {map_id}")
    return journey_map


def summarize_map(journey_map: JourneyMap) -> dict[str, object]:
    steps = journey_map.ordered_steps
    days = [s.timeline_day for s in steps]
    return {
        "id": journey_map.id,
        "idea_id": journey_map.idea_id,
        "title": journey_map.title,
        "subtitle": journey_map.subtitle,
        "step_count": len(steps),
        "span_days": max(days) - min(days) if days else 0,
        "max_pain": max((s.negative_experience for s in steps), default=None),
        "updated_at": journey_map.updated_at,
    }


def list_journey_maps(idea_id: str, db: JourneyMapDB) -> list[dict[str, object]]:
    return [summarize_map(m) for m in db.list_by_idea_id(idea_id)]


def get_journey_map(map_id: str, db: JourneyMapDB) -> dict[str, object]:
    """Full map with steps in order, using the stored wire field names."""
    journey_map = _require_map(map_id, db)
    data = journey_map.model_dump(by_alias=True, exclude={"steps"})
    data["steps"] = [s.model_dump(by_alias=True) for s in journey_map.ordered_steps]
    return data


def get_journey_chart(map_id: str, db: JourneyMapDB, config: Config) -> dict[str, object]:
    """Chart coordinates plus SVG point strings for a saved map."""
    journey_map = _require_map(map_id, db)
    projection = project_chart(journey_map.steps, ChartLayout.from_config(config.chart))
    return {
        "width": projection.width,
        "height": projection.height,
        "midline": projection.midline,
        "points": [
            {
                "x": p.x,
                "y_positive": p.y_positive,
                "y_negative": p.y_negative,
                "title": p.title,
                "timeline_day": p.timeline_day,
            }
            for p in projection.points
        ],
        "positive_polyline": projection.svg_points(projection.positive_curve),
        "negative_polyline": projection.svg_points(projection.negative_curve),
        "positive_area": projection.svg_points(projection.positive_area),
        "negative_area": projection.svg_points(projection.negative_area),
    }


def render_journey_chart(
    map_id: str,
    db: JourneyMapDB,
    config: Config,
    output_dir: Path | None = None,
) -> Path:
    """Render a saved map's chart to PNG. Returns output path."""
    journey_map = _require_map(map_id, db)
    projection = project_chart(journey_map.steps, ChartLayout.from_config(config.chart))
    if output_dir is None:
        output_dir = Path("data/charts")
    return render_chart_png(
        projection,
        output_dir / f"{map_id}_journey.png",
        title=journey_map.title,
        scale=config.chart.render_scale,
    )


def delete_journey_map(map_id: str, db: JourneyMapDB) -> dict[str, str]:
    journey_map = _require_map(map_id, db)
    db.delete(map_id)
    return {"status": "ok", "message": f"Deleted journey map '{journey_map.title}'"}


async def generate_journey_map(
    idea_id: str,
    context: GenerationContext,
    db: JourneyMapDB,
    config: Config,
    generator: GenerationService,
    save: bool = True,
) -> EditingSession:
    """Generate a new draft for an idea and optionally save it."""
    session = EditingSession(db, idea_id, config=config, generator=generator)
    await session.generate(context)
    if save:
        await session.save()
        logger.info("Saved generated journey map %s for idea %s", session.map_id, idea_id)
    return session
