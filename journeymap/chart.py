"""Chart projector — maps a step sequence onto pain/opportunity curves.

Positive experience is drawn above the midline and negative below it, both
sharing one x-axis:

    x_i          = offset + i * slot_width
    y_positive_i = midline - ((positive_i - 1) / 4) * amplitude
    y_negative_i = midline + ((negative_i - 1) / 4) * amplitude

Level 1 sits on the midline, level 5 is `amplitude` away from it. The
projection is a pure function of its inputs.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from journeymap.config import ChartConfig
from journeymap.models import MAX_EXPERIENCE, MIN_EXPERIENCE, JourneyStep

Point = tuple[float, float]

_LEVEL_SPAN = MAX_EXPERIENCE - MIN_EXPERIENCE


@dataclass(frozen=True)
class ChartLayout:
    slot_width: float = 160
    offset: float = 80
    height: float = 400
    amplitude: float = 160

    @property
    def midline(self) -> float:
        return self.height / 2

    @classmethod
    def from_config(cls, config: ChartConfig) -> "ChartLayout":
        return cls(
            slot_width=config.slot_width,
            offset=config.offset,
            height=config.height,
            amplitude=config.amplitude,
        )


@dataclass(frozen=True)
class StepPoint:
    """Projected coordinates for one step."""
    index: int
    x: float
    y_positive: float
    y_negative: float
    title: str
    timeline_day: int
    pain_point_note: str | None = None


@dataclass(frozen=True)
class ChartProjection:
    layout: ChartLayout
    points: tuple[StepPoint, ...]
    positive_curve: tuple[Point, ...]
    negative_curve: tuple[Point, ...]
    positive_area: tuple[Point, ...]
    negative_area: tuple[Point, ...]
    width: float

    @property
    def height(self) -> float:
        return self.layout.height

    @property
    def midline(self) -> float:
        return self.layout.midline

    @staticmethod
    def svg_points(curve: Sequence[Point]) -> str:
        """Format a polyline as an SVG `points` attribute."""
        return " ".join(f"{x:g},{y:g}" for x, y in curve)


def experience_offset(level: int, amplitude: float) -> float:
    """Distance from the midline for an experience level."""
    return ((level - MIN_EXPERIENCE) / _LEVEL_SPAN) * amplitude


def _area(curve: tuple[Point, ...], midline: float) -> tuple[Point, ...]:
    """Close a curve against the midline into a fillable polygon."""
    if not curve:
        return ()
    return ((curve[0][0], midline), *curve, (curve[-1][0], midline))


def project_chart(
    steps: Sequence[JourneyStep],
    layout: ChartLayout | None = None,
) -> ChartProjection:
    """Project steps (sorted by order) into chart coordinates."""
    layout = layout or ChartLayout()
    ordered = sorted(steps, key=lambda s: s.order)
    mid = layout.midline

    points = tuple(
        StepPoint(
            index=i,
            x=layout.offset + i * layout.slot_width,
            y_positive=mid - experience_offset(step.positive_experience, layout.amplitude),
            y_negative=mid + experience_offset(step.negative_experience, layout.amplitude),
            title=step.title,
            timeline_day=step.timeline_day,
            pain_point_note=step.pain_point_note,
        )
        for i, step in enumerate(ordered)
    )
    positive_curve = tuple((p.x, p.y_positive) for p in points)
    negative_curve = tuple((p.x, p.y_negative) for p in points)

    if points:
        width = 2 * layout.offset + (len(points) - 1) * layout.slot_width
    else:
        width = 2 * layout.offset

    return ChartProjection(
        layout=layout,
        points=points,
        positive_curve=positive_curve,
        negative_curve=negative_curve,
        positive_area=_area(positive_curve, mid),
        negative_area=_area(negative_curve, mid),
        width=width,
    )
