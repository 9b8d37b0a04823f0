"""Journey chart image — rasterises a chart projection to PNG.

Opportunity (positive) is filled above the midline, pain (negative) below,
with one column per step labelled by title and timeline day.
"""

import logging
import math
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from journeymap.chart import ChartProjection, Point

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    path = _FONT_BOLD if bold else _FONT_REGULAR
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        return ImageFont.load_default(size=size)


# --- Colors ---

BG = (13, 17, 23)
TEXT = (230, 237, 243)
TEXT_DIM = (110, 118, 129)
DIVIDER = (48, 54, 61)

POSITIVE_LINE = (63, 185, 80)
POSITIVE_FILL = (14, 68, 41)
NEGATIVE_LINE = (248, 81, 73)
NEGATIVE_FILL = (73, 22, 24)

# --- Layout ---

HEADER_HEIGHT = 56
LABEL_HEIGHT = 48
MARKER_RADIUS = 5
LINE_WIDTH = 3
MIN_WIDTH = 320


def _shift(points: tuple[Point, ...], dy: float, scale: int) -> list[tuple[float, float]]:
    return [(x * scale, (y + dy) * scale) for x, y in points]


def render_chart_png(
    projection: ChartProjection,
    output_path: Path,
    title: str | None = None,
    scale: int = 1,
) -> Path:
    """Render the projection as a PNG image. Returns the output path."""
    width = max(int(math.ceil(projection.width * scale)), MIN_WIDTH)
    height = int(math.ceil((HEADER_HEIGHT + projection.height + LABEL_HEIGHT) * scale))
    top = HEADER_HEIGHT

    img = Image.new("RGB", (width, height), BG)
    draw = ImageDraw.Draw(img)

    # --- Header ---
    draw.text((16 * scale, 12 * scale), title or "Journey map", font=_font(18 * scale, bold=True), fill=TEXT)
    draw.text(
        (16 * scale, 36 * scale),
        f"{len(projection.points)} steps · opportunity above, pain below",
        font=_font(11 * scale),
        fill=TEXT_DIM,
    )

    # --- Areas ---
    if len(projection.points) > 1:
        draw.polygon(_shift(projection.positive_area, top, scale), fill=POSITIVE_FILL)
        draw.polygon(_shift(projection.negative_area, top, scale), fill=NEGATIVE_FILL)

    # --- Midline ---
    mid_y = (projection.midline + top) * scale
    draw.line([(0, mid_y), (width, mid_y)], fill=DIVIDER, width=max(1, scale))

    # --- Curves and markers ---
    for curve, color in (
        (projection.positive_curve, POSITIVE_LINE),
        (projection.negative_curve, NEGATIVE_LINE),
    ):
        shifted = _shift(curve, top, scale)
        if len(shifted) > 1:
            draw.line(shifted, fill=color, width=LINE_WIDTH * scale, joint="curve")
        r = MARKER_RADIUS * scale
        for x, y in shifted:
            draw.ellipse([x - r, y - r, x + r, y + r], fill=color, outline=BG)

    # --- Step labels ---
    label_y = (top + projection.height + 6) * scale
    label_font = _font(10 * scale)
    for p in projection.points:
        cx = p.x * scale
        name = p.title[:22] or f"Step {p.index + 1}"
        for row, (text, color) in enumerate(((name, TEXT), (f"Day {p.timeline_day}", TEXT_DIM))):
            tw = draw.textlength(text, font=label_font)
            draw.text((cx - tw / 2, label_y + row * 16 * scale), text, font=label_font, fill=color)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(output_path), "PNG")
    logger.info("Chart saved to %s (%dx%d)", output_path, width, height)
    return output_path
