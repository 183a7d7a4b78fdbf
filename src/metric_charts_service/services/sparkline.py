"""Sparkline geometry and badge document composition.

Everything here is pure string/number work; rasterization lives in
``services.rasterizer`` so the geometry can be tested without an image codec.

Badge layout (pixels)::

    +--------------------------------------------+  y=0
    | label                                      |  baseline y=13
    |                                            |
    |   ~~~~ sparkline band (y=20 .. y=36) ~~~~  |
    +--------------------------------------------+  y=40
    x=0   padding=8                     x=240
"""
from __future__ import annotations

from typing import Sequence

from metric_charts_service.domain.models import MetricPoint

WIDTH = 240
HEIGHT = 40
PADDING = 8
CORNER_RADIUS = 6
BAND_TOP = 20
BAND_HEIGHT = 16
CHART_WIDTH = WIDTH - 2 * PADDING
SINGLE_POINT_STROKE = 10

_XML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#39;",
}


def escape_xml(text: str) -> str:
    return "".join(_XML_ESCAPES.get(ch, ch) for ch in text)


def build_sparkline_path(points: Sequence[MetricPoint]) -> str:
    """Return SVG path data (``M``/``L`` commands, integer coordinates).

    Empty input gives an empty path. A single point is drawn as a short
    centred dash and a flat series as one line across the padded width, so
    neither case depends on the value itself.
    """
    if not points:
        return ""

    mid_y = BAND_TOP + BAND_HEIGHT // 2
    if len(points) == 1:
        x = WIDTH // 2
        half = SINGLE_POINT_STROKE // 2
        return f"M{x - half} {mid_y} L{x + half} {mid_y}"

    values = [p.value for p in points]
    min_val = min(values)
    max_val = max(values)
    # halved so the span of values near the float limits cannot overflow to inf
    half_span = max_val / 2 - min_val / 2
    if half_span == 0:
        return f"M{PADDING} {mid_y} L{WIDTH - PADDING} {mid_y}"

    timestamps = [p.timestamp for p in points]
    min_time = min(timestamps)
    raw_range = max(timestamps) - min_time
    time_range = max(raw_range, 1)
    last_index = len(points) - 1

    commands = []
    for i, point in enumerate(points):
        if raw_range > 0:
            x = PADDING + int((point.timestamp - min_time) / time_range * CHART_WIDTH)
        else:
            # every sample landed in the same second
            x = PADDING + i * CHART_WIDTH // last_index
        y = BAND_TOP + BAND_HEIGHT - int((point.value / 2 - min_val / 2) / half_span * BAND_HEIGHT)
        commands.append(f"{'M' if i == 0 else 'L'}{x} {y}")
    return " ".join(commands)


def build_badge_svg(path_data: str, label: str) -> str:
    """Compose the badge document around a sparkline path."""
    sparkline = (
        f'  <path d="{path_data}" fill="none" stroke="black" stroke-width="1.5" '
        f'stroke-linecap="round" stroke-linejoin="round"/>\n'
        if path_data
        else ""
    )
    return (
        f'<svg width="{WIDTH}" height="{HEIGHT}" viewBox="0 0 {WIDTH} {HEIGHT}" '
        f'xmlns="http://www.w3.org/2000/svg">\n'
        f'  <rect x="0" y="0" width="{WIDTH}" height="{HEIGHT}" fill="white"/>\n'
        f'  <rect x="0.5" y="0.5" width="{WIDTH - 1}" height="{HEIGHT - 1}" '
        f'rx="{CORNER_RADIUS}" ry="{CORNER_RADIUS}" fill="white" stroke="black" stroke-width="1"/>\n'
        f'  <text x="{PADDING}" y="13" font-family="monospace" font-size="11" '
        f'font-weight="bold" fill="black">{escape_xml(label)}</text>\n'
        f"{sparkline}"
        f"</svg>\n"
    )
