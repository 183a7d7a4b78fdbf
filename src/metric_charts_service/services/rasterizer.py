"""Rasterize badge SVG documents to PNG with matplotlib's Agg backend.

Only the subset of SVG that ``services.sparkline`` emits is understood:
``rect`` (optionally rounded), ``text`` and ``path`` with absolute or
relative ``M``/``L`` commands, styled through presentation attributes.
"""
from __future__ import annotations

import io
import re
import threading
import xml.etree.ElementTree as ET
from typing import Sequence

from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch, PathPatch, Rectangle
from matplotlib.path import Path as MplPath

from metric_charts_service.core.exceptions import RenderError
from metric_charts_service.domain.models import MetricPoint
from metric_charts_service.services.sparkline import build_badge_svg, build_sparkline_path

# At 72 dpi one point is one pixel, so SVG user units map 1:1.
DPI = 72

_PATH_TOKEN = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# matplotlib's font and text-layout caches are not thread-safe
_render_lock = threading.Lock()


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _length(elem: ET.Element, name: str, default: float = 0.0) -> float:
    raw = elem.get(name)
    if raw is None:
        return default
    return float(raw.strip().removesuffix("px"))


def _color(value: str | None, default: str) -> str:
    if value is None:
        return default
    return value.strip()


def parse_path_data(data: str) -> MplPath:
    """Convert ``M``/``L`` path data into a matplotlib path."""
    tokens = _PATH_TOKEN.findall(data)
    vertices: list[tuple[float, float]] = []
    codes: list[int] = []
    command: str | None = None
    cursor = (0.0, 0.0)
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.isalpha():
            if token not in "MmLl":
                raise ValueError(f"unsupported path command {token!r}")
            command = token
            i += 1
            continue
        if command is None or i + 1 >= len(tokens):
            raise ValueError("malformed path data")
        x, y = float(tokens[i]), float(tokens[i + 1])
        if command.islower():
            x, y = cursor[0] + x, cursor[1] + y
        codes.append(MplPath.MOVETO if command in "Mm" else MplPath.LINETO)
        vertices.append((x, y))
        cursor = (x, y)
        # extra coordinate pairs after a moveto are implicit linetos
        if command == "M":
            command = "L"
        elif command == "m":
            command = "l"
        i += 2
    if not vertices:
        raise ValueError("empty path data")
    return MplPath(vertices, codes)


def _draw_rect(ax, elem: ET.Element) -> None:  # noqa: ANN001 (matplotlib Axes)
    x, y = _length(elem, "x"), _length(elem, "y")
    width, height = _length(elem, "width"), _length(elem, "height")
    radius = _length(elem, "rx", _length(elem, "ry"))
    stroke = _color(elem.get("stroke"), "none")
    style = {
        "facecolor": _color(elem.get("fill"), "black"),
        "edgecolor": stroke,
        "linewidth": _length(elem, "stroke-width", 1.0) if stroke != "none" else 0.0,
    }
    if radius > 0:
        patch = FancyBboxPatch(
            (x, y), width, height, boxstyle=f"round,pad=0,rounding_size={radius}", **style
        )
    else:
        patch = Rectangle((x, y), width, height, **style)
    ax.add_patch(patch)


def _draw_text(ax, elem: ET.Element) -> None:  # noqa: ANN001
    ax.text(
        _length(elem, "x"),
        _length(elem, "y"),
        "".join(elem.itertext()),
        fontfamily=elem.get("font-family", "sans-serif"),
        fontsize=_length(elem, "font-size", 12.0),
        fontweight=elem.get("font-weight", "normal"),
        color=_color(elem.get("fill"), "black"),
        ha="left",
        va="baseline",
        parse_math=False,
    )


def _draw_path(ax, elem: ET.Element) -> None:  # noqa: ANN001
    stroke = _color(elem.get("stroke"), "none")
    patch = PathPatch(
        parse_path_data(elem.get("d", "")),
        facecolor=_color(elem.get("fill"), "black"),
        edgecolor=stroke,
        linewidth=_length(elem, "stroke-width", 1.0) if stroke != "none" else 0.0,
        capstyle=elem.get("stroke-linecap", "butt"),
        joinstyle=elem.get("stroke-linejoin", "miter"),
    )
    ax.add_patch(patch)


_DRAWERS = {"rect": _draw_rect, "text": _draw_text, "path": _draw_path}


def rasterize_svg(document: str) -> bytes:
    """Parse an SVG document and return PNG bytes of its fixed-size canvas."""
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise RenderError(f"Invalid badge document: {exc}") from exc
    if _local_name(root.tag) != "svg":
        raise RenderError("Badge document root must be <svg>")

    try:
        width = _length(root, "width")
        height = _length(root, "height")
        if width <= 0 or height <= 0:
            raise ValueError("canvas size must be positive")

        with _render_lock:
            fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI, facecolor="white")
            ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
            ax.set_xlim(0, width)
            ax.set_ylim(height, 0)
            ax.set_axis_off()
            for elem in root.iter():
                drawer = _DRAWERS.get(_local_name(elem.tag))
                if drawer is not None:
                    drawer(ax, elem)
            buf = io.BytesIO()
            # metadata=None for Software keeps the PNG free of version strings
            fig.savefig(buf, format="png", dpi=DPI, facecolor="white", metadata={"Software": None})
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"Badge rasterization failed: {exc}") from exc
    return buf.getvalue()


def render_badge_png(points: Sequence[MetricPoint], label: str) -> bytes:
    """Full pipeline: points → path → SVG document → PNG."""
    return rasterize_svg(build_badge_svg(build_sparkline_path(points), label))
