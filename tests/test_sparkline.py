"""Unit tests for the pure sparkline geometry."""
from __future__ import annotations

import re

from metric_charts_service.domain.models import MetricPoint
from metric_charts_service.services.sparkline import (
    BAND_HEIGHT,
    BAND_TOP,
    PADDING,
    WIDTH,
    build_badge_svg,
    build_sparkline_path,
    escape_xml,
)


def _coords(path: str) -> list[tuple[int, int]]:
    return [(int(x), int(y)) for x, y in re.findall(r"[ML](-?\d+) (-?\d+)", path)]


class TestPath:
    def test_empty(self):
        assert build_sparkline_path([]) == ""

    def test_single_point_is_centred_dash(self):
        path = build_sparkline_path([MetricPoint(100, 42.0)])
        (x0, y0), (x1, y1) = _coords(path)
        assert x1 - x0 == 10
        assert y0 == y1 == BAND_TOP + BAND_HEIGHT // 2
        assert (x0 + x1) // 2 == WIDTH // 2
        assert path == "M115 28 L125 28"

    def test_single_point_ignores_value(self):
        assert build_sparkline_path([MetricPoint(1, -5.0)]) == build_sparkline_path([MetricPoint(9, 1e9)])

    def test_flat_series_spans_padded_width(self):
        points = [MetricPoint(t, 3.0) for t in (10, 20, 30, 40)]
        assert build_sparkline_path(points) == f"M{PADDING} 28 L{WIDTH - PADDING} 28"

    def test_increasing_pair_goes_up(self):
        path = build_sparkline_path([MetricPoint(0, 1.0), MetricPoint(10, 2.0)])
        (x0, y0), (x1, y1) = _coords(path)
        assert y1 < y0
        assert (x0, y0) == (PADDING, BAND_TOP + BAND_HEIGHT)
        assert (x1, y1) == (WIDTH - PADDING, BAND_TOP)

    def test_x_follows_timestamps(self):
        points = [MetricPoint(0, 0.0), MetricPoint(1, 1.0), MetricPoint(4, 0.5)]
        xs = [x for x, _ in _coords(build_sparkline_path(points))]
        # 224 px chart width: 0, 1/4 and 4/4 of it
        assert xs == [8, 64, 232]

    def test_coinciding_timestamps_use_index_spacing(self):
        points = [MetricPoint(50, v) for v in (1.0, 3.0, 2.0)]
        xs = [x for x, _ in _coords(build_sparkline_path(points))]
        assert xs == [8, 120, 232]

    def test_y_stays_inside_band(self):
        points = [MetricPoint(t, v) for t, v in enumerate([5.0, -3.0, 12.5, 0.0, 7.25])]
        for _, y in _coords(build_sparkline_path(points)):
            assert BAND_TOP <= y <= BAND_TOP + BAND_HEIGHT

    def test_values_at_float_limits_stay_in_band(self):
        path = build_sparkline_path([MetricPoint(1, -1e308), MetricPoint(2, 1e308)])
        (x0, y0), (x1, y1) = _coords(path)
        assert (x0, y0) == (PADDING, BAND_TOP + BAND_HEIGHT)
        assert (x1, y1) == (WIDTH - PADDING, BAND_TOP)

    def test_subnormal_spread_is_flat(self):
        points = [MetricPoint(1, 0.0), MetricPoint(2, 5e-324)]
        assert build_sparkline_path(points) == f"M{PADDING} 28 L{WIDTH - PADDING} 28"

    def test_general_path_commands(self):
        path = build_sparkline_path([MetricPoint(0, 0.0), MetricPoint(1, 1.0), MetricPoint(2, 0.0)])
        assert path.startswith("M")
        assert path.count("L") == 2


class TestDocument:
    def test_escape_xml(self):
        assert escape_xml("""<a & "b" 'c'>""") == "&lt;a &amp; &quot;b&quot; &#39;c&#39;&gt;"

    def test_label_is_escaped(self):
        svg = build_badge_svg("", "cpu<&>")
        assert "cpu&lt;&amp;&gt;" in svg
        assert "cpu<&>" not in svg

    def test_empty_path_omits_stroke(self):
        svg = build_badge_svg("", "latency")
        assert "<path" not in svg
        assert 'rx="6"' in svg

    def test_path_is_embedded(self):
        svg = build_badge_svg("M8 28 L232 28", "latency")
        assert 'd="M8 28 L232 28"' in svg
        assert 'font-family="monospace"' in svg
