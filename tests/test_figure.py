"""Tests for the Plotly chart builders."""

from __future__ import annotations

from chart.figure import build_figure, build_line_chart, write_html
from chart.series import Point

_POINTS = [Point(1, 426.75), Point(2, 426.9), Point(3, 426.6)]


class TestBuildFigure:
    def test_trace_and_labels(self) -> None:
        fig = build_figure(_POINTS, "DIA")
        trace = fig.data[0]
        assert trace.name == "DIA"
        assert list(trace.x) == [1, 2, 3]
        assert list(trace.y) == [426.75, 426.9, 426.6]
        assert fig.layout.title.text == "DIA Price"
        assert fig.layout.xaxis.title.text == "Fetch #"
        assert fig.layout.yaxis.title.text == "Price (USD)"

    def test_fixed_y_range(self) -> None:
        cfg = {"title": "DIA Price (Dow Jones Industrial Average Proxy)",
               "y_range": [425.5, 427.5], "y_step": 0.1}
        fig = build_figure(_POINTS, "DIA", cfg)
        assert tuple(fig.layout.yaxis.range) == (425.5, 427.5)
        assert fig.layout.yaxis.autorange is False
        assert fig.layout.yaxis.dtick == 0.1
        assert fig.layout.title.text.startswith("DIA Price (Dow Jones")

    def test_autorange_by_default(self) -> None:
        fig = build_figure(_POINTS, "DIA", {"y_range": None})
        assert fig.layout.yaxis.range is None

    def test_empty_series(self) -> None:
        fig = build_figure([], "DIA")
        assert len(fig.data) == 1
        assert len(fig.data[0].x) == 0


class TestSerialisation:
    def test_line_chart_is_json_dict(self) -> None:
        chart = build_line_chart(_POINTS, "DIA")
        assert isinstance(chart, dict)
        assert chart["data"][0]["name"] == "DIA"
        assert chart["layout"]["title"]["text"] == "DIA Price"

    def test_write_html(self, tmp_path) -> None:
        path = write_html(_POINTS, tmp_path / "out" / "chart.html", "DIA")
        assert path.exists()
        assert "DIA Price" in path.read_text(encoding="utf-8")
