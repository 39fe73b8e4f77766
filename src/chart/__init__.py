"""Chart layer -- series state, UI hand-off, and Plotly rendering."""

from chart.executor import AsyncioExecutor, InlineExecutor, UIExecutor
from chart.figure import build_figure, build_line_chart, write_html
from chart.series import Point, Renderer, Series

__all__ = [
    "AsyncioExecutor",
    "InlineExecutor",
    "Point",
    "Renderer",
    "Series",
    "UIExecutor",
    "build_figure",
    "build_line_chart",
    "write_html",
]
