"""Plotly line chart for a price series."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import plotly
import plotly.graph_objects as go

from chart.series import Point


def _chart_options(chart_cfg: dict[str, Any] | None) -> dict[str, Any]:
    cfg = chart_cfg or {}
    return {
        "title": cfg.get("title"),
        "x_label": cfg.get("x_label") or "Fetch #",
        "y_label": cfg.get("y_label") or "Price (USD)",
        "y_range": cfg.get("y_range"),
        "y_step": cfg.get("y_step"),
    }


def build_figure(
    points: Iterable[Point],
    symbol: str,
    chart_cfg: dict[str, Any] | None = None,
) -> go.Figure:
    """Build a Plotly line chart of *points*.

    Args:
        points: Points in plotting order.
        symbol: Ticker, used as the trace name and in the default title.
        chart_cfg: The ``chart`` config section.  ``y_range`` (a
            ``[low, high]`` pair) pins the y axis instead of autoranging;
            ``y_step`` sets the tick spacing.
    """
    opts = _chart_options(chart_cfg)
    points = list(points)

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=[p.index for p in points],
            y=[p.value for p in points],
            mode="lines+markers",
            name=symbol,
            line=dict(width=2, color="#60a5fa"),
            marker=dict(size=5),
        )
    )

    yaxis: dict[str, Any] = dict(title=dict(text=opts["y_label"]), gridcolor="#374151")
    if opts["y_range"]:
        low, high = opts["y_range"]
        yaxis.update(range=[float(low), float(high)], autorange=False)
    if opts["y_step"]:
        yaxis["dtick"] = float(opts["y_step"])

    fig.update_layout(
        template="plotly_dark",
        paper_bgcolor="#111827",
        plot_bgcolor="#1f2937",
        font=dict(color="#d1d5db"),
        xaxis=dict(title=dict(text=opts["x_label"]), gridcolor="#374151"),
        yaxis=yaxis,
        margin=dict(l=60, r=20, t=50, b=50),
        height=600,
        title=dict(text=opts["title"] or f"{symbol} Price", font=dict(size=16)),
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def build_line_chart(
    points: Iterable[Point],
    symbol: str,
    chart_cfg: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Same as :func:`build_figure`, as a JSON-serialisable dict."""
    fig = build_figure(points, symbol, chart_cfg)
    return json.loads(plotly.io.to_json(fig))


def write_html(
    points: Iterable[Point],
    path: str | Path,
    symbol: str,
    chart_cfg: dict[str, Any] | None = None,
) -> Path:
    """Write the chart to a standalone HTML file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_figure(points, symbol, chart_cfg)
    fig.write_html(str(path), include_plotlyjs="cdn")
    return path
