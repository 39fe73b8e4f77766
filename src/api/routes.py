"""FastAPI application serving the live quote chart.

The server's event loop is the UI thread: the poller submits every new
point to it through :class:`~chart.executor.AsyncioExecutor`, and all route
handlers are ``async`` so they read the series on that same thread.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from app.config import get_config, load_config
from app.logging import get_logger
from chart.executor import AsyncioExecutor
from chart.figure import build_line_chart
from chart.series import Renderer, Series
from data.providers import get_provider
from data.providers.base import QuoteProvider
from poller.loop import DEFAULT_INTERVAL_SECONDS, PollerState, QuotePoller

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# How long shutdown waits for an in-flight request before giving up.
_STOP_TIMEOUT_SECONDS = 10.0


def _format_price(value: float | None) -> str:
    if value is None:
        return "--"
    return f"{value:,.4f}"


def create_app(
    provider: QuoteProvider | None = None,
    *,
    interval: float | None = None,
    chart_cfg: dict[str, Any] | None = None,
    start_poller: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        provider: Quote source; built from the ``quote`` config section
            when omitted.
        interval: Seconds between ticks; defaults to
            ``poller.interval_seconds``.
        chart_cfg: Chart options; defaults to the ``chart`` config section.
        start_poller: Start polling when the app starts.  Tests turn this
            off and drive :meth:`QuotePoller.tick` by hand.
    """
    cfg = load_config()

    if provider is None:
        provider = get_provider("alpha_vantage", cfg.get("quote", {}))
    if interval is None:
        interval = float(
            cfg.get("poller", {}).get("interval_seconds", DEFAULT_INTERVAL_SECONDS)
        )
    if chart_cfg is None:
        chart_cfg = get_config("chart")

    symbol = provider.symbol
    renderer = Renderer(Series(symbol))
    # Lives as long as the series: a restarted lifespan continues the count.
    poller_state = PollerState()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        executor = AsyncioExecutor(asyncio.get_running_loop())
        poller = QuotePoller(
            provider, renderer, executor, interval=interval, state=poller_state
        )
        app.state.poller = poller
        if start_poller:
            poller.start()
        try:
            yield
        finally:
            # stop() joins the thread; keep the loop free while it does.
            await asyncio.to_thread(poller.stop, _STOP_TIMEOUT_SECONDS)

    app = FastAPI(
        title="Live Quote Chart",
        description=f"Live {symbol} price chart",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.renderer = renderer
    app.state.symbol = symbol

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))
    templates.env.filters["format_price"] = _format_price

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        """Render the live chart page."""
        last = renderer.series.last
        refresh_ms = int(float(chart_cfg.get("refresh_seconds", 2.0)) * 1000)
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "symbol": symbol,
                "title": chart_cfg.get("title") or f"{symbol} Price",
                "last_price": last.value if last else None,
                "points": len(renderer.series),
                "refresh_ms": refresh_ms,
            },
        )

    @app.get("/api/series", response_class=JSONResponse)
    async def series_json():
        """All plotted points, oldest first."""
        return JSONResponse(content={
            "symbol": symbol,
            "points": [p.to_dict() for p in renderer.snapshot()],
        })

    @app.get("/api/chart", response_class=JSONResponse)
    async def chart_json():
        """The Plotly figure for the current series."""
        return JSONResponse(
            content=build_line_chart(renderer.snapshot(), symbol, chart_cfg)
        )

    @app.get("/health", response_class=JSONResponse)
    async def health_check():
        """Poller status and counters."""
        poller: QuotePoller | None = getattr(app.state, "poller", None)
        body: dict[str, Any] = {
            "status": "ok",
            "service": "live-quote-chart",
            "symbol": symbol,
            "running": bool(poller and poller.is_running),
            "points": len(renderer.series),
        }
        if poller is not None:
            body.update(poller.state.to_dict())
        return JSONResponse(content=body)

    return app
