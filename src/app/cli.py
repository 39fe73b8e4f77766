"""Click CLI for Live Quote Chart.

Entry point: ``lqc`` (installed via pyproject.toml) or ``python -m app.cli``.
"""

from __future__ import annotations

import asyncio
import math
from typing import Optional

import click
from rich.console import Console
from rich.live import Live
from rich.table import Table

from app.config import get_config
from app.logging import get_logger, setup_logging
from chart.series import Point
from data.errors import QuoteError

logger = get_logger(__name__)
console = Console()

# Rows shown in the live table; the full series is kept for --save.
_LIVE_ROWS = 15
# Upper bound on how stale the watch table's counters can get.
_REDRAW_SECONDS = 0.5


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(message: str) -> None:
    """Print a styled error message and exit."""
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise SystemExit(1)


def _state_line(state) -> str:
    """One-line poll summary, e.g. ``ticks=4 failures=1``."""
    return f"ticks={state.ticks} failures={state.failures}"


def _points_table(symbol: str, points: list[Point], state_line: str) -> Table:
    """Build the table shown by ``watch``: the most recent points, newest last."""
    table = Table(title=f"{symbol} Price", caption=state_line)
    table.add_column("Fetch #", justify="right", style="dim")
    table.add_column("Price (USD)", justify="right")
    table.add_column("Change", justify="right")

    recent = points[-_LIVE_ROWS:]
    offset = len(points) - len(recent)
    for i, point in enumerate(recent):
        prev_idx = offset + i - 1
        if prev_idx < 0:
            change = ""
        else:
            delta = point.value - points[prev_idx].value
            style = "green" if delta >= 0 else "red"
            change = f"[{style}]{delta:+.4f}[/{style}]"
        table.add_row(str(point.index), f"{point.value:,.4f}", change)
    return table


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="live-quote-chart")
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: from config or LQC_LOG_LEVEL).",
)
def cli(log_level: Optional[str]) -> None:
    """Live Quote Chart -- poll a quote endpoint and chart the price."""
    setup_logging(log_level or get_config().get("log_level"), force=True)


# ---------------------------------------------------------------------------
# fetch
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--symbol", default=None, help="Symbol to quote (default: from config).")
def fetch(symbol: Optional[str]) -> None:
    """Fetch a single quote and print it."""
    from data.providers import get_provider  # lazy import

    provider = get_provider("alpha_vantage", get_config("quote"), symbol=symbol)

    try:
        with console.status(f"[bold green]Fetching {provider.symbol}..."):
            quote = provider.fetch_quote()
    except QuoteError as exc:
        logger.debug("fetch failed", exc_info=True)
        _error(str(exc))

    if math.isnan(quote.value):
        _error(f"Invalid price or parse error for {quote.symbol}.")

    table = Table(title="Quote")
    table.add_column("Symbol", style="bold")
    table.add_column("Price (USD)", justify="right")
    table.add_column("Observed (UTC)")
    table.add_row(
        quote.symbol,
        f"{quote.value:,.4f}",
        quote.observed_at.strftime("%Y-%m-%d %H:%M:%S"),
    )
    console.print(table)


# ---------------------------------------------------------------------------
# watch
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--symbol", default=None, help="Symbol to poll (default: from config).")
@click.option(
    "--interval",
    default=None,
    type=click.FloatRange(min=0.1),
    help="Seconds between polls (default: from config, 5).",
)
@click.option(
    "--save",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Write the chart as HTML to this path on exit.",
)
@click.option(
    "--count",
    default=None,
    type=click.IntRange(min=1),
    help="Stop after this many polls (default: run until Ctrl+C).",
)
def watch(
    symbol: Optional[str],
    interval: Optional[float],
    save: Optional[str],
    count: Optional[int],
) -> None:
    """Poll continuously and show the series in the terminal (Ctrl+C to stop)."""
    from chart.executor import AsyncioExecutor  # lazy imports
    from chart.figure import write_html
    from chart.series import Renderer, Series
    from data.providers import get_provider
    from poller.loop import PollerState, QuotePoller

    cfg = get_config()
    provider = get_provider("alpha_vantage", cfg["quote"], symbol=symbol)
    resolved_interval = interval or float(cfg["poller"]["interval_seconds"])
    renderer = Renderer(Series(provider.symbol))

    console.print(
        f"[bold cyan]Watching[/bold cyan] {provider.symbol} | "
        f"every {resolved_interval:g}s | Ctrl+C to stop"
    )

    state = PollerState()

    def _view() -> Table:
        return _points_table(provider.symbol, renderer.snapshot(), _state_line(state))

    async def _main() -> None:
        # This loop is the UI thread: the table only changes inside it.
        executor = AsyncioExecutor(asyncio.get_running_loop())
        poller = QuotePoller(
            provider, renderer, executor, interval=resolved_interval, state=state
        )

        with Live(_view(), console=console, refresh_per_second=4) as live:
            renderer.add_listener(lambda _point: live.update(_view()))
            poller.start()
            try:
                # Failed ticks render nothing, so redraw the counters on a timer.
                while count is None or state.ticks < count:
                    await asyncio.sleep(min(_REDRAW_SECONDS, resolved_interval))
                    live.update(_view())
            finally:
                await asyncio.to_thread(poller.stop, 10.0)
                live.update(_view())

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        console.print("[yellow]Stopped.[/yellow]")

    points = renderer.snapshot()
    console.print(
        f"Collected {len(points)} point(s) for {provider.symbol} "
        f"({_state_line(state)})."
    )
    if save:
        path = write_html(points, save, provider.symbol, cfg.get("chart"))
        console.print(f"[green]Chart saved to:[/green] {path}")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--symbol", default=None, help="Symbol to poll (default: from config).")
@click.option("--host", default=None, help="Bind host (default: from config or 127.0.0.1).")
@click.option("--port", default=None, type=int, help="Bind port (default: from config or 8000).")
def serve(symbol: Optional[str], host: Optional[str], port: Optional[int]) -> None:
    """Start the web UI with the live chart."""
    import uvicorn  # lazy import
    from api.routes import create_app  # lazy import
    from data.providers import get_provider

    cfg = get_config()
    server_cfg = cfg.get("server", {})

    resolved_host = host or server_cfg.get("host", "127.0.0.1")
    resolved_port = port or server_cfg.get("port", 8000)

    provider = get_provider("alpha_vantage", cfg["quote"], symbol=symbol)
    app = create_app(provider)

    console.print(
        f"[bold cyan]Starting server[/bold cyan] for {provider.symbol} at "
        f"http://{resolved_host}:{resolved_port}"
    )
    logger.info("serve: host=%s port=%d", resolved_host, resolved_port)

    uvicorn.run(app, host=resolved_host, port=resolved_port)


# ---------------------------------------------------------------------------
# Entry point for direct execution
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
