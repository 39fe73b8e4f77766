"""Periodic quote polling on a background thread.

Each tick runs fetch -> extract -> hand-off.  Any failure is logged and
the tick is skipped; the next tick acts as the retry.  The delay between
ticks is fixed and does not account for how long the tick took, so the
effective period is ``interval`` plus request latency.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Any

from app.logging import get_logger
from chart.executor import UIExecutor
from chart.series import Renderer
from data.errors import NetworkError, ParseError, QuoteError, SchemaError
from data.providers.base import Quote, QuoteProvider

logger = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0


@dataclass
class PollerState:
    """Mutable state owned by the poll loop.

    ``counter`` is the index handed to the most recent rendered point.  It
    only moves on a successful, numeric extraction, so skipped ticks leave
    no gaps in the plotted indices.
    """

    counter: int = 0
    ticks: int = 0
    failures: int = 0
    last_quote: Quote | None = None
    last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        quote = self.last_quote
        return {
            "counter": self.counter,
            "ticks": self.ticks,
            "failures": self.failures,
            "last_price": quote.value if quote else None,
            "last_observed_at": quote.observed_at.isoformat() if quote else None,
            "last_error": self.last_error,
        }


class QuotePoller:
    """Drive a :class:`QuoteProvider` on a fixed interval.

    Points are never appended from the polling thread: every accepted
    price is submitted to *executor*, which runs ``renderer.render`` on
    the UI thread.

    Args:
        provider: Source of quotes.
        renderer: Owner of the plotted series.
        executor: Hand-off to the UI thread.
        interval: Seconds to wait after each tick.
        state: Existing state to continue from.  Pass the state of a
            previous poller that fed the same renderer, so indices keep
            increasing instead of restarting at 1.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        renderer: Renderer,
        executor: UIExecutor,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        state: PollerState | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._provider = provider
        self._renderer = renderer
        self._executor = executor
        self._interval = float(interval)
        self.state = state if state is not None else PollerState()

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def provider(self) -> QuoteProvider:
        return self._provider

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Single iteration
    # ------------------------------------------------------------------

    def tick(self) -> Quote | None:
        """Run one poll iteration.

        Returns:
            The accepted quote, or ``None`` if this tick was skipped.
        """
        self.state.ticks += 1
        symbol = self._provider.symbol

        try:
            text = self._provider.fetch_raw()
        except NetworkError as exc:
            self._skip(f"Failed to fetch quote for {symbol}", exc)
            return None

        try:
            value = self._provider.extract(text)
        except (ParseError, SchemaError) as exc:
            self._skip(f"Could not read quote for {symbol}", exc)
            return None

        if math.isnan(value):
            self._skip(f"Invalid price for {symbol}", None)
            return None

        self.state.counter += 1
        index = self.state.counter
        quote = Quote(symbol=symbol, value=value)
        self.state.last_quote = quote
        self.state.last_error = None

        logger.info("%s #%d: %.4f", symbol, index, value)
        self._executor.submit(self._renderer.render, index, value)
        return quote

    def _skip(self, message: str, exc: QuoteError | None) -> None:
        self.state.failures += 1
        self.state.last_error = f"{message}: {exc}" if exc else message
        logger.warning("%s", self.state.last_error)

    # ------------------------------------------------------------------
    # Background thread
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start polling on a daemon thread.  No-op if already running."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="quote-poller", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask the loop to exit and wait for the thread to finish.

        Safe to call more than once.  An in-flight request is not
        interrupted; the loop exits once it returns.
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Poller thread did not stop within %ss", timeout)
                return
        self._thread = None

    def _run(self) -> None:
        logger.info(
            "Polling %s every %.1fs via %s",
            self._provider.symbol,
            self._interval,
            self._provider.provider_name(),
        )
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Unexpected error during poll tick")
            if self._stop.wait(self._interval):
                break
        logger.info("Poller for %s stopped", self._provider.symbol)
