"""Hand-off from the polling thread to the single-threaded UI context.

The chart and its series belong to whichever loop drives the UI.  The
poller never touches them directly; it submits a callable here and the
UI loop runs it on its own thread.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol

from app.logging import get_logger

logger = get_logger(__name__)


class UIExecutor(Protocol):
    """Anything that can run a callable on the UI thread."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """Schedule ``fn(*args)`` on the UI thread and return immediately."""
        ...


class AsyncioExecutor:
    """Marshal callables onto an asyncio event loop.

    Fire-and-forget: the poller does not wait for the callable to run, so a
    slow UI never delays polling.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        if self._loop.is_closed():
            logger.warning("UI loop is closed; dropping update %r", fn)
            return
        try:
            self._loop.call_soon_threadsafe(fn, *args)
        except RuntimeError:
            # The loop closed between the check and the call.
            logger.warning("UI loop is closed; dropping update %r", fn)


class InlineExecutor:
    """Run callables immediately on the calling thread.

    For tests and headless use, where the caller already is the only thread
    that touches the series.
    """

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        fn(*args)
