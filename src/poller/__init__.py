"""Poll loop -- periodic fetch/extract with hand-off to the UI thread."""

from poller.loop import PollerState, QuotePoller

__all__ = ["PollerState", "QuotePoller"]
