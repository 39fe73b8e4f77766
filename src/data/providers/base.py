"""Abstract base class for single-symbol quote providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Quote:
    """A single price observation for one symbol.

    Quotes are ephemeral: nothing stores them beyond the most recent one.
    """

    symbol: str
    value: float
    observed_at: datetime = field(default_factory=_utcnow)


class QuoteProvider(abc.ABC):
    """Base interface every quote provider must implement.

    A provider is split in two steps so the poll loop can log and classify
    failures separately: :meth:`fetch_raw` does the network round trip and
    :meth:`extract` turns the body into a number.
    """

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @property
    @abc.abstractmethod
    def symbol(self) -> str:
        """The symbol this provider is bound to (e.g. ``"DIA"``)."""
        ...

    @abc.abstractmethod
    def fetch_raw(self) -> str:
        """Perform one blocking request and return the response body.

        Raises:
            data.errors.NetworkError: Non-200 status or transport failure.
        """
        ...

    @abc.abstractmethod
    def extract(self, text: str) -> float:
        """Decode *text* into a price, NaN when the price is not numeric.

        Raises:
            data.errors.ParseError: Malformed body.
            data.errors.SchemaError: Body has no quote object.
        """
        ...

    @abc.abstractmethod
    def provider_name(self) -> str:
        """Return a short, unique identifier for this provider."""
        ...

    # ------------------------------------------------------------------
    # Helpers available to all providers
    # ------------------------------------------------------------------

    def fetch_quote(self) -> Quote:
        """Fetch and decode one quote.

        The returned value may be NaN; callers that plot it must check.
        """
        value = self.extract(self.fetch_raw())
        return Quote(symbol=self.symbol, value=value)
