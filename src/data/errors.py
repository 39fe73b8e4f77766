"""Failure types raised while fetching and decoding a quote.

None of these is fatal to the poll loop: each one skips a single tick.
"""

from __future__ import annotations


class QuoteError(Exception):
    """Base class for every recoverable quote failure."""


class NetworkError(QuoteError):
    """The request failed in transport or returned a non-200 status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(QuoteError):
    """The response body is not valid JSON."""


class SchemaError(QuoteError):
    """The JSON payload does not contain a quote object."""
