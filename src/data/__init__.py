"""Data layer -- quote providers, payload extraction, and error types.

Quick usage::

    from data import get_provider

    provider = get_provider("alpha_vantage", symbol="DIA")
    quote = provider.fetch_quote()
"""

from data.errors import NetworkError, ParseError, QuoteError, SchemaError
from data.extract import extract_price
from data.providers import Quote, get_provider

__all__ = [
    "NetworkError",
    "ParseError",
    "Quote",
    "QuoteError",
    "SchemaError",
    "extract_price",
    "get_provider",
]
