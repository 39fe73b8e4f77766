"""Decode a GLOBAL_QUOTE JSON payload into a single price.

The endpoint labels the quote object differently depending on the
entitlement of the API key::

    {"Global Quote": {"05. price": "426.7500", ...}}
    {"Global Quote - DATA DELAYED BY 15 MINUTES": {"05. price": "426.7500", ...}}

Both shapes are accepted.  A missing or non-numeric price is not an error:
it comes back as ``math.nan`` and the caller decides what to do with it.
"""

from __future__ import annotations

import json
import math
from typing import Any

from data.errors import ParseError, SchemaError

QUOTE_KEY = "Global Quote"
DELAYED_QUOTE_KEY = "Global Quote - DATA DELAYED BY 15 MINUTES"
PRICE_FIELD = "05. price"

# Lookup order matters: the real-time key wins when both are present.
QUOTE_KEYS: tuple[str, ...] = (QUOTE_KEY, DELAYED_QUOTE_KEY)

# Top-level keys the API uses for informational / error messages.
_MESSAGE_KEYS: tuple[str, ...] = ("Error Message", "Note", "Information")


def coerce_number(value: Any) -> float:
    """Convert a JSON value to float, returning NaN when it is not numeric.

    Numbers and numeric strings convert; booleans, ``None``, containers and
    free text all give NaN.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def parse_payload(text: str) -> dict[str, Any]:
    """Parse *text* as a JSON object.

    Raises:
        ParseError: If *text* is not valid JSON.
        SchemaError: If the top-level value is not an object.
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Malformed JSON response: {exc}") from exc

    if not isinstance(payload, dict):
        raise SchemaError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def find_quote_object(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the quote object stored under either quote key.

    Raises:
        SchemaError: If neither key is present, or the value is not an object.
    """
    for key in QUOTE_KEYS:
        if key not in payload:
            continue
        quote = payload[key]
        if not isinstance(quote, dict):
            raise SchemaError(f"'{key}' is not an object")
        return quote

    message = next(
        (str(payload[k]) for k in _MESSAGE_KEYS if k in payload), None
    )
    detail = f": {message}" if message else ""
    raise SchemaError(f"'{QUOTE_KEY}' data not found in JSON{detail}")


def extract_price(text: str, field: str = PRICE_FIELD) -> float:
    """Extract the price from a raw GLOBAL_QUOTE response body.

    Args:
        text: Raw JSON text as returned by the endpoint.
        field: Key of the numeric field inside the quote object.

    Returns:
        The price, or ``math.nan`` if the field is missing or non-numeric.

    Raises:
        ParseError: Malformed JSON.
        SchemaError: No quote object in the payload.
    """
    quote = find_quote_object(parse_payload(text))
    return coerce_number(quote.get(field))
