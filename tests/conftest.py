"""Shared test fixtures for Live Quote Chart.

Provides canned GLOBAL_QUOTE payloads, a scripted in-memory provider, and
an isolated config singleton used across all test modules.
"""

from __future__ import annotations

import json
from collections import deque
from typing import Iterable

import pytest

import app.config as app_config
from data.extract import DELAYED_QUOTE_KEY, QUOTE_KEY, extract_price
from data.providers.base import QuoteProvider


def quote_payload(price: object, *, key: str = QUOTE_KEY, **extra: object) -> str:
    """A GLOBAL_QUOTE body with ``"05. price"`` set to *price*."""
    inner = {
        "01. symbol": "DIA",
        "02. open": "425.1000",
        "05. price": price,
        "07. latest trading day": "2024-08-02",
    }
    inner.update(extra)
    return json.dumps({key: inner})


class ScriptedProvider(QuoteProvider):
    """Replays a fixed script of response bodies and exceptions.

    Each :meth:`fetch_raw` call takes the next item: strings are returned
    as the body, exceptions are raised.  Extraction is the real one.
    """

    def __init__(self, script: Iterable[str | Exception], symbol: str = "DIA") -> None:
        self._script = deque(script)
        self._symbol = symbol
        self.calls = 0

    @property
    def symbol(self) -> str:
        return self._symbol

    def provider_name(self) -> str:
        return "scripted"

    def fetch_raw(self) -> str:
        self.calls += 1
        item = self._script.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def extract(self, text: str) -> float:
        return extract_price(text)


@pytest.fixture()
def good_payload() -> str:
    """Real-time key, price 426.75."""
    return quote_payload("426.7500")


@pytest.fixture()
def delayed_payload() -> str:
    """Delayed key, price 426.75."""
    return quote_payload("426.7500", key=DELAYED_QUOTE_KEY)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Reset the config singleton and strip LQC_* overrides for each test."""
    for var in list(app_config._ENV_OVERRIDES):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(app_config, "_instance", None)
    yield
    app_config._instance = None


@pytest.fixture()
def make_payload():
    """Factory for GLOBAL_QUOTE bodies (see :func:`quote_payload`)."""
    return quote_payload


@pytest.fixture()
def make_provider():
    """Factory for :class:`ScriptedProvider` instances."""
    return ScriptedProvider
