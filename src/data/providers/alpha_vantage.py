"""Alpha Vantage GLOBAL_QUOTE provider."""

from __future__ import annotations

from typing import Any

import httpx

from app.logging import get_logger
from data.errors import NetworkError
from data.extract import PRICE_FIELD, extract_price
from data.providers.base import QuoteProvider

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://www.alphavantage.co/query"
_FUNCTION = "GLOBAL_QUOTE"
_DEFAULT_TIMEOUT = 30.0


class AlphaVantageProvider(QuoteProvider):
    """Fetch the latest quote for one symbol from Alpha Vantage.

    One GET per call, no retries: the poll loop's next tick is the retry.
    With ``entitlement="delayed"`` the API answers under the
    ``"Global Quote - DATA DELAYED BY 15 MINUTES"`` key, which the
    extractor accepts alongside the plain ``"Global Quote"`` key.

    Args:
        symbol: Ticker to quote (e.g. ``"DIA"``).
        api_key: Alpha Vantage API key.
        base_url: Query endpoint; overridable for proxies and tests.
        entitlement: Value of the ``entitlement`` query parameter, or
            ``None`` to omit it.
        timeout: Per-request timeout in seconds.
        transport: Optional :mod:`httpx` transport (tests inject
            :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        symbol: str,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        entitlement: str | None = "delayed",
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._symbol = symbol.upper()
        self._api_key = api_key
        self._base_url = base_url
        self._entitlement = entitlement
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        quote_cfg: dict[str, Any],
        *,
        symbol: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> AlphaVantageProvider:
        """Build a provider from the ``quote`` config section."""
        return cls(
            symbol=symbol or quote_cfg.get("symbol", "DIA"),
            api_key=quote_cfg.get("api_key", "demo"),
            base_url=quote_cfg.get("base_url", DEFAULT_BASE_URL),
            entitlement=quote_cfg.get("entitlement", "delayed"),
            timeout=float(quote_cfg.get("timeout", _DEFAULT_TIMEOUT)),
            transport=transport,
        )

    # ------------------------------------------------------------------
    # QuoteProvider interface
    # ------------------------------------------------------------------

    @property
    def symbol(self) -> str:
        return self._symbol

    def provider_name(self) -> str:
        return "alpha_vantage"

    def query_params(self) -> dict[str, str]:
        """Query string for one GLOBAL_QUOTE request."""
        params = {"function": _FUNCTION, "symbol": self._symbol}
        if self._entitlement:
            params["entitlement"] = self._entitlement
        params["apikey"] = self._api_key
        return params

    def fetch_raw(self) -> str:
        logger.debug("Alpha Vantage: requesting %s %s", _FUNCTION, self._symbol)

        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = client.get(self._base_url, params=self.query_params())
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Request for {self._symbol} failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise NetworkError(
                f"HTTP error code {resp.status_code} for {self._symbol}",
                status_code=resp.status_code,
            )

        logger.debug("Alpha Vantage: full JSON response: %s", resp.text)
        return resp.text

    def extract(self, text: str) -> float:
        return extract_price(text, PRICE_FIELD)
