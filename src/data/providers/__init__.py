"""Quote providers.

Use :func:`get_provider` to obtain a provider instance by name::

    from data.providers import get_provider

    provider = get_provider("alpha_vantage", symbol="DIA")
    quote = provider.fetch_quote()
"""

from __future__ import annotations

from typing import Any

from data.providers.alpha_vantage import AlphaVantageProvider
from data.providers.base import Quote, QuoteProvider

# Registry mapping provider name -> class.
_PROVIDER_REGISTRY: dict[str, type[AlphaVantageProvider]] = {
    "alpha_vantage": AlphaVantageProvider,
}


def get_provider(
    name: str = "alpha_vantage",
    quote_cfg: dict[str, Any] | None = None,
    **overrides: Any,
) -> QuoteProvider:
    """Instantiate and return a quote provider by name.

    Args:
        name: Provider identifier (e.g. ``"alpha_vantage"``).
        quote_cfg: The ``quote`` config section; loaded from the app
            config when omitted.
        **overrides: Passed through to the provider's ``from_config``
            (e.g. ``symbol="SPY"``).

    Raises:
        ValueError: If no provider is registered under *name*.
    """
    cls = _PROVIDER_REGISTRY.get(name)
    if cls is None:
        available = ", ".join(sorted(_PROVIDER_REGISTRY.keys()))
        raise ValueError(
            f"Unknown provider '{name}'. Available providers: {available}"
        )
    if quote_cfg is None:
        from app.config import get_config  # lazy import

        quote_cfg = get_config("quote")
    return cls.from_config(quote_cfg, **overrides)


__all__ = [
    "AlphaVantageProvider",
    "Quote",
    "QuoteProvider",
    "get_provider",
]
