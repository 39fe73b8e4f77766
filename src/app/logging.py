"""Console logging setup with a Rich handler on the root logger."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.logging import RichHandler

_DEFAULT_LEVEL: Final[str] = "INFO"
_FORMAT: Final[str] = "%(message)s"
_DATE_FORMAT: Final[str] = "[%X]"

# Chatty third-party loggers kept at WARNING unless we run at DEBUG.
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "uvicorn.access")

_handler: RichHandler | None = None


def _resolve_level(level: str | None) -> int:
    if level is None:
        level = os.environ.get("LQC_LOG_LEVEL", _DEFAULT_LEVEL)
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(level: str | None = None, *, force: bool = False) -> None:
    """Attach a single Rich console handler to the root logger.

    The first call installs the handler; later calls are no-ops unless
    *force* is set, in which case only the level is changed. The CLI uses
    that to apply ``log_level`` from config or ``--log-level``.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Falls back to the LQC_LOG_LEVEL env var, then to INFO.
        force: Re-apply the level even if logging is already configured.
    """
    global _handler
    if _handler is not None and not force:
        return

    resolved_level = _resolve_level(level)
    root = logging.getLogger()

    if _handler is None:
        _handler = RichHandler(
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(_handler)

    _handler.setLevel(resolved_level)
    root.setLevel(resolved_level)

    quiet = logging.DEBUG if resolved_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, ensuring logging is configured.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.
    """
    setup_logging()
    return logging.getLogger(name)
