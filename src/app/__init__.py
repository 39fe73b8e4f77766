"""Core application utilities: configuration and logging."""

from app.config import get_config, load_config
from app.logging import get_logger, setup_logging

__all__ = ["get_config", "get_logger", "load_config", "setup_logging"]
