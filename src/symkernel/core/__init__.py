"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .cache import LRUCache, Stats


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # Caching
    "LRUCache",
    "Stats",
]
