from __future__ import annotations

from .config import LoggingConfig, parse_level
from .core import _QUEUE_LISTENER_ATTR, configure_logging, shutdown_logging
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "parse_level",
    "shutdown_logging",
]
