from __future__ import annotations

from .config import LoggingConfig
from .core import (
    configure_logging,
    get_logger,
    shutdown_logging,
)
from .handlers import FileLoggerHandler

__all__ = [
    "FileLoggerHandler",
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
]
