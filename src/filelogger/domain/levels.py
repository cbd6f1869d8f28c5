from __future__ import annotations

"""
Log Severity Levels.

Defines the ordered severity scale used for filtering and rendering, and
its mapping onto the numeric levels of the standard 'logging' module.
"""

import logging
from enum import IntEnum
from typing import Dict


class LogLevel(IntEnum):
    """
    Ordered severity of a log message.

    Integer-valued so that `level >= minimum` comparisons work directly.
    """
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Short uppercase tag rendered in formatted lines."""
        return _LABELS[self]

    def to_logging_level(self) -> int:
        """Return the equivalent standard-library numeric level."""
        return _TO_LOGGING[self]

    @classmethod
    def from_logging_level(cls, levelno: int) -> LogLevel:
        """
        Map a standard-library numeric level onto the closest LogLevel.

        Levels above ERROR (e.g. CRITICAL) collapse into ERROR and levels
        below INFO collapse into DEBUG.
        """
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG

    @classmethod
    def parse(cls, value: str) -> LogLevel:
        """
        Parse a level name such as "info" or "WARN".

        Raises:
            ValueError: If the name is not a known level.
        """
        key = str(value).strip().upper()
        if key == "WARN":
            key = "WARNING"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


_LABELS: Dict[LogLevel, str] = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERROR",
}

_TO_LOGGING: Dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}
