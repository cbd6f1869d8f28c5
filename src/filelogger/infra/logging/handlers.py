from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Provides the bridge handler feeding standard-library records into the
file engine, plus the tagging mechanism that lets the configuration code
tell its own handlers apart from external or library-injected ones.
"""

import logging
import sys
from typing import Optional

from filelogger.core.engine import FileLogger
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.levels import LogLevel
from filelogger.domain.models import LogMessage
from filelogger.infra.logging.config import LoggingConfig

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_filelogger_handler"

# Records from the engine's own loggers must not be written back into it
_INTERNAL_LOGGER_PREFIX: str = "filelogger"


# ==============================================================================
# BRIDGE HANDLER
# ==============================================================================

class FileLoggerHandler(logging.Handler):
    """
    Standard-library handler writing through a FileLogger.

    The handler's own formatter (if any) only renders the message body and
    exception text; the line layout is decided by the engine's formatter.

    Args:
        file_logger: Target engine.
        level: Handler threshold.
        owns_logger: Close the engine when the handler is closed.
    """

    def __init__(self, file_logger: FileLogger, level: int = logging.NOTSET, owns_logger: bool = True) -> None:
        super().__init__(level)
        self.file_logger = file_logger
        self._owns_logger = owns_logger

    def emit(self, record: logging.LogRecord) -> None:
        if _is_internal(record):
            return
        try:
            self.file_logger.log(
                LogMessage(
                    level=LogLevel.from_logging_level(record.levelno),
                    message=self._render(record),
                    timestamp=record.created,
                    file=record.pathname,
                    function=record.funcName or "",
                    line=record.lineno,
                )
            )
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            if self._owns_logger:
                self.file_logger.close()
        finally:
            super().close()

    def _render(self, record: logging.LogRecord) -> str:
        if self.formatter is not None:
            return self.format(record)
        text = record.getMessage()
        if record.exc_info:
            text = f"{text}\n{logging.Formatter().formatException(record.exc_info)}"
        return text


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as an internally-managed handler.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """
    Verify if a handler was installed by this module.

    Args:
        handler: The handler to inspect.

    Returns:
        bool: True if the handler carries our internal tag.
    """
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_file_logger_handler(cfg: LoggingConfig, level_int: int) -> Optional[FileLoggerHandler]:
    """
    Initialize a FileLoggerHandler with robust error handling.

    Args:
        cfg: Root logger settings carrying the file engine thresholds.
        level_int: Numeric logging level.

    Returns:
        Optional[FileLoggerHandler]: Configured handler or None if setup fails.
    """
    try:
        fh = FileLoggerHandler(FileLogger(configuration=_file_configuration(cfg, level_int)), level=level_int)
        _tag_handler(fh)
        return fh
    except (OSError, ValueError) as e:
        sys.stderr.write(f"WARNING: Log persistence failure at '{cfg.log_directory}': {e}\n")
        return None


def _file_configuration(cfg: LoggingConfig, level_int: int) -> FileLoggerConfiguration:
    """Translate the root logger settings into file engine settings."""
    return FileLoggerConfiguration(
        log_directory=cfg.log_directory,
        file_name_prefix=cfg.file_name_prefix,
        maximum_file_size=cfg.maximum_file_size,
        maximum_file_age=cfg.maximum_file_age,
        maximum_number_of_log_files=cfg.maximum_number_of_log_files,
        minimum_log_level=LogLevel.from_logging_level(level_int),
        should_use_multi_process_locking=cfg.multi_process_locking,
    )


def _is_internal(record: logging.LogRecord) -> bool:
    name = record.name or ""
    return name == _INTERNAL_LOGGER_PREFIX or name.startswith(_INTERNAL_LOGGER_PREFIX + ".")
