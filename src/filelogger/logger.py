from __future__ import annotations

"""
Application Logging Facade.

Fans a single logical log call out to every configured backend: by
default the console backend and a rotating file engine. Captures the
caller's source location so backends can render 'file:line - function'.
"""

import dataclasses
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from filelogger.backends.base import LoggerBackend
from filelogger.backends.console import ConsoleBackend
from filelogger.core.engine import FileLogger
from filelogger.domain import constants as const
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.levels import LogLevel
from filelogger.domain.models import LogMessage, LogSubsystem


class DefaultLogger:
    """
    Logger writing to the console and to rotated files.

    Args:
        subsystem: Console identity (logger name is '<identifier>.<category>').
        configuration: File engine settings. Defaults to the per-user
                       location, keeping 3 files of at most 24 hours each.
        backends: Extra backends appended after the console and file ones.
    """

    def __init__(
            self,
            subsystem: LogSubsystem,
            configuration: Optional[FileLoggerConfiguration] = None,
            backends: Optional[Sequence[LoggerBackend]] = None,
    ) -> None:
        if configuration is None:
            configuration = dataclasses.replace(
                FileLoggerConfiguration.default(),
                maximum_number_of_log_files=const.FACADE_MAXIMUM_NUMBER_OF_LOG_FILES,
                maximum_file_age=const.FACADE_MAXIMUM_FILE_AGE,
            )

        self._file_logger = FileLogger(configuration=configuration)
        self._console = ConsoleBackend(subsystem)
        self._backends: List[LoggerBackend] = [self._console, self._file_logger, *(backends or ())]

    @property
    def file_logger(self) -> FileLogger:
        return self._file_logger

    @property
    def backends(self) -> List[LoggerBackend]:
        return list(self._backends)

    @property
    def log_file_paths(self) -> List[Path]:
        """Paths of every log file currently on disk, oldest first."""
        return [info.path for info in self._file_logger.retrieve_all_log_files()]

    def log(
            self,
            message: str,
            level: LogLevel = LogLevel.DEBUG,
            file: Optional[str] = None,
            function: Optional[str] = None,
            line: Optional[int] = None,
            *,
            stacklevel: int = 1,
    ) -> None:
        """
        Record a message on every backend.

        The source location defaults to the caller of this method (or of
        the convenience wrapper, via `stacklevel`).
        """
        if file is None or function is None or line is None:
            frame = sys._getframe(stacklevel)
            file = file if file is not None else frame.f_code.co_filename
            function = function if function is not None else frame.f_code.co_name
            line = line if line is not None else frame.f_lineno

        log_message = LogMessage(level=level, message=message, file=file, function=function, line=line)
        for backend in self._backends:
            backend.log(log_message)

    def debug(self, message: str) -> None:
        self.log(message, LogLevel.DEBUG, stacklevel=2)

    def info(self, message: str) -> None:
        self.log(message, LogLevel.INFO, stacklevel=2)

    def warning(self, message: str) -> None:
        self.log(message, LogLevel.WARNING, stacklevel=2)

    def error(self, message: str) -> None:
        self.log(message, LogLevel.ERROR, stacklevel=2)

    def close(self) -> None:
        """Close the file engine, flushing pending lines."""
        self._file_logger.close()
