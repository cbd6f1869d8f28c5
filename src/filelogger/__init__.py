from __future__ import annotations

from filelogger.backends.base import LoggerBackend
from filelogger.backends.console import ConsoleBackend
from filelogger.backends.formatter import DefaultLogMessageFormatter, LogMessageFormatter
from filelogger.core.engine import FileLogger
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.errors import (
    DeleteError,
    DirectoryUnavailableError,
    FileLoggerError,
    FileOpenError,
    LockAcquisitionError,
    MetadataReadError,
    WriteError,
)
from filelogger.domain.levels import LogLevel
from filelogger.domain.models import LogFileInfo, LogMessage, LogSubsystem
from filelogger.logger import DefaultLogger

__version__ = "0.1.0"

__all__ = [
    "ConsoleBackend",
    "DefaultLogMessageFormatter",
    "DefaultLogger",
    "DeleteError",
    "DirectoryUnavailableError",
    "FileLogger",
    "FileLoggerConfiguration",
    "FileLoggerError",
    "FileOpenError",
    "LockAcquisitionError",
    "LogFileInfo",
    "LogLevel",
    "LogMessage",
    "LogMessageFormatter",
    "LogSubsystem",
    "LoggerBackend",
    "MetadataReadError",
    "WriteError",
]
