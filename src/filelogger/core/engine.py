from __future__ import annotations

"""
File Logger Engine.

Public entry point of the rotation-aware file backend. Formats messages on
the caller's thread, then hands every file operation (open, write, rotate,
purge, recovery, close) to a single worker so that they apply in
submission order. No failure inside the engine is ever raised to a
logging caller; errors are reported through the standard logging module
and the engine degrades to dropping lines.
"""

import atexit
import logging
from pathlib import Path
from typing import List, Optional

from filelogger.backends.base import LoggerBackend
from filelogger.backends.formatter import DefaultLogMessageFormatter, LogMessageFormatter
from filelogger.core.discovery import find_log_files
from filelogger.core.monitor import ChangeMonitor
from filelogger.core.retention import delete_log_file
from filelogger.core.rotation import rotate, should_rotate
from filelogger.core.serializer import TaskSerializer
from filelogger.core.session import WriteSession
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.errors import (
    DeleteError,
    FileLoggerError,
    LockAcquisitionError,
    WriteError,
)
from filelogger.domain.levels import LogLevel
from filelogger.domain.models import LogFileInfo, LogMessage
from filelogger.infra.fs import safe_mkdir

logger = logging.getLogger(__name__)


class FileLogger(LoggerBackend):
    """
    Persists formatted log lines into size/age rotated files.

    The engine owns one write session, one change monitor and one worker.
    Call `close()` (or use it as a context manager) to release the file;
    an exit hook does it for engines still open at interpreter shutdown.

    Args:
        configuration: Engine settings; defaults to the per-user location.
        formatter: Line renderer; defaults to DefaultLogMessageFormatter.
    """

    def __init__(
            self,
            configuration: Optional[FileLoggerConfiguration] = None,
            formatter: Optional[LogMessageFormatter] = None,
    ) -> None:
        self._configuration = configuration or FileLoggerConfiguration.default()
        self._formatter = formatter or DefaultLogMessageFormatter()
        self._closed = False

        self._monitor = ChangeMonitor(self._on_external_change)
        self._session = WriteSession(
            self._configuration,
            on_open=self._monitor.watch,
            on_close=self._monitor.unwatch,
        )
        self._serializer = TaskSerializer()

        self._ensure_log_directory()
        self._serializer.submit(self._open_task)

        atexit.register(self.close)

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    @property
    def configuration(self) -> FileLoggerConfiguration:
        return self._configuration

    @property
    def minimum_log_level(self) -> LogLevel:
        return self._configuration.minimum_log_level

    def log(self, message: LogMessage) -> None:
        """
        Queue one message for writing. Returns immediately and never raises.

        Messages below the configured minimum level are dropped before any
        formatting or queueing happens.
        """
        if self._closed or message.level < self._configuration.minimum_log_level:
            return

        try:
            data = (self._formatter.format_message(message) + "\n").encode("utf-8")
        except Exception as e:
            logger.error(f"FileLogger: Failed to format message: {e}")
            return

        self._serializer.submit(self._write_task, data)

    def synchronize(self) -> None:
        """
        Block until every write submitted before this call is on disk.
        """
        self._serializer.run_sync(self._synchronize_task)

    def rotate_log_file(self) -> None:
        """Queue a manual rotation."""
        self._serializer.submit(self._rotate_task)

    def retrieve_all_log_files(self) -> List[LogFileInfo]:
        """
        Return the current discovery snapshot, oldest file first.

        Runs behind every previously queued operation.
        """
        return self._serializer.run_sync(self._discover_task)

    @staticmethod
    def retrieve_all_log_files_from_default_location() -> List[LogFileInfo]:
        """
        Discover log files of the default configuration without a live engine.
        """
        configuration = FileLoggerConfiguration.default()
        return _sorted_by_creation(
            find_log_files(configuration.log_directory, configuration.file_name_prefix)
        )

    def purge_all_log_files(self) -> None:
        """Queue deletion of every log file followed by creation of a fresh one."""
        self._serializer.submit(self._purge_task)

    def close(self) -> None:
        """
        Stop monitoring, drain pending work and close the active file. Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        atexit.unregister(self.close)

        self._monitor.cancel()
        try:
            self._serializer.run_sync(self._close_task)
        finally:
            self._serializer.shutdown()

    def __enter__(self) -> FileLogger:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ==========================================================================
    # WORKER TASKS
    # ==========================================================================

    def _open_task(self) -> None:
        if self._session.is_open:
            return
        try:
            self._session.open_or_create()
        except FileLoggerError as e:
            logger.error(f"FileLogger: {e}")

    def _write_task(self, data: bytes) -> None:
        # The change event may still be in flight; never write into an unlinked file
        if self._session.is_stale():
            self._reopen(self._session.path)

        try:
            self._session.append(data)
        except LockAcquisitionError as e:
            logger.error(f"FileLogger: {e}. Line dropped.")
            return
        except WriteError as e:
            logger.error(f"FileLogger: {e}")
            self._session.close()
            self._open_task()
            return
        except FileLoggerError as e:
            # Open/create failure; retried on the next write
            logger.error(f"FileLogger: {e}. Line dropped.")
            return

        if should_rotate(self._session, self._configuration):
            self._rotate_task()

    def _rotate_task(self) -> None:
        try:
            rotate(self._session, self._configuration)
        except FileLoggerError as e:
            logger.error(f"FileLogger: Rotation incomplete: {e}")

    def _purge_task(self) -> None:
        self._session.close()

        for info in find_log_files(self._configuration.log_directory, self._configuration.file_name_prefix):
            try:
                delete_log_file(info.path)
            except DeleteError as e:
                logger.error(f"FileLogger: {e}")

        try:
            self._session.create_new()
        except FileLoggerError as e:
            logger.error(f"FileLogger: {e}")

    def _recover_task(self, path: Path) -> None:
        # The session may have moved on (rotation, purge, an earlier write) since the event fired
        if self._session.path != path or not self._session.is_stale():
            return
        self._reopen(path)

    def _reopen(self, path: Path) -> None:
        logger.warning(f"FileLogger: Active log file {path.name} was deleted or renamed externally. Reopening.")
        self._session.close()
        self._open_task()

    def _synchronize_task(self) -> None:
        try:
            self._session.sync()
        except WriteError as e:
            logger.error(f"FileLogger: {e}")

    def _discover_task(self) -> List[LogFileInfo]:
        return _sorted_by_creation(
            find_log_files(self._configuration.log_directory, self._configuration.file_name_prefix)
        )

    def _close_task(self) -> None:
        self._synchronize_task()
        self._session.close()

    # ==========================================================================
    # PRIVATE HELPERS
    # ==========================================================================

    def _on_external_change(self, path: Path) -> None:
        """Observer-thread callback: schedule recovery behind pending work."""
        self._serializer.submit(self._recover_task, path)

    def _ensure_log_directory(self) -> None:
        ok, err = safe_mkdir(str(self._configuration.log_directory))
        if not ok:
            logger.error(
                f"FileLogger: Failed to create logs directory '{self._configuration.log_directory}': {err}"
            )


def _sorted_by_creation(files: List[LogFileInfo]) -> List[LogFileInfo]:
    return sorted(files, key=lambda f: (f.creation_date, f.file_name))
