from __future__ import annotations

"""
Write Session Management.

A WriteSession owns the single open output file of an engine instance:
its handle, its path, the time it was created and a running count of the
bytes appended through this session. The counter is not re-derived from
the filesystem on every write, so it may drift from the true size when
other processes append to the same file; an external change event forces
a full reopen, which resyncs it.

All methods must be called from the engine's worker thread only.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from filelogger.core.discovery import build_log_file_name, find_log_files
from filelogger.core.locking import exclusive_lock
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.errors import DirectoryUnavailableError, FileOpenError, WriteError
from filelogger.domain.models import LogFileInfo
from filelogger.infra.fs import safe_mkdir

logger = logging.getLogger(__name__)

# Upper bound on '-N' suffixes tried when a timestamped name already exists
_MAX_NAME_ATTEMPTS = 1000


class WriteSession:
    """
    Append-only writer over the currently active log file.

    Args:
        configuration: Engine configuration (directory, prefix, thresholds).
        on_open: Invoked with the path each time a file becomes active.
        on_close: Invoked each time the active file is released.
    """

    def __init__(
            self,
            configuration: FileLoggerConfiguration,
            on_open: Optional[Callable[[Path], None]] = None,
            on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self._config = configuration
        self._directory = Path(os.path.abspath(configuration.log_directory))
        self._on_open = on_open
        self._on_close = on_close

        self._handle: Optional[BinaryIO] = None
        self._path: Optional[Path] = None
        self._created_at: Optional[datetime] = None
        self._size = 0

    # -------------------------------------------------------------------------
    # STATE
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def current_size(self) -> int:
        return self._size

    @property
    def created_at(self) -> Optional[datetime]:
        return self._created_at

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def open_or_create(self) -> Path:
        """
        Resume the most recent active file, or start a new one.

        The newest non-archived file is reused only if it is below both the
        size and the age thresholds.

        Returns:
            Path: The file now open for writing.

        Raises:
            FileOpenError: If no file could be opened or created.
            DirectoryUnavailableError: If the log directory cannot be created.
        """
        candidates = [
            f for f in find_log_files(self._directory, self._config.file_name_prefix)
            if not f.is_archived
        ]
        most_recent = max(candidates, key=lambda f: (f.creation_date, f.file_name), default=None)

        if (
                most_recent is not None
                and most_recent.file_size < self._config.maximum_file_size
                and most_recent.age < self._config.maximum_file_age
        ):
            return self.open_existing(most_recent)

        return self.create_new()

    def open_existing(self, info: LogFileInfo) -> Path:
        """
        Open a discovered file in append mode, positioned at its end.

        Raises:
            FileOpenError: If the file cannot be opened.
        """
        self.close()

        try:
            handle = open(info.path, "ab")
            handle.seek(0, os.SEEK_END)
        except OSError as e:
            raise FileOpenError(f"Failed to open log file at '{info.path}': {e}") from e

        logger.debug(f"Session: Resumed {info.file_name} ({info.file_size} bytes)")
        self._attach(handle, Path(info.path), info.file_size, info.creation_date)
        return Path(info.path)

    def create_new(self) -> Path:
        """
        Create and open a brand new, empty log file.

        The name is derived from the prefix and the current UTC time. The
        file is created exclusively; on a name clash a counter suffix is
        added until creation succeeds.

        Raises:
            DirectoryUnavailableError: If the log directory cannot be created.
            FileOpenError: If the file cannot be created.
        """
        self.close()

        ok, err = safe_mkdir(str(self._directory))
        if not ok:
            raise DirectoryUnavailableError(f"Failed to create logs directory '{self._directory}': {err}")

        moment = datetime.now(timezone.utc)
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_APPEND | getattr(os, "O_BINARY", 0)

        for counter in range(_MAX_NAME_ATTEMPTS):
            path = self._directory / build_log_file_name(self._config.file_name_prefix, moment, counter)
            try:
                fd = os.open(path, flags, 0o644)
            except FileExistsError:
                continue
            except OSError as e:
                raise FileOpenError(f"Failed to create log file at '{path}': {e}") from e

            logger.debug(f"Session: Created {path.name}")
            self._attach(os.fdopen(fd, "ab"), path, 0, moment)
            return path

        raise FileOpenError(f"Failed to find a free log file name in '{self._directory}'")

    def close(self) -> None:
        """
        Release the file handle and reset in-memory state. Idempotent.
        """
        handle = self._handle
        if handle is None:
            return

        self._handle = None
        self._path = None
        self._created_at = None
        self._size = 0

        try:
            handle.close()
        except OSError as e:
            logger.error(f"Session: Failed to close log file: {e}")

        if self._on_close is not None:
            self._on_close()

    # -------------------------------------------------------------------------
    # WRITING
    # -------------------------------------------------------------------------

    def append(self, data: bytes) -> int:
        """
        Append bytes at the current end of the active file.

        Opens or creates a file first if none is active. Always re-seeks to
        the end before writing to tolerate growth by other processes.

        Args:
            data: Encoded line to write.

        Returns:
            int: Number of bytes written.

        Raises:
            FileOpenError: If no file could be opened.
            DirectoryUnavailableError: If the log directory cannot be created.
            LockAcquisitionError: If the advisory lock is unavailable (nothing written).
            WriteError: If the write itself failed.
        """
        if self._handle is None:
            self.open_or_create()

        handle = self._handle
        if handle is None:
            raise FileOpenError(f"No log file available in '{self._directory}'")

        with exclusive_lock(handle, self._config.should_use_multi_process_locking):
            try:
                handle.seek(0, os.SEEK_END)
                handle.write(data)
                handle.flush()
            except OSError as e:
                raise WriteError(f"Failed to write to log file '{self._path}': {e}") from e

        self._size += len(data)
        return len(data)

    def is_stale(self) -> bool:
        """
        Check whether the open handle still refers to the file at `path`.

        A handle goes stale when the file is deleted, renamed or replaced
        behind the session's back; writes through it would be lost.

        Returns:
            bool: True if a file is open and its path no longer leads to it.
        """
        if self._handle is None or self._path is None:
            return False
        try:
            return not os.path.samestat(os.fstat(self._handle.fileno()), os.stat(self._path))
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.debug(f"Session: Cannot check '{self._path}': {e}")
            return False

    def sync(self) -> None:
        """
        Flush buffers and ask the OS to persist the active file.

        Raises:
            WriteError: If flushing or syncing fails.
        """
        if self._handle is None:
            return
        try:
            self._handle.flush()
            os.fsync(self._handle.fileno())
        except OSError as e:
            raise WriteError(f"Failed to synchronize log file '{self._path}': {e}") from e

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _attach(self, handle: BinaryIO, path: Path, size: int, created_at: datetime) -> None:
        self._handle = handle
        self._path = path
        self._size = size
        self._created_at = created_at

        if self._on_open is not None:
            self._on_open(path)
