from __future__ import annotations

"""
File Engine Error Kinds.

None of these ever reach a caller of `FileLogger.log()`; they are raised by
the internal helpers and caught at the task boundary, where they are
reported through the standard logging module.
"""


class FileLoggerError(RuntimeError):
    """Base class for failures inside the file engine."""


class DirectoryUnavailableError(FileLoggerError):
    """The log directory cannot be created or accessed."""


class FileOpenError(FileLoggerError):
    """A log file could not be created or opened for writing."""


class LockAcquisitionError(FileLoggerError):
    """The advisory cross-process lock could not be acquired."""


class WriteError(FileLoggerError):
    """Bytes could not be appended to the active log file."""


class DeleteError(FileLoggerError):
    """A log file could not be removed during cleanup or purge."""


class MetadataReadError(FileLoggerError):
    """File metadata (stat or extended attributes) could not be read or set."""
