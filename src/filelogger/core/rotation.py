from __future__ import annotations

"""
Rotation Engine.

Decides when the active file has to be retired and performs the rotation:
mark the file archived, close it, start a new file and prune old files.
Callers run these functions on the engine's worker so that a rotation is
atomic with respect to every other queued file operation.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from filelogger.core.retention import enforce_retention
from filelogger.core.session import WriteSession
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.errors import MetadataReadError
from filelogger.infra.fs import set_archived_marker

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def should_rotate(session: WriteSession, configuration: FileLoggerConfiguration) -> bool:
    """
    Evaluate the rotation triggers against the session's own bookkeeping.

    Uses the in-memory size counter instead of a fresh stat to avoid a
    syscall per write.

    Args:
        session: The active write session.
        configuration: Thresholds to check.

    Returns:
        bool: True if size or age reached its maximum.
    """
    if not session.is_open or session.created_at is None:
        return False

    if session.current_size >= configuration.maximum_file_size:
        return True

    age = (_utcnow() - session.created_at).total_seconds()
    return age >= configuration.maximum_file_age


def mark_archived(path: Union[str, Path]) -> None:
    """
    Flag a file as archived so that it is never reopened for writing.

    Raises:
        MetadataReadError: If the extended attribute cannot be set.
    """
    try:
        set_archived_marker(str(path))
    except OSError as e:
        raise MetadataReadError(f"Failed to mark '{path}' as archived: {e}") from e


def rotate(session: WriteSession, configuration: FileLoggerConfiguration) -> None:
    """
    Retire the active file and start a fresh one.

    Steps:
    1. Mark the current file archived (failure is logged, not fatal).
    2. Close the session.
    3. Create a new file; an existing unarchived file is never reused here.
    4. Apply the retention policy.

    Raises:
        FileOpenError: If the new file could not be created. Retention
                       still runs before the error propagates.
        DirectoryUnavailableError: If the log directory cannot be created.
    """
    current = session.path
    if current is not None:
        try:
            mark_archived(current)
        except MetadataReadError as e:
            logger.error(f"Rotation: {e}")

    session.close()

    try:
        new_path = session.create_new()
        if current is not None:
            logger.debug(f"Rotation: {current.name} -> {new_path.name}")
    finally:
        enforce_retention(
            configuration.log_directory,
            configuration.file_name_prefix,
            configuration.maximum_number_of_log_files,
        )
