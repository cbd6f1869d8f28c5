from __future__ import annotations

"""
Count-Based Retention Policy.

After a rotation the directory is rescanned and the oldest files beyond
the configured cap are deleted. Age is deliberately not considered here;
the maximum age only drives rotation timing.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Union

from filelogger.core.discovery import find_log_files
from filelogger.domain.errors import DeleteError
from filelogger.domain.models import LogFileInfo

logger = logging.getLogger(__name__)


def select_surplus(files: Iterable[LogFileInfo], maximum_count: int) -> List[LogFileInfo]:
    """
    Pick the files that exceed the retention cap, oldest first.

    Args:
        files: Discovery results in any order.
        maximum_count: Number of files allowed to remain.

    Returns:
        List[LogFileInfo]: Files to delete, ordered by creation date ascending.
    """
    ordered = sorted(files, key=lambda f: (f.creation_date, f.file_name))
    excess = len(ordered) - maximum_count
    if excess <= 0:
        return []
    return ordered[:excess]


def delete_log_file(path: Union[str, Path]) -> None:
    """
    Remove a single log file.

    A file that is already gone counts as deleted.

    Raises:
        DeleteError: If the file exists but cannot be removed.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        raise DeleteError(f"Failed to delete log file '{path}': {e}") from e


def enforce_retention(directory: Union[str, Path], prefix: str, maximum_count: int) -> List[Path]:
    """
    Delete the oldest files so that at most `maximum_count` remain.

    Deletion failures are reported and otherwise ignored; the file is
    reconsidered on the next pass.

    Args:
        directory: Log directory.
        prefix: Configured file name prefix.
        maximum_count: Retention cap.

    Returns:
        List[Path]: Paths actually removed.
    """
    removed: List[Path] = []

    for info in select_surplus(find_log_files(directory, prefix), maximum_count):
        try:
            delete_log_file(info.path)
        except DeleteError as e:
            logger.error(f"Retention: {e}")
            continue
        logger.info(f"Retention: Deleted old log file: {info.file_name}")
        removed.append(info.path)

    return removed
