from __future__ import annotations

"""
Log File Discovery Service.

Scans the log directory for files following the naming convention
'<prefix>_<timestamp>.log' and reads their metadata. Enumeration is
best-effort: entries whose metadata cannot be read are skipped, and a
missing directory simply yields nothing. Safe to call while a write
session holds a file open (read-only stat, no locking).
"""

import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from filelogger.domain.constants import LOG_EXTENSION
from filelogger.domain.models import LogFileInfo
from filelogger.infra.fs import has_archived_marker

logger = logging.getLogger(__name__)

# Stamp produced by format_timestamp(); the fraction is optional so that
# second-resolution names written by older writers are still understood.
_STAMP_RX = re.compile(r"^_(?P<stamp>\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})(?:\.(?P<fraction>\d{1,6}))?")


# ==============================================================================
# NAMING API
# ==============================================================================

def format_timestamp(moment: datetime) -> str:
    """
    Render a moment as a filesystem-safe ISO-8601 stamp.

    The UTC ISO-8601 representation is used with ':' replaced by '-' and
    '+' replaced by '_', e.g. '2026-10-18T09-15-02.123456_00-00'.

    Args:
        moment: Point in time to encode (naive values are taken as UTC).

    Returns:
        str: The encoded stamp.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    iso = moment.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return iso.replace(":", "-").replace("+", "_")


def build_log_file_name(prefix: str, moment: datetime, counter: int = 0) -> str:
    """
    Build the name of a new log file.

    Args:
        prefix: Configured file name prefix.
        moment: Creation time encoded in the name.
        counter: Collision counter; appended as '-N' when non-zero.

    Returns:
        str: File name such as 'app_2026-10-18T09-15-02.123456_00-00.log'.
    """
    suffix = f"-{counter}" if counter else ""
    return f"{prefix}_{format_timestamp(moment)}{suffix}{LOG_EXTENSION}"


def parse_creation_date(file_name: str, prefix: str) -> Optional[datetime]:
    """
    Recover the creation time encoded in a log file name.

    Args:
        file_name: Base name of the file.
        prefix: Configured file name prefix.

    Returns:
        Optional[datetime]: UTC creation time, or None if the name carries no stamp.
    """
    if not file_name.startswith(prefix):
        return None

    match = _STAMP_RX.match(file_name[len(prefix):])
    if not match:
        return None

    try:
        moment = datetime.strptime(match.group("stamp"), "%Y-%m-%dT%H-%M-%S")
    except ValueError:
        return None

    fraction = match.group("fraction")
    if fraction:
        moment = moment.replace(microsecond=int(fraction.ljust(6, "0")))
    return moment.replace(tzinfo=timezone.utc)


def is_log_file_name(file_name: str, prefix: str) -> bool:
    """
    Check whether a name matches the discovery filter.

    Hidden entries are never considered log files.
    """
    if file_name.startswith("."):
        return False
    return file_name.startswith(prefix) and os.path.splitext(file_name)[1] == LOG_EXTENSION


# ==============================================================================
# DISCOVERY API
# ==============================================================================

def find_log_files(directory: Union[str, Path], prefix: str) -> List[LogFileInfo]:
    """
    Enumerate every log file in a directory with its metadata.

    No ordering is guaranteed; callers sort as needed.

    Args:
        directory: Directory to scan.
        prefix: Configured file name prefix.

    Returns:
        List[LogFileInfo]: One entry per readable matching regular file.
    """
    results: List[LogFileInfo] = []
    base = os.path.abspath(directory)

    try:
        with os.scandir(base) as entries:
            candidates = [e for e in entries if is_log_file_name(e.name, prefix)]
    except OSError as e:
        logger.debug(f"Discovery: Cannot list '{base}': {e}")
        return results

    for entry in candidates:
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
            st = entry.stat(follow_symlinks=False)
        except OSError as e:
            # Vanished or unreadable between listing and stat
            logger.debug(f"Discovery: Skipping '{entry.name}': {e}")
            continue

        results.append(
            LogFileInfo(
                path=Path(entry.path),
                creation_date=_resolve_creation_date(entry.name, prefix, st),
                modification_date=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                file_size=int(st.st_size),
                is_archived=has_archived_marker(entry.path),
            )
        )

    return results


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _resolve_creation_date(file_name: str, prefix: str, st: os.stat_result) -> datetime:
    """
    Determine the creation time of a file.

    Preference order: the stamp in the name, the filesystem birth time,
    then st_ctime (metadata change time on POSIX).
    """
    from_name = parse_creation_date(file_name, prefix)
    if from_name is not None:
        return from_name

    birth = getattr(st, "st_birthtime", None)
    if birth is None:
        birth = st.st_ctime
    return datetime.fromtimestamp(birth, tz=timezone.utc)
