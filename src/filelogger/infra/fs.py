from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform resolution of the default log location, safe
directory creation and the extended-attribute primitives used to persist
the archived marker on rotated files. Acts as an abstraction over the 'os'
module so the core never branches on platform details.
"""

import errno
import os
from typing import Optional, Tuple

from filelogger.domain.constants import (
    ARCHIVED_ATTRIBUTE,
    ARCHIVED_ATTRIBUTE_VALUE,
    DEFAULT_LOGS_SUBDIR,
)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "FileLogger"
UNIX_APP_DIR_NAME = ".filelogger"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/FileLogger
    - Linux/Mac: ~/.filelogger

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


def get_default_log_dir() -> str:
    """
    Resolve the directory used by the default configuration.

    Returns:
        str: Absolute path of the 'Logs' folder inside the user data directory.
    """
    return os.path.join(get_user_data_dir(), DEFAULT_LOGS_SUBDIR)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (str(path) if path is not None else "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)

# -----------------------------------------------------------------------------
# EXTENDED ATTRIBUTES API
# -----------------------------------------------------------------------------

def set_archived_marker(path: str) -> None:
    """
    Persist the archived marker on a file as an extended attribute.

    Args:
        path: File to mark.

    Raises:
        OSError: If the platform or filesystem does not support user
                 extended attributes, or the file is gone.
    """
    if not hasattr(os, "setxattr"):
        raise OSError(errno.ENOTSUP, "Extended attributes are not supported on this platform", path)
    os.setxattr(path, ARCHIVED_ATTRIBUTE, ARCHIVED_ATTRIBUTE_VALUE)


def has_archived_marker(path: str) -> bool:
    """
    Check whether a file carries the archived marker.

    Absence of the attribute, or a platform without extended attribute
    support, both mean "active".

    Args:
        path: File to inspect.

    Returns:
        bool: True if the marker attribute exists.
    """
    if not hasattr(os, "getxattr"):
        return False
    try:
        os.getxattr(path, ARCHIVED_ATTRIBUTE)
        return True
    except OSError:
        return False
