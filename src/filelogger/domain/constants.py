from __future__ import annotations

"""
Domain Constants.

Centralizes the defaults and fixed identifiers shared by the file engine:
rotation thresholds, retention cap, naming convention and the archived
marker attribute.
"""

# -----------------------------------------------------------------------------
# ROTATION & RETENTION DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_FILE_NAME_PREFIX = "app"
DEFAULT_MAXIMUM_FILE_SIZE = 1024 * 1024  # 1 MB
DEFAULT_MAXIMUM_FILE_AGE = 24 * 60 * 60  # 24 hours, in seconds
DEFAULT_MAXIMUM_NUMBER_OF_LOG_FILES = 5

# Overrides applied by the DefaultLogger facade
FACADE_MAXIMUM_NUMBER_OF_LOG_FILES = 3
FACADE_MAXIMUM_FILE_AGE = 24 * 60 * 60

# -----------------------------------------------------------------------------
# NAMING CONVENTION
# -----------------------------------------------------------------------------
LOG_EXTENSION = ".log"
DEFAULT_LOGS_SUBDIR = "Logs"

# -----------------------------------------------------------------------------
# ARCHIVED MARKER
# -----------------------------------------------------------------------------
# Linux only exposes the "user." namespace to unprivileged processes
ARCHIVED_ATTRIBUTE = "user.filelogger.archived"
ARCHIVED_ATTRIBUTE_VALUE = b"\x01"

# -----------------------------------------------------------------------------
# WORKER
# -----------------------------------------------------------------------------
WORKER_THREAD_NAME = "FileLoggerWorker"
