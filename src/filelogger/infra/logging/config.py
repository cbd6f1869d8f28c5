from __future__ import annotations

"""
Logging Configuration Models.

Defines the data structures and constants required to route the standard
'logging' module into the console and the rotating file engine.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from filelogger.domain import constants as const

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification for the root logger setup.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_directory: Optional directory for rotated log files.
        file_name_prefix: Prefix of the rotated log files.
        maximum_file_size: Size in bytes that triggers a rotation.
        maximum_file_age: Age in seconds that triggers a rotation.
        maximum_number_of_log_files: Number of files to retain.
        multi_process_locking: Lock each write across processes.
        console_fmt: Structural format for terminal output.
    """
    level: str = "INFO"
    console: bool = True
    log_directory: Optional[str] = None

    file_name_prefix: str = const.DEFAULT_FILE_NAME_PREFIX
    maximum_file_size: int = const.DEFAULT_MAXIMUM_FILE_SIZE
    maximum_file_age: float = const.DEFAULT_MAXIMUM_FILE_AGE
    maximum_number_of_log_files: int = const.DEFAULT_MAXIMUM_NUMBER_OF_LOG_FILES
    multi_process_locking: bool = True

    console_fmt: str = "%(levelname)s | %(name)s | %(message)s"
