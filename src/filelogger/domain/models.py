from __future__ import annotations

"""
Logging Domain Data Models.

Defines the immutable value objects exchanged between the facade, the
backends and the file engine: the per-call message, the console subsystem
identity and the discovery result describing one log file on disk.
"""

import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from filelogger.domain.levels import LogLevel

# -----------------------------------------------------------------------------
# MESSAGE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LogMessage:
    """
    A single log call, produced once by the caller.

    Attributes:
        level: Severity of the message.
        message: Raw message text.
        timestamp: Seconds since the epoch at which the call was made.
        file: Path of the source file that issued the call.
        function: Name of the calling function.
        line: Line number of the call site.
    """
    level: LogLevel
    message: str
    timestamp: float = field(default_factory=time.time)
    file: str = ""
    function: str = ""
    line: int = 0


@dataclass(frozen=True)
class LogSubsystem:
    """
    Identity under which the console backend publishes messages.

    Attributes:
        identifier: Reverse-DNS style subsystem name (e.g. "com.example.app").
        category: Functional area inside the subsystem (e.g. "network").
    """
    identifier: str
    category: str

    @property
    def logger_name(self) -> str:
        return f"{self.identifier}.{self.category}"


# -----------------------------------------------------------------------------
# DISCOVERY MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LogFileInfo:
    """
    Snapshot of one log file found by a discovery scan.

    Recomputed on every scan and never cached; the filesystem remains the
    source of truth.

    Attributes:
        path: Absolute path to the file.
        creation_date: UTC creation time (from the name stamp when present).
        modification_date: UTC time of the last content change.
        file_size: Size in bytes at scan time.
        is_archived: Whether the archived marker attribute is present.
    """
    path: Path
    creation_date: datetime
    modification_date: datetime
    file_size: int
    is_archived: bool

    @property
    def age(self) -> float:
        """Seconds elapsed since the file was created."""
        return (datetime.now(timezone.utc) - self.creation_date).total_seconds()

    @property
    def file_name(self) -> str:
        return os.path.basename(self.path)
