from __future__ import annotations

"""
Console Backend.

Publishes messages through the standard 'logging' module under a
'<subsystem>.<category>' logger name, which is where console/syslog
handlers are attached in a Python process.
"""

import logging

from filelogger.backends.base import LoggerBackend
from filelogger.domain.models import LogMessage, LogSubsystem


class ConsoleBackend(LoggerBackend):
    """
    Forwards each message to a named standard-library logger.

    Args:
        subsystem: Identity used to derive the logger name.
    """

    def __init__(self, subsystem: LogSubsystem) -> None:
        self._subsystem = subsystem
        self._logger = logging.getLogger(subsystem.logger_name)

    @property
    def subsystem(self) -> LogSubsystem:
        return self._subsystem

    def log(self, message: LogMessage) -> None:
        self._logger.log(message.level.to_logging_level(), message.message)
