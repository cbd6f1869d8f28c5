from __future__ import annotations

"""
Base Definitions for Logging Backends.

Every destination (console, files, ...) implements the same contract:
accept a LogMessage and decide on its own whether to keep it.
"""

from abc import ABC, abstractmethod

from filelogger.domain.models import LogMessage


class LoggerBackend(ABC):
    """
    Abstract destination for log messages.
    """

    @abstractmethod
    def log(self, message: LogMessage) -> None:
        """
        Consume one message. Must never raise to the caller.

        Args:
            message: The message to record.
        """
        pass
