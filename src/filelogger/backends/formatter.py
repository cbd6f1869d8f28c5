from __future__ import annotations

"""
Log Line Formatting.

Renders a LogMessage into a single line of text. The default formatter is
stateless and thread-safe: every call builds its own timestamp string.
"""

import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime

from filelogger.domain.models import LogMessage


class LogMessageFormatter(ABC):
    """
    Abstract renderer turning a message into one text line (no newline).
    """

    @abstractmethod
    def format_message(self, message: LogMessage) -> str:
        pass


class DefaultLogMessageFormatter(LogMessageFormatter):
    """
    Renders 'YYYY-MM-DD HH:MM:SS.mmm [LEVEL] [thread] file.py:line - function > message'.

    The timestamp is expressed in local time. The thread tag is 'main' on
    the main thread and the thread name elsewhere; it is taken from the
    thread that calls format_message(), i.e. the logging caller.
    """

    def format_message(self, message: LogMessage) -> str:
        moment = datetime.fromtimestamp(message.timestamp)
        timestamp = f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"
        file_name = os.path.basename(message.file) if message.file else "?"

        return (
            f"{timestamp} [{message.level.label}] [{_thread_tag()}] "
            f"{file_name}:{message.line} - {message.function} > {message.message}"
        )


def _thread_tag() -> str:
    current = threading.current_thread()
    if current is threading.main_thread():
        return "main"
    return current.name
