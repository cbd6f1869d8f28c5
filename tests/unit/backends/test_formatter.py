from __future__ import annotations

"""
Unit tests for Log Line Formatting.

Verifies:
1. The default line layout (timestamp, level, thread, location, message).
2. Thread tags for the main thread and for named threads.
3. Fallbacks for missing location data.
"""

import re
import threading
from datetime import datetime

from filelogger.backends.formatter import DefaultLogMessageFormatter
from filelogger.domain.levels import LogLevel
from filelogger.domain.models import LogMessage

_LINE_RX = re.compile(
    r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3} \[(?P<level>\w+)\] \[(?P<thread>[^\]]+)\] "
    r"(?P<file>[^:]+):(?P<line>\d+) - (?P<function>\S+) > (?P<message>.*)$"
)


def test_default_layout() -> None:
    """TC-01: All parts of the line are rendered in order."""
    moment = datetime(2026, 10, 18, 14, 3, 7, 456789)
    message = LogMessage(
        level=LogLevel.WARNING,
        message="disk almost full",
        timestamp=moment.timestamp(),
        file="/srv/app/storage/volume.py",
        function="check_space",
        line=42,
    )

    line = DefaultLogMessageFormatter().format_message(message)

    assert line == "2026-10-18 14:03:07.456 [WARN] [main] volume.py:42 - check_space > disk almost full"


def test_thread_tag_uses_thread_name() -> None:
    """TC-02: Off the main thread the caller thread's name is used."""
    result = {}
    message = LogMessage(level=LogLevel.INFO, message="hi", file="a.py", function="f", line=1)

    def _format() -> None:
        result["line"] = DefaultLogMessageFormatter().format_message(message)

    t = threading.Thread(target=_format, name="network-io")
    t.start()
    t.join()

    match = _LINE_RX.match(result["line"])
    assert match is not None
    assert match.group("thread") == "network-io"
    assert match.group("level") == "INFO"


def test_missing_location_fallbacks() -> None:
    """TC-03: An empty file renders as '?'."""
    line = DefaultLogMessageFormatter().format_message(LogMessage(level=LogLevel.ERROR, message="x"))

    match = _LINE_RX.match(line)
    assert match is not None
    assert match.group("file") == "?"
    assert match.group("line") == "0"
    assert match.group("level") == "ERROR"


def test_message_is_not_escaped() -> None:
    line = DefaultLogMessageFormatter().format_message(
        LogMessage(level=LogLevel.DEBUG, message="a > b [c]", file="m.py", function="g", line=3)
    )
    assert line.endswith("m.py:3 - g > a > b [c]")
