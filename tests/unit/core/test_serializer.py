from __future__ import annotations

"""
Unit tests for the Task Serializer.

Verifies:
1. FIFO execution on a single named worker thread.
2. run_sync() barrier semantics, return values and exceptions.
3. Re-entrant run_sync() from the worker does not deadlock.
4. Failing fire-and-forget tasks are logged and do not stop the worker.
5. Behavior after shutdown.
6. Executors refusing work during interpreter exit.
"""

import logging
import threading
import time
from typing import List
from unittest.mock import patch

import pytest

from filelogger.core.serializer import TaskSerializer


@pytest.fixture
def serializer():
    s = TaskSerializer(name="TestWorker")
    yield s
    s.shutdown()


def test_tasks_run_in_submission_order(serializer: TaskSerializer) -> None:
    """TC-01: Tasks execute strictly in the order they were submitted."""
    seen: List[int] = []
    for i in range(200):
        serializer.submit(seen.append, i)

    serializer.run_sync(lambda: None)
    assert seen == list(range(200))


def test_tasks_run_on_worker_thread(serializer: TaskSerializer) -> None:
    name = serializer.run_sync(lambda: threading.current_thread().name)
    assert name.startswith("TestWorker")
    assert name != threading.current_thread().name


def test_run_sync_waits_for_earlier_tasks(serializer: TaskSerializer) -> None:
    """TC-02: The barrier returns only after previously queued work has run."""
    done = []
    serializer.submit(lambda: (time.sleep(0.1), done.append(True)))

    serializer.run_sync(lambda: None)
    assert done == [True]


def test_run_sync_returns_value_and_raises(serializer: TaskSerializer) -> None:
    assert serializer.run_sync(lambda a, b: a + b, 2, 3) == 5

    def boom() -> None:
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        serializer.run_sync(boom)


def test_nested_run_sync_runs_inline(serializer: TaskSerializer) -> None:
    """TC-03: A barrier issued from the worker itself does not deadlock."""
    result = serializer.run_sync(lambda: serializer.run_sync(lambda: "inner"))
    assert result == "inner"


def test_failing_task_is_logged(serializer: TaskSerializer, caplog: pytest.LogCaptureFixture) -> None:
    """TC-04: An exception in a queued task is reported and the worker survives."""
    def boom() -> None:
        raise RuntimeError("task exploded")

    with caplog.at_level(logging.ERROR, logger="filelogger.core.serializer"):
        serializer.submit(boom)
        assert serializer.run_sync(lambda: "alive") == "alive"

    assert "task exploded" in caplog.text


def test_after_shutdown() -> None:
    """TC-05: Submissions are dropped and barriers run inline once closed."""
    s = TaskSerializer()
    s.shutdown()
    s.shutdown()

    assert s.closed
    assert s.submit(lambda: None) is None
    assert s.run_sync(lambda: threading.current_thread()) is threading.current_thread()


def test_shutdown_drains_pending_tasks() -> None:
    s = TaskSerializer()
    seen: List[int] = []
    for i in range(50):
        s.submit(seen.append, i)
    s.shutdown()
    assert seen == list(range(50))


def test_interpreter_shutdown_is_tolerated() -> None:
    """TC-06: An executor refusing work (interpreter exit) neither raises nor loses barriers."""
    s = TaskSerializer()
    seen: List[int] = []
    s.submit(seen.append, 1)

    refused = RuntimeError("cannot schedule new futures after interpreter shutdown")
    with patch.object(s._executor, "submit", side_effect=refused):
        assert s.submit(seen.append, 2) is None
        assert s.run_sync(lambda: seen.append(3) or "inline") == "inline"

    assert s.closed
    assert seen == [1, 3]
    s.shutdown()
