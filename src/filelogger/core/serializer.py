from __future__ import annotations

"""
Single-Worker Task Serializer.

Every state-mutating file operation of an engine instance runs on one
dedicated worker thread, strictly in submission order. Submission never
blocks; `run_sync` provides the barrier used by flushes and snapshots.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

from filelogger.domain.constants import WORKER_THREAD_NAME

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskSerializer:
    """
    FIFO execution queue backed by a one-thread executor.

    Args:
        name: Name prefix of the worker thread.
    """

    def __init__(self, name: str = WORKER_THREAD_NAME) -> None:
        self._worker: Optional[threading.Thread] = None
        self._closed = False
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
            initializer=self._bind_worker,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def in_worker(self) -> bool:
        """True when called from this serializer's own worker thread."""
        return self._worker is threading.current_thread()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Optional[Future]:
        """
        Enqueue a fire-and-forget task.

        Exceptions raised by the task are logged and never kill the worker.

        Returns:
            Optional[Future]: The pending task, or None once the serializer is closed.
        """
        with self._lock:
            if self._closed:
                logger.debug(f"Serializer: Dropped task {_task_name(fn)} after shutdown")
                return None
            try:
                return self._executor.submit(self._guarded, fn, *args)
            except RuntimeError as e:
                # Interpreter shutdown stops executors before atexit hooks run
                self._closed = True
                logger.debug(f"Serializer: Dropped task {_task_name(fn)}: {e}")
                return None

    def run_sync(self, fn: Callable[..., T], *args: Any) -> T:
        """
        Enqueue a task and block until it, and everything before it, has run.

        Runs inline when called from the worker itself (a nested barrier would
        deadlock) or after shutdown (no worker left to race with).

        Returns:
            T: The task's return value.

        Raises:
            Exception: Whatever the task raised.
        """
        if self.in_worker():
            return fn(*args)

        with self._lock:
            future = None
            if not self._closed:
                try:
                    future = self._executor.submit(fn, *args)
                except RuntimeError as e:
                    self._closed = True
                    logger.debug(f"Serializer: Executor unavailable, running {_task_name(fn)} inline: {e}")

        if future is None:
            # Let already queued tasks finish before touching shared state
            self._executor.shutdown(wait=True)
            return fn(*args)
        return future.result()

    def shutdown(self) -> None:
        """
        Stop accepting tasks and wait for every pending task to finish. Idempotent.
        """
        with self._lock:
            self._closed = True
        # A worker cannot join itself
        self._executor.shutdown(wait=not self.in_worker())

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _bind_worker(self) -> None:
        self._worker = threading.current_thread()

    @staticmethod
    def _guarded(fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except Exception as e:
            logger.error(f"Serializer: Task {_task_name(fn)} failed: {e}", exc_info=True)


def _task_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", repr(fn))
