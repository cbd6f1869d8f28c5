from __future__ import annotations

"""
External Change Monitor.

Subscribes to filesystem notifications for the active log file and
reports when it is deleted or renamed by someone else. The watchdog
observer watches the file's parent directory (non-recursively) and the
handler narrows events down to the single watched path.

The callback runs on the observer thread; it must only hand work over to
the engine's serializer, never touch the session directly.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

logger = logging.getLogger(__name__)


def _normalize(path: Union[str, bytes, Path]) -> str:
    return os.path.normcase(os.path.abspath(os.fsdecode(path)))


class _WatchedFileHandler(FileSystemEventHandler):
    """Forwards delete/rename events that concern exactly one file."""

    def __init__(self, path: Path, callback: Callable[[Path], None]) -> None:
        super().__init__()
        self._path = path
        self._key = _normalize(path)
        self._callback = callback

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._dispatch(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._dispatch(event)

    def _dispatch(self, event: FileSystemEvent) -> None:
        if event.is_directory or _normalize(event.src_path) != self._key:
            return
        logger.debug(f"Monitor: {event.event_type} event on {self._path.name}")
        self._callback(self._path)


class ChangeMonitor:
    """
    Watches at most one file at a time for external deletion or rename.

    `watch()` replaces any previous subscription; `unwatch()` drops it;
    `cancel()` tears the observer down for good.

    Args:
        on_change: Called with the watched path when it is deleted or renamed.
    """

    def __init__(self, on_change: Callable[[Path], None]) -> None:
        self._on_change = on_change
        self._observer: Optional[BaseObserver] = None
        self._watch: Optional[ObservedWatch] = None
        self._path: Optional[Path] = None
        self._cancelled = False
        # Guards subscription state between the worker and the closing thread
        self._lock = threading.Lock()

    @property
    def watched_path(self) -> Optional[Path]:
        return self._path

    def watch(self, path: Path) -> None:
        """
        Subscribe to delete/rename events for `path`.

        Failure to subscribe only disables monitoring for this file.
        """
        with self._lock:
            if self._cancelled:
                return

            self._unschedule_locked()

            try:
                observer = self._ensure_observer_locked()
                self._watch = observer.schedule(
                    _WatchedFileHandler(Path(path), self._on_change),
                    os.path.dirname(os.path.abspath(path)),
                    recursive=False,
                )
                self._path = Path(path)
            except OSError as e:
                logger.warning(f"Monitor: Cannot watch '{path}', external changes will go unnoticed: {e}")

    def unwatch(self) -> None:
        """Drop the current subscription, if any."""
        with self._lock:
            self._unschedule_locked()

    def cancel(self) -> None:
        """
        Stop the observer thread. Subsequent `watch()` calls are ignored.
        """
        with self._lock:
            self._cancelled = True
            self._unschedule_locked()
            observer = self._observer
            self._observer = None

        if observer is not None:
            observer.stop()
            if observer.is_alive() and observer is not threading.current_thread():
                observer.join(timeout=5.0)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _ensure_observer_locked(self) -> BaseObserver:
        if self._observer is None:
            observer = Observer()
            observer.daemon = True
            observer.start()
            self._observer = observer
        return self._observer

    def _unschedule_locked(self) -> None:
        watch = self._watch
        self._watch = None
        self._path = None

        if watch is None or self._observer is None:
            return
        try:
            self._observer.unschedule(watch)
        except (KeyError, OSError) as e:
            logger.debug(f"Monitor: Subscription already gone: {e}")
