from __future__ import annotations

"""
Cross-Process Advisory Locking.

Wraps the physical write step in an exclusive OS-level lock taken on the
open file itself. The lock is advisory: it only serializes writers that
follow the same protocol (every process running this engine).
"""

import logging
from contextlib import contextmanager
from typing import IO, Any, Iterator

import portalocker

from filelogger.domain.errors import LockAcquisitionError

logger = logging.getLogger(__name__)


@contextmanager
def exclusive_lock(handle: IO[Any], enabled: bool = True) -> Iterator[None]:
    """
    Hold an exclusive advisory lock on `handle` for the duration of the block.

    The lock is released on every exit path, including exceptions raised
    inside the block. Acquisition is attempted once; there is no retry.

    Args:
        handle: Open file object to lock.
        enabled: When False the block runs without any locking.

    Raises:
        LockAcquisitionError: If the lock cannot be acquired. The block is
                              not executed in that case.
    """
    if not enabled:
        yield
        return

    try:
        portalocker.lock(handle, portalocker.LOCK_EX)
    except (portalocker.LockException, OSError) as e:
        raise LockAcquisitionError(f"Failed to acquire file lock on '{_name_of(handle)}': {e}") from e

    try:
        yield
    finally:
        try:
            portalocker.unlock(handle)
        except (portalocker.LockException, OSError) as e:
            # Closing the descriptor releases it anyway
            logger.error(f"Locking: Failed to release file lock on '{_name_of(handle)}': {e}")


def _name_of(handle: IO[Any]) -> str:
    return str(getattr(handle, "name", "<unknown>"))
