from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for engine configurations and on-disk log files.
"""

import os
import sys
import time
from pathlib import Path
from typing import Callable, Generator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from filelogger.core.engine import FileLogger  # noqa: E402
from filelogger.domain.config import FileLoggerConfiguration  # noqa: E402
from filelogger.domain.constants import ARCHIVED_ATTRIBUTE  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Return an empty directory dedicated to log files."""
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def config(log_dir: Path) -> FileLoggerConfiguration:
    """
    Return a configuration with generous thresholds rooted in `log_dir`.
    """
    return FileLoggerConfiguration(
        log_directory=log_dir,
        file_name_prefix="app",
        maximum_file_size=1024 * 1024,
        maximum_file_age=3600,
        maximum_number_of_log_files=5,
    )


@pytest.fixture
def make_engine() -> Generator[Callable[..., FileLogger], None, None]:
    """
    Factory building FileLogger instances that are always closed on teardown.
    """
    engines = []

    def _factory(configuration: FileLoggerConfiguration, **kwargs) -> FileLogger:
        engine = FileLogger(configuration=configuration, **kwargs)
        engines.append(engine)
        return engine

    yield _factory

    for engine in engines:
        engine.close()


@pytest.fixture
def xattr_supported(tmp_path: Path) -> None:
    """
    Skip the test when the temporary filesystem rejects user extended attributes.
    """
    probe = tmp_path / "xattr_probe"
    probe.write_bytes(b"")
    if not hasattr(os, "setxattr"):
        pytest.skip("Extended attributes are not available on this platform")
    try:
        os.setxattr(probe, ARCHIVED_ATTRIBUTE, b"\x01")
    except OSError:
        pytest.skip("Filesystem does not support user extended attributes")
    finally:
        probe.unlink()


def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll `predicate` until it holds or `timeout` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Expose the polling helper used by tests that depend on background threads."""
    return _wait_for

