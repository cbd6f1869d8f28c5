from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies idempotency of the root logger configuration, the bridge from
standard-library records into the rotating file engine, and teardown.
"""

import logging
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from filelogger.infra.logging import (
    FileLoggerHandler,
    LoggingConfig,
    configure_logging,
    shutdown_logging,
)
from filelogger.infra.logging.handlers import _is_our_handler


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach handlers installed by configure_logging() before and after each test."""
    root = logging.getLogger()
    level = root.level
    shutdown_logging()
    yield
    shutdown_logging()
    root.setLevel(level)


def _file_handler() -> FileLoggerHandler:
    [handler] = [h for h in logging.getLogger().handlers if isinstance(h, FileLoggerHandler)]
    return handler


def _written(handler: FileLoggerHandler) -> List[str]:
    handler.file_logger.synchronize()
    lines: List[str] = []
    for info in handler.file_logger.retrieve_all_log_files():
        lines.extend(info.path.read_text(encoding="utf-8").splitlines())
    return lines


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_reconfigures(tmp_path: Path) -> None:
    """TC-01: force=True replaces the file engine instead of stacking a second one."""
    configure_logging(LoggingConfig(console=False, log_directory=str(tmp_path / "a")))
    first = _file_handler()

    configure_logging(LoggingConfig(console=False, log_directory=str(tmp_path / "b")), force=True)
    second = _file_handler()

    assert first is not second
    assert second.file_logger.configuration.log_directory == tmp_path / "b"


def test_records_reach_rotating_files(tmp_path: Path) -> None:
    """TC-02: Records from application loggers are written through the engine."""
    cfg = LoggingConfig(level="DEBUG", console=False, log_directory=str(tmp_path), file_name_prefix="svc")
    configure_logging(cfg)

    logging.getLogger("myapp.jobs").info("job %s started", "nightly")
    lines = _written(_file_handler())

    assert len(lines) == 1
    assert "[INFO]" in lines[0]
    assert lines[0].endswith("> job nightly started")
    assert "test_logging_infra.py:" in lines[0]
    assert list(tmp_path.glob("svc_*.log"))


def test_level_threshold_applies(tmp_path: Path) -> None:
    configure_logging(LoggingConfig(level="WARNING", console=False, log_directory=str(tmp_path)))
    handler = _file_handler()
    assert handler.file_logger.minimum_log_level.label == "WARN"

    log = logging.getLogger("myapp.jobs")
    log.info("hidden")
    log.warning("shown")

    lines = _written(handler)
    assert len(lines) == 1 and lines[0].endswith("> shown")


def test_exception_text_is_kept(tmp_path: Path) -> None:
    configure_logging(LoggingConfig(level="DEBUG", console=False, log_directory=str(tmp_path)))

    try:
        raise ValueError("bad input")
    except ValueError:
        logging.getLogger("myapp").exception("failed")

    text = "\n".join(_written(_file_handler()))
    assert "[ERROR]" in text
    assert "Traceback" in text and "ValueError: bad input" in text


def test_internal_records_are_not_persisted(tmp_path: Path) -> None:
    """TC-03: The engine's own diagnostics never loop back into its files."""
    configure_logging(LoggingConfig(level="DEBUG", console=False, log_directory=str(tmp_path)))

    logging.getLogger("filelogger.core.engine").error("internal failure")
    logging.getLogger("filelogger").warning("also internal")
    logging.getLogger("fileloggerish").warning("not internal")

    lines = _written(_file_handler())
    assert len(lines) == 1 and lines[0].endswith("> not internal")


def test_shutdown_flushes_and_detaches(tmp_path: Path) -> None:
    """TC-04: shutdown_logging() drains pending records and removes our handlers."""
    configure_logging(LoggingConfig(level="DEBUG", console=True, log_directory=str(tmp_path)))
    for i in range(50):
        logging.getLogger("myapp").debug(f"record {i}")

    shutdown_logging()

    assert not any(_is_our_handler(h) for h in logging.getLogger().handlers)
    [path] = list(tmp_path.glob("app_*.log"))
    assert len(path.read_text().splitlines()) == 50


def test_unusable_directory_falls_back_to_console(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    """TC-05: An invalid file setup leaves console logging in place."""
    cfg = LoggingConfig(level="INFO", console=True, log_directory=str(tmp_path), maximum_file_size=0)
    root = configure_logging(cfg)

    assert not any(isinstance(h, FileLoggerHandler) for h in root.handlers)
    assert any(_is_our_handler(h) for h in root.handlers)
    assert "Log persistence failure" in capsys.readouterr().err


def test_emergency_fallback() -> None:
    with patch("filelogger.infra.logging.core._parse_level", side_effect=RuntimeError("broken")):
        root = configure_logging(LoggingConfig())

    assert any(
        _is_our_handler(h) and "CRITICAL FALLBACK" in h.formatter._fmt
        for h in root.handlers
    )
