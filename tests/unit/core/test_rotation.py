from __future__ import annotations

"""
Unit tests for the Rotation Engine.

Verifies:
1. Size and age triggers of should_rotate().
2. rotate() archives, replaces and prunes in that order.
3. Archiving failures do not prevent the rotation.
"""

import dataclasses
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from filelogger.core.discovery import build_log_file_name, find_log_files
from filelogger.core.rotation import mark_archived, rotate, should_rotate
from filelogger.core.session import WriteSession
from filelogger.domain.config import FileLoggerConfiguration
from filelogger.domain.errors import MetadataReadError
from filelogger.infra.fs import has_archived_marker


def test_should_rotate_closed_session(config: FileLoggerConfiguration) -> None:
    assert should_rotate(WriteSession(config), config) is False


def test_should_rotate_on_size(config: FileLoggerConfiguration) -> None:
    """TC-01: Reaching the size threshold triggers rotation."""
    small = dataclasses.replace(config, maximum_file_size=10)
    session = WriteSession(small)

    session.append(b"12345\n")
    assert should_rotate(session, small) is False

    session.append(b"6789\n")
    assert should_rotate(session, small) is True
    session.close()


def test_should_rotate_on_age(config: FileLoggerConfiguration) -> None:
    """TC-01: Reaching the age threshold triggers rotation."""
    session = WriteSession(config)
    session.create_new()
    created = session.created_at

    with patch("filelogger.core.rotation._utcnow", return_value=created + timedelta(seconds=3599)):
        assert should_rotate(session, config) is False
    with patch("filelogger.core.rotation._utcnow", return_value=created + timedelta(seconds=3600)):
        assert should_rotate(session, config) is True
    session.close()


def test_rotate_archives_and_replaces(config: FileLoggerConfiguration, xattr_supported: None) -> None:
    """TC-02: The old file is archived and a different file becomes active."""
    session = WriteSession(config)
    session.append(b"before\n")
    old_path = session.path

    rotate(session, config)

    assert session.is_open
    assert session.path != old_path
    assert session.current_size == 0
    assert has_archived_marker(str(old_path))
    assert not has_archived_marker(str(session.path))
    assert old_path.read_bytes() == b"before\n"
    session.close()


def test_rotate_applies_retention(config: FileLoggerConfiguration, log_dir: Path) -> None:
    """TC-02: Surplus files are deleted oldest first once the new file exists."""
    capped = dataclasses.replace(config, maximum_number_of_log_files=2)
    now = datetime.now(timezone.utc)
    for hours in (3, 2, 1):
        (log_dir / build_log_file_name("app", now - timedelta(hours=hours))).write_bytes(b"old\n")

    session = WriteSession(capped)
    current = session.create_new()

    with patch("filelogger.core.rotation.set_archived_marker"):
        rotate(session, capped)

    remaining = sorted(f.path for f in find_log_files(log_dir, "app"))
    assert remaining == sorted([current, session.path])
    session.close()


def test_rotate_tolerates_marking_failure(
        config: FileLoggerConfiguration, caplog: pytest.LogCaptureFixture
) -> None:
    """TC-03: A filesystem without xattr support still rotates."""
    session = WriteSession(config)
    old_path = session.create_new()

    with patch("filelogger.core.rotation.set_archived_marker", side_effect=OSError("not supported")):
        with caplog.at_level(logging.ERROR, logger="filelogger.core.rotation"):
            rotate(session, config)

    assert session.path is not None and session.path != old_path
    assert "Failed to mark" in caplog.text
    session.close()


def test_mark_archived_wraps_os_error(tmp_path: Path) -> None:
    with patch("filelogger.core.rotation.set_archived_marker", side_effect=OSError("nope")):
        with pytest.raises(MetadataReadError):
            mark_archived(tmp_path / "a.log")
