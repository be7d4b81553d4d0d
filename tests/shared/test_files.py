"""Tests for binary file opening helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from audiosniff.shared.errors import AudioFileNotAccessibleError, AudioFileNotFoundError
from audiosniff.shared.files import open_binary, read_prefix


def test_read_prefix(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    _ = path.write_bytes(b"0123456789")

    assert read_prefix(path, 4) == b"0123"
    assert read_prefix(str(path), 100) == b"0123456789"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(AudioFileNotFoundError):
        with open_binary(tmp_path / "missing.bin"):
            pass


def test_unreadable_file(tmp_path: Path, mocker: MockerFixture) -> None:
    path = tmp_path / "locked.bin"
    _ = path.write_bytes(b"data")
    _ = mocker.patch(
        "audiosniff.shared.files.open",
        create=True,
        side_effect=PermissionError(13, "Permission denied"),
    )

    with pytest.raises(AudioFileNotAccessibleError, match="Permission denied"):
        _ = read_prefix(path, 4)


def test_handle_is_closed_after_use(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    _ = path.write_bytes(b"data")

    with open_binary(path) as handle:
        assert handle.read() == b"data"

    assert handle.closed
