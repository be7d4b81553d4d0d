# Where: audiosniff.shared.files
# What: Open audio files for binary reading with package-level I/O errors.
# Why: Detection, validation and tag parsing report vanished and unreadable files the same way.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from audiosniff.platform.logging import logger
from audiosniff.shared.errors import AudioFileNotAccessibleError, AudioFileNotFoundError


@contextmanager
def open_binary(file_path: Path | str) -> Iterator[BinaryIO]:
    """Open ``file_path`` read-only in binary mode.

    Raises:
        AudioFileNotFoundError: If the file does not exist.
        AudioFileNotAccessibleError: If the file exists but cannot be opened.
    """
    path = Path(file_path)
    try:
        handle = open(path, "rb")
    except FileNotFoundError as exc:
        raise AudioFileNotFoundError(path) from exc
    except OSError as exc:
        logger.error("Failed to open %s: %s", path, exc)
        raise AudioFileNotAccessibleError(path, exc.strerror) from exc
    with handle:
        yield handle


def read_prefix(file_path: Path | str, length: int) -> bytes:
    """Read at most ``length`` leading bytes of ``file_path``."""

    with open_binary(file_path) as handle:
        return handle.read(length)


__all__ = ["open_binary", "read_prefix"]
