"""Tests for ``setup_logger`` handler wiring."""

from __future__ import annotations

import logging
import logging.handlers
from collections.abc import Iterator
from pathlib import Path

import pytest

from audiosniff.platform.logging import DEFAULT_LOG_FILE, InspectionRichHandler, setup_logger


@pytest.fixture
def restore_logger() -> Iterator[None]:
    """Re-install the default handlers after a test reconfigures the logger."""

    yield None
    _ = setup_logger(log_file=DEFAULT_LOG_FILE)


def test_console_only(restore_logger: None) -> None:
    _ = restore_logger

    logger = setup_logger(console_level=logging.WARNING)

    assert logger.name == "audiosniff"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], InspectionRichHandler)
    assert logger.handlers[0].level == logging.WARNING


def test_rotating_file_handler(tmp_path: Path, restore_logger: None) -> None:
    _ = restore_logger
    log_file = tmp_path / "nested" / "inspect.log"

    logger = setup_logger(log_file=log_file, file_level=logging.INFO)
    logger.info("file handler check")
    logger.debug("below the file level")
    for handler in logger.handlers:
        handler.flush()

    file_handlers = [
        handler for handler in logger.handlers if isinstance(handler, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 10 * 1024 * 1024
    assert file_handlers[0].backupCount == 5
    content = log_file.read_text(encoding="utf-8")
    assert "audiosniff - INFO - file handler check" in content
    assert "below the file level" not in content


def test_repeated_setup_does_not_duplicate_handlers(tmp_path: Path, restore_logger: None) -> None:
    _ = restore_logger

    _ = setup_logger(log_file=tmp_path / "a.log")
    logger = setup_logger(log_file=tmp_path / "a.log")

    assert len(logger.handlers) == 2
