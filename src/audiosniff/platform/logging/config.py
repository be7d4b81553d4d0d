"""Logger configuration bootstrap.

Where: platform/logging/config.py
What: Build the console and rotating file handlers for the ``audiosniff`` logger.
Why: Every module logs through one logger whose handlers are configured in one place.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Final

from rich.console import Console

from audiosniff.config.paths import default_log_file

from .handlers import InspectionRichHandler


LOGGER_NAME: Final[str] = "audiosniff"
FILE_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5

DEFAULT_LOG_FILE: Final[Path] = default_log_file()


def _console_handler(level: int) -> logging.Handler:
    handler = InspectionRichHandler(console=Console(stderr=True, soft_wrap=True))
    handler.setLevel(level)
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    target = log_file.expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        target,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    return handler


def setup_logger(
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """(Re)configure the package logger.

    Existing handlers are closed first, so calling this repeatedly never
    stacks duplicate output. The file handler is only added when
    ``log_file`` is given.
    """

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)

    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)

    package_logger.addHandler(_console_handler(console_level))
    if log_file is not None:
        package_logger.addHandler(_file_handler(Path(log_file), file_level))

    return package_logger


logger: Final[logging.Logger] = setup_logger(log_file=DEFAULT_LOG_FILE)


__all__ = ["DEFAULT_LOG_FILE", "LOGGER_NAME", "setup_logger", "logger"]
