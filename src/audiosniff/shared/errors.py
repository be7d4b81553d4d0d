"""
Summary: Exception hierarchy raised across detection, validation and tag parsing.
Why: Let callers tell missing files, unreadable files and empty tags apart.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from audiosniff.features.validation.domain.models import ValidationError


class AudioInspectionError(Exception):
    """Base class for every error raised by the package."""


class AudioFileNotFoundError(AudioInspectionError, FileNotFoundError):
    """The path does not exist."""

    def __init__(self, path: Path | str) -> None:
        self.path: Path = Path(path)
        super().__init__(f"File not found: {self.path}")


class AudioFileNotAccessibleError(AudioInspectionError, PermissionError):
    """The path exists but cannot be opened for reading."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        self.path: Path = Path(path)
        message = f"File not accessible: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedFormatError(AudioInspectionError, ValueError):
    """No extractor or walker exists for the requested format."""

    def __init__(self, audio_format: str) -> None:
        self.audio_format: str = audio_format
        super().__init__(f"Unsupported audio format: {audio_format}")


class InsufficientDataError(AudioInspectionError):
    """The supplied buffer is too small for any check."""

    def __init__(self, size: int, minimum: int) -> None:
        self.size: int = size
        self.minimum: int = minimum
        super().__init__(f"Insufficient data: {size} bytes, need at least {minimum}")


class _ValidationFailure(AudioInspectionError):
    def __init__(self, prefix: str, errors: Sequence["ValidationError"]) -> None:
        self.errors: tuple["ValidationError", ...] = tuple(errors)
        details = "; ".join(error.message for error in self.errors) or "no details"
        super().__init__(f"{prefix}: {details}")


class StructuralMismatchError(_ValidationFailure):
    """The byte structure does not match the declared format."""

    def __init__(self, errors: Sequence["ValidationError"]) -> None:
        super().__init__("Structural mismatch", errors)


class IntegrityFailureError(_ValidationFailure):
    """The file is too small, unreadable or not playable."""

    def __init__(self, errors: Sequence["ValidationError"]) -> None:
        super().__init__("Integrity failure", errors)


class MetadataError(AudioInspectionError):
    """Base class for tag extraction failures."""


class CorruptedMetadataError(MetadataError):
    """Tag bytes are present but malformed."""

    def __init__(self, reason: str) -> None:
        self.reason: str = reason
        super().__init__(f"The metadata appears to be corrupted: {reason}")


class NoMetadataFoundError(MetadataError):
    """The tags are well formed but carry no title, artist or album."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path: Path | None = Path(path) if path is not None else None
        suffix = f": {self.path.name}" if self.path is not None else ""
        super().__init__(f"No metadata found in file{suffix}")


__all__ = [
    "AudioInspectionError",
    "AudioFileNotFoundError",
    "AudioFileNotAccessibleError",
    "UnsupportedFormatError",
    "InsufficientDataError",
    "StructuralMismatchError",
    "IntegrityFailureError",
    "MetadataError",
    "CorruptedMetadataError",
    "NoMetadataFoundError",
]
