"""
Summary: Format-independent file integrity check.
Why: A structurally plausible file can still be unreadable, truncated or unplayable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.introspection import IntrospectionReport

from ..domain.models import IntegrityCheck, ValidationError, ValidationErrorKind

VALID_CONFIDENCE: Final[float] = 0.9
INVALID_CONFIDENCE: Final[float] = 0.3
DEFAULT_MINIMUM_SIZE: Final[int] = 512

MINIMUM_SIZES: Final[dict[FormatKind, int]] = {
    FormatKind.MP3: 1024,
    FormatKind.AAC: 1024,
    FormatKind.OGG: 1024,
    FormatKind.OPUS: 1024,
    FormatKind.WAV: 4096,
    FormatKind.AIFF: 4096,
    FormatKind.FLAC: 4096,
}


def minimum_size(kind: FormatKind) -> int:
    """Smallest plausible file size in bytes for ``kind``."""
    return MINIMUM_SIZES.get(kind, DEFAULT_MINIMUM_SIZE)


def check_integrity(file_path: Path, kind: FormatKind, report: IntrospectionReport) -> IntegrityCheck:
    """Check readability, minimum size and playability.

    Args:
        file_path: File being validated.
        kind: Detected format, which selects the minimum size.
        report: Introspection result for the same file.

    Returns:
        IntegrityCheck: 0.9 confidence when every check passes, 0.3 otherwise,
        0.0 when the file cannot be read or sized at all.
    """
    if not os.access(file_path, os.R_OK):
        return IntegrityCheck.build(False, 0.0, [ValidationError.of(ValidationErrorKind.FILE_NOT_READABLE)])

    try:
        file_size = file_path.stat().st_size
    except OSError:
        return IntegrityCheck.build(False, 0.0, [ValidationError.of(ValidationErrorKind.INVALID_FILE_SIZE)])

    errors: list[ValidationError] = []
    minimum = minimum_size(kind)
    if file_size < minimum:
        errors.append(ValidationError.file_too_small(file_size, minimum))
    if not report.is_playable:
        errors.append(ValidationError.of(ValidationErrorKind.NOT_PLAYABLE))

    return IntegrityCheck.build(
        is_valid=not errors,
        confidence=VALID_CONFIDENCE if not errors else INVALID_CONFIDENCE,
        errors=errors,
        details={"file_size": file_size, "minimum_size": minimum},
    )


__all__ = ["check_integrity", "minimum_size", "MINIMUM_SIZES"]
