"""
Summary: Validation result types and error records.
Why: Report every structural and integrity failure as data, raising only on request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from audiosniff.features.detection.domain.models import DetectionResult
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import IntegrityFailureError, StructuralMismatchError


class ValidationErrorKind(StrEnum):
    """Failure categories reported by the walkers and the integrity check."""

    INVALID_SIGNATURE = "invalid_signature"
    INVALID_HEADER = "invalid_header"
    INVALID_FORMAT = "invalid_format"
    MISSING_ATOM = "missing_atom"
    MISSING_CHUNK = "missing_chunk"
    MISSING_BLOCK = "missing_block"
    INSUFFICIENT_FRAMES = "insufficient_frames"
    INSUFFICIENT_PAGES = "insufficient_pages"
    NO_AUDIO_TRACK = "no_audio_track"
    NOT_PLAYABLE = "not_playable"
    FILE_NOT_READABLE = "file_not_readable"
    INVALID_FILE_SIZE = "invalid_file_size"
    FILE_TOO_SMALL = "file_too_small"
    INSUFFICIENT_DATA = "insufficient_data"
    CORRUPTED_DATA = "corrupted_data"


_FIXED_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.INVALID_SIGNATURE: "Invalid file signature",
    ValidationErrorKind.INVALID_HEADER: "Invalid file header",
    ValidationErrorKind.NO_AUDIO_TRACK: "No audio track found",
    ValidationErrorKind.NOT_PLAYABLE: "File is not playable",
    ValidationErrorKind.FILE_NOT_READABLE: "File is not readable",
    ValidationErrorKind.INVALID_FILE_SIZE: "Invalid file size",
    ValidationErrorKind.INSUFFICIENT_DATA: "Insufficient data for validation",
}


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One concrete validation failure.

    ``detail`` names the missing atom, chunk or block, or explains an
    invalid format. ``found``/``expected`` carry counts or sizes.
    """

    kind: ValidationErrorKind
    detail: str | None = None
    found: int | None = None
    expected: int | None = None

    @property
    def message(self) -> str:
        """Human readable description."""

        fixed = _FIXED_MESSAGES.get(self.kind)
        if fixed is not None:
            return fixed
        match self.kind:
            case ValidationErrorKind.INVALID_FORMAT:
                return f"Invalid format: {self.detail}"
            case ValidationErrorKind.MISSING_ATOM:
                return f"Missing required atom: {self.detail}"
            case ValidationErrorKind.MISSING_CHUNK:
                return f"Missing required chunk: {self.detail}"
            case ValidationErrorKind.MISSING_BLOCK:
                return f"Missing required block: {self.detail}"
            case ValidationErrorKind.INSUFFICIENT_FRAMES:
                return f"Insufficient frames: found {self.found}, expected at least {self.expected}"
            case ValidationErrorKind.INSUFFICIENT_PAGES:
                return f"Insufficient pages: found {self.found}, expected at least {self.expected}"
            case ValidationErrorKind.FILE_TOO_SMALL:
                return f"File too small: {self.found} bytes, minimum {self.expected}"
            case _:
                return f"Corrupted data: {self.detail}"

    # Factories mirror the kinds that take parameters.

    @classmethod
    def invalid_format(cls, detail: str) -> ValidationError:
        return cls(ValidationErrorKind.INVALID_FORMAT, detail=detail)

    @classmethod
    def missing_atom(cls, name: str) -> ValidationError:
        return cls(ValidationErrorKind.MISSING_ATOM, detail=name)

    @classmethod
    def missing_chunk(cls, name: str) -> ValidationError:
        return cls(ValidationErrorKind.MISSING_CHUNK, detail=name)

    @classmethod
    def missing_block(cls, name: str) -> ValidationError:
        return cls(ValidationErrorKind.MISSING_BLOCK, detail=name)

    @classmethod
    def insufficient_frames(cls, found: int, expected: int) -> ValidationError:
        return cls(ValidationErrorKind.INSUFFICIENT_FRAMES, found=found, expected=expected)

    @classmethod
    def insufficient_pages(cls, found: int, expected: int) -> ValidationError:
        return cls(ValidationErrorKind.INSUFFICIENT_PAGES, found=found, expected=expected)

    @classmethod
    def file_too_small(cls, size: int, minimum: int) -> ValidationError:
        return cls(ValidationErrorKind.FILE_TOO_SMALL, found=size, expected=minimum)

    @classmethod
    def corrupted_data(cls, detail: str) -> ValidationError:
        return cls(ValidationErrorKind.CORRUPTED_DATA, detail=detail)

    @classmethod
    def of(cls, kind: ValidationErrorKind) -> ValidationError:
        return cls(kind)


class IssueCategory(StrEnum):
    FORMAT_MISMATCH = "format_mismatch"
    STRUCTURAL_MISMATCH = "structural_mismatch"
    INTEGRITY_FAILURE = "integrity_failure"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Group of errors belonging to one failure category."""

    category: IssueCategory
    errors: tuple[ValidationError, ...] = ()


def _freeze(details: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(details or {}))


@dataclass(frozen=True, slots=True)
class StructureCheck:
    """Outcome of walking a file's container structure."""

    is_valid: bool
    confidence: float
    errors: tuple[ValidationError, ...] = ()
    details: Mapping[str, Any] = field(default_factory=lambda: _freeze(None))

    @classmethod
    def build(
        cls,
        is_valid: bool,
        confidence: float,
        errors: list[ValidationError] | tuple[ValidationError, ...] = (),
        details: Mapping[str, Any] | None = None,
    ) -> StructureCheck:
        return cls(is_valid, min(1.0, max(0.0, confidence)), tuple(errors), _freeze(details))


@dataclass(frozen=True, slots=True)
class IntegrityCheck:
    """Outcome of the readability, size and playability checks."""

    is_valid: bool
    confidence: float
    errors: tuple[ValidationError, ...] = ()
    details: Mapping[str, Any] = field(default_factory=lambda: _freeze(None))

    @classmethod
    def build(
        cls,
        is_valid: bool,
        confidence: float,
        errors: list[ValidationError] | tuple[ValidationError, ...] = (),
        details: Mapping[str, Any] | None = None,
    ) -> IntegrityCheck:
        return cls(is_valid, min(1.0, max(0.0, confidence)), tuple(errors), _freeze(details))


ASSUMED_INTEGRITY = IntegrityCheck(is_valid=True, confidence=1.0)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Combined verdict for one file or buffer against a declared format."""

    is_valid: bool
    confidence: float
    expected_format: FormatKind
    detection: DetectionResult
    issues: tuple[ValidationIssue, ...]
    structure: StructureCheck
    integrity: IntegrityCheck

    @property
    def detected_format(self) -> FormatKind:
        return self.detection.format

    @property
    def format_matches(self) -> bool:
        return not any(issue.category is IssueCategory.FORMAT_MISMATCH for issue in self.issues)

    @property
    def errors(self) -> tuple[ValidationError, ...]:
        """Every error across all issues, in issue order."""

        return tuple(error for issue in self.issues for error in issue.errors)

    def raise_for_status(self) -> None:
        """Raise when the result is invalid.

        Raises:
            StructuralMismatchError: On a format mismatch or structural failure.
            IntegrityFailureError: When only the integrity check failed.
        """
        if self.is_valid:
            return
        if not self.format_matches:
            mismatch = ValidationError.invalid_format(
                f"expected {self.expected_format.value}, detected {self.detected_format.value}"
            )
            raise StructuralMismatchError((mismatch, *self.structure.errors))
        if not self.structure.is_valid:
            raise StructuralMismatchError(self.structure.errors)
        raise IntegrityFailureError(self.integrity.errors)


__all__ = [
    "ASSUMED_INTEGRITY",
    "IntegrityCheck",
    "IssueCategory",
    "StructureCheck",
    "ValidationError",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
]
