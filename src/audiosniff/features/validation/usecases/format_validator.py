"""Format validation orchestrator.

Where: src/audiosniff/features/validation/usecases/format_validator.py
What: Detect, compare against the declared format, walk the structure, check integrity and score.
Why: A declared format is only trustworthy once the bytes are shown to match it.
"""

from __future__ import annotations

import mmap
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final, final

from audiosniff.features.detection.domain.format_registry import descriptor
from audiosniff.features.detection.domain.models import DetectionResult
from audiosniff.features.detection.usecases import FormatDetector
from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import (
    AudioFileNotAccessibleError,
    AudioFileNotFoundError,
    AudioInspectionError,
)
from audiosniff.shared.events import InspectionEvent
from audiosniff.shared.files import open_binary
from audiosniff.shared.introspection import NOT_PLAYABLE, IntrospectionReport, Introspector

from ..domain.models import (
    ASSUMED_INTEGRITY,
    IntegrityCheck,
    IssueCategory,
    StructureCheck,
    ValidationError,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from .integrity import check_integrity
from .structure_walkers import (
    ByteView,
    walk_aiff,
    walk_flac,
    walk_mp3,
    walk_mp4,
    walk_ogg,
    walk_unknown,
    walk_wav,
)

DETECTION_WEIGHT: Final[float] = 0.3
STRUCTURE_WEIGHT: Final[float] = 0.4
INTEGRITY_WEIGHT: Final[float] = 0.3
RAW_MINIMUM_BYTES: Final[int] = 64
RAW_VALID_CONFIDENCE: Final[float] = 0.8
RAW_INVALID_CONFIDENCE: Final[float] = 0.1

_WALKERS: Final[dict[FormatKind, Callable[[ByteView], StructureCheck]]] = {
    FormatKind.MP3: walk_mp3,
    FormatKind.FLAC: walk_flac,
    FormatKind.WAV: walk_wav,
    FormatKind.AIFF: walk_aiff,
    FormatKind.OGG: walk_ogg,
    FormatKind.OPUS: walk_ogg,
}
_MP4_FAMILY: Final[frozenset[FormatKind]] = frozenset({FormatKind.AAC, FormatKind.M4A, FormatKind.ALAC})


@contextmanager
def _mapped(file_path: Path) -> Iterator[ByteView]:
    """Yield a read-only view of the whole file."""

    with open_binary(file_path) as handle:
        if os.fstat(handle.fileno()).st_size == 0:
            yield b""
            return
        try:
            view = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
        except OSError as exc:
            logger.error("Failed to map %s for validation: %s", file_path, exc)
            raise AudioFileNotAccessibleError(file_path, exc.strerror) from exc
        with view:
            yield view


def combined_confidence(
    format_matches: bool,
    detection_confidence: float,
    structure: StructureCheck,
    integrity: IntegrityCheck,
) -> float:
    """Weighted score of the three signals; zero when the format does not match."""

    if not format_matches:
        return 0.0
    weighted = (
        DETECTION_WEIGHT * detection_confidence
        + STRUCTURE_WEIGHT * structure.confidence
        + INTEGRITY_WEIGHT * integrity.confidence
    )
    return min(1.0, weighted)


def _collect_issues(
    format_matches: bool,
    structure: StructureCheck,
    integrity: IntegrityCheck,
) -> tuple[ValidationIssue, ...]:
    issues: list[ValidationIssue] = []
    if not format_matches:
        issues.append(ValidationIssue(IssueCategory.FORMAT_MISMATCH))
    if structure.errors:
        issues.append(ValidationIssue(IssueCategory.STRUCTURAL_MISMATCH, structure.errors))
    if integrity.errors:
        issues.append(ValidationIssue(IssueCategory.INTEGRITY_FAILURE, integrity.errors))
    return tuple(issues)


@final
class FormatValidator:
    """Validate that files and buffers really are the format they claim to be."""

    def __init__(
        self,
        *,
        detector: FormatDetector | None = None,
        introspector: Introspector | None = None,
    ) -> None:
        """Create a validator.

        Args:
            detector: Detector used for step one. Built around ``introspector`` when omitted.
            introspector: Deep inspection collaborator. Defaults to the detector's.
        """
        self._detector: FormatDetector = detector or FormatDetector(introspector=introspector)
        self._introspector: Introspector = introspector or self._detector.introspector

    @property
    def detector(self) -> FormatDetector:
        return self._detector

    def validate(
        self,
        source: str | os.PathLike[str] | bytes | bytearray | memoryview,
        expected_format: FormatKind | str,
    ) -> ValidationResult:
        """Validate a file path or a byte buffer against ``expected_format``.

        Raises:
            AudioFileNotFoundError: If a path source does not exist.
            AudioFileNotAccessibleError: If a path source cannot be read.
            InsufficientDataError: If a buffer source has fewer than four bytes.
        """
        expected = FormatKind(expected_format)
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.validate_bytes(bytes(source), expected)
        return self.validate_file(Path(source), expected)

    def validate_file(self, file_path: Path, expected_format: FormatKind) -> ValidationResult:
        path = Path(file_path)
        if not path.exists():
            raise AudioFileNotFoundError(path)

        detection = self._detector.detect_file(path)
        format_matches = detection.matches(expected_format)
        report = self._introspect(path)
        structure = self._walk(path, detection.format, report)
        integrity = check_integrity(path, detection.format, report)

        result = ValidationResult(
            is_valid=format_matches and structure.is_valid and integrity.is_valid,
            confidence=combined_confidence(
                format_matches, detection.confidence, structure, integrity
            ),
            expected_format=expected_format,
            detection=detection,
            issues=_collect_issues(format_matches, structure, integrity),
            structure=structure,
            integrity=integrity,
        )
        self._log_result(str(path), result)
        return result

    def validate_bytes(self, data: bytes, expected_format: FormatKind) -> ValidationResult:
        """Validate an in-memory buffer with a signature-level structure check.

        Integrity cannot be checked without a file and is assumed.
        """
        detection = self._detector.detect_bytes(data)
        format_matches = detection.matches(expected_format)
        structure = self._check_signature(data, expected_format)
        confidence = min(detection.confidence, structure.confidence) if format_matches else 0.0

        result = ValidationResult(
            is_valid=format_matches and structure.is_valid,
            confidence=confidence,
            expected_format=expected_format,
            detection=detection,
            issues=_collect_issues(format_matches, structure, ASSUMED_INTEGRITY),
            structure=structure,
            integrity=ASSUMED_INTEGRITY,
        )
        self._log_result("<bytes>", result)
        return result

    def quick_validate(self, file_path: str | os.PathLike[str], expected_format: FormatKind | str) -> bool:
        """Cheap check: extension, readability and leading signature. Never raises."""

        path = Path(file_path)
        try:
            expected = FormatKind(expected_format)
        except ValueError:
            return False
        if path.suffix.lstrip(".").lower() not in descriptor(expected).extensions:
            return False
        if not os.access(path, os.R_OK):
            return False
        try:
            with open(path, "rb") as handle:
                header = handle.read(RAW_MINIMUM_BYTES)
        except OSError:
            return False
        return self._detector.sniffer.matches_signature(header, expected)

    # Internals ------------------------------------------------------------

    def _introspect(self, file_path: Path) -> IntrospectionReport:
        try:
            return self._introspector.introspect(file_path)
        except AudioInspectionError:
            raise
        except Exception as exc:  # pragma: no cover - introspector failure
            logger.warning("Deep inspection of %s failed: %s", file_path, exc)
            return NOT_PLAYABLE

    def _walk(self, file_path: Path, kind: FormatKind, report: IntrospectionReport) -> StructureCheck:
        with _mapped(file_path) as data:
            if kind in _MP4_FAMILY:
                return walk_mp4(data, report)
            return _WALKERS.get(kind, walk_unknown)(data)

    def _check_signature(self, data: bytes, expected_format: FormatKind) -> StructureCheck:
        if len(data) < RAW_MINIMUM_BYTES:
            return StructureCheck.build(
                False, 0.0, [ValidationError.of(ValidationErrorKind.INSUFFICIENT_DATA)]
            )
        if self._detector.sniffer.matches_signature(data[:RAW_MINIMUM_BYTES], expected_format):
            return StructureCheck.build(True, RAW_VALID_CONFIDENCE)
        return StructureCheck.build(
            False,
            RAW_INVALID_CONFIDENCE,
            [ValidationError.of(ValidationErrorKind.INVALID_SIGNATURE)],
        )

    @staticmethod
    def _log_result(label: str, result: ValidationResult) -> None:
        detection: DetectionResult = result.detection
        if result.is_valid:
            logger.info(
                "Validated %s as %s (%.2f)",
                label,
                result.expected_format.value,
                result.confidence,
                extra={
                    "inspection_event": InspectionEvent.VALIDATE_PASS,
                    "file_path": label,
                    "audio_format": result.expected_format.value,
                    "confidence": result.confidence,
                },
            )
            return
        message = "; ".join(error.message for error in result.errors) or "format mismatch"
        logger.warning(
            "Validation of %s as %s failed (detected %s): %s",
            label,
            result.expected_format.value,
            detection.format.value,
            message,
            extra={
                "inspection_event": InspectionEvent.VALIDATE_FAIL,
                "file_path": label,
                "audio_format": detection.format.value,
                "confidence": result.confidence,
                "error_message": message,
            },
        )


__all__ = ["FormatValidator", "combined_confidence"]
