"""
Summary: Tests for validation error records and result helpers.
Why: Messages and raise_for_status are part of the public contract.
"""

from __future__ import annotations

import pytest

from audiosniff.features.detection import DetectionMethod, DetectionResult
from audiosniff.features.validation import (
    IntegrityCheck,
    IssueCategory,
    StructureCheck,
    ValidationError,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from audiosniff.features.validation.usecases import combined_confidence
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import IntegrityFailureError, StructuralMismatchError


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (ValidationError.of(ValidationErrorKind.INVALID_SIGNATURE), "Invalid file signature"),
        (ValidationError.of(ValidationErrorKind.INVALID_HEADER), "Invalid file header"),
        (ValidationError.invalid_format("Not a WAVE file"), "Invalid format: Not a WAVE file"),
        (ValidationError.missing_atom("ftyp"), "Missing required atom: ftyp"),
        (ValidationError.missing_chunk("fmt"), "Missing required chunk: fmt"),
        (ValidationError.missing_block("STREAMINFO"), "Missing required block: STREAMINFO"),
        (
            ValidationError.insufficient_frames(3, 10),
            "Insufficient frames: found 3, expected at least 10",
        ),
        (
            ValidationError.insufficient_pages(1, 2),
            "Insufficient pages: found 1, expected at least 2",
        ),
        (ValidationError.of(ValidationErrorKind.NO_AUDIO_TRACK), "No audio track found"),
        (ValidationError.of(ValidationErrorKind.NOT_PLAYABLE), "File is not playable"),
        (ValidationError.of(ValidationErrorKind.FILE_NOT_READABLE), "File is not readable"),
        (ValidationError.of(ValidationErrorKind.INVALID_FILE_SIZE), "Invalid file size"),
        (ValidationError.file_too_small(10, 512), "File too small: 10 bytes, minimum 512"),
        (
            ValidationError.of(ValidationErrorKind.INSUFFICIENT_DATA),
            "Insufficient data for validation",
        ),
        (ValidationError.corrupted_data("bad sync"), "Corrupted data: bad sync"),
    ],
)
def test_error_messages(error: ValidationError, message: str) -> None:
    assert error.message == message


def test_build_clamps_confidence() -> None:
    assert StructureCheck.build(True, 3.0).confidence == 1.0
    assert IntegrityCheck.build(False, -1.0).confidence == 0.0


def test_details_are_read_only() -> None:
    check = StructureCheck.build(True, 0.5, details={"frame_count": 3})

    with pytest.raises(TypeError):
        check.details["frame_count"] = 4  # pyright: ignore[reportIndexIssue]


def _result(
    *,
    expected: FormatKind = FormatKind.MP3,
    detected: FormatKind = FormatKind.MP3,
    structure: StructureCheck | None = None,
    integrity: IntegrityCheck | None = None,
) -> ValidationResult:
    structure = structure or StructureCheck.build(True, 0.95)
    integrity = integrity or IntegrityCheck.build(True, 0.9)
    detection = DetectionResult(detected, 1.0, DetectionMethod.COMBINED)
    matches = detection.matches(expected)
    issues: list[ValidationIssue] = []
    if not matches:
        issues.append(ValidationIssue(IssueCategory.FORMAT_MISMATCH))
    if structure.errors:
        issues.append(ValidationIssue(IssueCategory.STRUCTURAL_MISMATCH, structure.errors))
    if integrity.errors:
        issues.append(ValidationIssue(IssueCategory.INTEGRITY_FAILURE, integrity.errors))
    return ValidationResult(
        is_valid=matches and structure.is_valid and integrity.is_valid,
        confidence=combined_confidence(matches, 1.0, structure, integrity),
        expected_format=expected,
        detection=detection,
        issues=tuple(issues),
        structure=structure,
        integrity=integrity,
    )


def test_valid_result_does_not_raise() -> None:
    result = _result()

    result.raise_for_status()

    assert result.format_matches
    assert result.detected_format is FormatKind.MP3
    assert result.errors == ()


def test_mismatch_raises_structural_mismatch() -> None:
    result = _result(detected=FormatKind.FLAC)

    with pytest.raises(StructuralMismatchError) as excinfo:
        result.raise_for_status()

    assert result.confidence == 0.0
    assert excinfo.value.errors[0].kind is ValidationErrorKind.INVALID_FORMAT
    assert "expected mp3, detected flac" in str(excinfo.value)


def test_structure_failure_raises_structural_mismatch() -> None:
    structure = StructureCheck.build(False, 0.3, [ValidationError.missing_block("STREAMINFO")])
    result = _result(structure=structure)

    with pytest.raises(StructuralMismatchError) as excinfo:
        result.raise_for_status()

    assert excinfo.value.errors == structure.errors


def test_integrity_failure_raises_integrity_failure() -> None:
    integrity = IntegrityCheck.build(False, 0.3, [ValidationError.file_too_small(10, 1024)])
    result = _result(integrity=integrity)

    with pytest.raises(IntegrityFailureError, match="File too small"):
        result.raise_for_status()


def test_combined_confidence_weights() -> None:
    structure = StructureCheck.build(True, 0.4)
    integrity = IntegrityCheck.build(True, 0.9)

    assert combined_confidence(True, 1.0, structure, integrity) == pytest.approx(0.73)
    assert combined_confidence(False, 1.0, structure, integrity) == 0.0
