"""
Summary: Tests for the validation orchestrator.
Why: Cover format matching, scoring, structural and integrity failures, raw buffers and quick checks.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from audio_samples import (
    StubIntrospector,
    WriteSample,
    flac_bytes,
    id3v1_tag,
    m4a_bytes,
    mp3_bytes,
    playable_report,
    riff_bytes,
)
from audiosniff.features.detection import DetectionMethod
from audiosniff.features.validation import FormatValidator, IssueCategory, ValidationErrorKind
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import (
    AudioFileNotFoundError,
    IntegrityFailureError,
    StructuralMismatchError,
)
from audiosniff.shared.events import InspectionEvent
from audiosniff.shared.introspection import NOT_PLAYABLE


def _validator(report_format: str = "mp3") -> tuple[FormatValidator, StubIntrospector]:
    introspector = StubIntrospector(playable_report(report_format))
    return FormatValidator(introspector=introspector), introspector


def test_valid_mp3(write_sample: WriteSample) -> None:
    path = write_sample("song.mp3", mp3_bytes(20))
    validator, introspector = _validator()

    result = validator.validate(path, "mp3")

    assert result.is_valid
    assert result.format_matches
    assert result.issues == ()
    # 0.3 * 1.0 + 0.4 * (20 / 50) + 0.3 * 0.9
    assert result.confidence == pytest.approx(0.73)
    assert introspector.calls == [path]


def test_valid_flac(write_sample: WriteSample) -> None:
    path = write_sample("song.flac", flac_bytes())
    validator, _ = _validator("flac")

    result = validator.validate(str(path), FormatKind.FLAC)

    assert result.is_valid
    assert result.structure.details["blocks"] == ("STREAMINFO", "PADDING")
    assert result.confidence == pytest.approx(0.95)


def test_flac_without_streaminfo_is_a_structural_mismatch(write_sample: WriteSample) -> None:
    path = write_sample("broken.flac", flac_bytes(with_streaminfo=False))
    validator, _ = _validator("flac")

    result = validator.validate(path, FormatKind.FLAC)

    assert not result.is_valid
    assert result.format_matches
    assert [issue.category for issue in result.issues] == [IssueCategory.STRUCTURAL_MISMATCH]
    assert result.errors[0].message == "Missing required block: STREAMINFO"
    with pytest.raises(StructuralMismatchError):
        result.raise_for_status()


def test_declared_format_mismatch_zeroes_confidence(write_sample: WriteSample) -> None:
    path = write_sample("song.flac", flac_bytes())
    validator, _ = _validator("flac")

    result = validator.validate(path, FormatKind.MP3)

    assert not result.is_valid
    assert result.confidence == 0.0
    assert result.detected_format is FormatKind.FLAC
    assert result.issues[0].category is IssueCategory.FORMAT_MISMATCH
    with pytest.raises(StructuralMismatchError) as excinfo:
        result.raise_for_status()
    assert excinfo.value.errors[0].kind is ValidationErrorKind.INVALID_FORMAT


def test_truncated_mp3_reports_frames_and_size(write_sample: WriteSample) -> None:
    """A 130-byte file holding only an ID3v1 block is an MP3 by name alone."""

    path = write_sample("short.mp3", b"\x00\x00" + id3v1_tag(title="Test"))
    validator = FormatValidator(introspector=StubIntrospector(NOT_PLAYABLE))

    detection = validator.detector.detect(path)
    result = validator.validate(path, FormatKind.MP3)

    assert path.stat().st_size == 130
    assert detection.format is FormatKind.MP3
    assert detection.method is DetectionMethod.EXTENSION
    assert detection.confidence == pytest.approx(0.8)
    assert result.structure.details["has_id3v1"] is True

    messages = [error.message for error in result.errors]
    assert not result.is_valid
    assert "Insufficient frames: found 0, expected at least 10" in messages
    assert "File too small: 130 bytes, minimum 1024" in messages
    with pytest.raises(StructuralMismatchError):
        result.raise_for_status()


def test_unplayable_file_fails_integrity_only(write_sample: WriteSample) -> None:
    path = write_sample("song.mp3", mp3_bytes(20))
    validator = FormatValidator(introspector=StubIntrospector(NOT_PLAYABLE))

    result = validator.validate(path, FormatKind.MP3)

    assert not result.is_valid
    assert result.structure.is_valid
    assert [issue.category for issue in result.issues] == [IssueCategory.INTEGRITY_FAILURE]
    with pytest.raises(IntegrityFailureError):
        result.raise_for_status()


def test_m4a_container_matches_declared_container(write_sample: WriteSample) -> None:
    path = write_sample("track.m4a", m4a_bytes(b"mp4a"))
    validator, _ = _validator("aac")

    result = validator.validate(path, FormatKind.M4A)

    assert result.is_valid
    assert result.detected_format is FormatKind.AAC
    assert result.structure.details["boxes"] == ("ftyp", "moov", "mdat")


def test_wav_missing_data_chunk(write_sample: WriteSample) -> None:
    path = write_sample("voice.wav", riff_bytes([(b"fmt ", bytes(16)), (b"LIST", bytes(8192))]))
    validator, _ = _validator("wav")

    result = validator.validate(path, FormatKind.WAV)

    assert not result.is_valid
    assert [error.message for error in result.structure.errors] == ["Missing required chunk: data"]


def test_empty_file_is_invalid_not_an_error(write_sample: WriteSample) -> None:
    """Detection falls back to the extension; structure and integrity both fail."""

    path = write_sample("empty.mp3", b"")
    validator = FormatValidator(introspector=StubIntrospector(NOT_PLAYABLE))

    result = validator.validate(path, FormatKind.MP3)

    assert not result.is_valid
    assert result.structure.details["frame_count"] == 0
    # 0.3 * 0.8 + 0.4 * 0.0 + 0.3 * 0.3
    assert result.confidence == pytest.approx(0.33)


def test_missing_file_raises(tmp_path: Path) -> None:
    validator, _ = _validator()

    with pytest.raises(AudioFileNotFoundError):
        _ = validator.validate(tmp_path / "missing.mp3", FormatKind.MP3)


def test_unknown_format_name_is_rejected(write_sample: WriteSample) -> None:
    path = write_sample("song.mp3", mp3_bytes())
    validator, _ = _validator()

    with pytest.raises(ValueError):
        _ = validator.validate(path, "wma")


def test_failure_is_logged_with_event(
    write_sample: WriteSample, caplog: pytest.LogCaptureFixture
) -> None:
    path = write_sample("song.flac", flac_bytes())
    validator, _ = _validator("flac")
    caplog.set_level(logging.INFO, logger="audiosniff")

    _ = validator.validate(path, FormatKind.MP3)

    events = [getattr(record, "inspection_event", None) for record in caplog.records]
    assert InspectionEvent.VALIDATE_FAIL in events


class TestValidateBytes:
    def test_valid_buffer(self) -> None:
        validator, introspector = _validator()

        result = validator.validate(mp3_bytes(1), FormatKind.MP3)

        assert result.is_valid
        assert result.confidence == pytest.approx(0.8)
        assert result.integrity.confidence == 1.0
        assert introspector.calls == []

    def test_short_buffer(self) -> None:
        validator, _ = _validator()

        result = validator.validate(mp3_bytes(1)[:16], FormatKind.MP3)

        assert not result.is_valid
        assert result.confidence == 0.0
        assert result.structure.errors[0].kind is ValidationErrorKind.INSUFFICIENT_DATA

    def test_mismatched_buffer(self) -> None:
        validator, _ = _validator()

        result = validator.validate(bytearray(flac_bytes()), "mp3")

        assert not result.is_valid
        assert result.confidence == 0.0
        assert result.detected_format is FormatKind.FLAC
        assert result.structure.errors[0].kind is ValidationErrorKind.INVALID_SIGNATURE


class TestQuickValidate:
    def test_matching_file(self, write_sample: WriteSample) -> None:
        path = write_sample("song.mp3", mp3_bytes(2))
        validator, introspector = _validator()

        assert validator.quick_validate(path, "mp3") is True
        assert introspector.calls == []

    def test_wrong_extension(self, write_sample: WriteSample) -> None:
        path = write_sample("song.flac", mp3_bytes(2))
        validator, _ = _validator()

        assert validator.quick_validate(path, FormatKind.MP3) is False

    def test_wrong_signature(self, write_sample: WriteSample) -> None:
        path = write_sample("song.mp3", flac_bytes())
        validator, _ = _validator()

        assert validator.quick_validate(path, FormatKind.MP3) is False

    def test_missing_file(self, tmp_path: Path) -> None:
        validator, _ = _validator()

        assert validator.quick_validate(tmp_path / "missing.mp3", FormatKind.MP3) is False

    def test_unknown_format_name(self, write_sample: WriteSample) -> None:
        path = write_sample("song.mp3", mp3_bytes(2))
        validator, _ = _validator()

        assert validator.quick_validate(path, "wma") is False
