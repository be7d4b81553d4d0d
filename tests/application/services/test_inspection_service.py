"""
Summary: Tests for the batch inspection service.
Why: Batches must return one outcome per input, in input order, with per-item errors captured.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from audio_samples import (
    StubIntrospector,
    WriteSample,
    encoded_text,
    flac_bytes,
    frame_v23,
    id3v2_tag,
    mp3_bytes,
    playable_report,
)
from audiosniff import BatchOutcome, InspectionService
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import AudioFileNotFoundError, NoMetadataFoundError
from audiosniff.shared.events import InspectionEvent


@pytest.fixture
def service(stub_introspector: StubIntrospector) -> InspectionService:
    return InspectionService(introspector=stub_introspector, max_workers=4)


def test_collaborators_share_the_introspector(stub_introspector: StubIntrospector) -> None:
    service = InspectionService(introspector=stub_introspector)

    assert service.detector.introspector is stub_introspector
    assert service.validator.detector is service.detector


def test_detect_many_preserves_input_order(service: InspectionService, write_sample: WriteSample) -> None:
    paths: list[Path] = []
    for index in range(50):
        if index % 2:
            paths.append(write_sample(f"track_{index:02d}.flac", flac_bytes()))
        else:
            paths.append(write_sample(f"track_{index:02d}.mp3", mp3_bytes(2)))

    outcomes = service.detect_many(paths)

    assert [outcome.path for outcome in outcomes] == paths
    assert all(outcome.ok for outcome in outcomes)
    expected = [FormatKind.FLAC if index % 2 else FormatKind.MP3 for index in range(50)]
    assert [outcome.value.format for outcome in outcomes if outcome.value is not None] == expected


def test_failures_are_captured_per_item(
    service: InspectionService,
    write_sample: WriteSample,
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    good = write_sample("good.mp3", mp3_bytes(2))
    missing = tmp_path / "missing.mp3"
    caplog.set_level(logging.INFO, logger="audiosniff")

    outcomes = service.detect_many([good, str(missing)])

    assert outcomes[0].ok
    assert not outcomes[1].ok
    assert outcomes[1].path == missing
    assert isinstance(outcomes[1].error, AudioFileNotFoundError)
    assert outcomes[1].value is None

    events = [getattr(record, "inspection_event", None) for record in caplog.records]
    assert events[0] == InspectionEvent.BATCH_START
    assert InspectionEvent.BATCH_ITEM_ERROR in events
    complete = [
        record
        for record in caplog.records
        if getattr(record, "inspection_event", None) == InspectionEvent.BATCH_COMPLETE
    ]
    assert [(getattr(record, "total"), getattr(record, "failed")) for record in complete] == [(2, 1)]


def test_empty_batch(service: InspectionService, mocker: MockerFixture) -> None:
    factory = mocker.Mock()
    empty = InspectionService(detector=service.detector, executor_factory=factory)

    assert empty.detect_many([]) == []
    factory.assert_not_called()


def test_worker_count_is_bounded_by_batch_size(
    stub_introspector: StubIntrospector, write_sample: WriteSample, mocker: MockerFixture
) -> None:
    factory = mocker.Mock(side_effect=lambda workers: ThreadPoolExecutor(max_workers=workers))
    service = InspectionService(introspector=stub_introspector, max_workers=8, executor_factory=factory)
    paths = [write_sample(f"{index}.mp3", mp3_bytes(2)) for index in range(3)]

    _ = service.detect_many(paths)

    factory.assert_called_once_with(3)


def test_validate_many_uses_each_extension(write_sample: WriteSample) -> None:
    introspector = StubIntrospector(playable_report("flac"))
    service = InspectionService(introspector=introspector)
    flac = write_sample("real.flac", flac_bytes())
    lying = write_sample("lying.mp3", flac_bytes())

    outcomes = service.validate_many([flac, lying])

    results = [outcome.value for outcome in outcomes]
    assert results[0] is not None and results[0].is_valid
    assert results[1] is not None and not results[1].is_valid
    assert results[1].expected_format is FormatKind.MP3


def test_validate_many_with_one_expected_format(write_sample: WriteSample) -> None:
    service = InspectionService(introspector=StubIntrospector(playable_report("flac")))
    path = write_sample("real.flac", flac_bytes())

    (outcome,) = service.validate_many([path], "mp3")

    assert outcome.value is not None
    assert outcome.value.expected_format is FormatKind.MP3
    assert outcome.value.confidence == 0.0


def test_extract_metadata_many(service: InspectionService, write_sample: WriteSample) -> None:
    tagged = write_sample("tagged.mp3", id3v2_tag(3, frame_v23("TIT2", encoded_text("Hello"))) + mp3_bytes(12))
    bare = write_sample("bare.mp3", mp3_bytes(12))

    outcomes = service.extract_metadata_many([tagged, bare])

    assert outcomes[0].value is not None
    assert outcomes[0].value.title == "Hello"
    assert isinstance(outcomes[1].error, NoMetadataFoundError)


def test_clear_caches(service: InspectionService, write_sample: WriteSample) -> None:
    path = write_sample("tagged.mp3", id3v2_tag(3, frame_v23("TIT2", encoded_text("Hello"))) + mp3_bytes(12))
    _ = service.detect_many([path])
    _ = service.extract_metadata_many([path])

    service.clear_caches()

    assert service.detector.cache_stats().size == 0
    assert service.metadata_extractor.cache_stats().metadata_entries == 0


def test_batch_outcome_ok() -> None:
    assert BatchOutcome(path=Path("a.mp3"), value=1).ok
    assert not BatchOutcome(path=Path("a.mp3"), error=ValueError("x")).ok
