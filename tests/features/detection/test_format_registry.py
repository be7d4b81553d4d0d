"""
Summary: Tests for the static format descriptor table.
Why: Extension and MIME lookups decide the declared format for every other component.
"""

from __future__ import annotations

import pytest

from audiosniff.features.detection.domain.format_registry import (
    REGISTRY,
    all_descriptors,
    by_extension,
    by_mime,
    descriptor,
)
from audiosniff.shared.audio_format import FormatKind


@pytest.mark.parametrize(
    ("extension", "expected"),
    [
        ("mp3", FormatKind.MP3),
        (".MP3", FormatKind.MP3),
        (" .Flac ", FormatKind.FLAC),
        ("m4a", FormatKind.M4A),
        ("aif", FormatKind.AIFF),
        ("opus", FormatKind.OPUS),
        ("oga", FormatKind.OGG),
        ("wave", FormatKind.WAV),
        ("txt", FormatKind.UNKNOWN),
        ("", FormatKind.UNKNOWN),
    ],
)
def test_by_extension(extension: str, expected: FormatKind) -> None:
    """Extension lookups are case-insensitive and tolerate a leading dot."""

    assert by_extension(extension).kind is expected


def test_m4a_extension_resolves_to_first_match_in_priority_order() -> None:
    """ALAC shares the extension but M4A is declared earlier."""

    assert "m4a" in descriptor(FormatKind.ALAC).extensions
    assert by_extension("m4a").kind is FormatKind.M4A


@pytest.mark.parametrize(
    ("mime", "expected"),
    [
        ("audio/mpeg", FormatKind.MP3),
        ("AUDIO/FLAC", FormatKind.FLAC),
        ("audio/ogg; codecs=opus", FormatKind.OGG),
        ("audio/mp4", FormatKind.AAC),
        ("audio/x-aiff", FormatKind.AIFF),
        ("text/plain", FormatKind.UNKNOWN),
    ],
)
def test_by_mime(mime: str, expected: FormatKind) -> None:
    """MIME lookups ignore case and parameters and honour priority order."""

    assert by_mime(mime).kind is expected


def test_descriptors_follow_format_kind_order() -> None:
    """The priority order is the declaration order of the enum."""

    assert [item.kind for item in all_descriptors()] == list(FormatKind)


def test_descriptor_contents() -> None:
    """Spot-check the signature and lossless flags."""

    flac = descriptor(FormatKind.FLAC)
    assert flac.signatures == (b"fLaC",)
    assert flac.is_lossy is False
    assert flac.display_name == "FLAC"
    assert descriptor(FormatKind.OPUS).signatures == (b"OggS",)
    assert descriptor(FormatKind.UNKNOWN).extensions == ()


def test_registry_is_read_only() -> None:
    """The descriptor table cannot be modified at runtime."""

    with pytest.raises(TypeError):
        REGISTRY[FormatKind.MP3] = descriptor(FormatKind.FLAC)  # pyright: ignore[reportIndexIssue]
