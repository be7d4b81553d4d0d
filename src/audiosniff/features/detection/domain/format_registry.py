"""
Summary: Static descriptor table of supported audio formats.
Why: Extension, MIME and signature lookups share one immutable source of truth.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from audiosniff.shared.audio_format import FormatKind


@dataclass(frozen=True, slots=True)
class FormatDescriptor:
    """Immutable description of one audio format."""

    kind: FormatKind
    extensions: tuple[str, ...]
    mime_types: tuple[str, ...]
    signatures: tuple[bytes, ...]
    is_lossy: bool
    display_name: str


_MP4_SIGNATURES: Final[tuple[bytes, ...]] = (
    b"\x00\x00\x00\x20ftypM4A",
    b"\x00\x00\x00\x1cftypM4A",
    b"\x00\x00\x00\x20ftypisom",
    b"\x00\x00\x00\x18ftypmp42",
)

_DESCRIPTORS: Final[tuple[FormatDescriptor, ...]] = (
    FormatDescriptor(
        kind=FormatKind.MP3,
        extensions=("mp3", "mp2", "mp1"),
        mime_types=("audio/mpeg", "audio/mp3", "audio/x-mp3", "audio/mpeg3", "audio/x-mpeg-3"),
        # ID3v2 tag, MPEG-1 L3, MPEG-2 L3, MPEG-2.5 L3, MPEG-1 L2
        signatures=(b"ID3", b"\xff\xfb", b"\xff\xf3", b"\xff\xf2", b"\xff\xfa"),
        is_lossy=True,
        display_name="MP3",
    ),
    FormatDescriptor(
        kind=FormatKind.AAC,
        extensions=("aac", "adts"),
        mime_types=("audio/aac", "audio/x-aac", "audio/mp4", "audio/x-m4a"),
        # ADTS sync for MPEG-4 and MPEG-2
        signatures=(b"\xff\xf1", b"\xff\xf9"),
        is_lossy=True,
        display_name="AAC",
    ),
    FormatDescriptor(
        kind=FormatKind.M4A,
        extensions=("m4a", "m4b", "m4p", "m4v", "m4r"),
        mime_types=("audio/mp4", "audio/x-m4a", "audio/m4a"),
        signatures=_MP4_SIGNATURES,
        is_lossy=True,
        display_name="M4A",
    ),
    FormatDescriptor(
        kind=FormatKind.FLAC,
        extensions=("flac",),
        mime_types=("audio/flac", "audio/x-flac"),
        signatures=(b"fLaC",),
        is_lossy=False,
        display_name="FLAC",
    ),
    FormatDescriptor(
        kind=FormatKind.OGG,
        extensions=("ogg", "oga", "ogv"),
        mime_types=("audio/ogg", "audio/x-ogg", "application/ogg", "audio/vorbis"),
        signatures=(b"OggS",),
        is_lossy=True,
        display_name="Ogg Vorbis",
    ),
    FormatDescriptor(
        kind=FormatKind.WAV,
        extensions=("wav", "wave"),
        mime_types=("audio/wav", "audio/x-wav", "audio/wave"),
        signatures=(b"RIFF",),
        is_lossy=False,
        display_name="WAV",
    ),
    FormatDescriptor(
        kind=FormatKind.AIFF,
        extensions=("aiff", "aif", "aifc"),
        mime_types=("audio/aiff", "audio/x-aiff"),
        signatures=(b"FORM",),
        is_lossy=False,
        display_name="AIFF",
    ),
    FormatDescriptor(
        kind=FormatKind.ALAC,
        extensions=("m4a",),
        mime_types=("audio/mp4", "audio/x-m4a"),
        signatures=_MP4_SIGNATURES,
        is_lossy=False,
        display_name="Apple Lossless",
    ),
    FormatDescriptor(
        kind=FormatKind.OPUS,
        extensions=("opus",),
        mime_types=("audio/opus", "audio/ogg"),
        signatures=(b"OggS",),
        is_lossy=True,
        display_name="Opus",
    ),
    FormatDescriptor(
        kind=FormatKind.UNKNOWN,
        extensions=(),
        mime_types=(),
        signatures=(),
        is_lossy=True,
        display_name="Unknown",
    ),
)

REGISTRY: Final[Mapping[FormatKind, FormatDescriptor]] = MappingProxyType(
    {descriptor.kind: descriptor for descriptor in _DESCRIPTORS}
)


def descriptor(kind: FormatKind) -> FormatDescriptor:
    """Return the descriptor for ``kind``."""
    return REGISTRY[kind]


def all_descriptors() -> tuple[FormatDescriptor, ...]:
    """Return every descriptor in fixed priority order."""
    return _DESCRIPTORS


def by_extension(extension: str) -> FormatDescriptor:
    """Look up a format by file extension (case-insensitive, leading dot optional)."""
    ext = extension.strip().lstrip(".").lower()
    if not ext:
        return REGISTRY[FormatKind.UNKNOWN]
    return next(
        (item for item in _DESCRIPTORS if ext in item.extensions),
        REGISTRY[FormatKind.UNKNOWN],
    )


def by_mime(mime_type: str) -> FormatDescriptor:
    """Look up a format by MIME type (case-insensitive, parameters ignored)."""
    mime = mime_type.split(";", 1)[0].strip().lower()
    return next(
        (item for item in _DESCRIPTORS if mime in item.mime_types),
        REGISTRY[FormatKind.UNKNOWN],
    )


__all__ = [
    "FormatDescriptor",
    "REGISTRY",
    "all_descriptors",
    "by_extension",
    "by_mime",
    "descriptor",
]
