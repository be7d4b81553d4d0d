"""Format-specific metadata extractors.

Where: src/audiosniff/features/metadata/usecases/extraction/format_extractors.py
What: Define mutagen-backed extractors for the formats the ID3 parser does not cover.
Why: Give every registered container a tag source without hand-parsing Vorbis comments or MP4 atoms.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, ClassVar, cast, override

from mutagen._util import MutagenError
from mutagen.aiff import AIFF
from mutagen.flac import FLAC, Picture
from mutagen.id3 import ID3
from mutagen.mp4 import MP4, MP4Cover
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis
from mutagen.wave import WAVE

from audiosniff.features.detection.domain.format_registry import descriptor
from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import FormatKind

from ._base_extractors import BaseAudioExtractor, BaseTagExtractor
from ._tag_utils import parse_int, parse_tuple_numbers
from ...domain.models import ArtworkType, AudioArtwork, AudioMetadata

__all__ = [
    "AacExtractor",
    "AiffExtractor",
    "FlacExtractor",
    "M4aExtractor",
    "OggVorbisExtractor",
    "OpusExtractor",
    "WaveExtractor",
]


class _VorbisCommentExtractor(BaseAudioExtractor):
    """Shared mapping for Vorbis comment containers (FLAC, Ogg Vorbis, Opus)."""

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "title",
        "artist": "artist",
        "album_artist": "albumartist",
        "album": "album",
        "track": "tracknumber",
        "disc": "discnumber",
        "date": "date",
        "genre": "genre",
        "composer": "composer",
        "comment": "comment",
        "lyrics": "lyrics",
        "bpm": "bpm",
        "isrc": "isrc",
        "publisher": "organization",
        "copyright": "copyright",
        "encoder": "encoder",
    }

    def _get_tag_value(self, tags: Any, key: str) -> str | None:
        return BaseTagExtractor.get_str_tag(tags, key)

    @override
    def _refine(self, audio: Any, metadata: AudioMetadata) -> None:
        # Totals are often stored in their own comments instead of "N/M".
        if metadata.track_total is None:
            metadata.track_total = parse_int(
                self._get_tag_value(audio, "tracktotal") or self._get_tag_value(audio, "totaltracks")
            )
        if metadata.disc_total is None:
            metadata.disc_total = parse_int(
                self._get_tag_value(audio, "disctotal") or self._get_tag_value(audio, "totaldiscs")
            )

    def _artwork(self, audio: Any) -> list[AudioArtwork]:
        artwork: list[AudioArtwork] = []
        for encoded in cast(list[str], audio.get("metadata_block_picture", None) or []):
            try:
                picture = Picture(base64.b64decode(encoded))
            except (binascii.Error, MutagenError, ValueError) as exc:
                logger.warning("Skipping unreadable embedded picture: %s", exc)
                continue
            artwork.append(_from_flac_picture(picture))
        return artwork


def _from_flac_picture(picture: Picture) -> AudioArtwork:
    return AudioArtwork(
        data=bytes(picture.data),
        mime_type=picture.mime or None,
        type=ArtworkType.from_picture_type(int(picture.type)),
    )


class FlacExtractor(_VorbisCommentExtractor):
    """Extractor for FLAC files."""

    FILE_CLASS: ClassVar[type | None] = FLAC
    FORMAT_NAME: ClassVar[str] = "FLAC"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.FLAC).extensions

    @override
    def _artwork(self, audio: Any) -> list[AudioArtwork]:
        return [_from_flac_picture(picture) for picture in cast(FLAC, audio).pictures]


class OggVorbisExtractor(_VorbisCommentExtractor):
    """Extractor for Ogg Vorbis files."""

    FILE_CLASS: ClassVar[type | None] = OggVorbis
    FORMAT_NAME: ClassVar[str] = "OGG"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.OGG).extensions


class OpusExtractor(_VorbisCommentExtractor):
    """Extractor for Opus (.opus) files using Vorbis comments."""

    FILE_CLASS: ClassVar[type | None] = OggOpus
    FORMAT_NAME: ClassVar[str] = "OPUS"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.OPUS).extensions


class M4aExtractor(BaseAudioExtractor):
    """Extractor for M4A/AAC/ALAC files using MP4 atoms."""

    FILE_CLASS: ClassVar[type | None] = MP4
    FORMAT_NAME: ClassVar[str] = "M4A"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.M4A).extensions

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "\xa9nam",
        "artist": "\xa9ART",
        "album_artist": "aART",
        "album": "\xa9alb",
        "track": "trkn",
        "disc": "disk",
        "date": "\xa9day",
        "genre": "\xa9gen",
        "composer": "\xa9wrt",
        "comment": "\xa9cmt",
        "lyrics": "\xa9lyr",
        "bpm": "tmpo",
        "isrc": "",
        "publisher": "",
        "copyright": "cprt",
        "encoder": "\xa9too",
    }

    _COVER_MIME: ClassVar[dict[int, str]] = {
        MP4Cover.FORMAT_JPEG: "image/jpeg",
        MP4Cover.FORMAT_PNG: "image/png",
    }

    def _get_tag_value(self, tags: Any, key: str) -> str | None:
        if key in ["trkn", "disk"]:
            value: list[tuple[int, int]] | None = cast(list[tuple[int, int]] | None, tags.get(key))
            if not value:
                return None
            num, total = parse_tuple_numbers(data=value)
            return f"{num or ''}/{total or ''}"
        if key == "tmpo":
            tempo = cast(list[int] | None, tags.get(key))
            return str(tempo[0]) if tempo else None
        return BaseTagExtractor.get_str_tag(tags, key)

    def _artwork(self, audio: Any) -> list[AudioArtwork]:
        covers = cast(list[MP4Cover], audio.get("covr", None) or [])
        return [
            AudioArtwork(
                data=bytes(cover),
                mime_type=self._COVER_MIME.get(int(cover.imageformat)),
                type=ArtworkType.FRONT_COVER,
            )
            for cover in covers
        ]


class _Id3ContainerExtractor(BaseAudioExtractor):
    """Shared mapping for files whose tags are an embedded ID3v2 block."""

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "TIT2",
        "artist": "TPE1",
        "album_artist": "TPE2",
        "album": "TALB",
        "track": "TRCK",
        "disc": "TPOS",
        "date": "TDRC",
        "genre": "TCON",
        "composer": "TCOM",
        "comment": "COMM",
        "lyrics": "USLT",
        "bpm": "TBPM",
        "isrc": "TSRC",
        "publisher": "TPUB",
        "copyright": "TCOP",
        "encoder": "TENC",
    }

    @staticmethod
    def _tags(audio: Any) -> ID3 | None:
        if isinstance(audio, ID3):
            return audio
        return cast(ID3 | None, getattr(audio, "tags", None))

    def _get_tag_value(self, tags: Any, key: str) -> str | None:
        id3 = self._tags(tags)
        if id3 is None or not key:
            return None
        try:
            frames = id3.getall(key)
        except Exception as exc:  # pragma: no cover - malformed frame
            logger.warning("Failed to get ID3 tag %r: %s", key, exc)
            return None
        if not frames:
            return None
        text: object = getattr(frames[0], "text", None)
        if isinstance(text, (list, tuple)) and text:
            return str(text[0])
        if isinstance(text, str):
            return text
        return None

    def _artwork(self, audio: Any) -> list[AudioArtwork]:
        id3 = self._tags(audio)
        if id3 is None:
            return []
        return [
            AudioArtwork(
                data=bytes(frame.data),
                mime_type=frame.mime or None,
                type=ArtworkType.from_picture_type(int(frame.type)),
            )
            for frame in id3.getall("APIC")
        ]


class WaveExtractor(_Id3ContainerExtractor):
    """Extractor for WAV files carrying an ``id3 `` chunk."""

    FILE_CLASS: ClassVar[type | None] = WAVE
    FORMAT_NAME: ClassVar[str] = "WAV"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.WAV).extensions


class AiffExtractor(_Id3ContainerExtractor):
    """Extractor for AIFF files carrying an ``ID3 `` chunk."""

    FILE_CLASS: ClassVar[type | None] = AIFF
    FORMAT_NAME: ClassVar[str] = "AIFF"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.AIFF).extensions


class AacExtractor(_Id3ContainerExtractor):
    """Extractor for raw ADTS streams prefixed by an ID3v2 tag."""

    FILE_CLASS: ClassVar[type | None] = ID3
    FORMAT_NAME: ClassVar[str] = "AAC"
    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = descriptor(FormatKind.AAC).extensions
