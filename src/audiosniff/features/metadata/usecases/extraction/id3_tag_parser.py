"""ID3v1 and ID3v2 tag parser.

Where: src/audiosniff/features/metadata/usecases/extraction/id3_tag_parser.py
What: Decode ID3v1, ID3v2.2, ID3v2.3 and ID3v2.4 tags of MP3 files into AudioMetadata and artwork.
Why: MP3 tags are parsed directly from the bytes so corrupted and empty tags can be told apart.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO, ClassVar, Final, override

from audiosniff.platform.logging import logger
from audiosniff.shared.errors import CorruptedMetadataError, NoMetadataFoundError
from audiosniff.shared.files import open_binary

from ._base_extractors import AudioFormatExtractor
from ._tag_utils import parse_int, parse_slash_separated, parse_year
from .id3_frames import (
    ID3V2_HEADER_SIZE,
    RawFrame,
    TagHeader,
    iter_frames,
    parse_comment_frame,
    parse_pic_frame,
    parse_picture_frame,
    parse_tag_header,
    parse_text_frame,
    prepare_body,
)
from ...domain.id3_genres import genre_name, resolve_genre
from ...domain.models import AudioArtwork, AudioMetadata

__all__ = ["ID3TagParser", "parse_id3v1"]

ID3V1_TAG_SIZE: Final[int] = 128

# Plain text frames for both the 3-character (v2.2) and 4-character ids.
_TEXT_FIELDS: Final[dict[str, str]] = {
    "TT2": "title",
    "TP1": "artist",
    "TAL": "album",
    "TP2": "album_artist",
    "TCM": "composer",
    "TCR": "copyright",
    "TPB": "publisher",
    "TEN": "encoder",
    "TRC": "isrc",
    "TIT2": "title",
    "TPE1": "artist",
    "TALB": "album",
    "TPE2": "album_artist",
    "TCOM": "composer",
    "TCOP": "copyright",
    "TPUB": "publisher",
    "TENC": "encoder",
    "TSRC": "isrc",
}
_YEAR_FRAMES: Final[frozenset[str]] = frozenset({"TYE", "TYER", "TDRC"})
_GENRE_FRAMES: Final[frozenset[str]] = frozenset({"TCO", "TCON"})
_TRACK_FRAMES: Final[frozenset[str]] = frozenset({"TRK", "TRCK"})
_DISC_FRAMES: Final[frozenset[str]] = frozenset({"TPA", "TPOS"})
_BPM_FRAMES: Final[frozenset[str]] = frozenset({"TBP", "TBPM"})
_COMMENT_FRAMES: Final[frozenset[str]] = frozenset({"COM", "COMM"})
_LYRICS_FRAMES: Final[frozenset[str]] = frozenset({"ULT", "USLT"})
_PICTURE_FRAMES: Final[frozenset[str]] = frozenset({"PIC", "APIC"})

# Fields ID3v1 may fill when ID3v2 left them empty.
_ID3V1_MERGE_FIELDS: Final[tuple[str, ...]] = (
    "title",
    "artist",
    "album",
    "year",
    "genre",
    "comment",
    "track_number",
)


def _v1_string(raw: bytes) -> str | None:
    text = raw.split(b"\x00", 1)[0].decode("latin-1").strip()
    return text or None


def parse_id3v1(tag: bytes) -> AudioMetadata | None:
    """Decode a 128-byte ID3v1/ID3v1.1 block; ``None`` when it is not one."""

    if len(tag) != ID3V1_TAG_SIZE or tag[:3] != b"TAG":
        return None
    metadata = AudioMetadata(
        title=_v1_string(tag[3:33]),
        artist=_v1_string(tag[33:63]),
        album=_v1_string(tag[63:93]),
        year=parse_year(_v1_string(tag[93:97]) or ""),
        genre=genre_name(tag[127]),
    )
    if tag[125] == 0 and tag[126] != 0:
        # ID3v1.1: the comment gives up its last two bytes to a track number.
        metadata.comment = _v1_string(tag[97:125])
        metadata.track_number = tag[126]
    else:
        metadata.comment = _v1_string(tag[97:127])
    return metadata


def _apply_frames(frames: Iterable[RawFrame]) -> AudioMetadata:
    metadata = AudioMetadata()
    comment_description: str | None = None

    for frame in frames:
        frame_id = frame.frame_id
        field_name = _TEXT_FIELDS.get(frame_id)
        if field_name is not None:
            setattr(metadata, field_name, parse_text_frame(frame.data))
        elif frame_id in _YEAR_FRAMES:
            metadata.year = parse_year(parse_text_frame(frame.data) or "")
        elif frame_id in _GENRE_FRAMES:
            metadata.genre = resolve_genre(parse_text_frame(frame.data))
        elif frame_id in _TRACK_FRAMES:
            metadata.track_number, metadata.track_total = parse_slash_separated(
                parse_text_frame(frame.data) or ""
            )
        elif frame_id in _DISC_FRAMES:
            metadata.disc_number, metadata.disc_total = parse_slash_separated(
                parse_text_frame(frame.data) or ""
            )
        elif frame_id in _BPM_FRAMES:
            metadata.bpm = parse_int(parse_text_frame(frame.data))
        elif frame_id in _COMMENT_FRAMES:
            parsed = parse_comment_frame(frame.data)
            if parsed is None:
                continue
            # Prefer the comment without a description over tool-specific ones.
            if comment_description is None or (comment_description and not parsed[0]):
                comment_description, metadata.comment = parsed
        elif frame_id in _LYRICS_FRAMES:
            parsed = parse_comment_frame(frame.data)
            if parsed is not None and metadata.lyrics is None:
                metadata.lyrics = parsed[1]
        elif frame_id in _PICTURE_FRAMES:
            metadata.has_artwork = True
    return metadata


def _picture(frame: RawFrame) -> AudioArtwork | None:
    if frame.frame_id == "APIC":
        return parse_picture_frame(frame.data)
    if frame.frame_id == "PIC":
        return parse_pic_frame(frame.data)
    return None


class ID3TagParser(AudioFormatExtractor):
    """Parse ID3v1 and ID3v2 tags of MP3 files.

    ID3v2 fields win over ID3v1; ID3v1 only fills fields ID3v2 left empty.
    """

    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = ("mp3",)

    @override
    def extract_metadata(self, file_path: Path) -> AudioMetadata:
        """Extract title, artist, album and the other ID3 fields.

        Args:
            file_path: MP3 file to read.

        Returns:
            AudioMetadata: Merged ID3v2/ID3v1 fields with ``file_format`` "MP3".

        Raises:
            AudioFileNotFoundError: If the file does not exist.
            AudioFileNotAccessibleError: If the file cannot be opened.
            CorruptedMetadataError: If the ID3v2 tag is malformed and ID3v1 recovers nothing.
            NoMetadataFoundError: If neither tag carries a title, artist or album.
        """
        path = Path(file_path)
        corruption: CorruptedMetadataError | None = None
        v2_metadata: AudioMetadata | None = None

        with open_binary(path) as handle:
            try:
                tag = self._read_id3v2(handle)
            except CorruptedMetadataError as exc:
                logger.warning("Corrupted ID3v2 tag in %s: %s", path, exc.reason)
                corruption = exc
                tag = None
            if tag is not None:
                header, body = tag
                v2_metadata = _apply_frames(iter_frames(header, body))
            v1_metadata = self._read_id3v1(handle)

        metadata = v2_metadata or AudioMetadata()
        if v1_metadata is not None:
            for field_name in _ID3V1_MERGE_FIELDS:
                if getattr(metadata, field_name) is None:
                    setattr(metadata, field_name, getattr(v1_metadata, field_name))

        if not metadata.has_core_tags:
            if corruption is not None:
                raise corruption
            raise NoMetadataFoundError(path)

        metadata.file_format = "MP3"
        return metadata

    @override
    def extract_artwork(self, file_path: Path) -> list[AudioArtwork]:
        """Return APIC/PIC pictures in tag order; a corrupted or missing tag yields none."""

        path = Path(file_path)
        with open_binary(path) as handle:
            try:
                tag = self._read_id3v2(handle)
            except CorruptedMetadataError as exc:
                logger.warning("Corrupted ID3v2 tag in %s: %s", path, exc.reason)
                return []
        if tag is None:
            return []
        header, body = tag
        return [
            artwork
            for artwork in (_picture(frame) for frame in iter_frames(header, body))
            if artwork is not None
        ]

    @staticmethod
    def _read_id3v2(handle: BinaryIO) -> tuple[TagHeader, bytes] | None:
        _ = handle.seek(0)
        header = parse_tag_header(handle.read(ID3V2_HEADER_SIZE))
        if header is None:
            return None
        body = handle.read(header.size)
        if len(body) < header.size:
            raise CorruptedMetadataError(
                f"ID3v2 tag declares {header.size} bytes but only {len(body)} are present"
            )
        return header, prepare_body(header, body)

    @staticmethod
    def _read_id3v1(handle: BinaryIO) -> AudioMetadata | None:
        file_size = handle.seek(0, 2)
        if file_size < ID3V1_TAG_SIZE:
            return None
        _ = handle.seek(file_size - ID3V1_TAG_SIZE)
        return parse_id3v1(handle.read(ID3V1_TAG_SIZE))
