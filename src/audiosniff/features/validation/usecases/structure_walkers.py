"""Per-format container structure walkers.

Where: src/audiosniff/features/validation/usecases/structure_walkers.py
What: Walk MP3 frames, FLAC blocks, RIFF chunks, the AIFF FORM header, Ogg pages and MP4 boxes.
Why: Prove that a file's bytes actually have the layout its declared format requires.

Every walker takes the whole file as a sliceable buffer (``bytes`` or an
``mmap``) and never raises on malformed input; problems are reported as
``ValidationError`` records on the returned ``StructureCheck``.
"""

from __future__ import annotations

import mmap
from typing import Final

from audiosniff.shared.binary import decode_synchsafe, uint_be, uint_le
from audiosniff.shared.introspection import IntrospectionReport

from ..domain.models import StructureCheck, ValidationError, ValidationErrorKind

ByteView = bytes | bytearray | mmap.mmap

ID3V2_HEADER_SIZE: Final[int] = 10
ID3V1_TAG_SIZE: Final[int] = 128
MP3_FRAME_SKIP: Final[int] = 400
MP3_MAX_FRAMES: Final[int] = 100
MP3_MIN_FRAMES: Final[int] = 10
MP3_FULL_CONFIDENCE_FRAMES: Final[int] = 50
OGG_PAGE_HEADER_SIZE: Final[int] = 27
OGG_MAX_PAGES: Final[int] = 50
OGG_MIN_PAGES: Final[int] = 2
OGG_FULL_CONFIDENCE_PAGES: Final[int] = 20
VALID_CONFIDENCE: Final[float] = 0.95
INVALID_CONFIDENCE: Final[float] = 0.3
UNKNOWN_CONFIDENCE: Final[float] = 0.5

_FLAC_BLOCK_NAMES: Final[dict[int, str]] = {
    0: "STREAMINFO",
    1: "PADDING",
    2: "APPLICATION",
    3: "SEEKTABLE",
    4: "VORBIS_COMMENT",
    5: "CUESHEET",
    6: "PICTURE",
}


def is_valid_mp3_frame_header(header: bytes) -> bool:
    """Check four bytes for a plausible MPEG audio frame header.

    >>> is_valid_mp3_frame_header(bytes([0xFF, 0xFB, 0x90, 0x00]))
    True
    >>> is_valid_mp3_frame_header(bytes([0xFF, 0xE0, 0x90, 0x00]))
    False
    """
    if len(header) < 4:
        return False
    if header[0] != 0xFF or (header[1] & 0xE0) != 0xE0:
        return False
    version = (header[1] >> 3) & 0x03
    layer = (header[1] >> 1) & 0x03
    bitrate_index = (header[2] >> 4) & 0x0F
    sample_rate_index = (header[2] >> 2) & 0x03
    return version != 0b01 and layer != 0b00 and bitrate_index != 0x0F and sample_rate_index != 0x03


def id3v2_tag_span(data: ByteView) -> int:
    """Bytes occupied by a leading ID3v2 tag (header included), 0 when absent."""

    if len(data) < 3 or data[:3] != b"ID3":
        return 0
    if len(data) < ID3V2_HEADER_SIZE:
        return len(data)
    return ID3V2_HEADER_SIZE + decode_synchsafe(data[6:10])


def walk_mp3(data: ByteView) -> StructureCheck:
    """Scan for MPEG frame headers after any ID3v2 tag."""

    size = len(data)
    id3v2_span = id3v2_tag_span(data)
    tag_start = size - ID3V1_TAG_SIZE
    has_id3v1 = tag_start >= 0 and data[tag_start : tag_start + 3] == b"TAG"

    frame_count = 0
    first_frame: int | None = None
    position = id3v2_span
    limit = size - 4
    while position < limit and frame_count < MP3_MAX_FRAMES:
        position = data.find(b"\xff", position, limit)
        if position < 0:
            break
        if is_valid_mp3_frame_header(data[position : position + 4]):
            frame_count += 1
            if first_frame is None:
                first_frame = position
            # Frame lengths vary; a fixed stride keeps the scan bounded.
            position += MP3_FRAME_SKIP
        else:
            position += 1

    errors: list[ValidationError] = []
    if id3v2_span > size:
        errors.append(ValidationError.corrupted_data(f"ID3v2 tag declares {id3v2_span} bytes, data has {size}"))
    if frame_count < MP3_MIN_FRAMES:
        errors.append(ValidationError.insufficient_frames(frame_count, MP3_MIN_FRAMES))
    return StructureCheck.build(
        is_valid=frame_count >= MP3_MIN_FRAMES,
        confidence=frame_count / MP3_FULL_CONFIDENCE_FRAMES,
        errors=errors,
        details={
            "frame_count": frame_count,
            "first_frame_offset": first_frame,
            "has_id3v2": id3v2_span > 0,
            "has_id3v1": has_id3v1,
        },
    )


def walk_flac(data: ByteView) -> StructureCheck:
    """Follow the FLAC metadata block chain looking for STREAMINFO."""

    if data[:4] != b"fLaC":
        return StructureCheck.build(
            False, 0.0, [ValidationError.of(ValidationErrorKind.INVALID_SIGNATURE)]
        )

    blocks: list[str] = []
    found_stream_info = False
    reached_last = False
    position = 4
    while position + 4 <= len(data):
        header = data[position : position + 4]
        is_last = bool(header[0] & 0x80)
        block_type = header[0] & 0x7F
        block_size = uint_be(header[1:4])
        blocks.append(_FLAC_BLOCK_NAMES.get(block_type, f"RESERVED_{block_type}"))
        if block_type == 0:
            found_stream_info = True
        position += 4 + block_size
        if is_last:
            reached_last = True
            break

    errors: list[ValidationError] = []
    if not found_stream_info:
        errors.append(ValidationError.missing_block("STREAMINFO"))
    return StructureCheck.build(
        is_valid=not errors,
        confidence=VALID_CONFIDENCE if not errors else INVALID_CONFIDENCE,
        errors=errors,
        details={"blocks": tuple(blocks), "reached_last_block": reached_last},
    )


def walk_wav(data: ByteView) -> StructureCheck:
    """Check the RIFF/WAVE header and look for ``fmt `` and ``data`` chunks."""

    size = len(data)
    if size < 12:
        return StructureCheck.build(
            False, 0.0, [ValidationError.of(ValidationErrorKind.INVALID_HEADER)]
        )

    errors: list[ValidationError] = []
    if data[0:4] != b"RIFF":
        errors.append(ValidationError.of(ValidationErrorKind.INVALID_SIGNATURE))
    if data[8:12] != b"WAVE":
        errors.append(ValidationError.invalid_format("Not a WAVE file"))

    chunks: list[str] = []
    position = 12
    while position + 8 <= size:
        chunk_id = bytes(data[position : position + 4])
        chunk_size = uint_le(data[position + 4 : position + 8])
        chunks.append(chunk_id.decode("latin-1"))
        # Chunk payloads are padded to an even length.
        position += 8 + chunk_size + (chunk_size & 1)

    if "fmt " not in chunks:
        errors.append(ValidationError.missing_chunk("fmt"))
    if "data" not in chunks:
        errors.append(ValidationError.missing_chunk("data"))
    return StructureCheck.build(
        is_valid=not errors,
        confidence=VALID_CONFIDENCE if not errors else INVALID_CONFIDENCE,
        errors=errors,
        details={"chunks": tuple(chunks)},
    )


def walk_aiff(data: ByteView) -> StructureCheck:
    """Check the ``FORM`` header and its ``AIFF``/``AIFC`` form type."""

    if len(data) < 12:
        return StructureCheck.build(
            False, 0.0, [ValidationError.of(ValidationErrorKind.INVALID_HEADER)]
        )

    errors: list[ValidationError] = []
    if data[0:4] != b"FORM":
        errors.append(ValidationError.of(ValidationErrorKind.INVALID_SIGNATURE))
    form_type = bytes(data[8:12])
    if form_type not in (b"AIFF", b"AIFC"):
        errors.append(ValidationError.invalid_format("Not an AIFF file"))
    return StructureCheck.build(
        is_valid=not errors,
        confidence=VALID_CONFIDENCE if not errors else INVALID_CONFIDENCE,
        errors=errors,
        details={"form_type": form_type.decode("latin-1")},
    )


def walk_ogg(data: ByteView) -> StructureCheck:
    """Count Ogg pages by following each page's segment table."""

    page_count = 0
    position = 0
    limit = len(data) - OGG_PAGE_HEADER_SIZE + 1
    while position < limit and page_count < OGG_MAX_PAGES:
        found = data.find(b"OggS", position)
        if found < 0 or found >= limit:
            break
        page_count += 1
        segment_count = data[found + 26]
        table_start = found + OGG_PAGE_HEADER_SIZE
        payload_size = sum(data[table_start : table_start + segment_count])
        position = table_start + segment_count + payload_size

    errors: list[ValidationError] = []
    if page_count < OGG_MIN_PAGES:
        errors.append(ValidationError.insufficient_pages(page_count, OGG_MIN_PAGES))
    return StructureCheck.build(
        is_valid=page_count >= OGG_MIN_PAGES,
        confidence=page_count / OGG_FULL_CONFIDENCE_PAGES,
        errors=errors,
        details={"page_count": page_count},
    )


def walk_mp4_boxes(data: ByteView) -> tuple[str, ...]:
    """Return the top-level box types in file order."""

    boxes: list[str] = []
    size = len(data)
    position = 0
    while position + 8 <= size:
        box_size = uint_be(data[position : position + 4])
        boxes.append(bytes(data[position + 4 : position + 8]).decode("latin-1"))
        header_size = 8
        if box_size == 1:
            if position + 16 > size:
                break
            box_size = uint_be(data[position + 8 : position + 16])
            header_size = 16
        elif box_size == 0:
            # Box runs to the end of the file.
            break
        if box_size < header_size:
            break
        position += box_size
    return tuple(boxes)


def walk_mp4(data: ByteView, report: IntrospectionReport) -> StructureCheck:
    """Walk MP4 boxes and require a playable audio track.

    Box walking alone cannot prove the codec payload is sound, so the
    introspection report must also confirm a playable audio track.
    """
    if not report.is_playable:
        return StructureCheck.build(False, 0.0, [ValidationError.of(ValidationErrorKind.NOT_PLAYABLE)])

    boxes = walk_mp4_boxes(data)
    errors: list[ValidationError] = []
    if "ftyp" not in boxes:
        errors.append(ValidationError.missing_atom("ftyp"))
    if "moov" not in boxes and "mdat" not in boxes:
        errors.append(ValidationError.missing_atom("mdat or moov"))

    details = {"boxes": boxes, "audio_track_count": len(report.audio_tracks)}
    track = report.primary_track
    if track is None:
        errors.append(ValidationError.of(ValidationErrorKind.NO_AUDIO_TRACK))
        return StructureCheck.build(False, 0.0, errors, details)
    if not track.format_id:
        errors.append(ValidationError.invalid_format("No format description"))

    return StructureCheck.build(
        is_valid=not errors,
        confidence=VALID_CONFIDENCE if not errors else INVALID_CONFIDENCE,
        errors=errors,
        details=details,
    )


def walk_unknown(_data: ByteView) -> StructureCheck:
    """Nothing to walk for an unidentified format."""

    return StructureCheck.build(True, UNKNOWN_CONFIDENCE)


__all__ = [
    "ByteView",
    "id3v2_tag_span",
    "is_valid_mp3_frame_header",
    "walk_aiff",
    "walk_flac",
    "walk_mp3",
    "walk_mp4",
    "walk_mp4_boxes",
    "walk_ogg",
    "walk_unknown",
    "walk_wav",
]
