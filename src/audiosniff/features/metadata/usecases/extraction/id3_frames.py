"""ID3v2 tag and frame decoding.

Where: src/audiosniff/features/metadata/usecases/extraction/id3_frames.py
What: Parse the tag header, undo unsynchronisation, iterate frames and decode text, comment and picture payloads.
Why: Keep byte-level ID3 handling separate from the field mapping done by the tag parser.

Frame iteration never reads past the tag body: it stops on a zero frame
size, an all-zero frame id, or a frame that would cross the body end.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from audiosniff.shared.binary import decode_synchsafe, remove_unsynchronisation, uint_be
from audiosniff.shared.errors import CorruptedMetadataError

from ...domain.models import ArtworkType, AudioArtwork
from ._tag_utils import first_value

__all__ = [
    "ID3V2_HEADER_SIZE",
    "RawFrame",
    "TagHeader",
    "decode_text",
    "iter_frames",
    "parse_comment_frame",
    "parse_picture_frame",
    "parse_pic_frame",
    "parse_tag_header",
    "parse_text_frame",
    "prepare_body",
    "split_terminated",
]

ID3V2_HEADER_SIZE: Final[int] = 10
SUPPORTED_VERSIONS: Final[frozenset[int]] = frozenset({2, 3, 4})

# Tag header flags
TAG_UNSYNCHRONISED: Final[int] = 0x80
TAG_EXTENDED_HEADER: Final[int] = 0x40
TAG_V22_COMPRESSED: Final[int] = 0x40

# ID3v2.3 frame format flags (second flag byte)
V23_COMPRESSED: Final[int] = 0x80
V23_ENCRYPTED: Final[int] = 0x40
V23_GROUPED: Final[int] = 0x20

# ID3v2.4 frame format flags (second flag byte)
V24_GROUPED: Final[int] = 0x40
V24_COMPRESSED: Final[int] = 0x08
V24_ENCRYPTED: Final[int] = 0x04
V24_UNSYNCHRONISED: Final[int] = 0x02
V24_DATA_LENGTH: Final[int] = 0x01

ENCODING_LATIN1: Final[int] = 0
ENCODING_UTF16: Final[int] = 1
ENCODING_UTF16BE: Final[int] = 2
ENCODING_UTF8: Final[int] = 3

_PIC_FORMATS: Final[dict[str, str]] = {"JPG": "image/jpeg", "PNG": "image/png"}


@dataclass(frozen=True, slots=True)
class TagHeader:
    """The 10-byte ID3v2 tag header."""

    version: int
    revision: int
    flags: int
    size: int

    @property
    def unsynchronised(self) -> bool:
        return bool(self.flags & TAG_UNSYNCHRONISED)

    @property
    def has_extended_header(self) -> bool:
        return self.version >= 3 and bool(self.flags & TAG_EXTENDED_HEADER)

    @property
    def frame_header_size(self) -> int:
        return 6 if self.version == 2 else 10


@dataclass(frozen=True, slots=True)
class RawFrame:
    """Frame id and payload with format-flag processing already applied."""

    frame_id: str
    data: bytes


def parse_tag_header(header: bytes) -> TagHeader | None:
    """Parse a tag header; ``None`` when ``header`` does not start an ID3v2 tag.

    Raises:
        CorruptedMetadataError: If the header is an ID3v2 header that cannot be read.
    """
    if len(header) < ID3V2_HEADER_SIZE or header[:3] != b"ID3":
        return None
    version, revision, flags = header[3], header[4], header[5]
    if version not in SUPPORTED_VERSIONS:
        raise CorruptedMetadataError(f"unsupported ID3v2 version 2.{version}")
    if any(byte & 0x80 for byte in header[6:10]):
        raise CorruptedMetadataError("ID3v2 tag size is not a synchsafe integer")
    return TagHeader(version, revision, flags, decode_synchsafe(header[6:10]))


def prepare_body(header: TagHeader, body: bytes) -> bytes:
    """Undo whole-tag unsynchronisation and drop the extended header."""

    if header.version == 2 and header.flags & TAG_V22_COMPRESSED:
        # ID3v2.2 never defined a compression scheme; nothing is readable.
        return b""
    if header.unsynchronised and header.version < 4:
        body = remove_unsynchronisation(body)
    if header.has_extended_header and len(body) >= 4:
        if header.version == 3:
            # Size excludes its own four bytes.
            body = body[4 + uint_be(body[:4]) :]
        else:
            body = body[decode_synchsafe(body[:4]) :]
    return body


def iter_frames(header: TagHeader, body: bytes) -> Iterator[RawFrame]:
    """Yield every readable frame in ``body``.

    Compressed and encrypted frames are skipped. ID3v2.4 per-frame
    unsynchronisation and data-length indicators are undone.
    """
    id_size = 3 if header.version == 2 else 4
    frame_header_size = header.frame_header_size
    empty_id = b"\x00" * id_size
    size = len(body)
    offset = 0

    while offset + frame_header_size < size:
        raw_id = body[offset : offset + id_size]
        if header.version == 2:
            frame_size = uint_be(body[offset + 3 : offset + 6])
            format_flags = 0
        else:
            size_bytes = body[offset + 4 : offset + 8]
            frame_size = decode_synchsafe(size_bytes) if header.version == 4 else uint_be(size_bytes)
            format_flags = body[offset + 9]

        if frame_size == 0 or raw_id == empty_id:
            break
        offset += frame_header_size
        if offset + frame_size > size:
            break
        data = body[offset : offset + frame_size]
        offset += frame_size

        frame_id = raw_id.decode("latin-1")
        if header.version == 3:
            if format_flags & (V23_COMPRESSED | V23_ENCRYPTED):
                continue
            if format_flags & V23_GROUPED:
                data = data[1:]
        elif header.version == 4:
            if format_flags & (V24_COMPRESSED | V24_ENCRYPTED):
                continue
            if format_flags & V24_GROUPED:
                data = data[1:]
            if format_flags & V24_DATA_LENGTH:
                data = data[4:]
            if format_flags & V24_UNSYNCHRONISED or header.unsynchronised:
                data = remove_unsynchronisation(data)
        yield RawFrame(frame_id, data)


def decode_text(encoding: int, data: bytes) -> str:
    """Decode ``data`` using an ID3 text encoding byte.

    Unknown encoding bytes fall back to Latin-1; undecodable sequences are replaced.
    """
    match encoding:
        case 1:
            if data.startswith(b"\xfe\xff"):
                return data[2:].decode("utf-16-be", errors="replace")
            if data.startswith(b"\xff\xfe"):
                return data[2:].decode("utf-16-le", errors="replace")
            return data.decode("utf-16-le", errors="replace")
        case 2:
            return data.decode("utf-16-be", errors="replace")
        case 3:
            return data.decode("utf-8", errors="replace")
        case _:
            return data.decode("latin-1")


def split_terminated(data: bytes, encoding: int) -> tuple[bytes, bytes]:
    """Split ``data`` at its first string terminator.

    The terminator is one null byte for Latin-1 and UTF-8, and an aligned
    null pair for the UTF-16 encodings. Without a terminator the whole
    input is the string and the remainder is empty.
    """
    if encoding in (ENCODING_UTF16, ENCODING_UTF16BE):
        for index in range(0, len(data) - 1, 2):
            if data[index] == 0 and data[index + 1] == 0:
                return data[:index], data[index + 2 :]
        return data, b""
    index = data.find(b"\x00")
    if index < 0:
        return data, b""
    return data[:index], data[index + 1 :]


def parse_text_frame(data: bytes) -> str | None:
    """Decode a text frame to its first value."""

    if len(data) < 2:
        return None
    return first_value(decode_text(data[0], data[1:]))


def parse_comment_frame(data: bytes) -> tuple[str, str] | None:
    """Decode a COMM/USLT (or v2.2 COM/ULT) frame to ``(description, text)``."""

    if len(data) < 5:
        return None
    encoding = data[0]
    # data[1:4] is the ISO-639-2 language code.
    description, remainder = split_terminated(data[4:], encoding)
    if not remainder:
        return None
    text = first_value(decode_text(encoding, remainder))
    if text is None:
        return None
    return (first_value(decode_text(encoding, description)) or ""), text


def parse_picture_frame(data: bytes) -> AudioArtwork | None:
    """Decode an ID3v2.3/2.4 APIC frame."""

    if len(data) < 5:
        return None
    encoding = data[0]
    mime_end = data.find(b"\x00", 1)
    if mime_end < 0:
        return None
    mime_type = data[1:mime_end].decode("latin-1").strip() or None
    offset = mime_end + 1
    if offset >= len(data):
        return None
    picture_type = data[offset]
    _, image = split_terminated(data[offset + 1 :], encoding)
    if not image:
        return None
    return AudioArtwork(image, mime_type, ArtworkType.from_picture_type(picture_type))


def parse_pic_frame(data: bytes) -> AudioArtwork | None:
    """Decode an ID3v2.2 PIC frame (3-byte image format instead of a MIME type)."""

    if len(data) < 6:
        return None
    encoding = data[0]
    image_format = data[1:4].decode("latin-1").upper()
    picture_type = data[4]
    _, image = split_terminated(data[5:], encoding)
    if not image:
        return None
    return AudioArtwork(image, _PIC_FORMATS.get(image_format), ArtworkType.from_picture_type(picture_type))
