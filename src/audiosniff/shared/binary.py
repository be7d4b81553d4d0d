"""Binary decoding helpers.

Where: src/audiosniff/shared/binary.py
What: Pure helpers for the integer encodings used by audio containers and ID3 tags.
Why: The structure walkers and the tag parser decode the same primitives.
"""

from __future__ import annotations

__all__ = [
    "decode_synchsafe",
    "remove_unsynchronisation",
    "uint_be",
    "uint_le",
]


def decode_synchsafe(data: bytes) -> int:
    """Decode a synchsafe integer (7 usable bits per byte, MSB ignored).

    >>> decode_synchsafe(bytes([0x00, 0x00, 0x02, 0x01]))
    257
    """
    result = 0
    for byte in data:
        result = (result << 7) | (byte & 0x7F)
    return result


def uint_be(data: bytes) -> int:
    """Decode an unsigned big-endian integer."""
    return int.from_bytes(data, "big")


def uint_le(data: bytes) -> int:
    """Decode an unsigned little-endian integer."""
    return int.from_bytes(data, "little")


def remove_unsynchronisation(data: bytes) -> bytes:
    """Reverse ID3 unsynchronisation (every ``FF 00`` becomes ``FF``)."""
    return data.replace(b"\xff\x00", b"\xff")
