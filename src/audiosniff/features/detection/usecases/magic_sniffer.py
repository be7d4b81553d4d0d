"""Magic-byte format sniffing.

Where: src/audiosniff/features/detection/usecases/magic_sniffer.py
What: Match a byte prefix against registry signatures and disambiguate containers.
Why: Signature matching is the only detection signal derived from content alone.
"""

from __future__ import annotations

from typing import ClassVar, Final

from audiosniff.config.settings import SNIFF_LENGTH
from audiosniff.shared.audio_format import FormatKind

from ..domain.format_registry import FormatDescriptor, all_descriptors, descriptor
from ..domain.models import DetectionMethod, DetectionResult, unknown_result

MIN_SNIFF_BYTES: Final[int] = 4
SIGNATURE_CONFIDENCE: Final[float] = 0.95
CONTAINER_CONFIDENCE: Final[float] = 0.9


def _matches(data: bytes, item: FormatDescriptor) -> bool:
    return any(data.startswith(signature) for signature in item.signatures)


class MagicByteSniffer:
    """Identify formats from their leading bytes.

    Formats are tried in registry priority order; the first signature hit
    wins. MP4 and Ogg hits are refined by looking for codec markers in the
    supplied bytes.
    """

    _MP4_CODEC_MARKERS: ClassVar[tuple[tuple[bytes, FormatKind], ...]] = (
        (b"alac", FormatKind.ALAC),
        (b"mp4a", FormatKind.AAC),
    )
    _OGG_CODEC_MARKERS: ClassVar[tuple[tuple[bytes, FormatKind], ...]] = (
        (b"OpusHead", FormatKind.OPUS),
        (b"vorbis", FormatKind.OGG),
    )

    def __init__(self, sniff_length: int = SNIFF_LENGTH) -> None:
        self._sniff_length: int = max(sniff_length, MIN_SNIFF_BYTES)

    @property
    def sniff_length(self) -> int:
        """Number of leading bytes a caller should supply."""
        return self._sniff_length

    def sniff(self, data: bytes) -> DetectionResult:
        """Classify ``data`` by its magic bytes.

        Args:
            data: Leading bytes of a file; fewer than four yields unknown.

        Returns:
            DetectionResult: Format with 0.95 (plain signature), 0.9
            (disambiguated container) or 0.0 (no match) confidence.
        """
        if len(data) < MIN_SNIFF_BYTES:
            return unknown_result(DetectionMethod.MAGIC_BYTES)

        head = bytes(data[: self._sniff_length])
        for item in all_descriptors():
            if not _matches(head, item):
                continue
            if item.kind is FormatKind.M4A:
                codec = self._find_codec(head, self._MP4_CODEC_MARKERS, FormatKind.AAC)
                return DetectionResult(
                    format=codec,
                    confidence=CONTAINER_CONFIDENCE,
                    method=DetectionMethod.MAGIC_BYTES,
                    container_format=FormatKind.M4A,
                )
            if item.kind is FormatKind.OGG:
                codec = self._find_codec(head, self._OGG_CODEC_MARKERS, FormatKind.OGG)
                return DetectionResult(
                    format=codec,
                    confidence=CONTAINER_CONFIDENCE,
                    method=DetectionMethod.MAGIC_BYTES,
                    container_format=FormatKind.OGG if codec is FormatKind.OPUS else None,
                )
            return DetectionResult(
                format=item.kind,
                confidence=SIGNATURE_CONFIDENCE,
                method=DetectionMethod.MAGIC_BYTES,
            )

        return unknown_result(DetectionMethod.MAGIC_BYTES)

    def matches_signature(self, data: bytes, kind: FormatKind) -> bool:
        """Whether ``data`` starts with one of ``kind``'s registered signatures."""
        return _matches(bytes(data[: self._sniff_length]), descriptor(kind))

    @staticmethod
    def _find_codec(
        data: bytes,
        markers: tuple[tuple[bytes, FormatKind], ...],
        default: FormatKind,
    ) -> FormatKind:
        for marker, kind in markers:
            if marker in data:
                return kind
        return default


__all__ = ["MagicByteSniffer", "MIN_SNIFF_BYTES"]
