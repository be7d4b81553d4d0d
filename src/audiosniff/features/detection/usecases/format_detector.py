"""Audio format detection orchestrator.

Where: src/audiosniff/features/detection/usecases/format_detector.py
What: Fuse the extension heuristic, magic bytes, deep inspection and a result cache.
Why: Callers need one confidence-scored answer without paying for deep inspection when the cheap signals agree.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import ClassVar, Final

from audiosniff.config.settings import DETECTION_CACHE_SIZE, FAST_PATH_THRESHOLD
from audiosniff.platform.cache import CacheKey, CacheStats, ResultCache
from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import AudioProperties, FormatKind
from audiosniff.shared.errors import (
    AudioFileNotFoundError,
    AudioInspectionError,
    InsufficientDataError,
)
from audiosniff.shared.events import InspectionEvent
from audiosniff.shared.files import read_prefix
from audiosniff.shared.introspection import NOT_PLAYABLE, IntrospectionReport, Introspector

from ..domain.format_registry import by_extension, by_mime
from ..domain.models import DetectionMethod, DetectionResult
from .magic_sniffer import MIN_SNIFF_BYTES, MagicByteSniffer

MIME_CONFIDENCE: Final[float] = 0.7
COMBINED_BONUS: Final[float] = 0.1
RAW_DATA_TRUST_THRESHOLD: Final[float] = 0.9

AudioSource = str | os.PathLike[str] | bytes | bytearray | memoryview


class FormatDetector:
    """Detect the audio format of files and in-memory buffers."""

    _EXTENSION_CONFIDENCE: ClassVar[dict[FormatKind, float]] = {
        FormatKind.MP3: 0.8,
        FormatKind.FLAC: 0.8,
        FormatKind.WAV: 0.8,
        FormatKind.AIFF: 0.8,
        FormatKind.OGG: 0.8,
        FormatKind.AAC: 0.8,
        FormatKind.OPUS: 0.8,
        FormatKind.M4A: 0.7,
        FormatKind.UNKNOWN: 0.0,
    }
    _DEFAULT_EXTENSION_CONFIDENCE: ClassVar[float] = 0.6

    def __init__(
        self,
        *,
        introspector: Introspector | None = None,
        sniffer: MagicByteSniffer | None = None,
        cache: ResultCache[DetectionResult] | None = None,
        fast_path_threshold: float = FAST_PATH_THRESHOLD,
    ) -> None:
        """Create a detector.

        Args:
            introspector: Deep inspection collaborator. Defaults to the mutagen adapter.
            sniffer: Magic-byte sniffer. Defaults to one using the configured sniff length.
            cache: Result cache. Defaults to a bounded cache sized from settings.
            fast_path_threshold: Minimum extension confidence for the fast path.
        """
        if introspector is None:
            from audiosniff.platform.introspection import MutagenIntrospector

            introspector = MutagenIntrospector()
        self._introspector: Introspector = introspector
        self._sniffer: MagicByteSniffer = sniffer or MagicByteSniffer()
        self._cache: ResultCache[DetectionResult] = (
            cache if cache is not None else ResultCache(DETECTION_CACHE_SIZE)
        )
        self._fast_path_threshold: float = fast_path_threshold

    @property
    def introspector(self) -> Introspector:
        return self._introspector

    @property
    def sniffer(self) -> MagicByteSniffer:
        return self._sniffer

    # Public API -----------------------------------------------------------

    def detect(self, source: AudioSource, *, with_properties: bool = False) -> DetectionResult:
        """Detect the format of a file path or a raw byte buffer."""

        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.detect_bytes(bytes(source))
        return self.detect_file(Path(source), with_properties=with_properties)

    def detect_file(self, file_path: Path, *, with_properties: bool = False) -> DetectionResult:
        """Detect the format of a file on disk.

        Args:
            file_path: File to inspect.
            with_properties: Require technical properties, which forces deep inspection.

        Returns:
            DetectionResult: Cached when the file is unchanged since the last call.

        Raises:
            AudioFileNotFoundError: If the file does not exist.
            AudioFileNotAccessibleError: If the file cannot be read.
        """
        path = Path(file_path)
        if not path.exists():
            raise AudioFileNotFoundError(path)

        key = CacheKey.for_path(path)
        cached = self._cache.get(key)
        if cached is not None and (cached.properties is not None or not with_properties):
            logger.debug(
                "Using cached detection for %s",
                path,
                extra={
                    "inspection_event": InspectionEvent.DETECT_CACHE_HIT,
                    "file_path": str(path),
                    "audio_format": cached.format.value,
                },
            )
            return cached

        extension_result = self.detect_extension(path)
        magic_result = self._sniffer.sniff(self.read_header(path))

        result: DetectionResult | None = None
        if (
            not with_properties
            and extension_result.confidence >= self._fast_path_threshold
            and self._agrees(extension_result, magic_result)
        ):
            result = DetectionResult(
                format=magic_result.format,
                confidence=min(
                    1.0,
                    max(extension_result.confidence, magic_result.confidence) + COMBINED_BONUS,
                ),
                method=DetectionMethod.COMBINED,
                container_format=magic_result.container_format,
            )
        if result is None:
            result = self._inspect(path, magic_result, fallbacks=(magic_result, extension_result))

        self._cache.put(key, result)
        logger.debug(
            "Detected %s as %s (%.2f, %s)",
            path,
            result.format.value,
            result.confidence,
            result.method.value,
            extra={
                "inspection_event": InspectionEvent.DETECT_COMPLETE,
                "file_path": str(path),
                "audio_format": result.format.value,
                "confidence": result.confidence,
                "method": result.method.value,
            },
        )
        return result

    def detect_bytes(self, data: bytes) -> DetectionResult:
        """Detect the format of an in-memory buffer.

        Raises:
            InsufficientDataError: If fewer than four bytes are supplied.
        """
        if len(data) < MIN_SNIFF_BYTES:
            raise InsufficientDataError(len(data), MIN_SNIFF_BYTES)

        magic_result = self._sniffer.sniff(data)
        if magic_result.confidence >= RAW_DATA_TRUST_THRESHOLD:
            return magic_result

        with tempfile.TemporaryDirectory(prefix="audiosniff-") as scratch:
            scratch_file = Path(scratch) / f"sniffed.{magic_result.format.value}"
            try:
                _ = scratch_file.write_bytes(data)
            except OSError as exc:
                logger.warning("Could not materialise buffer for deep inspection: %s", exc)
                return magic_result
            return self._inspect(scratch_file, magic_result, fallbacks=(magic_result,))

    def detect_mime(self, mime_type: str) -> DetectionResult:
        """Map a MIME type to a format."""

        kind = by_mime(mime_type).kind
        return DetectionResult(
            format=kind,
            confidence=0.0 if kind is FormatKind.UNKNOWN else MIME_CONFIDENCE,
            method=DetectionMethod.MIME_TYPE,
        )

    def detect_extension(self, file_path: Path | str) -> DetectionResult:
        """Guess the format from the file extension alone."""

        kind = by_extension(Path(file_path).suffix).kind
        return DetectionResult(
            format=kind,
            confidence=self._EXTENSION_CONFIDENCE.get(kind, self._DEFAULT_EXTENSION_CONFIDENCE),
            method=DetectionMethod.EXTENSION,
        )

    def read_header(self, file_path: Path) -> bytes:
        """Read at most ``sniff_length`` leading bytes.

        Raises:
            AudioFileNotFoundError: If the file vanished.
            AudioFileNotAccessibleError: If the file cannot be opened.
        """
        return read_prefix(file_path, self._sniffer.sniff_length)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    # Internals ------------------------------------------------------------

    @staticmethod
    def _agrees(extension_result: DetectionResult, magic_result: DetectionResult) -> bool:
        if extension_result.is_unknown or magic_result.is_unknown:
            return False
        return magic_result.matches(extension_result.format)

    def _introspect(self, file_path: Path) -> IntrospectionReport:
        try:
            return self._introspector.introspect(file_path)
        except AudioInspectionError:
            raise
        except Exception as exc:  # pragma: no cover - introspector failure
            logger.warning("Deep inspection of %s failed: %s", file_path, exc)
            return NOT_PLAYABLE

    def _inspect(
        self,
        file_path: Path,
        magic_result: DetectionResult,
        *,
        fallbacks: tuple[DetectionResult, ...],
    ) -> DetectionResult:
        report = self._introspect(file_path)
        track = report.primary_track
        kind = FormatKind.UNKNOWN
        if report.is_playable and track is not None:
            try:
                kind = FormatKind(track.format_id)
            except ValueError:
                kind = FormatKind.UNKNOWN

        if kind is not FormatKind.UNKNOWN and track is not None:
            try:
                file_size: int | None = file_path.stat().st_size
            except OSError:
                file_size = None
            return DetectionResult(
                format=kind,
                confidence=1.0,
                method=DetectionMethod.DEEP_INSPECTION,
                container_format=(
                    magic_result.container_format if magic_result.format is kind else None
                ),
                properties=AudioProperties(
                    bitrate=track.estimated_bitrate,
                    sample_rate=track.sample_rate,
                    channels=track.channels,
                    bit_depth=track.bit_depth,
                    is_variable_bitrate=track.is_variable_bitrate,
                    codec=track.codec,
                    duration=report.duration,
                    file_size=file_size,
                ),
            )

        best = next((item for item in fallbacks if not item.is_unknown), fallbacks[-1])
        logger.info(
            "Deep inspection could not confirm %s; falling back to %s",
            file_path,
            best.method.value,
            extra={
                "inspection_event": InspectionEvent.DETECT_FALLBACK,
                "file_path": str(file_path),
                "audio_format": best.format.value,
                "confidence": best.confidence,
                "method": best.method.value,
            },
        )
        return best


__all__ = ["AudioSource", "FormatDetector"]
