"""Audio file metadata extraction functionality.

Where: src/audiosniff/features/metadata/usecases/metadata_extractor.py
What: Provide the MetadataExtractor facade routing files to the ID3 parser or mutagen fallbacks.
Why: Callers get one entry point with caching, file information and technical properties attached.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import final

from audiosniff.config.settings import METADATA_CACHE_SIZE
from audiosniff.features.detection.domain.format_registry import by_extension
from audiosniff.platform.cache import CacheKey, ResultCache
from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import (
    AudioFileNotFoundError,
    AudioInspectionError,
    NoMetadataFoundError,
    UnsupportedFormatError,
)
from audiosniff.shared.events import InspectionEvent
from audiosniff.shared.introspection import Introspector

from ..domain.models import AudioArtwork, AudioMetadata
from .extraction import (
    AacExtractor,
    AiffExtractor,
    AudioFormatExtractor,
    FlacExtractor,
    ID3TagParser,
    M4aExtractor,
    OggVorbisExtractor,
    OpusExtractor,
    WaveExtractor,
)

__all__ = ["MetadataCacheStats", "MetadataExtractor", "default_extractors"]


@dataclass(frozen=True, slots=True)
class MetadataCacheStats:
    """Sizes of the metadata and artwork caches."""

    metadata_entries: int
    artwork_entries: int
    artwork_bytes: int


def default_extractors() -> dict[FormatKind, AudioFormatExtractor]:
    """Extractor per format: the ID3 parser for MP3, mutagen for the rest."""

    m4a = M4aExtractor()
    return {
        FormatKind.MP3: ID3TagParser(),
        FormatKind.FLAC: FlacExtractor(),
        FormatKind.OGG: OggVorbisExtractor(),
        FormatKind.OPUS: OpusExtractor(),
        FormatKind.M4A: m4a,
        FormatKind.ALAC: m4a,
        FormatKind.WAV: WaveExtractor(),
        FormatKind.AIFF: AiffExtractor(),
        FormatKind.AAC: AacExtractor(),
    }


@final
class MetadataExtractor:
    """Facade class for extracting metadata from audio files.

    This class selects the appropriate extractor based on file extension
    and caches results per (path, mtime).
    """

    def __init__(
        self,
        *,
        extractors: Mapping[FormatKind, AudioFormatExtractor] | None = None,
        introspector: Introspector | None = None,
        cache_capacity: int = METADATA_CACHE_SIZE,
    ) -> None:
        if introspector is None:
            from audiosniff.platform.introspection import MutagenIntrospector

            introspector = MutagenIntrospector()
        self._extractors: dict[FormatKind, AudioFormatExtractor] = dict(
            extractors if extractors is not None else default_extractors()
        )
        self._introspector: Introspector = introspector
        self._metadata_cache: ResultCache[AudioMetadata] = ResultCache(cache_capacity)
        self._artwork_cache: ResultCache[tuple[AudioArtwork, ...]] = ResultCache(cache_capacity)

    @property
    def supported_formats(self) -> frozenset[FormatKind]:
        return frozenset(self._extractors)

    def extractor_for(self, file_path: Path | str) -> AudioFormatExtractor:
        """Return the extractor registered for the file's extension.

        Raises:
            UnsupportedFormatError: If no extractor handles the extension.
        """
        path = Path(file_path)
        kind = by_extension(path.suffix).kind
        extractor = self._extractors.get(kind)
        if extractor is None:
            raise UnsupportedFormatError(path.suffix.lower() or path.name)
        return extractor

    def extract(self, file_path: Path | str) -> AudioMetadata:
        """Extract metadata from an audio file.

        Args:
            file_path: Path to the audio file.

        Returns:
            AudioMetadata: Tags plus file information and, where available,
            duration, bitrate, sample rate and channels.

        Raises:
            AudioFileNotFoundError: If the file does not exist.
            UnsupportedFormatError: If the file format is unsupported.
            CorruptedMetadataError: If the tag bytes are malformed.
            NoMetadataFoundError: If the file carries no usable tags.
        """
        path = Path(file_path)
        if not path.exists():
            raise AudioFileNotFoundError(path)
        extractor = self.extractor_for(path)

        key = CacheKey.for_path(path)
        cached = self._metadata_cache.get(key)
        if cached is not None:
            return dataclasses.replace(cached)

        try:
            metadata = extractor.extract_metadata(path)
        except NoMetadataFoundError:
            logger.info(
                "No metadata found in %s",
                path,
                extra={"inspection_event": InspectionEvent.METADATA_MISSING, "file_path": str(path)},
            )
            raise

        self._attach_file_information(path, metadata)
        self._attach_technical_properties(path, metadata)
        self._metadata_cache.put(key, metadata)
        logger.debug(
            "Extracted metadata from %s",
            path,
            extra={
                "inspection_event": InspectionEvent.METADATA_COMPLETE,
                "file_path": str(path),
                "audio_format": metadata.file_format,
            },
        )
        return dataclasses.replace(metadata)

    def extract_artwork(self, file_path: Path | str) -> list[AudioArtwork]:
        """Extract embedded artwork.

        Raises:
            AudioFileNotFoundError: If the file does not exist.
            UnsupportedFormatError: If the file format is unsupported.
        """
        path = Path(file_path)
        if not path.exists():
            raise AudioFileNotFoundError(path)
        extractor = self.extractor_for(path)

        key = CacheKey.for_path(path)
        cached = self._artwork_cache.get(key)
        if cached is not None:
            return list(cached)

        artwork = tuple(extractor.extract_artwork(path))
        self._artwork_cache.put(key, artwork)
        return list(artwork)

    def clear_cache(self) -> None:
        self._metadata_cache.clear()
        self._artwork_cache.clear()

    def cache_stats(self) -> MetadataCacheStats:
        artwork_sets = self._artwork_cache.values()
        return MetadataCacheStats(
            metadata_entries=len(self._metadata_cache),
            artwork_entries=len(artwork_sets),
            artwork_bytes=sum(len(item.data) for items in artwork_sets for item in items),
        )

    # Internals ------------------------------------------------------------

    @staticmethod
    def _attach_file_information(file_path: Path, metadata: AudioMetadata) -> None:
        metadata.file_path = file_path
        try:
            stat = file_path.stat()
        except OSError as exc:
            logger.warning("Could not stat %s: %s", file_path, exc)
            return
        metadata.file_size = stat.st_size
        metadata.date_modified = datetime.fromtimestamp(stat.st_mtime)

    def _attach_technical_properties(self, file_path: Path, metadata: AudioMetadata) -> None:
        try:
            report = self._introspector.introspect(file_path)
        except AudioInspectionError:
            raise
        except Exception as exc:  # pragma: no cover - introspector failure
            logger.warning("Deep inspection of %s failed: %s", file_path, exc)
            return

        if report.duration is not None:
            metadata.duration = report.duration
        track = report.primary_track
        if track is None:
            return
        if track.estimated_bitrate:
            metadata.bitrate = track.estimated_bitrate // 1000
        metadata.sample_rate = track.sample_rate
        metadata.channels = track.channels
