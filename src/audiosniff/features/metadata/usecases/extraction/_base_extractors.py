"""Shared base classes for metadata extractors.

Where: src/audiosniff/features/metadata/usecases/extraction/_base_extractors.py
What: Define the extractor contract and the mutagen-backed tag mapping base.
Why: The ID3 parser and every mutagen fallback expose the same two operations to the facade.
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any, ClassVar, TYPE_CHECKING, cast, override

from mutagen._util import MutagenError
from mutagen.id3 import ID3NoHeaderError

from audiosniff.platform.logging import logger
from audiosniff.shared.errors import (
    AudioFileNotFoundError,
    CorruptedMetadataError,
    NoMetadataFoundError,
)

from ._tag_utils import parse_int, parse_slash_separated, parse_year, safe_get_first
from ...domain.id3_genres import resolve_genre
from ...domain.models import AudioArtwork, AudioMetadata

if TYPE_CHECKING:
    from mutagen import FileType
else:  # pragma: no cover - typing convenience
    FileType: type[object] = object

__all__ = [
    "AudioFormatExtractor",
    "BaseTagExtractor",
    "BaseAudioExtractor",
]


class AudioFormatExtractor(abc.ABC):
    """Abstract base class for audio metadata extractors."""

    SUPPORTED_FORMATS: ClassVar[tuple[str, ...]] = ()

    @property
    def supported_formats(self) -> tuple[str, ...]:
        """Lower-case extensions (without dot) this extractor handles."""
        return self.SUPPORTED_FORMATS

    @abc.abstractmethod
    def extract_metadata(self, file_path: Path) -> AudioMetadata:
        """Extract metadata from an audio file."""
        raise NotImplementedError

    @abc.abstractmethod
    def extract_artwork(self, file_path: Path) -> list[AudioArtwork]:
        """Extract embedded pictures from an audio file."""
        raise NotImplementedError


class BaseTagExtractor:
    """Provides common helper methods for tag extraction."""

    @staticmethod
    def get_str_tag(tags: Any, key: str, default: str | None = None) -> str | None:
        """Extract the first string value for a key from tag collection."""
        if not key:
            return default
        value: object = tags.get(key)
        if isinstance(value, list):
            return safe_get_first(data=cast(list[str], value), default=default or "") or default
        if isinstance(value, str):
            return value
        return default


class BaseAudioExtractor(AudioFormatExtractor, abc.ABC):
    """Base class for mutagen-backed metadata extractors."""

    FILE_CLASS: ClassVar[type | None] = None
    FILE_INIT_PARAMS: ClassVar[dict[str, Any]] = {}
    FORMAT_NAME: ClassVar[str] = ""

    TAG_MAPPING: ClassVar[dict[str, str]] = {
        "title": "",
        "artist": "",
        "album_artist": "",
        "album": "",
        "track": "",
        "disc": "",
        "date": "",
        "genre": "",
        "composer": "",
        "comment": "",
        "lyrics": "",
        "bpm": "",
        "isrc": "",
        "publisher": "",
        "copyright": "",
        "encoder": "",
    }

    _PLAIN_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "artist",
        "album_artist",
        "album",
        "composer",
        "comment",
        "lyrics",
        "isrc",
        "publisher",
        "copyright",
        "encoder",
    )

    def _open_file(self, file_path: Path) -> FileType:
        """Open the audio file with ``FILE_CLASS``.

        Raises:
            AudioFileNotFoundError: If the file does not exist.
            NoMetadataFoundError: If the file carries no tag container at all.
            CorruptedMetadataError: If mutagen cannot parse the file.
        """
        if self.FILE_CLASS is None:
            raise NotImplementedError("FILE_CLASS must be defined in subclass")
        try:
            file_instance = self.FILE_CLASS(file_path, **self.FILE_INIT_PARAMS)
            return cast(FileType, file_instance)
        except ID3NoHeaderError as exc:
            raise NoMetadataFoundError(file_path) from exc
        except MutagenError as exc:
            logger.error(
                "Failed to extract %s metadata from %s: %s",
                self.__class__.__name__.replace("Extractor", ""),
                file_path,
                exc,
            )
            if "No such file" in str(exc):
                raise AudioFileNotFoundError(file_path) from exc
            raise CorruptedMetadataError(str(exc)) from exc

    @abc.abstractmethod
    def _get_tag_value(self, tags: Any, key: str) -> str | None:
        """Get a tag value from the audio file."""
        raise NotImplementedError

    @abc.abstractmethod
    def _artwork(self, audio: Any) -> list[AudioArtwork]:
        """Collect embedded pictures from an opened file."""
        raise NotImplementedError

    def _refine(self, audio: Any, metadata: AudioMetadata) -> None:
        """Fill format-specific fields after the common mapping ran."""

    @override
    def extract_metadata(self, file_path: Path) -> AudioMetadata:
        """Extract metadata from an audio file.

        Raises:
            NoMetadataFoundError: If title, artist and album are all missing.
        """
        audio = self._open_file(file_path)
        logger.debug("Opened file %s with tags type: %s", file_path, type(audio))

        metadata = AudioMetadata(file_format=self.FORMAT_NAME or None)
        for field_name in self._PLAIN_FIELDS:
            value = self._get_tag_value(audio, key=self.TAG_MAPPING[field_name])
            setattr(metadata, field_name, value.strip() if value and value.strip() else None)

        track_str: str = self._get_tag_value(audio, key=self.TAG_MAPPING["track"]) or ""
        metadata.track_number, metadata.track_total = parse_slash_separated(value=track_str)
        disc_str: str = self._get_tag_value(audio, key=self.TAG_MAPPING["disc"]) or ""
        metadata.disc_number, metadata.disc_total = parse_slash_separated(value=disc_str)

        year_str_preferred: str = self._get_tag_value(audio, key="year") or ""
        date_str: str = self._get_tag_value(audio, key=self.TAG_MAPPING["date"]) or ""
        logger.debug("Year tag: %s; Date tag: %s", year_str_preferred, date_str)
        metadata.year = parse_year(year_str_preferred) or parse_year(date_str)

        metadata.genre = resolve_genre(self._get_tag_value(audio, key=self.TAG_MAPPING["genre"]))
        metadata.bpm = parse_int(self._get_tag_value(audio, key=self.TAG_MAPPING["bpm"]))
        metadata.has_artwork = bool(self._artwork(audio))
        self._refine(audio, metadata)

        if not metadata.has_core_tags:
            raise NoMetadataFoundError(file_path)
        logger.debug("Extracted metadata: %s", metadata)
        return metadata

    @override
    def extract_artwork(self, file_path: Path) -> list[AudioArtwork]:
        try:
            audio = self._open_file(file_path)
        except NoMetadataFoundError:
            return []
        return self._artwork(audio)
