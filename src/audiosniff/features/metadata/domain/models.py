# Where: audiosniff.features.metadata.domain.models
# What: Metadata and artwork records produced by tag extraction.
# Why: Centralize the tag representation shared by the ID3 parser and the mutagen fallbacks.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path


@dataclass
class AudioMetadata:
    """Tags, technical properties and file information for one audio file."""

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    composer: str | None = None
    year: int | None = None
    genre: str | None = None
    track_number: int | None = None
    track_total: int | None = None
    disc_number: int | None = None
    disc_total: int | None = None

    comment: str | None = None
    lyrics: str | None = None
    bpm: int | None = None
    isrc: str | None = None
    publisher: str | None = None
    copyright: str | None = None
    encoder: str | None = None

    # Technical properties; bitrate is in kbps
    duration: float | None = None
    bitrate: int | None = None
    sample_rate: int | None = None
    channels: int | None = None
    file_format: str | None = None

    has_artwork: bool = False

    file_path: Path | None = None
    file_size: int | None = None
    date_modified: datetime | None = None

    @property
    def has_core_tags(self) -> bool:
        """Whether title, artist or album is populated."""
        return any((self.title, self.artist, self.album))

    @property
    def display_title(self) -> str:
        """Title, else a cleaned-up file stem, else ``"Unknown"``."""

        if self.title:
            return self.title
        if self.file_path is not None:
            return self.file_path.stem.replace("_", " ").replace("-", " - ")
        return "Unknown"

    @property
    def display_artist(self) -> str:
        return self.artist or self.album_artist or "Unknown Artist"


class ArtworkType(StrEnum):
    FRONT_COVER = "Front Cover"
    BACK_COVER = "Back Cover"
    ARTIST = "Artist"
    OTHER = "Other"

    @classmethod
    def from_picture_type(cls, picture_type: int) -> ArtworkType:
        """Map an ID3/FLAC picture type code."""
        return _PICTURE_TYPES.get(picture_type, cls.OTHER)


_PICTURE_TYPES: dict[int, ArtworkType] = {
    3: ArtworkType.FRONT_COVER,
    4: ArtworkType.BACK_COVER,
    8: ArtworkType.ARTIST,
}


@dataclass(frozen=True, slots=True)
class AudioArtwork:
    """Embedded picture bytes."""

    data: bytes
    mime_type: str | None = None
    type: ArtworkType = ArtworkType.FRONT_COVER

    def __len__(self) -> int:
        return len(self.data)


__all__ = ["AudioArtwork", "AudioMetadata", "ArtworkType"]
