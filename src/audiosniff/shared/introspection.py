"""Summary: Port for deep inspection by a platform media library.
Why: Detection and validation only need a narrow confirmation interface, so the prober can be swapped or stubbed."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class AudioTrackInfo:
    """Description of one audio stream inside a file."""

    format_id: str
    sample_rate: int | None = None
    channels: int | None = None
    bit_depth: int | None = None
    estimated_bitrate: int | None = None
    codec: str | None = None
    is_variable_bitrate: bool | None = None


@dataclass(frozen=True, slots=True)
class IntrospectionReport:
    """Outcome of probing a file with a media library."""

    is_playable: bool
    audio_tracks: tuple[AudioTrackInfo, ...] = field(default_factory=tuple)
    duration: float | None = None

    @property
    def primary_track(self) -> AudioTrackInfo | None:
        """First audio track, if any."""

        return self.audio_tracks[0] if self.audio_tracks else None


NOT_PLAYABLE = IntrospectionReport(is_playable=False)


@runtime_checkable
class Introspector(Protocol):
    """Port for probing a file's playability and audio tracks."""

    def introspect(self, file_path: Path) -> IntrospectionReport:
        """Probe ``file_path``; unreadable or unknown content is reported as not playable."""
        ...


__all__ = ["AudioTrackInfo", "IntrospectionReport", "Introspector", "NOT_PLAYABLE"]
