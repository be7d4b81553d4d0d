# Where: audiosniff.shared.audio_format
# What: Canonical audio format enum and technical property record.
# Why: Every feature speaks about formats with the same vocabulary.

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FormatKind(StrEnum):
    """Supported audio formats in fixed sniffing priority order."""

    MP3 = "mp3"
    AAC = "aac"
    M4A = "m4a"
    FLAC = "flac"
    OGG = "ogg"
    WAV = "wav"
    AIFF = "aiff"
    ALAC = "alac"
    OPUS = "opus"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class AudioProperties:
    """Technical stream properties reported by deep inspection."""

    bitrate: int | None = None
    sample_rate: int | None = None
    channels: int | None = None
    bit_depth: int | None = None
    is_variable_bitrate: bool | None = None
    codec: str | None = None
    duration: float | None = None
    file_size: int | None = None

    @property
    def average_bitrate(self) -> int | None:
        """Average bits per second derived from size and duration."""

        if self.duration is None or self.file_size is None or self.duration <= 0:
            return None
        return int(self.file_size * 8 / self.duration)


__all__ = ["FormatKind", "AudioProperties"]
