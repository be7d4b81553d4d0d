"""Mutagen-backed deep inspection.

Where: src/audiosniff/platform/introspection/mutagen_introspector.py
What: Implement the Introspector port on top of mutagen's stream-info parsers.
Why: Give detection and validation an independent confirmation source without decoding audio.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, final

import mutagen
from mutagen._util import MutagenError
from mutagen.aac import AAC
from mutagen.aiff import AIFF
from mutagen.flac import FLAC
from mutagen.mp3 import MP3, BitrateMode
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis
from mutagen.wave import WAVE

from audiosniff.platform.logging import logger
from audiosniff.shared.audio_format import FormatKind
from audiosniff.shared.errors import AudioFileNotFoundError
from audiosniff.shared.introspection import (
    NOT_PLAYABLE,
    AudioTrackInfo,
    IntrospectionReport,
)


@final
class MutagenIntrospector:
    """Probe files with ``mutagen.File`` and report their primary audio stream."""

    # Order matters: subclasses must precede their bases.
    _FORMAT_BY_TYPE: ClassVar[tuple[tuple[type, FormatKind], ...]] = (
        (MP3, FormatKind.MP3),
        (FLAC, FormatKind.FLAC),
        (OggOpus, FormatKind.OPUS),
        (OggVorbis, FormatKind.OGG),
        (WAVE, FormatKind.WAV),
        (AIFF, FormatKind.AIFF),
        (AAC, FormatKind.AAC),
    )

    def introspect(self, file_path: Path) -> IntrospectionReport:
        """Probe ``file_path`` with mutagen.

        Raises:
            AudioFileNotFoundError: If the file vanished before probing.
        """
        path = Path(file_path)
        if not path.exists():
            raise AudioFileNotFoundError(path)

        try:
            audio = mutagen.File(path)
        except MutagenError as exc:
            logger.debug("mutagen could not parse %s: %s", path, exc)
            return NOT_PLAYABLE

        if audio is None or getattr(audio, "info", None) is None:
            logger.debug("mutagen found no known stream in %s", path)
            return NOT_PLAYABLE

        format_id = self._format_id(audio)
        info = audio.info
        track = AudioTrackInfo(
            format_id=format_id,
            sample_rate=self._positive_int(getattr(info, "sample_rate", None)),
            channels=self._positive_int(getattr(info, "channels", None)),
            bit_depth=self._positive_int(getattr(info, "bits_per_sample", None)),
            estimated_bitrate=self._positive_int(getattr(info, "bitrate", None)),
            codec=getattr(info, "codec", None) or format_id.upper(),
            is_variable_bitrate=self._variable_bitrate(info),
        )
        duration = getattr(info, "length", None)
        report = IntrospectionReport(
            is_playable=bool(format_id),
            audio_tracks=(track,),
            duration=float(duration) if duration else None,
        )
        logger.debug("Introspected %s: %s", path, report)
        return report

    @classmethod
    def _format_id(cls, audio: Any) -> str:
        if isinstance(audio, MP4):
            codec = str(getattr(audio.info, "codec", "") or "")
            if codec.startswith("mp4a"):
                return FormatKind.AAC.value
            if codec == "alac":
                return FormatKind.ALAC.value
            return codec
        for file_type, kind in cls._FORMAT_BY_TYPE:
            if isinstance(audio, file_type):
                return kind.value
        return type(audio).__name__.lower()

    @staticmethod
    def _variable_bitrate(info: object) -> bool | None:
        """VBR/ABR flag from MPEG stream info; other formats do not report one."""
        mode = getattr(info, "bitrate_mode", None)
        if mode is None or mode == BitrateMode.UNKNOWN:
            return None
        return mode != BitrateMode.CBR

    @staticmethod
    def _positive_int(value: object) -> int | None:
        if isinstance(value, (int, float)) and value > 0:
            return int(value)
        return None


__all__ = ["MutagenIntrospector"]
