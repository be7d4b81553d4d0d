"""
Summary: Public surface for metadata extraction modules.
Why: Provide a stable import path for orchestrators and tests.
"""

from ._base_extractors import AudioFormatExtractor
from .format_extractors import (
    AacExtractor,
    AiffExtractor,
    FlacExtractor,
    M4aExtractor,
    OggVorbisExtractor,
    OpusExtractor,
    WaveExtractor,
)
from .id3_tag_parser import ID3TagParser, parse_id3v1

__all__ = [
    "AudioFormatExtractor",
    "ID3TagParser",
    "parse_id3v1",
    "AacExtractor",
    "AiffExtractor",
    "FlacExtractor",
    "M4aExtractor",
    "OggVorbisExtractor",
    "OpusExtractor",
    "WaveExtractor",
]
