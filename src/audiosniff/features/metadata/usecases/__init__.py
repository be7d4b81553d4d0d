"""
Summary: Public surface for metadata use cases.
Why: Provide a stable import path for the service layer and tests.
"""

from .extraction import AudioFormatExtractor, ID3TagParser
from .metadata_extractor import MetadataCacheStats, MetadataExtractor, default_extractors

__all__ = [
    "AudioFormatExtractor",
    "ID3TagParser",
    "MetadataCacheStats",
    "MetadataExtractor",
    "default_extractors",
]
