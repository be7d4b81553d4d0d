# Where: audiosniff.features.metadata.__init__
# What: Expose the metadata extractor, the ID3 parser and the tag models.
# Why: Provide a cohesive import surface for services and callers.

from .domain.models import ArtworkType, AudioArtwork, AudioMetadata
from .usecases import (
    AudioFormatExtractor,
    ID3TagParser,
    MetadataCacheStats,
    MetadataExtractor,
)

__all__ = [
    "ArtworkType",
    "AudioArtwork",
    "AudioFormatExtractor",
    "AudioMetadata",
    "ID3TagParser",
    "MetadataCacheStats",
    "MetadataExtractor",
]
