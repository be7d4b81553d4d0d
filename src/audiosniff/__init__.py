"""Audio format sniffing, structural validation and tag extraction."""

from audiosniff.application.services import BatchOutcome, InspectionService
from audiosniff.features.detection import (
    DetectionMethod,
    DetectionResult,
    FormatDescriptor,
    FormatDetector,
    MagicByteSniffer,
    by_extension,
    by_mime,
    descriptor,
)
from audiosniff.features.detection.domain.format_registry import all_descriptors
from audiosniff.features.metadata import (
    ArtworkType,
    AudioArtwork,
    AudioMetadata,
    ID3TagParser,
    MetadataExtractor,
)
from audiosniff.features.validation import (
    FormatValidator,
    IntegrityCheck,
    IssueCategory,
    StructureCheck,
    ValidationError,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from audiosniff.platform.introspection import MutagenIntrospector
from audiosniff.shared.audio_format import AudioProperties, FormatKind
from audiosniff.shared.errors import (
    AudioFileNotAccessibleError,
    AudioFileNotFoundError,
    AudioInspectionError,
    CorruptedMetadataError,
    InsufficientDataError,
    IntegrityFailureError,
    MetadataError,
    NoMetadataFoundError,
    StructuralMismatchError,
    UnsupportedFormatError,
)
from audiosniff.shared.introspection import AudioTrackInfo, IntrospectionReport, Introspector

__version__ = "0.1.0"

__all__ = [
    "ArtworkType",
    "AudioArtwork",
    "AudioFileNotAccessibleError",
    "AudioFileNotFoundError",
    "AudioInspectionError",
    "AudioMetadata",
    "AudioProperties",
    "AudioTrackInfo",
    "BatchOutcome",
    "CorruptedMetadataError",
    "DetectionMethod",
    "DetectionResult",
    "FormatDescriptor",
    "FormatDetector",
    "FormatKind",
    "FormatValidator",
    "ID3TagParser",
    "InspectionService",
    "InsufficientDataError",
    "IntegrityCheck",
    "IntegrityFailureError",
    "IntrospectionReport",
    "Introspector",
    "IssueCategory",
    "MagicByteSniffer",
    "MetadataError",
    "MetadataExtractor",
    "MutagenIntrospector",
    "NoMetadataFoundError",
    "StructuralMismatchError",
    "StructureCheck",
    "UnsupportedFormatError",
    "ValidationError",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "all_descriptors",
    "by_extension",
    "by_mime",
    "descriptor",
]
