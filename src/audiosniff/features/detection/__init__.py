# Where: audiosniff.features.detection.__init__
# What: Expose the format detector and its result types.
# Why: Provide a cohesive import surface for services and callers.

from .domain.format_registry import FormatDescriptor, by_extension, by_mime, descriptor
from .domain.models import DetectionMethod, DetectionResult
from .usecases import FormatDetector, MagicByteSniffer

__all__ = [
    "DetectionMethod",
    "DetectionResult",
    "FormatDescriptor",
    "FormatDetector",
    "MagicByteSniffer",
    "by_extension",
    "by_mime",
    "descriptor",
]
