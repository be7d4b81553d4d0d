# Where: audiosniff.features.validation.__init__
# What: Expose the format validator and its result types.
# Why: Provide a cohesive import surface for services and callers.

from .domain.models import (
    IntegrityCheck,
    IssueCategory,
    StructureCheck,
    ValidationError,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)
from .usecases import FormatValidator, is_valid_mp3_frame_header

__all__ = [
    "FormatValidator",
    "IntegrityCheck",
    "IssueCategory",
    "StructureCheck",
    "ValidationError",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "is_valid_mp3_frame_header",
]
