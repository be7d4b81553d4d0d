"""
Summary: Public surface for validation use cases.
Why: Provide a stable import path for the service layer and tests.
"""

from .format_validator import FormatValidator, combined_confidence
from .integrity import check_integrity, minimum_size
from .structure_walkers import is_valid_mp3_frame_header

__all__ = [
    "FormatValidator",
    "check_integrity",
    "combined_confidence",
    "is_valid_mp3_frame_header",
    "minimum_size",
]
