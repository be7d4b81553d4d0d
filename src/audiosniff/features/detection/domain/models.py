"""
Summary: Detection result types.
Why: Keep the detector's output shape independent of how it was computed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from audiosniff.shared.audio_format import AudioProperties, FormatKind


class DetectionMethod(StrEnum):
    """Which signal produced a detection result."""

    EXTENSION = "extension"
    MAGIC_BYTES = "magic_bytes"
    MIME_TYPE = "mime_type"
    DEEP_INSPECTION = "deep_inspection"
    COMBINED = "combined"


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Detected format with a confidence score in ``[0, 1]``."""

    format: FormatKind
    confidence: float
    method: DetectionMethod
    container_format: FormatKind | None = None
    properties: AudioProperties | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def is_unknown(self) -> bool:
        return self.format is FormatKind.UNKNOWN

    def matches(self, expected: FormatKind) -> bool:
        """Whether the detected format or its container is ``expected``."""
        return self.format is expected or self.container_format is expected


def unknown_result(method: DetectionMethod) -> DetectionResult:
    """Result reported when a signal identifies nothing."""
    return DetectionResult(format=FormatKind.UNKNOWN, confidence=0.0, method=method)


__all__ = ["DetectionMethod", "DetectionResult", "unknown_result"]
