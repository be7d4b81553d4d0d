# Where: audiosniff.shared.events
# What: Structured event identifiers attached to inspection log records.
# Why: Let the console handler style detection/validation logs consistently.

from enum import StrEnum


class InspectionEvent(StrEnum):
    """Structured event identifiers for inspection logs."""

    DETECT_COMPLETE = "inspection.detect.complete"
    DETECT_CACHE_HIT = "inspection.detect.cache_hit"
    DETECT_FALLBACK = "inspection.detect.fallback"
    VALIDATE_PASS = "inspection.validate.pass"
    VALIDATE_FAIL = "inspection.validate.fail"
    METADATA_COMPLETE = "inspection.metadata.complete"
    METADATA_MISSING = "inspection.metadata.missing"
    BATCH_START = "inspection.batch.start"
    BATCH_COMPLETE = "inspection.batch.complete"
    BATCH_ITEM_ERROR = "inspection.batch.item_error"


__all__ = ["InspectionEvent"]
