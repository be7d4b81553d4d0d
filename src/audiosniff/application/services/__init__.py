"""Application services for batch inspection."""

from .inspection_service import BatchOutcome, InspectionService

__all__ = ["BatchOutcome", "InspectionService"]
