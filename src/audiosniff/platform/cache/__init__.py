"""Summary: In-memory result caches keyed by file identity and mtime.
Why: Provide a stable import path for detectors and extractors."""

from .result_cache import CacheKey, CacheStats, ResultCache

__all__ = ["CacheKey", "CacheStats", "ResultCache"]
