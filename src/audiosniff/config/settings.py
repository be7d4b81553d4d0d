"""Where: src/audiosniff/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to feature layers without file I/O.
Trade-offs: - Validation is limited to simple boundary checks for speed.
"""

from __future__ import annotations

from audiosniff.config.config import (
    DETECTION_CACHE_SIZE_DEFAULT,
    FAST_PATH_THRESHOLD_DEFAULT,
    MAX_WORKERS_DEFAULT,
    METADATA_CACHE_SIZE_DEFAULT,
    SNIFF_LENGTH_DEFAULT,
    config as app_config,
)

# Sniffing -------------------------------------------------------------------

# The sniffer needs at least the 12-byte ftyp prefix of an MP4 file; the
# upper bound keeps header reads length-capped on untrusted input.
_sniff_length = getattr(app_config, "sniff_length", SNIFF_LENGTH_DEFAULT)
SNIFF_LENGTH: int = (
    _sniff_length
    if isinstance(_sniff_length, int) and 12 <= _sniff_length <= 4096
    else SNIFF_LENGTH_DEFAULT
)

_fast_path = getattr(app_config, "fast_path_threshold", FAST_PATH_THRESHOLD_DEFAULT)
FAST_PATH_THRESHOLD: float = (
    float(_fast_path)
    if isinstance(_fast_path, (int, float)) and 0.0 < _fast_path <= 1.0
    else FAST_PATH_THRESHOLD_DEFAULT
)


# Caches ---------------------------------------------------------------------

_detection_cache = getattr(app_config, "detection_cache_size", DETECTION_CACHE_SIZE_DEFAULT)
DETECTION_CACHE_SIZE: int = (
    _detection_cache if isinstance(_detection_cache, int) and _detection_cache > 0
    else DETECTION_CACHE_SIZE_DEFAULT
)

_metadata_cache = getattr(app_config, "metadata_cache_size", METADATA_CACHE_SIZE_DEFAULT)
METADATA_CACHE_SIZE: int = (
    _metadata_cache if isinstance(_metadata_cache, int) and _metadata_cache > 0
    else METADATA_CACHE_SIZE_DEFAULT
)


# Batch operations -----------------------------------------------------------

_max_workers = getattr(app_config, "max_workers", MAX_WORKERS_DEFAULT)
MAX_WORKERS: int = (
    _max_workers if isinstance(_max_workers, int) and _max_workers > 0 else MAX_WORKERS_DEFAULT
)


__all__ = [
    "SNIFF_LENGTH",
    "FAST_PATH_THRESHOLD",
    "DETECTION_CACHE_SIZE",
    "METADATA_CACHE_SIZE",
    "MAX_WORKERS",
]
