"""Where: src/audiosniff/platform/cache/result_cache.py
What: Thread-safe bounded cache keyed by file identity and modification time.
Why: Repeat inspections of an unmodified file must not touch the disk again.
"""

from __future__ import annotations

import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class CacheKey:
    """File identity plus the mtime the cached value was computed for."""

    path: str
    mtime_ns: int

    @classmethod
    def for_path(cls, file_path: Path | str) -> "CacheKey":
        """Build a key from the file's current resolved path and mtime.

        Raises:
            OSError: If the file cannot be stat'ed.
        """
        resolved = Path(file_path).resolve()
        return cls(path=str(resolved), mtime_ns=os.stat(resolved).st_mtime_ns)


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache counters."""

    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int


class ResultCache(Generic[V]):
    """Bounded associative store with oldest-first eviction.

    Each path keeps at most one entry: storing a value for a new mtime drops
    the entry computed for the previous mtime, so stale values are never served.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity: int = capacity
        self._lock: Final[threading.Lock] = threading.Lock()
        self._entries: OrderedDict[CacheKey, V] = OrderedDict()
        self._keys_by_path: dict[str, CacheKey] = {}
        self._hits: int = 0
        self._misses: int = 0
        self._evictions: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: CacheKey) -> V | None:
        """Return the value stored for exactly ``key`` or ``None``."""

        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self._misses += 1
                return None
            self._hits += 1
            return value

    def put(self, key: CacheKey, value: V) -> None:
        """Store ``value``; the last concurrent write for a key wins."""

        with self._lock:
            previous = self._keys_by_path.get(key.path)
            if previous is not None and previous != key:
                _ = self._entries.pop(previous, None)
            self._entries[key] = value
            self._entries.move_to_end(key)
            self._keys_by_path[key.path] = key
            while len(self._entries) > self._capacity:
                oldest, _ = self._entries.popitem(last=False)
                if self._keys_by_path.get(oldest.path) == oldest:
                    del self._keys_by_path[oldest.path]
                self._evictions += 1

    def values(self) -> list[V]:
        """Return a snapshot of the stored values, oldest first."""

        with self._lock:
            return list(self._entries.values())

    def clear(self) -> None:
        """Drop every entry; counters are kept."""

        with self._lock:
            self._entries.clear()
            self._keys_by_path.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                capacity=self._capacity,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheKey", "CacheStats", "ResultCache"]
