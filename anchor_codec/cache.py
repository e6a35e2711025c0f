"""Bounded LRU cache shared by the discriminator and PDA caches."""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

from .config import CacheConfig
from .constants import DEFAULT_CACHE_SIZE
from .errors import ArgumentError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LruCache(Generic[K, V]):
    """Thread-safe LRU cache with hit/miss/eviction counters.

    A disabled cache stores nothing and counts nothing. Values pass through
    ``_copy_in`` on the way in and ``_copy_out`` on the way out, so subclasses
    that hold mutable values can keep callers from aliasing cache state.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        enabled: bool = True,
        max_age: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
            raise ArgumentError(f"Cache max size must be positive, got {max_size}")
        if max_age is not None and max_age <= 0:
            raise ArgumentError(f"Cache max age must be positive, got {max_age}")
        self.max_size = max_size
        self.enabled = enabled
        self.max_age = max_age
        self._clock = clock
        self._entries: "OrderedDict[K, tuple[V, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def from_config(cls, config: CacheConfig, **kwargs):
        return cls(
            max_size=config.max_size,
            enabled=config.enabled,
            max_age=config.max_age_seconds,
            **kwargs,
        )

    def _copy_in(self, value: V) -> V:
        return value

    def _copy_out(self, value: V) -> V:
        return value

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, key: K) -> Optional[V]:
        """Return the cached value and mark it most recently used."""
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._expired(entry):
                del self._entries[key]
                self._evictions += 1
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return self._copy_out(entry[0])

    def put(self, key: K, value: V) -> None:
        """Store a value, evicting the least recently used entry when full."""
        if not self.enabled:
            return
        stored = self._copy_in(value)
        with self._lock:
            self._entries[key] = (stored, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted cache entry {evicted!r}")

    def contains(self, key: K) -> bool:
        """Check for a live entry without touching LRU order or counters."""
        if not self.enabled:
            return False
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._expired(entry)

    __contains__ = contains

    def remove(self, key: K) -> bool:
        """Remove an entry. Returns True if it was present."""
        if not self.enabled:
            return False
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            self._entries.clear()
            self._reset_counters()

    def warm(self, entries: Dict[K, V]) -> None:
        """Bulk-insert known entries. No-op when disabled."""
        if not self.enabled:
            return
        for key, value in entries.items():
            self.put(key, value)

    def _expired(self, entry: "tuple[V, float]") -> bool:
        return self.max_age is not None and self._clock() - entry[1] > self.max_age

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def size(self) -> int:
        return len(self)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def is_full(self) -> bool:
        return len(self) >= self.max_size

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def evictions(self) -> int:
        return self._evictions

    @property
    def total_accesses(self) -> int:
        return self._hits + self._misses

    @property
    def hit_ratio(self) -> float:
        total = self.total_accesses
        return self._hits / total if total else 0.0

    @property
    def miss_ratio(self) -> float:
        total = self.total_accesses
        return self._misses / total if total else 0.0

    def statistics(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._entries)
            hits, misses, evictions = self._hits, self._misses, self._evictions
        total = hits + misses
        return {
            "size": size,
            "max_size": self.max_size,
            "enabled": self.enabled,
            "hits": hits,
            "misses": misses,
            "evictions": evictions,
            "total_accesses": total,
            "hit_ratio": hits / total if total else 0.0,
            "miss_ratio": misses / total if total else 0.0,
        }

    def reset_statistics(self) -> None:
        """Reset counters, keeping entries."""
        with self._lock:
            self._reset_counters()

    def _reset_counters(self) -> None:
        self._hits = 0
        self._misses = 0
        self._evictions = 0
