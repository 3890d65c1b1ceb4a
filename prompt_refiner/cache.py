"""In-memory LRU cache with TTL expiry for refinement results."""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar('T')


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class CacheEntry(Generic[T]):
    value: T
    timestamp: float


class LRUCache(Generic[T]):
    """Bounded cache keyed by prompt text.

    Holds at most ``max_entries`` values, each for at most ``ttl_ms``
    milliseconds. Reading an entry marks it most-recently used but does not
    extend its lifetime.
    """

    def __init__(self, ttl_ms: int, max_entries: int, clock: Optional[Callable[[], float]] = None):
        """Initialize the cache.

        Args:
            ttl_ms: Lifetime of an entry in milliseconds
            max_entries: Maximum number of entries held at once
            clock: Callable returning the current time in milliseconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock or _now_ms
        self._entries: 'OrderedDict[str, CacheEntry[T]]' = OrderedDict()

    def _is_expired(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.timestamp >= self.ttl_ms

    def get(self, key: str) -> Optional[T]:
        """Get a value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry):
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: str, value: T) -> None:
        """Store a value, evicting the least-recently used entry when full."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)

        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())

    def has(self, key: str) -> bool:
        """Check if a live entry exists for the key."""
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Remove an entry and report whether it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
