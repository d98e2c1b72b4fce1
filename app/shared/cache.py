"""
In-process TTL cache.

Replaces module-level ``{fetched_at, data}`` globals with an explicit
object whose clock and backing storage are injected, so expiry can be
driven deterministically in tests.

Read-check-then-write with no locking: concurrent callers may both miss
and both populate. Only staleness is at stake, never correctness.
"""

import logging
import time
from collections.abc import Callable, MutableMapping
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


class TTLCache(Generic[T]):
    """Key/value cache where each entry expires ``ttl_seconds`` after it was set.

    Args:
        ttl_seconds: Lifetime of an entry in seconds. Must be positive.
        clock: Monotonic seconds source. Defaults to ``time.monotonic``.
        storage: Mapping used to hold ``key -> (stored_at, value)``.
            Defaults to a fresh dict.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Clock = time.monotonic,
        storage: Optional[MutableMapping[str, tuple[float, Any]]] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._storage: MutableMapping[str, tuple[float, Any]] = (
            storage if storage is not None else {}
        )

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        entry = self._storage.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self._ttl:
            self._storage.pop(key, None)
            return None
        return value

    def set(self, key: str, value: T) -> None:
        """Store ``value`` under ``key``, stamped with the current clock."""
        self._storage[key] = (self._clock(), value)

    def get_or_set(self, key: str, factory: Callable[[], T]) -> T:
        """Return the cached value or build, store and return a fresh one.

        Exceptions from ``factory`` propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        logger.debug("Cache miss for key=%s", key)
        value = factory()
        self.set(key, value)
        return value

    def invalidate(self, key: Optional[str] = None) -> int:
        """Drop one key, or every key when ``key`` is None.

        Returns:
            Number of entries removed.
        """
        if key is None:
            count = len(self._storage)
            self._storage.clear()
            return count
        return 1 if self._storage.pop(key, None) is not None else 0

    def __len__(self) -> int:
        return len(self._storage)
