"""Bounded TTL cache for comparable results.

The cache is the only shared mutable state on the matching path. A single
lock guards the entry map; computing a missing value happens under a lock
owned by that key only, so concurrent misses on one key compute once while
other keys proceed.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0


class ResultCache(Generic[V]):
    """LRU cache whose entries expire ``ttl_seconds`` after being stored.

    Parameters
    ----------
    ttl_seconds : float
        Entry lifetime.
    max_size : int
        Maximum number of live entries; the least recently used is evicted.
    clock : Callable[[], float]
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = 1800.0,
        max_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: dict[Hashable, list] = {}  # key -> [lock, waiters]
        self._stats = CacheStats()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _lookup(self, key: Hashable) -> tuple[bool, V | None]:
        # caller holds self._lock
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return False, None
        self._entries.move_to_end(key)
        return True, value

    def get(self, key: Hashable) -> V | None:
        """Return the live value for ``key`` or ``None``."""
        with self._lock:
            found, value = self._lookup(key)
            if found:
                self._stats.hits += 1
            else:
                self._stats.misses += 1
            return value

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._stats.evictions += 1
                logger.debug("Evicted cache entry %s", evicted)

    def get_or_compute(self, key: Hashable, compute: Callable[[], V]) -> tuple[V, bool]:
        """Return ``(value, hit)``, computing and storing the value on a miss.

        If ``compute`` raises, nothing is stored and the exception propagates.
        """
        with self._lock:
            found, value = self._lookup(key)
            if found:
                self._stats.hits += 1
                return value, True
            slot = self._key_locks.setdefault(key, [threading.Lock(), 0])
            slot[1] += 1

        try:
            with slot[0]:
                # Another caller may have filled the entry while we waited
                with self._lock:
                    found, value = self._lookup(key)
                    if found:
                        self._stats.hits += 1
                        return value, True
                    self._stats.misses += 1

                value = compute()
                self.put(key, value)
                return value, False
        finally:
            with self._lock:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._key_locks[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                size=len(self._entries),
            )
