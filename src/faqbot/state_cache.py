"""Bounded keyed cache shared by the per-chat state stores.

KeyedTTLCache is an in-memory map with least-recently-used eviction and an
optional time-to-live. Every operation takes the instance lock, so unrelated
chats can read and write concurrently without seeing each other's entries.
Expired entries are dropped lazily on access and when the cache is full.

Key class: KeyedTTLCache.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyedTTLCache(Generic[K, V]):
    """LRU map with per-entry expiry.

    Args:
        max_entries: Upper bound on stored keys; the least recently used key
            is evicted when a new key would exceed it.
        ttl: Seconds an entry stays valid after its last write. None disables
            expiry.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        max_entries: int,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be positive")
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._data: OrderedDict[K, tuple[V, float | None]] = OrderedDict()
        self._lock = threading.Lock()

    def _expired(self, expires_at: float | None, now: float) -> bool:
        return expires_at is not None and now >= expires_at

    def get(self, key: K) -> V | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._expired(expires_at, self._clock()):
                del self._data[key]
                return None
            self._data.move_to_end(key)
            return value

    def set(self, key: K, value: V) -> None:
        with self._lock:
            now = self._clock()
            expires_at = now + self.ttl if self.ttl is not None else None
            self._data[key] = (value, expires_at)
            self._data.move_to_end(key)
            if len(self._data) > self.max_entries:
                self._purge_expired(now)
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def pop(self, key: K) -> V | None:
        with self._lock:
            entry = self._data.pop(key, None)
            if entry is None:
                return None
            value, expires_at = entry
            if self._expired(expires_at, self._clock()):
                return None
            return value

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        stale = [k for k, (_, exp) in self._data.items() if self._expired(exp, now)]
        for k in stale:
            del self._data[k]

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
