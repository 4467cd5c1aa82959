"""Cache store contract and an in-process TTL implementation."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

T = TypeVar("T")


class CacheStore(Protocol):
    """Shared store consulted by connections; last write wins."""

    def get(self, key: str) -> object | None:
        """Return the cached value or None when missing/expired."""
        ...

    def has(self, key: str) -> bool:
        """Return True when a live entry exists for ``key``."""
        ...

    def remember(self, key: str, ttl: int | None, producer: Callable[[], T]) -> T:
        """Return the cached value, producing and storing it on a miss."""
        ...

    def forget(self, key: str) -> bool:
        """Drop ``key``; return True when an entry was removed."""
        ...


@dataclass
class CacheEntry:
    """Stored value with its absolute expiry time."""

    value: object
    expires_at: float | None


class MemoryCacheStore:
    """
    Dictionary-backed TTL cache.

    ``ttl=None`` stores without expiry; ``ttl <= 0`` produces the value without
    storing it. Expired entries are dropped lazily on access.
    """

    def __init__(self, *, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time = time_func
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        self._drop_expired(self._time())
        return len(self._entries)

    def get(self, key: str) -> object | None:
        """
        Return a live cached value.

        Returns
        -------
        object | None
            Cached value, or None when missing or expired.
        """
        entry = self._live_entry(key)
        return None if entry is None else entry.value

    def has(self, key: str) -> bool:
        """Return True when ``key`` holds a live entry."""
        return self._live_entry(key) is not None

    def put(self, key: str, value: object, ttl: int | None) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        if ttl is not None and ttl <= 0:
            self._entries.pop(key, None)
            return
        expires_at = None if ttl is None else self._time() + ttl
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def remember(self, key: str, ttl: int | None, producer: Callable[[], T]) -> T:
        """
        Return the cached value or produce, store and return a new one.

        Returns
        -------
        T
            Cached or freshly produced value.
        """
        entry = self._live_entry(key)
        if entry is not None:
            return entry.value  # type: ignore[return-value]
        value = producer()
        self.put(key, value, ttl)
        return value

    def forget(self, key: str) -> bool:
        """Remove ``key``; return True when an entry existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return entry.expires_at is not None and now >= entry.expires_at

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._time()):
            self._entries.pop(key, None)
            return None
        return entry

    def _drop_expired(self, now: float) -> None:
        keys_to_drop = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in keys_to_drop:
            self._entries.pop(key, None)
