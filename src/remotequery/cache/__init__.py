"""Response caching for connections."""

from __future__ import annotations

from remotequery.cache.keys import build_cache_key
from remotequery.cache.store import CacheEntry, CacheStore, MemoryCacheStore

__all__ = ["CacheEntry", "CacheStore", "MemoryCacheStore", "build_cache_key"]
