"""Application cache – query result keys and stores."""
from mp_dispatch.application.cache.keys import CacheKey
from mp_dispatch.application.cache.store import CacheEntry, CacheStore, InMemoryCacheStore

__all__ = ["CacheEntry", "CacheKey", "CacheStore", "InMemoryCacheStore"]
