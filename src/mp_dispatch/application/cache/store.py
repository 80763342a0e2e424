"""Application cache – CacheStore port and TTL-enforcing in-memory store."""
from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from mp_dispatch.kernel.time import Clock, SystemClock

__all__ = ["CacheEntry", "CacheStore", "InMemoryCacheStore"]


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and its absolute expiry (epoch seconds)."""

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@runtime_checkable
class CacheStore(Protocol):
    async def get(self, key: str) -> CacheEntry | None: ...
    async def set(self, key: str, value: Any, ttl: float) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def clear(self) -> None: ...


class InMemoryCacheStore:
    """In-memory CacheStore.

    Expired entries are dropped when read and swept on every write, so the
    map holds at most the entries still live at the last write.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self._data: dict[str, CacheEntry] = {}
        self._expiries: list[tuple[float, str]] = []

    async def get(self, key: str) -> CacheEntry | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock.timestamp()):
            del self._data[key]
            return None
        return entry

    async def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl!r}")
        now = self._clock.timestamp()
        self._evict_expired(now)
        entry = CacheEntry(value=value, expires_at=now + ttl)
        self._data[key] = entry
        heapq.heappush(self._expiries, (entry.expires_at, key))

    def _evict_expired(self, now: float) -> None:
        while self._expiries and self._expiries[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiries)
            entry = self._data.get(key)
            # A rewritten key leaves its old expiry behind in the heap.
            if entry is not None and entry.expires_at == expires_at:
                del self._data[key]

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()
        self._expiries.clear()

    def __len__(self) -> int:
        return len(self._data)
