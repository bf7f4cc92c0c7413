"""TTL cache for read-only chain call responses.

Keys are (provider, contract, method, argument-hex) so distinct calls never
share a slot. Pure math methods (get-amount-out / get-amount-in) depend only
on their arguments and may be kept longer than pool state reads.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

CacheKey = tuple[str, str, str, str]

# Sentinel for distinguishing a cached value from "no entry"
MISSING = object()

# Upper bound on stored responses
DEFAULT_MAX_ENTRIES = 10_000


class ResponseCache:
    """In-memory cache with a default TTL and per-method overrides.

    Expired entries are swept on write at most once per default TTL, and the
    store never holds more than max_entries; when full, the oldest entry is
    evicted. Used from a single event loop, so no locking is needed.
    """

    def __init__(
        self,
        default_ttl: float = 30.0,
        method_ttls: dict[str, float] | None = None,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive: {max_entries}")
        self._store: OrderedDict[CacheKey, tuple[Any, float]] = OrderedDict()
        self._default_ttl = default_ttl
        self._method_ttls = dict(method_ttls or {})
        self._clock = clock
        self._max_entries = max_entries
        self._next_sweep = clock() + default_ttl
        self._evictions = 0
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(provider: str, contract: str, method: str, args_hex: list[str]) -> CacheKey:
        return (provider, contract, method, ":".join(args_hex))

    def ttl_for(self, method: str) -> float:
        return self._method_ttls.get(method, self._default_ttl)

    def get(self, key: CacheKey) -> Any:
        entry = self._store.get(key)
        if entry is None:
            self._misses += 1
            return MISSING
        value, expires_at = entry
        if self._clock() < expires_at:
            self._hits += 1
            return value
        del self._store[key]
        self._misses += 1
        return MISSING

    def set(self, key: CacheKey, value: Any) -> None:
        ttl = self.ttl_for(key[2])
        if ttl <= 0:
            return
        now = self._clock()
        if now >= self._next_sweep or len(self._store) >= self._max_entries:
            self.purge_expired()
        self._store.pop(key, None)
        while len(self._store) >= self._max_entries:
            self._store.popitem(last=False)
            self._evictions += 1
        self._store[key] = (value, now + ttl)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._store.items() if expires_at <= now]
        for key in expired:
            del self._store[key]
        self._next_sweep = now + self._default_ttl
        return len(expired)

    def invalidate(self, key: CacheKey) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._store)

    @property
    def hit_rate(self) -> float:
        total = self._hits + self._misses
        return self._hits / total if total > 0 else 0.0

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self.hit_rate, 4),
            "size": len(self._store),
            "evictions": self._evictions,
        }
