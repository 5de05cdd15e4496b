"""In-process cache adapter - bounded LRU with per-entry TTL."""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Any, Callable, Optional

import structlog

log = structlog.get_logger(__name__)


class MemoryCacheAdapter:
    """Bounded in-memory cache implementing CachePort.

    - Least recently used entries are evicted once ``max_entries`` is reached.
    - Expired entries are dropped lazily on access and on insert.
    - All operations are synchronous dict operations without await points,
      so concurrent coroutines on one event loop cannot interleave inside them.

    Args:
        ttl_seconds: Default TTL for `set()` without explicit value (0 = no expiry).
        max_entries: Upper bound on stored entries.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: int = 86_400,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.default_ttl = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._data: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()

        log.info(
            "memory_cache_init",
            default_ttl=ttl_seconds,
            max_entries=max_entries,
        )

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._data.clear()

    def _expired(self, expires_at: float | None) -> bool:
        return expires_at is not None and self._clock() >= expires_at

    def _purge_expired(self) -> None:
        stale = [k for k, (_, exp) in self._data.items() if self._expired(exp)]
        for key in stale:
            del self._data[key]

    async def get(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            log.debug("cache_get", key=key, hit=False)
            return None
        value, expires_at = entry
        if self._expired(expires_at):
            del self._data[key]
            log.debug("cache_get", key=key, hit=False, expired=True)
            return None
        self._data.move_to_end(key)
        log.debug("cache_get", key=key, hit=True)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire = ttl if ttl is not None else self.default_ttl
        expires_at = self._clock() + expire if expire > 0 else None

        if key in self._data:
            self._data.move_to_end(key)
        self._data[key] = (value, expires_at)

        if len(self._data) > self.max_entries:
            self._purge_expired()
        while len(self._data) > self.max_entries:
            evicted, _ = self._data.popitem(last=False)
            log.debug("cache_evicted", key=evicted)

        log.debug("cache_set", key=key, ttl=expire)

    async def delete(self, key: str) -> bool:
        deleted = self._data.pop(key, None) is not None
        log.debug("cache_delete", key=key, deleted=deleted)
        return deleted

    async def exists(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        if self._expired(entry[1]):
            del self._data[key]
            return False
        return True

    async def size(self) -> int:
        return len(self._data)

    async def clear(self) -> None:
        self._data.clear()
        log.warning("cache_cleared", backend="memory")
