"""Diskcache adapter - size-limited SQLite cache that survives restarts."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)

T = TypeVar("T")

# Rough per-entry footprint used to turn max_entries into diskcache's byte limit.
_BYTES_PER_ENTRY = 512


class DiskcacheAdapter:
    """CachePort over ``diskcache.Cache``.

    diskcache is synchronous, so every call runs in a worker thread, and a
    semaphore caps how many threads touch the SQLite file at once. Entries
    past the size limit are culled least-recently-stored first.

    Args:
        directory: Cache directory.
        ttl_seconds: TTL for ``set()`` without an explicit value (0 = no expiry).
        max_entries: Approximate entry bound.
        max_concurrent: Max parallel disk operations.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/flixscrape",
        ttl_seconds: int = 86_400,
        max_entries: int = 10_000,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self.size_limit = max_entries * _BYTES_PER_ENTRY
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def __aenter__(self) -> DiskcacheAdapter:
        if self._cache is None:
            self._cache = await asyncio.to_thread(
                DiskCache,
                str(self.directory),
                size_limit=self.size_limit,
                eviction_policy="least-recently-stored",
            )
            log.info(
                "diskcache_opened",
                directory=str(self.directory),
                size_limit=self.size_limit,
                default_ttl=self.default_ttl,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is None:
            return
        cache, self._cache = self._cache, None
        await asyncio.to_thread(cache.close)
        log.info("diskcache_closed", directory=str(self.directory))

    async def _run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        async with self._semaphore:
            return await asyncio.to_thread(fn, *args, **kwargs)

    def _opened(self) -> DiskCache:
        if self._cache is None:
            raise RuntimeError("Cache not initialized; open it with 'async with'")
        return self._cache

    async def get(self, key: str) -> Optional[Any]:
        value = await self._run(self._opened().get, key, default=None)
        log.debug("cache_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire = self.default_ttl if ttl is None else ttl
        await self._run(self._opened().set, key, value, expire=expire or None)
        log.debug("cache_set", key=key, ttl=expire)

    # The remaining operations tolerate a closed cache and report "nothing".

    async def delete(self, key: str) -> bool:
        if self._cache is None:
            return False
        return bool(await self._run(self._cache.delete, key))

    async def exists(self, key: str) -> bool:
        if self._cache is None:
            return False
        # __contains__ honours expiry.
        return await self._run(self._cache.__contains__, key)

    async def size(self) -> int:
        if self._cache is None:
            return 0
        return await self._run(len, self._cache)

    async def clear(self) -> None:
        if self._cache is None:
            return
        removed = await self._run(self._cache.clear)
        log.warning("cache_cleared", backend="diskcache", removed=removed)
