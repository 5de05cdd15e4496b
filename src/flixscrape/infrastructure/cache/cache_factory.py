"""Cache factory - builds the adapter selected in the config."""

from __future__ import annotations

import structlog

from flixscrape.domain.ports.cache import CachePort
from flixscrape.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from flixscrape.infrastructure.cache.memory_adapter import MemoryCacheAdapter
from flixscrape.infrastructure.config.schema import CacheBackend

log = structlog.get_logger(__name__)


def create_cache(
    backend: CacheBackend = "memory",
    *,
    directory: str = "./.cache/flixscrape",
    ttl_seconds: int = 86_400,
    max_entries: int = 10_000,
) -> CachePort:
    """Create a cache adapter for *backend*.

    Args:
        backend: "memory" (bounded LRU) or "diskcache" (SQLite).
        directory: Diskcache path (ignored for memory).
        ttl_seconds: Default TTL for both backends.
        max_entries: Entry bound for both backends.

    Raises:
        ValueError: If `backend` is unknown.
    """
    log.info(
        "cache_factory_create",
        backend=backend,
        ttl=ttl_seconds,
        max_entries=max_entries,
    )
    if backend == "memory":
        return MemoryCacheAdapter(ttl_seconds=ttl_seconds, max_entries=max_entries)
    if backend == "diskcache":
        return DiskcacheAdapter(
            directory=directory,
            ttl_seconds=ttl_seconds,
            max_entries=max_entries,
        )
    raise ValueError(
        f"Unknown cache backend: {backend!r}. Must be 'memory' or 'diskcache'."
    )
