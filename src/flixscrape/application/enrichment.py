"""Bounded-concurrency TMDB enrichment of listing items."""

from __future__ import annotations

import asyncio
from dataclasses import replace

import structlog

from flixscrape.domain.entities import ListingItem
from flixscrape.domain.ports.metadata import MetadataEnricherPort

log = structlog.get_logger(__name__)


class ListingEnricher:
    """Attaches ``tmdb_id`` to listing items.

    Lookups for independent items run concurrently, at most
    ``max_concurrent`` at a time.  Output order always equals input
    order; an item whose lookup fails keeps ``tmdb_id=None``.
    """

    def __init__(
        self,
        metadata: MetadataEnricherPort,
        *,
        max_concurrent: int = 5,
        enabled: bool = True,
    ) -> None:
        self._metadata = metadata
        self._max_concurrent = max_concurrent
        self._enabled = enabled

    @property
    def active(self) -> bool:
        return self._enabled and self._metadata.enabled

    async def _enrich_one(self, item: ListingItem, semaphore: asyncio.Semaphore) -> ListingItem:
        if not item.title:
            return item
        async with semaphore:
            try:
                tmdb_id = await self._metadata.resolve(item.title, item.year, item.content_type)
            except Exception:
                log.warning("tmdb_lookup_failed", title=item.title, exc_info=True)
                return item
        if tmdb_id is None:
            return item
        return replace(item, tmdb_id=tmdb_id)

    async def enrich(self, items: list[ListingItem]) -> list[ListingItem]:
        if not self.active or not items:
            return list(items)

        semaphore = asyncio.Semaphore(self._max_concurrent)
        enriched = await asyncio.gather(*(self._enrich_one(item, semaphore) for item in items))
        log.debug(
            "listing_enriched",
            items=len(items),
            resolved=sum(1 for item in enriched if item.tmdb_id is not None),
        )
        return list(enriched)
