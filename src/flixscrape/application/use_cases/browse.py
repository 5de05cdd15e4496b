"""Navigation use cases - seasons, episodes, servers and search."""

from __future__ import annotations

import structlog

from flixscrape.application.enrichment import ListingEnricher
from flixscrape.application.validation import optional_id, require_id
from flixscrape.domain.entities import EpisodeItem, ListingItem, SeasonItem, ServerItem
from flixscrape.domain.exceptions import MissingRequiredParameter
from flixscrape.domain.ports.upstream_site import UpstreamSitePort

log = structlog.get_logger(__name__)

MAX_QUERY_LENGTH = 100


class BrowseUseCase:
    """Thin pass-through to the site's AJAX fragments, plus enriched search."""

    def __init__(self, site: UpstreamSitePort, enricher: ListingEnricher) -> None:
        self._site = site
        self._enricher = enricher

    async def seasons(self, movie_id: str) -> list[SeasonItem]:
        return await self._site.seasons(require_id("id", movie_id))

    async def episodes(self, season_id: str | None) -> list[EpisodeItem]:
        return await self._site.episodes(require_id("seasonId", season_id))

    async def servers(self, movie_id: str, episode_id: str | None = None) -> list[ServerItem]:
        return await self._site.servers(
            require_id("id", movie_id), optional_id("episodeId", episode_id)
        )

    async def search(self, query: str | None) -> list[ListingItem]:
        if query is None or not query.strip():
            raise MissingRequiredParameter("q", "Search query is required")
        query = query.strip()[:MAX_QUERY_LENGTH]

        results = await self._site.search(query)
        enriched = await self._enricher.enrich(results)
        log.info("search_ready", query=query, results=len(enriched))
        return enriched
