"""Home page use case - scrape the landing page and enrich its listings."""

from __future__ import annotations

from dataclasses import replace

import structlog

from flixscrape.application.enrichment import ListingEnricher
from flixscrape.domain.entities import HomePage, ListingItem
from flixscrape.domain.ports.upstream_site import UpstreamSitePort

log = structlog.get_logger(__name__)


class HomePageUseCase:
    """Fetch -> parse -> enrich for ``GET /home``.

    ``UpstreamUnavailable`` from the site propagates; enrichment never fails
    the request.
    """

    def __init__(self, site: UpstreamSitePort, enricher: ListingEnricher) -> None:
        self._site = site
        self._enricher = enricher

    async def execute(self) -> HomePage:
        home = await self._site.home_page()

        sections = home.listing_sections()
        flat: list[ListingItem] = [item for items in sections.values() for item in items]
        enriched = await self._enricher.enrich(flat)

        # split the flat list back into sections, keeping scrape order
        updates: dict[str, list[ListingItem]] = {}
        offset = 0
        for name, items in sections.items():
            updates[name] = enriched[offset : offset + len(items)]
            offset += len(items)

        log.info("home_page_ready", spotlight=len(home.spotlight), listings=len(flat))
        return replace(home, **updates)
