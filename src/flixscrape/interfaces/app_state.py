"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from flixscrape.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from flixscrape.application.enrichment import ListingEnricher
    from flixscrape.application.use_cases import (
        BrowseUseCase,
        EpisodeSourcesUseCase,
        HomePageUseCase,
        MovieDetailsUseCase,
    )
    from flixscrape.domain.ports import (
        CachePort,
        MetadataEnricherPort,
        PageFetcherPort,
        SourceExtractorPort,
        UpstreamSitePort,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain Ports
    fetcher: PageFetcherPort
    site: UpstreamSitePort
    metadata: MetadataEnricherPort
    source_extractor: SourceExtractorPort

    # Application Services
    listing_enricher: ListingEnricher
    home_page_uc: HomePageUseCase
    movie_details_uc: MovieDetailsUseCase
    episode_sources_uc: EpisodeSourcesUseCase
    browse_uc: BrowseUseCase
