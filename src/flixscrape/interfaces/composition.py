"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import structlog
from fastapi import FastAPI

from flixscrape.application.enrichment import ListingEnricher
from flixscrape.application.use_cases import (
    BrowseUseCase,
    EpisodeSourcesUseCase,
    HomePageUseCase,
    MovieDetailsUseCase,
)
from flixscrape.infrastructure.cache.cache_factory import create_cache
from flixscrape.infrastructure.http.fetcher import HttpxPageFetcher, build_http_client
from flixscrape.infrastructure.sources.extractor import IframeSourceExtractor
from flixscrape.infrastructure.tmdb.enricher import TmdbMetadataEnricher
from flixscrape.infrastructure.upstream.site import FlixhqSite
from flixscrape.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (required by the TMDB enricher)
        2. HTTP client (shared by fetcher and enricher)
        3. Page fetcher + site adapter
        4. TMDB enricher + listing enrichment
        5. Source extractor
        6. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache (must be first - the enricher depends on it)
    cache = create_cache(
        backend=config.cache_backend,
        directory=str(config.cache_dir),
        ttl_seconds=config.cache_ttl_seconds,
        max_entries=config.cache_max_entries,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", backend=config.cache_backend)

    # 2) HTTP client (browser headers, bounded timeout and redirects, no retries)
    state.http_client = build_http_client(
        user_agent=config.upstream_user_agent,
        timeout_seconds=config.upstream_timeout_seconds,
        max_redirects=config.upstream_max_redirects,
    )
    log.info(
        "http_client_initialized",
        timeout=config.upstream_timeout_seconds,
        max_redirects=config.upstream_max_redirects,
    )

    # 3) Upstream site
    state.fetcher = HttpxPageFetcher(state.http_client)
    state.site = FlixhqSite(state.fetcher, config.upstream_base_url)
    log.info("upstream_site_initialized", base_url=config.upstream_base_url)

    # 4) TMDB enrichment (lookups are no-ops without an API key)
    state.metadata = TmdbMetadataEnricher(
        api_key=config.tmdb_api_key,
        http_client=state.http_client,
        cache=state.cache,
        timeout_seconds=config.tmdb_timeout_seconds,
        language=config.tmdb_language,
    )
    state.listing_enricher = ListingEnricher(
        state.metadata,
        max_concurrent=config.enrichment_max_concurrent,
        enabled=config.enrichment_enabled,
    )
    if state.listing_enricher.active:
        log.info("tmdb_enrichment_enabled", max_concurrent=config.enrichment_max_concurrent)
    else:
        log.warning(
            "tmdb_enrichment_disabled",
            reason="no API key" if not config.tmdb_api_key else "disabled by config",
        )

    # 5) Source extractor
    state.source_extractor = IframeSourceExtractor(
        state.fetcher,
        probe_timeout=config.sources_probe_timeout_seconds,
        max_probe_endpoints=config.sources_max_probe_endpoints,
        max_probe_depth=config.sources_max_probe_depth,
    )

    # 6) Use cases
    state.home_page_uc = HomePageUseCase(state.site, state.listing_enricher)
    state.movie_details_uc = MovieDetailsUseCase(state.site)
    state.episode_sources_uc = EpisodeSourcesUseCase(
        state.site,
        state.source_extractor,
        base_url=config.upstream_base_url,
        debug_default=config.sources_debug,
    )
    state.browse_uc = BrowseUseCase(state.site, state.listing_enricher)

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
