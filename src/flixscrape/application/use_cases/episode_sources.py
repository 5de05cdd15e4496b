"""Episode sources use case - server id to playable manifest URL."""

from __future__ import annotations

import structlog

from flixscrape.application.validation import optional_id, require_id
from flixscrape.domain.entities import EpisodeSources, ServerItem
from flixscrape.domain.exceptions import UpstreamUnavailable
from flixscrape.domain.ports.source_extractor import SourceExtractorPort
from flixscrape.domain.ports.upstream_site import UpstreamSitePort

log = structlog.get_logger(__name__)


class EpisodeSourcesUseCase:
    """Resolves one server of a movie/episode to its sources.

    Flow:
        1. Validate ``server_id`` (and ``episode_id``) before any upstream call.
        2. Ask the site for the server's source link.
        3. Non-iframe or empty links end here (``success=False``).
        4. Extract the manifest from the iframe (null is a valid outcome).
        5. With an ``episode_id``, attach the matching server entry.

    The extraction trace is attached only when debugging is requested or
    enabled by default in the config.
    """

    def __init__(
        self,
        site: UpstreamSitePort,
        extractor: SourceExtractorPort,
        *,
        base_url: str,
        debug_default: bool = False,
    ) -> None:
        self._site = site
        self._extractor = extractor
        self._referer = f"{base_url.rstrip('/')}/"
        self._debug_default = debug_default

    async def _find_server(
        self, movie_id: str, episode_id: str, server_id: str
    ) -> ServerItem | None:
        try:
            servers = await self._site.servers(movie_id, episode_id)
        except UpstreamUnavailable:
            log.warning(
                "server_list_unavailable",
                movie_id=movie_id,
                episode_id=episode_id,
                exc_info=True,
            )
            return None
        return next((s for s in servers if s.id == server_id), None)

    async def execute(
        self,
        movie_id: str,
        server_id: str | None,
        episode_id: str | None = None,
        *,
        debug: bool = False,
    ) -> EpisodeSources:
        server_id = require_id("serverId", server_id)
        episode_id = optional_id("episodeId", episode_id)

        link = await self._site.source_link(server_id)
        if link.kind != "iframe" or not link.link:
            log.info("source_not_iframe", server_id=server_id, kind=link.kind)
            return EpisodeSources(
                server_id=server_id,
                link=link.link or None,
                kind=link.kind or None,
                manifest_url=None,
                episode_id=episode_id,
            )

        result = await self._extractor.extract(link.link, referer=self._referer)

        server = None
        if episode_id:
            server = await self._find_server(movie_id, episode_id, server_id)

        log.info(
            "episode_sources_resolved",
            movie_id=movie_id,
            server_id=server_id,
            found=result.manifest_url is not None,
            sources=len(result.sources),
        )
        return EpisodeSources(
            server_id=server_id,
            link=link.link,
            kind=link.kind,
            manifest_url=result.manifest_url,
            sources=result.sources,
            server=server,
            episode_id=episode_id,
            trace=result.trace if (debug or self._debug_default) else None,
        )
