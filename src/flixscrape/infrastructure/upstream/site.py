"""Typed access to the scraped FlixHQ-style site."""

from __future__ import annotations

from urllib.parse import quote

import structlog

from flixscrape.domain.entities import (
    EpisodeItem,
    HomePage,
    ListingItem,
    MovieDetails,
    SeasonItem,
    ServerItem,
    SourceLink,
)
from flixscrape.domain.exceptions import UpstreamUnavailable
from flixscrape.domain.ports.page_fetcher import PageFetcherPort
from flixscrape.infrastructure.scraping import (
    parse_episodes,
    parse_home_page,
    parse_movie_details,
    parse_search_results,
    parse_seasons,
    parse_servers,
    search_slug,
)

log = structlog.get_logger(__name__)


class FlixhqSite:
    """UpstreamSitePort implementation: builds URLs, fetches, delegates parsing.

    Args:
        fetcher: Page fetcher (raises UpstreamUnavailable on failure).
        base_url: Site origin without trailing slash.
    """

    def __init__(self, fetcher: PageFetcherPort, base_url: str) -> None:
        self._fetcher = fetcher
        self.base_url = base_url.rstrip("/")

    def watch_url(self, movie_id: str) -> str:
        return f"{self.base_url}/watch-movie/watch-{quote(movie_id, safe='')}"

    async def _ajax_html(self, path: str) -> str:
        page = await self._fetcher.fetch_text(
            f"{self.base_url}{path}",
            referer=f"{self.base_url}/",
            headers={"X-Requested-With": "XMLHttpRequest"},
        )
        return page.text

    async def home_page(self) -> HomePage:
        page = await self._fetcher.fetch_text(f"{self.base_url}/home")
        home = parse_home_page(page.text)
        log.info(
            "home_page_scraped",
            url=page.url,
            spotlight=len(home.spotlight),
            listings=sum(len(items) for items in home.listing_sections().values()),
        )
        return home

    async def movie_details(self, movie_id: str) -> MovieDetails:
        url = self.watch_url(movie_id)
        page = await self._fetcher.fetch_text(url, referer=url)
        details = parse_movie_details(page.text)
        log.info(
            "movie_details_scraped",
            movie_id=movie_id,
            content_type=details.content_type.value,
            related=len(details.related),
        )
        return details

    async def source_link(self, server_id: str) -> SourceLink:
        url = f"{self.base_url}/ajax/episode/sources/{quote(server_id, safe='')}"
        data = await self._fetcher.fetch_json(url, referer=f"{self.base_url}/")
        if not isinstance(data, dict):
            raise UpstreamUnavailable(url, reason="unexpected payload")
        link = SourceLink(kind=str(data.get("type") or ""), link=str(data.get("link") or ""))
        log.debug("source_link_fetched", server_id=server_id, kind=link.kind)
        return link

    async def seasons(self, movie_id: str) -> list[SeasonItem]:
        return parse_seasons(await self._ajax_html(f"/ajax/season/list/{quote(movie_id, safe='')}"))

    async def episodes(self, season_id: str) -> list[EpisodeItem]:
        return parse_episodes(
            await self._ajax_html(f"/ajax/season/episodes/{quote(season_id, safe='')}")
        )

    async def servers(self, movie_id: str, episode_id: str | None = None) -> list[ServerItem]:
        if episode_id:
            path = f"/ajax/episode/servers/{quote(episode_id, safe='')}"
        else:
            path = f"/ajax/episode/list/{quote(movie_id, safe='')}"
        return parse_servers(await self._ajax_html(path))

    async def search(self, query: str) -> list[ListingItem]:
        url = f"{self.base_url}/search/{quote(search_slug(query), safe='-')}"
        page = await self._fetcher.fetch_text(url)
        results = parse_search_results(page.text)
        log.info("search_scraped", query=query, results=len(results))
        return results
