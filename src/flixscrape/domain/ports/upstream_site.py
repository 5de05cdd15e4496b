"""Port for the scraped streaming site (fetch + parse)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flixscrape.domain.entities import (
    EpisodeItem,
    HomePage,
    ListingItem,
    MovieDetails,
    SeasonItem,
    ServerItem,
    SourceLink,
)


@runtime_checkable
class UpstreamSitePort(Protocol):
    """Typed access to the pages of the scraped site.

    Every method raises ``UpstreamUnavailable`` when the page cannot be
    fetched; missing fields in a fetched page degrade to empty values.
    """

    async def home_page(self) -> HomePage: ...

    async def movie_details(self, movie_id: str) -> MovieDetails: ...

    async def source_link(self, server_id: str) -> SourceLink: ...

    async def seasons(self, movie_id: str) -> list[SeasonItem]: ...

    async def episodes(self, season_id: str) -> list[EpisodeItem]: ...

    async def servers(
        self, movie_id: str, episode_id: str | None = None
    ) -> list[ServerItem]: ...

    async def search(self, query: str) -> list[ListingItem]: ...
