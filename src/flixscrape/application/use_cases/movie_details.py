"""Movie details use case."""

from __future__ import annotations

from flixscrape.application.validation import require_id
from flixscrape.domain.entities import MovieDetails
from flixscrape.domain.ports.upstream_site import UpstreamSitePort


class MovieDetailsUseCase:
    def __init__(self, site: UpstreamSitePort) -> None:
        self._site = site

    async def execute(self, movie_id: str) -> MovieDetails:
        """Scrape the detail page of *movie_id*.

        Raises:
            MissingRequiredParameter: If the id is malformed (no upstream call).
            UpstreamUnavailable: If the page cannot be fetched.
        """
        return await self._site.movie_details(require_id("id", movie_id))
