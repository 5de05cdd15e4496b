"""Port for external metadata lookups (TMDB)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flixscrape.domain.entities.catalog import ContentType


@runtime_checkable
class MetadataEnricherPort(Protocol):
    """Resolves scraped titles to external numeric identifiers.

    Failures never propagate: every error maps to ``None``.
    """

    @property
    def enabled(self) -> bool:
        """False when no API key is configured (every lookup returns None)."""
        ...

    async def resolve(
        self,
        title: str,
        year: str | None = None,
        content_type: ContentType = ContentType.MOVIE,
    ) -> int | None:
        """Return the external id of the best match, or None."""
        ...
