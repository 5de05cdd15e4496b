"""Port for resolving an embed iframe to a manifest URL."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flixscrape.domain.entities import ExtractionResult


@runtime_checkable
class SourceExtractorPort(Protocol):
    """Best-effort manifest extraction from an iframe page.

    A null ``manifest_url`` is a normal outcome, not an error.
    """

    async def extract(self, iframe_url: str, *, referer: str | None = None) -> ExtractionResult:
        ...
