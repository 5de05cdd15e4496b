"""Port for fetching raw pages from the scraped site."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class FetchedPage:
    url: str  # final URL after redirects
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class PageFetcherPort(Protocol):
    """Browser-like GET requests with a bounded timeout.

    Implementations raise ``UpstreamUnavailable`` on transport errors,
    timeouts and failure statuses. No retries.
    """

    async def fetch_text(
        self,
        url: str,
        *,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
        accept_error_status: bool = False,
        timeout: float | None = None,
    ) -> FetchedPage:
        """GET *url* and return the body as text."""
        ...

    async def fetch_json(
        self,
        url: str,
        *,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET *url* as an XHR request and return the parsed JSON body."""
        ...
