"""httpx-based page fetcher for the scraped site."""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx
import structlog

from flixscrape.domain.exceptions import UpstreamUnavailable
from flixscrape.domain.ports.page_fetcher import FetchedPage
from flixscrape.infrastructure.config.schema import DEFAULT_USER_AGENT

log = structlog.get_logger(__name__)

BROWSER_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
}


def build_http_client(
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout_seconds: float = 15.0,
    max_redirects: int = 5,
) -> httpx.AsyncClient:
    """Shared client with browser-like headers and a fixed redirect limit."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        headers={"User-Agent": user_agent, **BROWSER_HEADERS},
        follow_redirects=True,
        max_redirects=max_redirects,
    )


class HttpxPageFetcher:
    """PageFetcherPort implementation on top of a shared httpx client.

    No retries: a failed request surfaces as ``UpstreamUnavailable``
    and the caller decides whether that is fatal.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def _get(
        self,
        url: str,
        *,
        referer: str | None,
        headers: Mapping[str, str] | None,
        timeout: float | None,
    ) -> httpx.Response:
        request_headers: dict[str, str] = {}
        if referer:
            request_headers["Referer"] = referer
        if headers:
            request_headers.update(headers)

        kwargs: dict[str, Any] = {"headers": request_headers}
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            return await self._client.get(url, **kwargs)
        except httpx.TimeoutException as exc:
            log.warning("upstream_timeout", url=url)
            raise UpstreamUnavailable(url, reason="timeout") from exc
        except httpx.TooManyRedirects as exc:
            log.warning("upstream_too_many_redirects", url=url)
            raise UpstreamUnavailable(url, reason="too many redirects") from exc
        except httpx.HTTPError as exc:
            log.warning("upstream_fetch_error", url=url, error=str(exc))
            raise UpstreamUnavailable(url, reason=str(exc) or type(exc).__name__) from exc

    async def fetch_text(
        self,
        url: str,
        *,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
        accept_error_status: bool = False,
        timeout: float | None = None,
    ) -> FetchedPage:
        resp = await self._get(url, referer=referer, headers=headers, timeout=timeout)
        if resp.status_code >= 400 and not accept_error_status:
            log.warning("upstream_http_error", url=url, status=resp.status_code)
            raise UpstreamUnavailable(url, status_code=resp.status_code)

        log.debug("upstream_fetched", url=url, status=resp.status_code, size=len(resp.text))
        return FetchedPage(url=str(resp.url), status_code=resp.status_code, text=resp.text)

    async def fetch_json(
        self,
        url: str,
        *,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        xhr_headers = {"X-Requested-With": "XMLHttpRequest", "Accept": "application/json"}
        if headers:
            xhr_headers.update(headers)

        resp = await self._get(url, referer=referer, headers=xhr_headers, timeout=timeout)
        if resp.status_code >= 400:
            log.warning("upstream_http_error", url=url, status=resp.status_code)
            raise UpstreamUnavailable(url, status_code=resp.status_code)

        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError) as exc:
            log.warning("upstream_invalid_json", url=url)
            raise UpstreamUnavailable(
                url, status_code=resp.status_code, reason="invalid json"
            ) from exc
