"""TMDB metadata enricher - async httpx lookups behind CachePort."""

from __future__ import annotations

import re
from typing import Any

import httpx
import structlog

from flixscrape.domain.entities import ContentType
from flixscrape.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"

_PARENTHETICAL_RE = re.compile(r"\s*\(.*?\)\s*")
_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

# Cached for searches TMDB answered without a usable result (ids start at 1).
_NO_MATCH = 0


def normalize_title(title: str) -> str:
    """``Spider-Man: No Way Home (2021)`` -> ``spider man no way home``."""
    cleaned = _PARENTHETICAL_RE.sub("", title)
    cleaned = _NON_WORD_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip().lower()


def _pick_best(results: list[dict[str, Any]], year: str | None, *date_keys: str) -> dict[str, Any]:
    """First result released in *year*, else the first result."""
    if year:
        for result in results:
            for key in date_keys:
                date = result.get(key) or ""
                if date.startswith(year):
                    return result
    return results[0]


class TmdbMetadataEnricher:
    """MetadataEnricherPort implementation using the TMDB search API.

    Lookups never raise; every failure is logged and maps to ``None``.
    Answered searches are cached, including ones with no match (stored as
    ``_NO_MATCH``). Failed requests are not cached and are retried on the
    next lookup.

    Args:
        api_key: TMDB v3 API key. ``None`` disables all lookups.
        http_client: Shared httpx client.
        cache: Bounded cache for resolved ids.
        timeout_seconds: Per-request timeout for TMDB calls.
        language: Result language sent to TMDB.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        timeout_seconds: float = 5.0,
        language: str = "en-US",
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._cache = cache
        self._timeout = timeout_seconds
        self._language = language

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": self._language, "page": 1, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra), timeout=self._timeout)
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _results(data: dict[str, Any] | None) -> list[dict[str, Any]]:
        if not data:
            return []
        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict) and r.get("id") is not None]

    async def resolve(
        self,
        title: str,
        year: str | None = None,
        content_type: ContentType = ContentType.MOVIE,
    ) -> int | None:
        if not self.enabled or not title:
            return None

        is_tv = content_type is ContentType.TV_SERIES
        cache_key = f"tmdb:{'tv' if is_tv else 'movie'}:{title}:{year or ''}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached or None

        query = normalize_title(title)
        if is_tv:
            extra: dict[str, Any] = {"first_air_date_year": year} if year else {}
            data = await self._get("/search/tv", query=query, **extra)
            date_key = "first_air_date"
        else:
            extra = {"year": year, "primary_release_year": year} if year else {}
            data = await self._get("/search/movie", query=query, **extra)
            date_key = "release_date"

        if data is None:
            return None

        results = self._results(data)
        if not results:
            await self._cache.set(cache_key, _NO_MATCH)
            log.debug("tmdb_no_match", title=title, year=year, content_type=content_type.value)
            return None

        tmdb_id = int(_pick_best(results, year, date_key)["id"])
        await self._cache.set(cache_key, tmdb_id)
        log.debug("tmdb_resolved", title=title, year=year, tmdb_id=tmdb_id)
        return tmdb_id
