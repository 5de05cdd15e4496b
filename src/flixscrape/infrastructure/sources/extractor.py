"""Iframe source extractor: pattern scan with an API probe fallback."""

from __future__ import annotations

import re
from urllib.parse import urljoin

import structlog

from flixscrape.domain.entities import (
    Candidate,
    ExtractionResult,
    ExtractionTrace,
    VideoSource,
)
from flixscrape.domain.exceptions import UpstreamUnavailable
from flixscrape.domain.ports.page_fetcher import PageFetcherPort

from .matchers import PROBE_MATCHERS, MatchContext, scan
from .scoring import normalize_url, quality_label

log = structlog.get_logger(__name__)

_SAMPLE_CHARS = 500
_PROBE_SAMPLE_CHARS = 300

_ENDPOINT_RES = (
    re.compile(r"""["']((?:\\?/)(?:ajax|api)(?:\\?/)[^"'\s<>]+)["']"""),
    re.compile(r"""["']((?:https?:)?(?:\\?/){2}[^"'\s<>]+?(?:\\?/)(?:api|ajax)(?:\\?/)[^"'\s<>]*)["']"""),
    re.compile(r"""["']([^"'\s<>]*getSources[^"'\s<>]*)["']"""),
)
_MP4_RE = re.compile(r"""(https?:(?:\\?/){2}[^"'\s<>()]+?\.mp4[^"'\s<>()]*)""", re.IGNORECASE)


def find_endpoints(body: str, page_url: str) -> list[str]:
    """Endpoint-shaped substrings of *body*, resolved and de-duplicated in order."""
    endpoints: list[str] = []
    for pattern in _ENDPOINT_RES:
        for raw in pattern.findall(body):
            url = urljoin(page_url, normalize_url(raw, page_url))
            if url.startswith(("http://", "https://")) and url not in endpoints:
                endpoints.append(url)
    return endpoints


def collect_sources(body: str, trace: ExtractionTrace, best: Candidate | None) -> list[VideoSource]:
    """Best manifest first, then other accepted manifests, then mp4 files."""
    sources: list[VideoSource] = []
    seen: set[str] = set()

    manifests = [best.url] if best else []
    manifests += [c["url"] for c in trace.candidates if c["accepted"]]
    for url in manifests:
        if url not in seen:
            seen.add(url)
            sources.append(VideoSource(url=url, quality=quality_label(url), is_m3u8=True))

    for raw in _MP4_RE.findall(body):
        url = raw.replace("\\/", "/")
        if url not in seen:
            seen.add(url)
            sources.append(VideoSource(url=url, quality=quality_label(url, "720p"), is_m3u8=False))
    return sources


class IframeSourceExtractor:
    """SourceExtractorPort implementation.

    1. Fetch the iframe page (error statuses are still scanned).
    2. Fold all matcher strategies over the body.
    3. Without a candidate, probe API endpoints referenced by the page
       (bounded count, timeout and depth) with the URL-shaped strategies.

    A missing manifest is a normal result (``manifest_url=None``); no
    failure in this pipeline raises.

    Args:
        fetcher: Page fetcher.
        probe_timeout: Per-probe request timeout (seconds).
        max_probe_endpoints: Total number of endpoints probed per extraction.
        max_probe_depth: How deep probing follows endpoints found in probe responses.
    """

    def __init__(
        self,
        fetcher: PageFetcherPort,
        *,
        probe_timeout: float = 8.0,
        max_probe_endpoints: int = 5,
        max_probe_depth: int = 2,
    ) -> None:
        self._fetcher = fetcher
        self._probe_timeout = probe_timeout
        self._max_probe_endpoints = max_probe_endpoints
        self._max_probe_depth = max_probe_depth

    async def extract(self, iframe_url: str, *, referer: str | None = None) -> ExtractionResult:
        trace = ExtractionTrace(iframe_url=iframe_url)
        try:
            page = await self._fetcher.fetch_text(
                iframe_url, referer=referer, accept_error_status=True
            )
        except UpstreamUnavailable as exc:
            trace.errors.append(str(exc))
            log.warning("iframe_fetch_failed", iframe_url=iframe_url, reason=exc.reason)
            return ExtractionResult(manifest_url=None, sources=[], trace=trace)

        trace.iframe_status = page.status_code
        trace.iframe_sample = page.text[:_SAMPLE_CHARS]
        if not page.ok:
            log.info("iframe_error_status", iframe_url=iframe_url, status=page.status_code)

        context = MatchContext(page_url=page.url or iframe_url, trace=trace)
        best = scan(page.text, context)
        if best is None:
            probed = {iframe_url, context.page_url}
            best = await self._probe(page.text, context, depth=1, probed=probed)

        sources = collect_sources(page.text, trace, best)
        if best is None:
            log.info("manifest_not_found", iframe_url=iframe_url, probes=len(trace.probes))
            return ExtractionResult(manifest_url=None, sources=sources, trace=trace)

        log.info(
            "manifest_selected",
            iframe_url=iframe_url,
            matcher=best.matcher,
            score=best.score,
        )
        return ExtractionResult(manifest_url=best.url, sources=sources, trace=trace)

    async def _probe(
        self,
        body: str,
        context: MatchContext,
        *,
        depth: int,
        probed: set[str],
    ) -> Candidate | None:
        for endpoint in find_endpoints(body, context.page_url):
            if endpoint in probed:
                continue
            if len(context.trace.probes) >= self._max_probe_endpoints:
                log.debug("probe_budget_exhausted", limit=self._max_probe_endpoints)
                return None
            probed.add(endpoint)

            try:
                page = await self._fetcher.fetch_text(
                    endpoint,
                    referer=context.trace.iframe_url,
                    headers={"X-Requested-With": "XMLHttpRequest"},
                    accept_error_status=True,
                    timeout=self._probe_timeout,
                )
            except UpstreamUnavailable as exc:
                context.trace.probes.append(
                    {"url": endpoint, "depth": depth, "status": exc.status_code, "error": exc.reason}
                )
                log.debug("probe_failed", url=endpoint, depth=depth, reason=exc.reason)
                continue

            context.trace.probes.append(
                {
                    "url": endpoint,
                    "depth": depth,
                    "status": page.status_code,
                    "sample": page.text[:_PROBE_SAMPLE_CHARS],
                }
            )
            probe_context = MatchContext(page_url=page.url or endpoint, trace=context.trace)
            found = scan(page.text, probe_context, PROBE_MATCHERS)
            if found is not None:
                log.info("probe_manifest_found", url=endpoint, depth=depth)
                return found

            if depth < self._max_probe_depth:
                found = await self._probe(page.text, probe_context, depth=depth + 1, probed=probed)
                if found is not None:
                    return found
        return None
