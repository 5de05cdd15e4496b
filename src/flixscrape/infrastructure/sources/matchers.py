"""Manifest matcher strategies.

Each strategy exposes ``attempt(body, context) -> Candidate | None``:
it collects raw matches from *body*, normalises and validates them
against the iframe origin, and returns its highest-scoring valid
candidate.  ``scan`` folds an ordered strategy list into the best
candidate overall.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, Sequence

import structlog

from flixscrape.domain.entities import Candidate, ExtractionTrace

from .packed import iter_unpacked
from .scoring import normalize_url, rejection_reason, score_url

log = structlog.get_logger(__name__)

_QUOTED_MANIFEST_RE = re.compile(
    r"""["']((?:https?:)?(?:\\?/){2}[^"'\s<>]+?\.m3u8[^"'\s<>]*)["']""",
    re.IGNORECASE,
)
_BARE_MANIFEST_RE = re.compile(
    r"""(https?:(?:\\?/){2}[^"'\s<>()]+?\.m3u8[^"'\s<>()]*)""",
    re.IGNORECASE,
)
_KEYED_PROPERTY_RE = re.compile(
    r"""["']?\b(?:file|src|source|hls2?|playlist|url)["']?\s*[:=]\s*["']([^"'\n]+)["']""",
    re.IGNORECASE,
)
_FUNCTION_CALL_RE = re.compile(
    r"""\b(?:loadSource|load|setup|play|fetch|open)\s*\(([^()]*)\)""",
)
_QUOTED_ARG_RE = re.compile(r"""["']([^"'\n]+)["']""")
_ATOB_RE = re.compile(r"""atob\(\s*["']([A-Za-z0-9+/=_-]+)["']\s*\)""")
_LONG_BASE64_RE = re.compile(r"""["']([A-Za-z0-9+/]{40,}={0,2})["']""")
_LOOSE_QUOTED_RE = re.compile(r"""["']([^"'\n]{20,})["']""")


@dataclass
class MatchContext:
    """Per-extraction state shared by all strategies."""

    page_url: str  # final iframe (or probe) URL, used for URL resolution
    trace: ExtractionTrace


class Matcher(Protocol):
    name: str

    def attempt(self, body: str, context: MatchContext) -> Candidate | None: ...


class RegexMatcher:
    """Base strategy: subclasses only say how raw matches are found."""

    name = "regex"

    def raw_matches(self, body: str) -> Iterable[str]:
        raise NotImplementedError

    def attempt(self, body: str, context: MatchContext) -> Candidate | None:
        best: Candidate | None = None
        seen: set[str] = set()
        for raw in self.raw_matches(body):
            url = normalize_url(raw, context.page_url)
            if url in seen:
                continue
            seen.add(url)

            reason = rejection_reason(url)
            if reason is not None:
                # only manifest-looking rejections are traced
                if ".m3u8" in url.lower():
                    context.trace.record_candidate(
                        matcher=self.name, raw=raw, url=url, score=None, reason=reason
                    )
                    log.debug(
                        "source_candidate_rejected", matcher=self.name, url=url, reason=reason
                    )
                continue

            score = score_url(url)
            context.trace.record_candidate(
                matcher=self.name, raw=raw, url=url, score=score, reason=None
            )
            if best is None or score > best.score:
                best = Candidate(url=url, matcher=self.name, score=score)
        return best


class QuotedManifestUrl(RegexMatcher):
    name = "quoted-manifest-url"

    def raw_matches(self, body: str) -> Iterable[str]:
        return _QUOTED_MANIFEST_RE.findall(body)


class BareManifestUrl(RegexMatcher):
    name = "bare-manifest-url"

    def raw_matches(self, body: str) -> Iterable[str]:
        return _BARE_MANIFEST_RE.findall(body)


class KeyedProperty(RegexMatcher):
    """``file: "..."``, ``"hls2":"..."``, ``source = '...'`` and friends."""

    name = "keyed-property"

    def raw_matches(self, body: str) -> Iterable[str]:
        return _KEYED_PROPERTY_RE.findall(body)


class FunctionCall(RegexMatcher):
    """Quoted arguments of player / XHR calls (``hls.loadSource("...")``)."""

    name = "function-call"

    def raw_matches(self, body: str) -> Iterator[str]:
        for call in _FUNCTION_CALL_RE.finditer(body):
            yield from _QUOTED_ARG_RE.findall(call.group(1))


class PackedScript(RegexMatcher):
    """Unpack ``eval(function(p,a,c,k,e,d)...)`` blocks, then scan the result."""

    name = "packed-script"

    def raw_matches(self, body: str) -> Iterator[str]:
        for unpacked in iter_unpacked(body):
            text = unpacked.replace("\\'", "'").replace('\\"', '"')
            yield from _QUOTED_MANIFEST_RE.findall(text)
            yield from _BARE_MANIFEST_RE.findall(text)
            yield from _KEYED_PROPERTY_RE.findall(text)


def decode_base64(data: str) -> str | None:
    """Strict base64 (standard or URL-safe) to UTF-8; ``None`` if undecodable."""
    data = data.strip().replace("-", "+").replace("_", "/")
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        # UnicodeDecodeError is a ValueError
        return None


class Base64Payload(RegexMatcher):
    """``atob("...")`` arguments and long base64-looking string literals.

    Only decoded payloads mentioning ``.m3u8`` are considered; anything
    that does not decode is skipped.
    """

    name = "base64"

    def raw_matches(self, body: str) -> Iterator[str]:
        encoded = [*_ATOB_RE.findall(body), *_LONG_BASE64_RE.findall(body)]
        for data in encoded:
            decoded = decode_base64(data)
            if decoded is None:
                log.debug("base64_candidate_undecodable", sample=data[:40])
                continue
            if ".m3u8" not in decoded:
                continue
            urls = _BARE_MANIFEST_RE.findall(decoded)
            if urls:
                yield from urls
            else:
                yield decoded.strip()


class LooseQuotedString(RegexMatcher):
    """Last resort: any quoted string of at least 20 characters."""

    name = "loose-quoted-string"

    def raw_matches(self, body: str) -> Iterable[str]:
        return _LOOSE_QUOTED_RE.findall(body)


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    QuotedManifestUrl(),
    BareManifestUrl(),
    KeyedProperty(),
    FunctionCall(),
    PackedScript(),
    Base64Payload(),
    LooseQuotedString(),
)

# API responses are small JSON/JS payloads; the URL-shaped strategies suffice.
PROBE_MATCHERS: tuple[Matcher, ...] = DEFAULT_MATCHERS[:3]


def scan(
    body: str,
    context: MatchContext,
    matchers: Sequence[Matcher] = DEFAULT_MATCHERS,
) -> Candidate | None:
    """Fold *matchers* over *body*; the highest score wins, ties keep the earlier strategy."""
    best: Candidate | None = None
    for matcher in matchers:
        context.trace.patterns_tried.append(matcher.name)
        candidate = matcher.attempt(body, context)
        if candidate is not None and (best is None or candidate.score > best.score):
            best = candidate
    return best
