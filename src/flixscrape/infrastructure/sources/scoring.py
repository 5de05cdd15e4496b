"""Candidate policy: normalisation, validation and scoring of manifest URLs.

Scoring weights (highest total wins, ties keep the earlier strategy):

    +3  https scheme
    +1  URL length >= 40
    +1  URL length >= 80
    +2  quality / CDN hint (master, playlist, index, hls, cdn, 1080, 720, 480, stream)
    +2  path ends exactly in ``.m3u8``
"""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit

MIN_URL_LENGTH = 20

SCORE_HTTPS = 3
SCORE_LENGTH_40 = 1
SCORE_LENGTH_80 = 1
SCORE_HINT = 2
SCORE_CLEAN_PATH = 2

_HINT_RE = re.compile(r"master|playlist|index|hls|cdn|1080|720|480|stream", re.IGNORECASE)
_BAIT_RE = re.compile(
    r"thumbnail|track|banner|pixel|adserv|analytics|metric", re.IGNORECASE
)
_QUALITY_RE = re.compile(r"(?<!\d)(2160|1440|1080|720|480|360)p?(?!\d)")
_DEGENERATE_CHARS = re.compile(r"[\s{}$<>`]")


def normalize_url(raw: str, page_url: str) -> str:
    """Unescape ``\\/`` and resolve protocol-relative / absolute-path URLs.

    *page_url* is the iframe URL; its scheme and origin are used for
    resolution.  Anything else is returned unchanged (minus whitespace).
    """
    url = raw.strip().replace("\\/", "/")
    if url.startswith("//"):
        scheme = urlsplit(page_url).scheme or "https"
        return f"{scheme}:{url}"
    if url.startswith("/"):
        return urljoin(page_url, url)
    return url


def rejection_reason(url: str) -> str | None:
    """Why *url* is not a usable manifest URL, or ``None`` if it is."""
    if len(url) < MIN_URL_LENGTH:
        return "too_short"
    if ".m3u8" not in url.lower():
        return "no_manifest"
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return "not_http"
    filename = parts.path.rsplit("/", 1)[-1]
    if filename.lower() in (".m3u8", "m3u8") or _DEGENERATE_CHARS.search(url):
        return "degenerate"
    if _BAIT_RE.search(url):
        return "bait"
    return None


def score_url(url: str) -> int:
    score = 0
    if url.startswith("https://"):
        score += SCORE_HTTPS
    if len(url) >= 40:
        score += SCORE_LENGTH_40
    if len(url) >= 80:
        score += SCORE_LENGTH_80
    if _HINT_RE.search(url):
        score += SCORE_HINT
    if urlsplit(url).path.lower().endswith(".m3u8"):
        score += SCORE_CLEAN_PATH
    return score


def quality_label(url: str, default: str = "auto") -> str:
    """Resolution label (``1080p``) found in *url*, else *default*."""
    match = _QUALITY_RE.search(url)
    return f"{match.group(1)}p" if match else default
