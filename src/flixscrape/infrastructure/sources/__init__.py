"""Manifest extraction from embed iframes."""

from .extractor import IframeSourceExtractor, collect_sources, find_endpoints
from .matchers import DEFAULT_MATCHERS, PROBE_MATCHERS, MatchContext, scan

__all__ = [
    "DEFAULT_MATCHERS",
    "IframeSourceExtractor",
    "MatchContext",
    "PROBE_MATCHERS",
    "collect_sources",
    "find_endpoints",
    "scan",
]
