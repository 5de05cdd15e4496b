"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "flixscrape",
    "environment": "dev",
    "upstream": {
        "base_url": "https://flixhq-tv.lol",
        "timeout_seconds": 15.0,
        "max_redirects": 5,
    },
    "tmdb": {
        "timeout_seconds": 5.0,
        "language": "en-US",
    },
    "enrichment": {
        "enabled": True,
        "max_concurrent": 5,
    },
    "sources": {
        "debug": False,
        "probe_timeout_seconds": 8.0,
        "max_probe_endpoints": 5,
        "max_probe_depth": 2,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "memory",
        "dir": "./.cache/flixscrape",
        "ttl_seconds": 86_400,
        "max_entries": 10_000,
    },
}
