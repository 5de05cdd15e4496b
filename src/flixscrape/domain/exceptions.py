"""Domain exceptions.

Extraction misses are not exceptions: selectors and patterns that find
nothing degrade to empty strings or ``None``.
"""

from __future__ import annotations


class FlixscrapeError(Exception):
    """Base class for all flixscrape errors."""


class UpstreamUnavailable(FlixscrapeError):
    """Raised when a fetch from the scraped site fails, times out, or returns a failure status."""

    def __init__(self, url: str, *, status_code: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"status={status_code}" if status_code is not None else reason
        super().__init__(f"Upstream unavailable: {url} ({detail})")


class MissingRequiredParameter(FlixscrapeError):
    """Raised when a caller omits or malforms a required request parameter."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"{name} is required")
