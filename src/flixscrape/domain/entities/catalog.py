"""Domain entities for scraped catalog data (listings, details, navigation).

Pure value objects - no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ContentType(str, Enum):
    """Variant tag produced by the single classification step."""

    MOVIE = "movie"
    TV_SERIES = "tvSeries"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class MovieStats:
    year: str = ""
    duration: str = ""
    rating: str = ""


@dataclass(frozen=True)
class TvSeriesStats:
    seasons: str = ""  # e.g. "SS 2"
    episodes: str = ""  # e.g. "EPS 8"
    rating: str = ""
    # First-air year when the card shows one; used for lookups, not rendered.
    year: str = ""


@dataclass(frozen=True)
class ListingItem:
    """Compact movie or TV series record from a list view.

    ``id`` is the last hyphen-delimited segment of the item's href and is
    ``""`` when the href is missing. ``tmdb_id`` is attached after
    enrichment via ``dataclasses.replace``.
    """

    id: str
    title: str
    poster: str
    content_type: ContentType
    stats: MovieStats | TvSeriesStats
    tmdb_id: int | None = None

    @property
    def year(self) -> str | None:
        """Release (or first-air) year usable for metadata lookups."""
        return self.stats.year or None


@dataclass(frozen=True)
class SpotlightItem:
    """Home page slider entry."""

    id: str
    title: str
    banner: str = ""
    description: str = ""
    rating: str = ""


@dataclass(frozen=True)
class HomePage:
    spotlight: list[SpotlightItem] = field(default_factory=list)
    trending_movies: list[ListingItem] = field(default_factory=list)
    trending_tv_series: list[ListingItem] = field(default_factory=list)
    latest_movies: list[ListingItem] = field(default_factory=list)
    latest_tv_series: list[ListingItem] = field(default_factory=list)
    coming_soon: list[ListingItem] = field(default_factory=list)

    def listing_sections(self) -> dict[str, list[ListingItem]]:
        """All listing sections keyed by field name (spotlight excluded)."""
        return {
            "trending_movies": self.trending_movies,
            "trending_tv_series": self.trending_tv_series,
            "latest_movies": self.latest_movies,
            "latest_tv_series": self.latest_tv_series,
            "coming_soon": self.coming_soon,
        }


@dataclass(frozen=True)
class DetailStat:
    """A (name, value) pair from the detail page info block.

    Multi-valued fields (genres, cast, ...) render as anchor lists and
    become ``list[str]``.
    """

    name: str
    value: str | list[str]


@dataclass(frozen=True)
class MovieDetails:
    title: str = ""
    description: str = ""
    poster: str = ""
    content_type: ContentType = ContentType.UNKNOWN
    episode_id: str | None = None  # movie pages only
    stats: list[DetailStat] = field(default_factory=list)
    related: list[ListingItem] = field(default_factory=list)


@dataclass(frozen=True)
class SeasonItem:
    id: str
    title: str


@dataclass(frozen=True)
class EpisodeItem:
    id: str
    number: str
    title: str


@dataclass(frozen=True)
class ServerItem:
    id: str
    name: str
