"""Listing item extraction (``.flw-item`` cards of the list views)."""

from __future__ import annotations

import re

from bs4 import Tag

from flixscrape.domain.entities import (
    ContentType,
    ListingItem,
    MovieStats,
    TvSeriesStats,
)

from .html_selectors import (
    extract_attr,
    extract_text,
    first_non_empty,
    last_path_segment,
)

_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


def classify_listing(el: Tag) -> ContentType:
    """Single classification step: the ``.fdi-type`` marker reads ``TV`` for series."""
    if extract_text(el, ".fdi-type") == "TV":
        return ContentType.TV_SERIES
    return ContentType.MOVIE


def _movie_stats(el: Tag) -> MovieStats:
    return MovieStats(
        year=extract_text(el, ".fd-infor .fdi-item"),
        duration=extract_text(el, ".fd-infor .fdi-duration"),
        rating=extract_text(el, ".fdi-rating"),
    )


def _first_air_year(el: Tag) -> str:
    match = _YEAR_RE.search(extract_text(el, ".fd-infor .fdi-item"))
    return match.group(0) if match else ""


def _tv_series_stats(el: Tag) -> TvSeriesStats:
    return TvSeriesStats(
        seasons=extract_text(el, ".fd-infor > span:nth-child(1)"),
        episodes=extract_text(el, ".fd-infor > span:nth-child(3)"),
        rating=extract_text(el, ".fdi-rating"),
        year=_first_air_year(el),
    )


def parse_listing_item(el: Tag, content_type: ContentType | None = None) -> ListingItem:
    """Build a ListingItem from one card.

    *content_type* forces the variant (sections that only hold movies or
    only series); ``None`` classifies the card by its type marker.
    """
    kind = content_type or classify_listing(el)

    href = extract_attr(el, "h3.film-name a", "href")
    title = first_non_empty(
        extract_attr(el, "h3.film-name a", "title"),
        extract_text(el, "h3.film-name a"),
    )
    poster = first_non_empty(
        extract_attr(el, "img.film-poster-img", "data-src"),
        extract_attr(el, "img.film-poster-img", "src"),
    )

    stats: MovieStats | TvSeriesStats
    if kind is ContentType.TV_SERIES:
        stats = _tv_series_stats(el)
    else:
        stats = _movie_stats(el)
        kind = ContentType.MOVIE

    return ListingItem(
        id=last_path_segment(href),
        title=title,
        poster=poster,
        content_type=kind,
        stats=stats,
    )

