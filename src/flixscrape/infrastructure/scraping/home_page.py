"""Home page parser: spotlight slider and the listing sections."""

from __future__ import annotations

import re

import structlog
from bs4 import Tag

from flixscrape.domain.entities import (
    ContentType,
    HomePage,
    ListingItem,
    SpotlightItem,
)

from .html_selectors import (
    extract_attr,
    extract_text,
    last_path_segment,
    parse_html,
    select_items,
)
from .listing import parse_listing_item

log = structlog.get_logger(__name__)

_BANNER_RE = re.compile(r"""url\(['"]?(.*?)['"]?\)""")


def _banner_from_style(style: str) -> str:
    match = _BANNER_RE.search(style)
    return match.group(1) if match else ""


def _spotlight_rating(slide: Tag) -> str:
    for item in slide.select(".scd-item"):
        if "IMDB" in item.get_text():
            return extract_text(item, "strong")
    return ""


def parse_spotlight_item(slide: Tag) -> SpotlightItem:
    return SpotlightItem(
        id=last_path_segment(extract_attr(slide, "a.slide-link", "href")),
        title=extract_text(slide, "h3.film-title a", "h3.film-title"),
        banner=_banner_from_style(extract_attr(slide, "", "style")),
        description=extract_text(slide, "p.sc-desc"),
        rating=_spotlight_rating(slide),
    )


def _cards(section: Tag, selector: str, content_type: ContentType | None) -> list[ListingItem]:
    return [parse_listing_item(el, content_type) for el in section.select(selector)]


def parse_home_page(html: str) -> HomePage:
    """Parse the home page into its sections.

    Unknown section headings are ignored; a missing section is an empty list.
    """
    soup = parse_html(html)

    spotlight = [
        parse_spotlight_item(slide)
        for slide in select_items(
            soup,
            "#slider .swiper-wrapper .swiper-slide:not(.swiper-slide-duplicate)",
            "#slider .swiper-slide:not(.swiper-slide-duplicate)",
        )
    ]

    trending_movies: list[ListingItem] = []
    trending_tv: list[ListingItem] = []
    latest_movies: list[ListingItem] = []
    latest_tv: list[ListingItem] = []
    coming_soon: list[ListingItem] = []

    for section in soup.select("section.block_area_home"):
        heading = extract_text(section, "h2.cat-heading")
        if heading == "Trending":
            trending_movies = _cards(section, "#trending-movies .flw-item", ContentType.MOVIE)
            trending_tv = _cards(section, "#trending-tv .flw-item", ContentType.TV_SERIES)
        elif heading == "Latest Movies":
            latest_movies = _cards(section, ".flw-item", ContentType.MOVIE)
        elif heading == "Latest TV Shows":
            latest_tv = _cards(section, ".flw-item", ContentType.TV_SERIES)
        elif heading == "Coming Soon":
            coming_soon = _cards(section, ".flw-item", None)
        else:
            log.debug("home_section_skipped", heading=heading)

    page = HomePage(
        spotlight=spotlight,
        trending_movies=trending_movies,
        trending_tv_series=trending_tv,
        latest_movies=latest_movies,
        latest_tv_series=latest_tv,
        coming_soon=coming_soon,
    )
    log.debug(
        "home_page_parsed",
        spotlight=len(spotlight),
        trending_movies=len(trending_movies),
        trending_tv_series=len(trending_tv),
        latest_movies=len(latest_movies),
        latest_tv_series=len(latest_tv),
        coming_soon=len(coming_soon),
    )
    return page
