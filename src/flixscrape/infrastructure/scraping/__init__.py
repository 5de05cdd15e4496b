"""HTML parsers for the scraped site."""

from .home_page import parse_home_page
from .listing import classify_listing, parse_listing_item
from .movie_details import parse_content_marker, parse_movie_details
from .navigation import (
    parse_episodes,
    parse_search_results,
    parse_seasons,
    parse_servers,
    search_slug,
)

__all__ = [
    "classify_listing",
    "parse_content_marker",
    "parse_episodes",
    "parse_home_page",
    "parse_listing_item",
    "parse_movie_details",
    "parse_search_results",
    "parse_seasons",
    "parse_servers",
    "search_slug",
]
