"""Detail page parser (``/watch-movie/watch-{id}``)."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from flixscrape.domain.entities import (
    ContentType,
    DetailStat,
    ListingItem,
    MovieDetails,
    MovieStats,
)

from .html_selectors import (
    extract_all_texts,
    extract_attr,
    extract_text,
    first_non_empty,
    last_path_segment,
    parse_html,
)

_MOVIE_MARKER = "const movie = {"

_POSTER_SELECTORS = (
    ".movie-detail .movie-image img",
    ".movie-poster img",
    ".film-poster img",
)


def parse_content_marker(html: str) -> tuple[ContentType, str | None]:
    """Read the content type and movie episode id from the inline script.

    The page declares a ``const movie = {`` object literal.  Two lines
    below it ``type: '1'`` marks a movie; four lines below it the first
    single-quoted value is the episode id of the movie.  The last
    declaration in the page wins.  No declaration means UNKNOWN.
    """
    lines = html.split("\n")
    for i in range(len(lines) - 1, -1, -1):
        if _MOVIE_MARKER not in lines[i]:
            continue
        type_line = lines[i + 2] if i + 2 < len(lines) else ""
        if "type: '1'" not in type_line:
            return ContentType.TV_SERIES, None
        id_line = lines[i + 4] if i + 4 < len(lines) else ""
        parts = id_line.split("'")
        episode_id = parts[1] if len(parts) > 1 and parts[1] else None
        return ContentType.MOVIE, episode_id
    return ContentType.UNKNOWN, None


def _poster(soup: BeautifulSoup) -> str:
    for sel in _POSTER_SELECTORS:
        value = first_non_empty(
            extract_attr(soup, sel, "src"),
            extract_attr(soup, sel, "data-src"),
        )
        if value:
            return value
    return ""


def _stats(soup: BeautifulSoup) -> list[DetailStat]:
    stats: list[DetailStat] = []
    for row in soup.select(".movie-detail .is-sub > div"):
        name = extract_text(row, ".name")
        anchors = extract_all_texts(row, ".value a")
        value: str | list[str] = anchors if anchors else extract_text(row, ".value")
        stats.append(DetailStat(name=name, value=value))
    return stats


def _related_item(el: Tag) -> ListingItem:
    href = first_non_empty(
        extract_attr(el, "a", "href"),
        extract_attr(el, ".film-poster-ahref", "href"),
    )
    return ListingItem(
        id=last_path_segment(href),
        title=extract_text(el, ".film-name", ".movie-name", "h3", ".title"),
        poster=first_non_empty(
            extract_attr(el, "img", "src"),
            extract_attr(el, "img", "data-src"),
            extract_attr(el, ".film-poster-img", "data-src"),
        ),
        content_type=ContentType.MOVIE,
        stats=MovieStats(
            year=extract_text(el, ".fdi-item", ".year"),
            duration=extract_text(el, ".fdi-duration", ".duration"),
            rating=extract_text(el, ".fdi-rating", ".rating", ".imdb"),
        ),
    )


def parse_movie_details(html: str) -> MovieDetails:
    soup = parse_html(html)

    related: list[ListingItem] = []
    related_elements = soup.select(".section-related .item") or soup.select(
        ".section-related .flw-item"
    )
    for el in related_elements:
        item = _related_item(el)
        # entries without id or title are navigation chrome, not items
        if item.id and item.title:
            related.append(item)

    content_type, episode_id = parse_content_marker(html)

    return MovieDetails(
        title=extract_text(soup, ".movie-detail h3.movie-name"),
        description=extract_text(
            soup,
            ".movie-detail .is-description .dropdown-menu .dropdown-text",
            ".movie-detail .description",
        ),
        poster=_poster(soup),
        content_type=content_type,
        episode_id=episode_id,
        stats=_stats(soup),
        related=related,
    )
