"""Parsers for the site's AJAX fragments (seasons, episodes, servers) and search."""

from __future__ import annotations

import re

from flixscrape.domain.entities import EpisodeItem, ListingItem, SeasonItem, ServerItem

from .html_selectors import (
    extract_attr,
    extract_text,
    first_non_empty,
    parse_html,
    select_items,
)
from .listing import parse_listing_item

_EPISODE_TITLE_RE = re.compile(r"^\s*Eps?\s*(\d+)\s*:\s*(.*)$", re.IGNORECASE)
_SERVER_PREFIX_RE = re.compile(r"^\s*Server\s+", re.IGNORECASE)


def parse_seasons(html: str) -> list[SeasonItem]:
    soup = parse_html(html)
    seasons: list[SeasonItem] = []
    for el in select_items(soup, "a.ss-item", ".dropdown-menu a[data-id]"):
        season_id = extract_attr(el, "", "data-id")
        if season_id:
            seasons.append(SeasonItem(id=season_id, title=extract_text(el, "")))
    return seasons


def parse_episodes(html: str) -> list[EpisodeItem]:
    """Episode links carry ``title="Eps 3: Name"``; number and name are split off."""
    soup = parse_html(html)
    episodes: list[EpisodeItem] = []
    for el in select_items(soup, "a.eps-item", ".nav-item a[data-id]"):
        episode_id = extract_attr(el, "", "data-id")
        if not episode_id:
            continue
        label = first_non_empty(extract_attr(el, "", "title"), extract_text(el, ""))
        match = _EPISODE_TITLE_RE.match(label)
        if match:
            number, title = match.group(1), match.group(2).strip()
        else:
            number, title = "", label
        episodes.append(EpisodeItem(id=episode_id, number=number, title=title))
    return episodes


def parse_servers(html: str) -> list[ServerItem]:
    """Server links use ``data-id`` (episodes) or ``data-linkid`` (movies)."""
    soup = parse_html(html)
    servers: list[ServerItem] = []
    for el in select_items(soup, "a.link-item", ".nav-item a"):
        server_id = first_non_empty(
            extract_attr(el, "", "data-id"),
            extract_attr(el, "", "data-linkid"),
        )
        if not server_id:
            continue
        name = first_non_empty(extract_text(el, "span"), extract_attr(el, "", "title"))
        servers.append(ServerItem(id=server_id, name=_SERVER_PREFIX_RE.sub("", name)))
    return servers


def parse_search_results(html: str) -> list[ListingItem]:
    soup = parse_html(html)
    return [
        parse_listing_item(el)
        for el in select_items(soup, ".film_list-wrap .flw-item", ".flw-item")
    ]


def search_slug(query: str) -> str:
    """``The Dark Knight`` -> ``the-dark-knight`` (site search path format)."""
    return "-".join(query.strip().lower().split())
