"""JSON presenter: domain entities to the camelCase response shapes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flixscrape.domain.entities import (
    DetailStat,
    EpisodeItem,
    EpisodeSources,
    ExtractionTrace,
    HomePage,
    ListingItem,
    MovieDetails,
    MovieStats,
    SeasonItem,
    ServerItem,
    SpotlightItem,
    VideoSource,
)

NO_IFRAME_ERROR = "No iframe source found"


def present_listing_item(item: ListingItem) -> dict[str, Any]:
    stats: dict[str, str]
    if isinstance(item.stats, MovieStats):
        stats = {
            "year": item.stats.year,
            "duration": item.stats.duration,
            "rating": item.stats.rating,
        }
    else:
        stats = {
            "seasons": item.stats.seasons,
            "episodes": item.stats.episodes,
            "rating": item.stats.rating,
        }

    payload: dict[str, Any] = {
        "id": item.id,
        "title": item.title,
        "poster": item.poster,
        "type": item.content_type.value,
    }
    if item.tmdb_id is not None:
        payload["tmdbId"] = item.tmdb_id
    payload["stats"] = stats
    return payload


def present_listing(items: list[ListingItem]) -> list[dict[str, Any]]:
    return [present_listing_item(item) for item in items]


def present_spotlight_item(item: SpotlightItem) -> dict[str, str]:
    return {
        "id": item.id,
        "title": item.title,
        "banner": item.banner,
        "description": item.description,
        "rating": item.rating,
    }


def present_home_page(home: HomePage) -> dict[str, Any]:
    return {
        "spotlight": [present_spotlight_item(s) for s in home.spotlight],
        "trending": {
            "movies": present_listing(home.trending_movies),
            "tvSeries": present_listing(home.trending_tv_series),
        },
        "latestMovies": present_listing(home.latest_movies),
        "latestTvSeries": present_listing(home.latest_tv_series),
        "comingSoon": present_listing(home.coming_soon),
    }


def _present_stat(stat: DetailStat) -> dict[str, Any]:
    value = list(stat.value) if isinstance(stat.value, list) else stat.value
    return {"name": stat.name, "value": value}


def present_movie_details(details: MovieDetails) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": details.title,
        "description": details.description,
        "poster": details.poster,
        "type": details.content_type.value,
    }
    if details.episode_id:
        payload["episodeId"] = details.episode_id
    payload["stats"] = [_present_stat(s) for s in details.stats]
    payload["related"] = present_listing(details.related)
    return payload


def _present_source(source: VideoSource) -> dict[str, Any]:
    return {"url": source.url, "quality": source.quality, "isM3U8": source.is_m3u8}


def present_trace(trace: ExtractionTrace) -> dict[str, Any]:
    data = asdict(trace)
    return {
        "iframeUrl": data["iframe_url"],
        "iframeStatus": data["iframe_status"],
        "iframeSample": data["iframe_sample"],
        "patternsTried": data["patterns_tried"],
        "candidates": data["candidates"],
        "probes": data["probes"],
        "errors": data["errors"],
    }


def present_episode_sources(result: EpisodeSources) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": result.success,
        "link": result.link,
        "type": result.kind,
        "m3u8": result.manifest_url,
        "sources": [_present_source(s) for s in result.sources],
        "subtitle": [],
        "intro": {"start": 0, "end": 0},
        "outro": {"start": 0, "end": 0},
    }
    if not result.success:
        payload["error"] = NO_IFRAME_ERROR
    if result.server is not None:
        payload["server"] = present_server(result.server)
    if result.episode_id:
        payload["episode"] = {"id": result.episode_id}
    if result.trace is not None:
        payload["debugInfo"] = present_trace(result.trace)
    return payload


def present_season(season: SeasonItem) -> dict[str, str]:
    return {"id": season.id, "title": season.title}


def present_episode(episode: EpisodeItem) -> dict[str, str]:
    return {"id": episode.id, "number": episode.number, "title": episode.title}


def present_server(server: ServerItem) -> dict[str, str]:
    return {"id": server.id, "name": server.name}
