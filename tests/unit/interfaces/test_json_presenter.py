"""Tests for the camelCase JSON presenter."""

from __future__ import annotations

from dataclasses import replace

from flixscrape.domain.entities import (
    ContentType,
    DetailStat,
    EpisodeSources,
    ExtractionTrace,
    HomePage,
    ListingItem,
    MovieDetails,
    ServerItem,
    SpotlightItem,
    VideoSource,
)
from flixscrape.interfaces.api.presenter import (
    NO_IFRAME_ERROR,
    present_episode_sources,
    present_home_page,
    present_listing_item,
    present_movie_details,
)

_EMBED = "https://embed.test/e/abc123"
_MANIFEST = "https://cdn.test/hls/master.m3u8"


class TestListingItem:
    def test_movie_shape(self, movie_item: ListingItem) -> None:
        assert present_listing_item(movie_item) == {
            "id": "19724",
            "title": "The Matrix",
            "poster": "https://img.test/poster.jpg",
            "type": "movie",
            "stats": {"year": "1999", "duration": "136m", "rating": ""},
        }

    def test_series_shape_with_tmdb_id(self, series_item: ListingItem) -> None:
        payload = present_listing_item(replace(series_item, tmdb_id=70523))

        assert payload["type"] == "tvSeries"
        assert payload["tmdbId"] == 70523
        assert payload["stats"] == {"seasons": "SS 3", "episodes": "EPS 8", "rating": ""}


class TestHomePage:
    def test_sections(self, movie_item: ListingItem, series_item: ListingItem) -> None:
        home = HomePage(
            spotlight=[SpotlightItem(id="105904", title="Dune", rating="8.6")],
            trending_movies=[movie_item],
            trending_tv_series=[series_item],
        )

        payload = present_home_page(home)

        assert list(payload) == [
            "spotlight",
            "trending",
            "latestMovies",
            "latestTvSeries",
            "comingSoon",
        ]
        assert payload["spotlight"][0]["rating"] == "8.6"
        assert payload["trending"]["movies"][0]["id"] == "19724"
        assert payload["trending"]["tvSeries"][0]["id"] == "39431"
        assert payload["comingSoon"] == []


class TestMovieDetails:
    def test_movie_with_episode_id(self, movie_item: ListingItem) -> None:
        details = MovieDetails(
            title="The Matrix",
            content_type=ContentType.MOVIE,
            episode_id="19724",
            stats=[
                DetailStat(name="Released:", value="1999-03-31"),
                DetailStat(name="Genre:", value=["Action", "Sci-Fi"]),
            ],
            related=[movie_item],
        )

        payload = present_movie_details(details)

        assert payload["type"] == "movie"
        assert payload["episodeId"] == "19724"
        assert payload["stats"][1] == {"name": "Genre:", "value": ["Action", "Sci-Fi"]}
        assert payload["related"][0]["title"] == "The Matrix"

    def test_series_has_no_episode_id(self) -> None:
        payload = present_movie_details(MovieDetails(content_type=ContentType.TV_SERIES))
        assert "episodeId" not in payload
        assert payload["type"] == "tvSeries"


class TestEpisodeSources:
    def test_found_manifest(self) -> None:
        result = EpisodeSources(
            server_id="9001",
            link=_EMBED,
            kind="iframe",
            manifest_url=_MANIFEST,
            sources=[VideoSource(url=_MANIFEST, quality="auto")],
        )

        payload = present_episode_sources(result)

        assert payload == {
            "success": True,
            "link": _EMBED,
            "type": "iframe",
            "m3u8": _MANIFEST,
            "sources": [{"url": _MANIFEST, "quality": "auto", "isM3U8": True}],
            "subtitle": [],
            "intro": {"start": 0, "end": 0},
            "outro": {"start": 0, "end": 0},
        }

    def test_null_manifest_still_success(self) -> None:
        result = EpisodeSources(server_id="9001", link=_EMBED, kind="iframe", manifest_url=None)

        payload = present_episode_sources(result)

        assert payload["success"] is True
        assert payload["m3u8"] is None
        assert "error" not in payload

    def test_non_iframe_has_error(self) -> None:
        result = EpisodeSources(server_id="9001", link=None, kind="direct", manifest_url=None)

        payload = present_episode_sources(result)

        assert payload["success"] is False
        assert payload["error"] == NO_IFRAME_ERROR

    def test_server_episode_and_debug_info(self) -> None:
        trace = ExtractionTrace(iframe_url=_EMBED, iframe_status=200, patterns_tried=["base64"])
        result = EpisodeSources(
            server_id="9002",
            link=_EMBED,
            kind="iframe",
            manifest_url=None,
            server=ServerItem(id="9002", name="Vidcloud"),
            episode_id="5001",
            trace=trace,
        )

        payload = present_episode_sources(result)

        assert payload["server"] == {"id": "9002", "name": "Vidcloud"}
        assert payload["episode"] == {"id": "5001"}
        assert payload["debugInfo"]["iframeUrl"] == _EMBED
        assert payload["debugInfo"]["iframeStatus"] == 200
        assert payload["debugInfo"]["patternsTried"] == ["base64"]
        assert payload["debugInfo"]["probes"] == []
