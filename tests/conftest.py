"""Shared test fixtures for the flixscrape test suite."""

from __future__ import annotations

import os
from unittest.mock import AsyncMock

import pytest

from flixscrape.domain.entities import (
    ContentType,
    ListingItem,
    MovieStats,
    TvSeriesStats,
)

BASE_URL = "https://flixhq.test"

# ---------------------------------------------------------------------------
# HTML samples (trimmed copies of the site's markup)
# ---------------------------------------------------------------------------

MOVIE_CARD = """\
<div class="flw-item">
  <div class="film-poster">
    <img class="film-poster-img lazyload" data-src="https://img.test/poster/matrix.jpg" src="https://img.test/placeholder.png">
  </div>
  <div class="film-detail">
    <h3 class="film-name"><a href="/movie/watch-the-matrix-19724" title="The Matrix">The Matrix</a></h3>
    <div class="fd-infor">
      <span class="fdi-item">1999</span>
      <span class="dot"></span>
      <span class="fdi-item fdi-duration">136m</span>
      <span class="float-right fdi-type">Movie</span>
    </div>
  </div>
</div>
"""

TV_CARD = """\
<div class="flw-item">
  <div class="film-poster">
    <img class="film-poster-img" src="https://img.test/poster/dark.jpg">
  </div>
  <div class="film-detail">
    <h3 class="film-name"><a href="/tv/watch-dark-39431" title="Dark">Dark</a></h3>
    <div class="fd-infor">
      <span class="fdi-item">SS 3</span>
      <span class="dot"></span>
      <span class="fdi-item">EPS 8</span>
      <span class="float-right fdi-type">TV</span>
    </div>
  </div>
</div>
"""

HOME_HTML = f"""\
<html><body>
<div id="slider">
  <div class="swiper-wrapper">
    <div class="swiper-slide" style="background-image: url(https://img.test/banner/dune.jpg);">
      <div class="slide-caption">
        <h3 class="film-title"><a href="/movie/watch-dune-part-two-105904">Dune: Part Two</a></h3>
        <div class="sc-detail">
          <div class="scd-item">IMDB: <strong>8.6</strong></div>
          <div class="scd-item">Duration: <strong>166m</strong></div>
        </div>
        <p class="sc-desc">Paul Atreides unites with the Fremen.</p>
      </div>
      <a class="slide-link" href="/movie/watch-dune-part-two-105904"></a>
    </div>
    <div class="swiper-slide swiper-slide-duplicate" style="background-image: url(https://img.test/banner/copy.jpg);">
      <a class="slide-link" href="/movie/watch-duplicate-1"></a>
    </div>
  </div>
</div>
<section class="block_area block_area_home">
  <div class="block_area-header"><h2 class="cat-heading">Trending</h2></div>
  <div id="trending-movies">{MOVIE_CARD}</div>
  <div id="trending-tv">{TV_CARD}</div>
</section>
<section class="block_area block_area_home">
  <div class="block_area-header"><h2 class="cat-heading">Latest Movies</h2></div>
  <div class="film_list-wrap">{MOVIE_CARD}</div>
</section>
<section class="block_area block_area_home">
  <div class="block_area-header"><h2 class="cat-heading">Latest TV Shows</h2></div>
  <div class="film_list-wrap">{TV_CARD}</div>
</section>
<section class="block_area block_area_home">
  <div class="block_area-header"><h2 class="cat-heading">Coming Soon</h2></div>
  <div class="film_list-wrap">{MOVIE_CARD}{TV_CARD}</div>
</section>
</body></html>
"""

DETAILS_HTML = """\
<html><body>
<div class="movie-detail">
  <div class="movie-image"><img src="https://img.test/poster/matrix-large.jpg"></div>
  <h3 class="movie-name">The Matrix</h3>
  <div class="is-description">
    <div class="dropdown-menu"><div class="dropdown-text">A hacker learns the truth.</div></div>
  </div>
  <div class="is-sub">
    <div><span class="name">Released:</span><span class="value">1999-03-31</span></div>
    <div><span class="name">Genre:</span><span class="value"><a href="/genre/action">Action</a><a href="/genre/sci-fi">Sci-Fi</a></span></div>
  </div>
</div>
<section class="section-related">
  <div class="item">
    <a href="/movie/watch-the-matrix-reloaded-19725"><img src="https://img.test/poster/reloaded.jpg"></a>
    <h3 class="film-name">The Matrix Reloaded</h3>
    <span class="fdi-item">2003</span>
  </div>
  <div class="item"><a href="#"></a></div>
</section>
<script>
    const movie = {
        id: '19724',
        type: '1',
        name: 'The Matrix',
        episode_id: '19724',
    };
</script>
</body></html>
"""

TV_DETAILS_HTML = """\
<html><body>
<div class="movie-detail"><h3 class="movie-name">Dark</h3></div>
<script>
    const movie = {
        id: '39431',
        type: '2',
        name: 'Dark',
    };
</script>
</body></html>
"""


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


def _make_movie(
    item_id: str = "19724", title: str = "The Matrix", year: str = "1999"
) -> ListingItem:
    return ListingItem(
        id=item_id,
        title=title,
        poster="https://img.test/poster.jpg",
        content_type=ContentType.MOVIE,
        stats=MovieStats(year=year, duration="136m"),
    )


def _make_series(item_id: str = "39431", title: str = "Dark") -> ListingItem:
    return ListingItem(
        id=item_id,
        title=title,
        poster="https://img.test/dark.jpg",
        content_type=ContentType.TV_SERIES,
        stats=TvSeriesStats(seasons="SS 3", episodes="EPS 8"),
    )


@pytest.fixture()
def movie_item() -> ListingItem:
    return _make_movie()


@pytest.fixture()
def series_item() -> ListingItem:
    return _make_series()


@pytest.fixture()
def metadata() -> AsyncMock:
    """MetadataEnricherPort mock (enabled, resolves nothing by default)."""
    mock = AsyncMock()
    mock.enabled = True
    mock.resolve.return_value = None
    return mock


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer TMDB keys and FLIXSCRAPE_* variables out of the tests."""
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    for name in list(os.environ):
        if name.upper().startswith("FLIXSCRAPE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def movie_card_html() -> str:
    return MOVIE_CARD


@pytest.fixture()
def tv_card_html() -> str:
    return TV_CARD


@pytest.fixture()
def home_html() -> str:
    return HOME_HTML


@pytest.fixture()
def details_html() -> str:
    return DETAILS_HTML


@pytest.fixture()
def tv_details_html() -> str:
    return TV_DETAILS_HTML
