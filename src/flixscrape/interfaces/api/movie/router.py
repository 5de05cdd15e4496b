"""Movie / TV series endpoints (details, sources, navigation)."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from flixscrape.domain.exceptions import MissingRequiredParameter, UpstreamUnavailable
from flixscrape.interfaces.api.errors import (
    MOVIE_DETAILS_ERROR,
    NAVIGATION_ERROR,
    SOURCES_ERROR,
    error_response,
)
from flixscrape.interfaces.api.presenter import (
    present_episode,
    present_episode_sources,
    present_movie_details,
    present_season,
    present_server,
)
from flixscrape.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/movie", tags=["movie"])


@router.get("/{movie_id}")
async def movie_details(request: Request, movie_id: str) -> JSONResponse:
    """Detail page of a movie or TV series. Never returns a partial record."""
    state = cast(AppState, request.app.state)
    try:
        details = await state.movie_details_uc.execute(movie_id)
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning("movie_details_upstream_failed", movie_id=movie_id, exc_info=True)
        return error_response(MOVIE_DETAILS_ERROR)
    except Exception:
        log.exception("movie_details_failed", movie_id=movie_id)
        return error_response(MOVIE_DETAILS_ERROR)

    return JSONResponse(content=present_movie_details(details))


@router.get("/{movie_id}/sources")
async def movie_sources(
    request: Request,
    movie_id: str,
    serverId: str | None = None,  # noqa: N803
    episodeId: str | None = None,  # noqa: N803
    debug: bool = False,
) -> JSONResponse:
    """Resolve a server to its manifest URL (``m3u8`` is null when none is found)."""
    state = cast(AppState, request.app.state)
    try:
        result = await state.episode_sources_uc.execute(
            movie_id, serverId, episodeId, debug=debug
        )
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning(
            "movie_sources_upstream_failed",
            movie_id=movie_id,
            server_id=serverId,
            exc_info=True,
        )
        return error_response(SOURCES_ERROR, with_success=True)
    except Exception:
        log.exception("movie_sources_failed", movie_id=movie_id, server_id=serverId)
        return error_response(SOURCES_ERROR, with_success=True)

    return JSONResponse(content=present_episode_sources(result))


@router.get("/{movie_id}/seasons")
async def movie_seasons(request: Request, movie_id: str) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        seasons = await state.browse_uc.seasons(movie_id)
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning("movie_seasons_upstream_failed", movie_id=movie_id, exc_info=True)
        return error_response(NAVIGATION_ERROR)

    return JSONResponse(content={"seasons": [present_season(s) for s in seasons]})


@router.get("/{movie_id}/episodes")
async def movie_episodes(
    request: Request,
    movie_id: str,
    seasonId: str | None = None,  # noqa: N803
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        episodes = await state.browse_uc.episodes(seasonId)
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning(
            "movie_episodes_upstream_failed",
            movie_id=movie_id,
            season_id=seasonId,
            exc_info=True,
        )
        return error_response(NAVIGATION_ERROR)

    return JSONResponse(content={"episodes": [present_episode(e) for e in episodes]})


@router.get("/{movie_id}/servers")
async def movie_servers(
    request: Request,
    movie_id: str,
    episodeId: str | None = None,  # noqa: N803
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        servers = await state.browse_uc.servers(movie_id, episodeId)
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning(
            "movie_servers_upstream_failed",
            movie_id=movie_id,
            episode_id=episodeId,
            exc_info=True,
        )
        return error_response(NAVIGATION_ERROR)

    return JSONResponse(content={"servers": [present_server(s) for s in servers]})
