"""Catalog endpoints (home page, search)."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from flixscrape.domain.exceptions import MissingRequiredParameter, UpstreamUnavailable
from flixscrape.interfaces.api.errors import HOME_PAGE_ERROR, error_response
from flixscrape.interfaces.api.presenter import present_home_page, present_listing
from flixscrape.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/home")
async def home_page(request: Request) -> JSONResponse:
    """Spotlight, trending, latest and coming-soon listings."""
    state = cast(AppState, request.app.state)
    try:
        home = await state.home_page_uc.execute()
    except UpstreamUnavailable:
        log.warning("home_page_upstream_failed", exc_info=True)
        return error_response(HOME_PAGE_ERROR)
    except Exception:
        log.exception("home_page_failed")
        return error_response(HOME_PAGE_ERROR)

    return JSONResponse(content=present_home_page(home))


@router.get("/search")
async def search(request: Request, q: str | None = None) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        results = await state.browse_uc.search(q)
    except MissingRequiredParameter as exc:
        return error_response(str(exc), 400, with_success=True)
    except UpstreamUnavailable:
        log.warning("search_upstream_failed", query=q, exc_info=True)
        return error_response(HOME_PAGE_ERROR)
    except Exception:
        log.exception("search_failed", query=q)
        return error_response(HOME_PAGE_ERROR)

    return JSONResponse(content={"results": present_listing(results)})
