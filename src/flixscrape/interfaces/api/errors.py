"""Error responses shared by the routers."""

from __future__ import annotations

from fastapi.responses import JSONResponse

HOME_PAGE_ERROR = "Failed to scrape data from the source."
MOVIE_DETAILS_ERROR = "Failed to fetch movie details"
SOURCES_ERROR = "Failed to fetch video sources"
NAVIGATION_ERROR = "Failed to fetch data from the source"


def error_response(message: str, status_code: int = 500, *, with_success: bool = False) -> JSONResponse:
    content: dict[str, object] = {"error": message}
    if with_success:
        content = {"success": False, **content}
    return JSONResponse(content=content, status_code=status_code)
