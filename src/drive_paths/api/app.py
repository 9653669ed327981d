"""FastAPI application exposing the drive endpoints under /api."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from drive_paths import __version__
from drive_paths.api.routes import router
from drive_paths.drive.client import DriveApiError

logger = logging.getLogger(__name__)


async def _drive_api_error(request: Request, exc: DriveApiError) -> JSONResponse:
    logger.error(
        "[drive_api_error] Drive API request failed; path:%s;status:%d",
        request.url.path,
        exc.status_code,
        exc_info=exc,
    )
    body = {"status": "error", "message": exc.message, "upstream_status": exc.status_code}
    return JSONResponse(status_code=502, content=body)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[unhandled_error] request failed; path:%s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500, content={"status": "error", "message": "Internal server error"}
    )


def create_app() -> FastAPI:
    """Build the application with the drive router and error handlers installed."""
    app = FastAPI(title="drive-paths", version=__version__)
    app.include_router(router, prefix="/api")
    app.add_exception_handler(DriveApiError, _drive_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)
    return app


app = create_app()
