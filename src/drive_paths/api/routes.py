"""API endpoints for path resolution and folder listing."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from drive_paths import __version__
from drive_paths.config import load_config
from drive_paths.drive.gdrive import GDrive, create_gdrive
from drive_paths.drive.listings import RecursionSpec

logger = logging.getLogger(__name__)

router = APIRouter(tags=["drive"])


async def get_drive() -> AsyncIterator[GDrive]:
    """Provide a request-scoped GDrive, so each request starts with an empty cache."""
    config = load_config()
    async with await create_gdrive(config) as drive:
        yield drive


def parse_recursive(value: str | None) -> RecursionSpec:
    """Parse the ``recursive`` query parameter.

    Accepts "true"/"false" (case-insensitive) or a non-negative integer depth.
    A missing or empty value means no recursion.

    Raises:
        ValueError: If the value is neither a boolean nor a non-negative integer.
    """
    if value is None or value == "":
        return False
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    depth = int(value)
    if depth < 0:
        raise ValueError(f"recursive must be >= 0, got {depth}")
    return depth


def _not_found(path: str) -> HTTPException:
    return HTTPException(status_code=404, detail={"status": "not_found", "path": path})


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return service status and version."""
    logger.info("[health_check] health check requested")
    return {"status": "ok", "version": __version__}


@router.get("/items/{path:path}", response_model=None)
async def get_item(
    path: str,
    download: bool = Query(False, description="Return the item's raw content"),
    drive: GDrive = Depends(get_drive),
) -> dict[str, Any] | Response:
    """
    Resolve a path below the root folder and return its metadata.

    With ``download=true`` the item's raw content is returned instead, using
    the item's MIME type as the response content type.
    """
    path = path.strip("/")
    logger.info("[get_item] item requested; path:%s;download:%s", path, download)

    item = await drive.resolve_path(path)
    if item is None:
        raise _not_found(path)
    if download:
        content = await drive.download_item(item.id)
        return Response(content=content, media_type=item.mime_type)
    return item.to_api()


@router.get("/listings/{path:path}")
async def get_listing(
    path: str,
    recursive: str | None = Query(None, description="true, false or a folder depth >= 0"),
    drive: GDrive = Depends(get_drive),
) -> dict[str, list[dict[str, Any]]]:
    """
    List a folder by path, optionally expanding subfolders.

    Names are qualified with the folder's resolved path; listing the root
    (empty path) returns bare names.
    """
    path = path.strip("/")
    try:
        depth = parse_recursive(recursive)
    except ValueError:
        raise HTTPException(
            status_code=400, detail="recursive must be true, false or a depth >= 0"
        ) from None
    logger.info("[get_listing] listing requested; path:%s;recursive:%s", path, depth)

    if path == "":
        listing = await drive.get_listings(recursive=depth)
    else:
        folder = await drive.resolve_path(path)
        if folder is None or not drive.is_folder(folder):
            raise _not_found(path)
        listing = await drive.get_listings(folder.id, folder.name, depth)

    logger.info("[get_listing] listing complete; path:%s;item_count:%d", path, len(listing.items))
    return {"items": [item.to_api() for item in listing.items]}
