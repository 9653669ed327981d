"""In-memory stand-in for the Drive files API, shared by the drive tests."""

from __future__ import annotations

import asyncio
import re
from typing import Any

from drive_paths.drive.client import DriveApiError
from drive_paths.drive.models import FOLDER_MIME_TYPE

_PARENT_QUERY = re.compile(r"^'(?P<parent>[^']*)' in parents and trashed = false$")


def folder(id: str, name: str) -> dict[str, Any]:
    return {"id": id, "name": name, "mimeType": FOLDER_MIME_TYPE}


def file(id: str, name: str, size: str = "10", mime_type: str = "text/plain") -> dict[str, Any]:
    return {"id": id, "name": name, "mimeType": mime_type, "size": size}


class FakeDriveApi:
    """Serves files.list pages and files.get resources from dicts.

    pages maps a folder ID to its list of pages; each page is a list of raw
    file resources. Continuation tokens are the string index of the next page.
    Folders in failing raise DriveApiError(500) when listed.
    """

    def __init__(
        self,
        pages: dict[str, list[list[dict[str, Any]]]] | None = None,
        items: dict[str, dict[str, Any]] | None = None,
        content: dict[str, bytes] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.pages = pages or {}
        self.items = items or {}
        self.content = content or {}
        self.failing = failing or set()
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((path, dict(params)))
        # Yield so concurrent callers genuinely interleave.
        await asyncio.sleep(0)
        if path != "/files":
            item_id = path.removeprefix("/files/")
            if item_id not in self.items:
                raise DriveApiError(404, f"File not found: {item_id}")
            return self.items[item_id]

        match = _PARENT_QUERY.match(params["q"])
        assert match is not None, params["q"]
        parent = match.group("parent")
        if parent in self.failing:
            raise DriveApiError(500, "Backend Error")
        pages = self.pages.get(parent, [[]])
        index = int(params.get("pageToken") or 0)
        body: dict[str, Any] = {"files": pages[index]}
        if index + 1 < len(pages):
            body["nextPageToken"] = str(index + 1)
        return body

    async def get_content(self, path: str, params: dict[str, Any]) -> bytes:
        self.calls.append((path, dict(params)))
        return self.content[path.removeprefix("/files/")]

    async def aclose(self) -> None:
        pass

    def list_calls(self, parent: str) -> list[dict[str, Any]]:
        """Return the params of every files.list request made for a folder."""
        return [
            params
            for path, params in self.calls
            if path == "/files" and params["q"] == f"'{parent}' in parents and trashed = false"
        ]

    def fetch_sequences(self, parent: str) -> int:
        """Count page-fetch sequences for a folder (first-page requests)."""
        return sum(1 for params in self.list_calls(parent) if params.get("pageToken") is None)


def photo_tree() -> FakeDriveApi:
    """root → photos → 2023 → trip.jpg, plus a top-level readme.txt."""
    return FakeDriveApi(
        pages={
            "root": [[folder("photos-id", "photos"), file("readme-id", "readme.txt")]],
            "photos-id": [[folder("2023-id", "2023"), file("cover-id", "cover.png")]],
            "2023-id": [[file("trip-id", "trip.jpg", mime_type="image/jpeg")]],
        },
        items={
            "root": {"id": "root", "name": "Shared", "mimeType": FOLDER_MIME_TYPE},
        },
    )
