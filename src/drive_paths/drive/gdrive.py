"""Drive facade: item fetches, cached listings and slash-separated path resolution."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import TYPE_CHECKING

from drive_paths.drive.auth import fetch_access_token
from drive_paths.drive.client import DriveClient
from drive_paths.drive.listings import ListingCache, RecursionSpec
from drive_paths.drive.models import FILE_FIELDS, DriveItem, Listing

if TYPE_CHECKING:
    from drive_paths.config import AppConfig

logger = logging.getLogger(__name__)


class GDrive:
    """Resolves paths and lists folders below a configured root folder.

    All listing lookups go through a ListingCache owned by this instance, so
    the cache lives exactly as long as the GDrive does.
    """

    def __init__(self, client: DriveClient, root_folder_id: str) -> None:
        """Initialise the facade.

        Args:
            client: Authenticated DriveClient.
            root_folder_id: Folder that paths are resolved from.
        """
        self._client = client
        self._root_folder_id = root_folder_id
        self._listings = ListingCache(client, root_folder_id)

    @property
    def root_folder_id(self) -> str:
        """ID of the folder that paths are resolved from."""
        return self._root_folder_id

    async def fetch_item(self, item_id: str) -> DriveItem:
        """Fetch an item's metadata directly, bypassing the listing cache."""
        response = await self._client.get_json(f"/files/{item_id}", {"fields": FILE_FIELDS})
        return DriveItem.from_api(response)

    async def download_item(self, item_id: str) -> bytes:
        """Download an item's raw content."""
        return await self._client.get_content(f"/files/{item_id}", {"alt": "media"})

    async def fetch_listings(
        self, parent: str | None = None, page_token: str | None = None
    ) -> Listing:
        return await self._listings.fetch_listings(parent, page_token)

    async def get_listings(
        self,
        parent: str | None = None,
        path_prefix: str | None = None,
        recursive: RecursionSpec = False,
    ) -> Listing:
        return await self._listings.get_listings(parent, path_prefix, recursive)

    async def get_item(self, name: str, parent: str | None = None) -> DriveItem | None:
        """Find a direct child of a folder by its exact name.

        Drive allows several items in one folder to share a name. The first
        one in listing order wins.

        Args:
            name: Bare item name, matched case-sensitively.
            parent: Folder ID; defaults to the root folder.

        Returns:
            The matching item, or None if the folder has no child with that name.
        """
        listing = await self._listings.get_listings(parent)
        return next((item for item in listing.items if item.name == name), None)

    @staticmethod
    def is_folder(item: DriveItem) -> bool:
        return item.is_folder

    async def resolve_path(self, path: str) -> DriveItem | None:
        """Resolve a slash-separated path below the root folder to an item.

        The path is walked one segment at a time, looking each segment up in
        its parent's listing. An empty path returns the root folder's own
        metadata, unmodified.

        Args:
            path: Path such as "photos/2023/trip.jpg".

        Returns:
            The item with its name rewritten to the full path, or None if any
            segment does not exist.
        """
        if path == "":
            return await self.fetch_item(self._root_folder_id)

        parent_id = self._root_folder_id
        chain: list[DriveItem] = []
        for segment in path.split("/"):
            item = await self.get_item(segment, parent_id)
            if item is None:
                logger.info(
                    "[resolve_path] path segment not found; path:%s;segment:%s", path, segment
                )
                return None
            chain.append(item)
            parent_id = item.id

        resolved_name = "/".join(link.name for link in chain).strip("/")
        return chain[-1].with_name(resolved_name)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GDrive:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


async def create_gdrive(config: AppConfig) -> GDrive:
    """Construct a GDrive from application configuration.

    Fetches an access token once, in a worker thread since the credential
    refresh blocks, and wires an authenticated DriveClient into a GDrive.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GDrive instance. Close it with aclose() or ``async with``.

    Raises:
        DriveAuthError: If no access token can be obtained.
    """
    token = await asyncio.to_thread(fetch_access_token, config)
    client = DriveClient(
        token["access_token"],
        base_url=config.api_base_url,
        timeout=config.request_timeout_seconds,
    )
    return GDrive(client, config.root_folder_id)
