"""Paginated folder listings with a per-folder cache and recursive expansion."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from drive_paths.drive.models import LISTING_FIELDS, DriveItem, Listing

if TYPE_CHECKING:
    from drive_paths.drive.client import DriveClient

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000

# False or 0: no expansion. True: unbounded. n > 0: expand n folder levels.
RecursionSpec = bool | int


def parents_query(folder_id: str) -> str:
    """Build the files.list filter for the non-trashed children of a folder."""
    return f"'{folder_id}' in parents and trashed = false"


def _validate_recursion(recursive: RecursionSpec) -> RecursionSpec:
    if isinstance(recursive, bool):
        return recursive
    if recursive < 0:
        raise ValueError(f"recursion depth must be >= 0, got {recursive}")
    return recursive


def _should_expand(recursive: RecursionSpec) -> bool:
    return recursive is True or (recursive is not False and recursive > 0)


def _next_level(recursive: RecursionSpec) -> RecursionSpec:
    # Unbounded stays unbounded.
    return True if recursive is True else recursive - 1


def _qualify(item: DriveItem, path_prefix: str | None) -> DriveItem:
    if path_prefix is None:
        return item
    return item.with_name(f"{path_prefix}/{item.name}")


class ListingCache:
    """Fetches folder listings and memoizes them by folder ID.

    Each folder's pages are fetched at most once for the lifetime of the
    instance; there is no invalidation, so listings are a snapshot taken on
    first access. The cache holds the base listing with the names Drive
    returned. Path prefixes and recursive expansion are applied to a fresh
    Listing on every call, so a cached listing is never mutated after it has
    been assembled.
    """

    def __init__(self, client: DriveClient, root_folder_id: str) -> None:
        """Initialise an empty cache.

        Args:
            client: Authenticated DriveClient used for files.list requests.
            root_folder_id: Folder listed when no parent is given.
        """
        self._client = client
        self._root_folder_id = root_folder_id
        self._listings: dict[str, asyncio.Task[Listing]] = {}
        self._waiters: dict[asyncio.Task[Listing], int] = {}

    def is_cached(self, folder_id: str) -> bool:
        """Return True if the folder's base listing has been fetched successfully."""
        task = self._listings.get(folder_id)
        if task is None or not task.done() or task.cancelled():
            return False
        return task.exception() is None

    async def fetch_listings(
        self, parent: str | None = None, page_token: str | None = None
    ) -> Listing:
        """Fetch a single page of a folder's children. Not cached.

        Args:
            parent: Folder ID; defaults to the root folder.
            page_token: Continuation token from a previous page, if any.

        Returns:
            The page as a Listing, with next_page_token set if more pages remain.
        """
        folder_id = self._root_folder_id if parent is None else parent
        params = {
            "fields": LISTING_FIELDS,
            "includeItemsFromAllDrives": True,
            "pageSize": PAGE_SIZE,
            "pageToken": page_token,
            "q": parents_query(folder_id),
        }
        response = await self._client.get_json("/files", params)
        return Listing.from_api(response)

    async def fetch_all_pages(self, folder_id: str) -> Listing:
        """Fetch every page of a folder's children, one request at a time.

        Each request depends on the previous page's continuation token, so
        pages are fetched strictly in sequence. There is no iteration cap: a
        server that never stops returning tokens keeps this loop running.
        """
        listing = await self.fetch_listings(folder_id)
        pages = 1
        while listing.next_page_token is not None:
            page = await self.fetch_listings(folder_id, listing.next_page_token)
            listing.items.extend(page.items)
            listing.next_page_token = page.next_page_token
            pages += 1
            logger.debug(
                "[fetch_all_pages] fetched page; folder_id:%s;page:%d;item_count:%d",
                folder_id,
                pages,
                len(page.items),
            )
        logger.info(
            "[fetch_all_pages] listing complete; folder_id:%s;page_count:%d;item_count:%d",
            folder_id,
            pages,
            len(listing.items),
        )
        return listing

    async def get_listings(
        self,
        parent: str | None = None,
        path_prefix: str | None = None,
        recursive: RecursionSpec = False,
    ) -> Listing:
        """Return a folder's listing, fetching it on first access.

        Args:
            parent: Folder ID; defaults to the root folder.
            path_prefix: Path of the folder itself. When given, every returned
                name is qualified as "<path_prefix>/<name>". Root-level
                listings pass None and keep bare names.
            recursive: False or 0 lists one level, True expands every
                subfolder without limit, n > 0 expands n levels.

        Returns:
            A new Listing. Items from expanded subfolders follow the folder's
            own items, carrying their full path-qualified names.

        Raises:
            ValueError: If recursive is a negative integer.
            DriveApiError: If any request fails, including one made while
                expanding a single subfolder.
        """
        recursive = _validate_recursion(recursive)
        folder_id = self._root_folder_id if parent is None else parent
        base = await self._get_or_fetch(folder_id)
        items = [_qualify(item, path_prefix) for item in base.items]
        if _should_expand(recursive):
            items.extend(await self._expand(items, _next_level(recursive)))
        return Listing(items=items)

    async def _get_or_fetch(self, folder_id: str) -> Listing:
        """Return the cached base listing, sharing one in-flight fetch per folder.

        When the last caller waiting on an unfinished fetch is cancelled, the
        fetch is cancelled too and dropped from the cache.
        """
        task = self._listings.get(folder_id)
        if task is None or task.cancelled():
            logger.info("[_get_or_fetch] cache miss; folder_id:%s", folder_id)
            task = asyncio.create_task(self.fetch_all_pages(folder_id))
            self._listings[folder_id] = task
        else:
            logger.debug("[_get_or_fetch] cache hit; folder_id:%s", folder_id)
        self._waiters[task] = self._waiters.get(task, 0) + 1
        try:
            # Cancelling one waiter leaves the fetch running for the others.
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._waiters[task] == 1 and not task.done():
                logger.info("[_get_or_fetch] fetch abandoned; folder_id:%s", folder_id)
                task.cancel()
                self._evict(folder_id, task)
            raise
        except Exception:
            # Evict failed fetches so a later call can try again.
            self._evict(folder_id, task)
            raise
        finally:
            self._waiters[task] -= 1
            if self._waiters[task] == 0:
                del self._waiters[task]

    def _evict(self, folder_id: str, task: asyncio.Task[Listing]) -> None:
        if self._listings.get(folder_id) is task:
            del self._listings[folder_id]

    async def _expand(self, items: list[DriveItem], recursive: RecursionSpec) -> list[DriveItem]:
        """List every folder in items concurrently and flatten the results.

        The first failing subfolder fails the whole expansion. Sibling
        expansions still running at that point are cancelled and awaited
        before the error propagates.
        """
        folders = [item for item in items if item.is_folder]
        if not folders:
            return []
        tasks = [
            asyncio.ensure_future(self.get_listings(folder.id, folder.name, recursive))
            for folder in folders
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [item for listing in results for item in listing.items]
