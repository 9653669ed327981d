"""Google Drive v3 API transport with bearer-token authentication."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from drive_paths.config import DEFAULT_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class DriveAuthError(Exception):
    """Raised when a Drive access token cannot be obtained."""


class DriveApiError(Exception):
    """Raised when the Drive API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Drive API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DriveClient:
    """Authenticated async client for the Drive v3 files endpoints."""

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the underlying httpx client.

        Args:
            access_token: OAuth bearer token sent with every request.
            base_url: Drive API base URL; request paths are relative to it.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, used to stub the network in tests.
        """
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    async def get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """Perform an authenticated GET and decode the JSON body.

        Args:
            path: URL path relative to the base URL (e.g. "/files").
            params: Query parameters; None values are omitted.

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            DriveApiError: If the API returns a non-2xx status code.
        """
        response = await self._get(path, params, accept="application/json")
        return response.json()  # type: ignore[no-any-return]

    async def get_content(self, path: str, params: dict[str, Any]) -> bytes:
        """Perform an authenticated GET and return the raw response bytes.

        Raises:
            DriveApiError: If the API returns a non-2xx status code.
        """
        response = await self._get(path, params, accept="*/*")
        return response.content

    async def _get(self, path: str, params: dict[str, Any], accept: str) -> httpx.Response:
        query = {"supportsAllDrives": True, **params}
        query = {key: value for key, value in query.items() if value is not None}
        response = await self._http.get(path, params=query, headers={"Accept": accept})
        if response.is_error:
            detail = _error_detail(response)
            logger.error(
                "[_get] Drive API request failed; path:%s;status:%d",
                path,
                response.status_code,
            )
            raise DriveApiError(response.status_code, detail)
        return response

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> DriveClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _error_detail(response: httpx.Response) -> str:
    """Extract the error message from a Drive error body, falling back to the reason phrase."""
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return str(message) if message else response.reason_phrase
