"""Service account credential provider for the Drive API."""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from drive_paths.drive.client import DriveAuthError

if TYPE_CHECKING:
    from drive_paths.config import AppConfig

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]


def _load_credentials(config: AppConfig) -> service_account.Credentials:
    """Load service account credentials, preferring the key file over inline JSON.

    Raises:
        DriveAuthError: If neither credential source is configured or usable.
    """
    if config.service_account_file and os.path.exists(config.service_account_file):
        return service_account.Credentials.from_service_account_file(
            config.service_account_file, scopes=DRIVE_SCOPES
        )
    if config.service_account_json:
        try:
            info = json.loads(config.service_account_json)
        except ValueError as exc:
            raise DriveAuthError("GDRIVE_SERVICE_ACCOUNT_JSON is not valid JSON") from exc
        return service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)
    raise DriveAuthError(
        "Drive credentials not configured. "
        "Set GDRIVE_SERVICE_ACCOUNT_FILE or GDRIVE_SERVICE_ACCOUNT_JSON"
    )


def fetch_access_token(config: AppConfig) -> dict[str, str]:
    """Obtain a bearer token for the Drive API.

    This performs blocking network I/O; async callers run it in a thread.

    Args:
        config: Application configuration instance.

    Returns:
        A dict with a single "access_token" key.

    Raises:
        DriveAuthError: If credentials are missing or the token refresh fails.
    """
    credentials = _load_credentials(config)
    try:
        credentials.refresh(Request())
    except google.auth.exceptions.RefreshError as exc:
        logger.error("[fetch_access_token] token refresh failed; error:%s", exc)
        raise DriveAuthError(f"Token acquisition failed: {exc}") from exc
    if not credentials.token:
        raise DriveAuthError("Token acquisition failed: no access token returned")
    return {"access_token": str(credentials.token)}
