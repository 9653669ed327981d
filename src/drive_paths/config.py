"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "https://www.googleapis.com/drive/v3"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    The root folder ID has no default and will cause a KeyError at startup
    if the corresponding environment variable is missing. Credential sources
    are optional here; the credential provider checks that one of them is set.
    """

    # Required, no default: fail at startup if missing
    root_folder_id: str

    # Credential sources: at least one must be set to obtain a token
    service_account_file: str | None = None
    service_account_json: str | None = None

    # Transport settings: defaults provided, overridable via env
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        GDRIVE_ROOT_FOLDER_ID: ID of the folder that path resolution starts from.

    Optional environment variables (with defaults):
        GDRIVE_SERVICE_ACCOUNT_FILE: Path to a service account key file.
        GDRIVE_SERVICE_ACCOUNT_JSON: Service account key JSON given inline.
        GDRIVE_API_BASE_URL: Drive API base URL (default: https://www.googleapis.com/drive/v3).
        GDRIVE_REQUEST_TIMEOUT_SECONDS: Per-request timeout in seconds (default: 30).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        root_folder_id=os.environ["GDRIVE_ROOT_FOLDER_ID"],
        service_account_file=os.environ.get("GDRIVE_SERVICE_ACCOUNT_FILE") or None,
        service_account_json=os.environ.get("GDRIVE_SERVICE_ACCOUNT_JSON") or None,
        api_base_url=os.environ.get("GDRIVE_API_BASE_URL", DEFAULT_API_BASE_URL),
        request_timeout_seconds=float(
            os.environ.get("GDRIVE_REQUEST_TIMEOUT_SECONDS", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))
        ),
    )
