"""Unit tests for config.py: AppConfig and load_config()."""

import os
from unittest.mock import patch

import pytest

from drive_paths.config import AppConfig, load_config

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Minimal set of required environment variables for load_config()
_REQUIRED_ENV = {
    "GDRIVE_ROOT_FOLDER_ID": "root-folder-123",
}

_OPTIONAL_KEYS = (
    "GDRIVE_SERVICE_ACCOUNT_FILE",
    "GDRIVE_SERVICE_ACCOUNT_JSON",
    "GDRIVE_API_BASE_URL",
    "GDRIVE_REQUEST_TIMEOUT_SECONDS",
)


def _clean_env() -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if k not in _OPTIONAL_KEYS}
    env.pop("GDRIVE_ROOT_FOLDER_ID", None)
    return env


# ---------------------------------------------------------------------------
# AppConfig tests
# ---------------------------------------------------------------------------


class TestAppConfig:
    def test_root_folder_id_is_required(self) -> None:
        config = AppConfig(root_folder_id="root")
        assert config.root_folder_id == "root"

    def test_transport_defaults(self) -> None:
        config = AppConfig(root_folder_id="root")
        assert config.api_base_url == "https://www.googleapis.com/drive/v3"
        assert config.request_timeout_seconds == 30.0
        assert config.service_account_file is None
        assert config.service_account_json is None

    def test_is_frozen(self) -> None:
        config = AppConfig(root_folder_id="root")
        with pytest.raises(AttributeError):
            config.root_folder_id = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_reads_required_values(self) -> None:
        with patch.dict(os.environ, {**_clean_env(), **_REQUIRED_ENV}, clear=True):
            config = load_config()
        assert config.root_folder_id == "root-folder-123"
        assert config.api_base_url == "https://www.googleapis.com/drive/v3"
        assert config.request_timeout_seconds == 30.0

    def test_missing_root_folder_raises_key_error(self) -> None:
        with patch.dict(os.environ, _clean_env(), clear=True), pytest.raises(KeyError):
            load_config()

    def test_reads_optional_overrides(self) -> None:
        env = {
            **_clean_env(),
            **_REQUIRED_ENV,
            "GDRIVE_SERVICE_ACCOUNT_FILE": "/secrets/key.json",
            "GDRIVE_SERVICE_ACCOUNT_JSON": '{"type": "service_account"}',
            "GDRIVE_API_BASE_URL": "http://localhost:8080/drive/v3",
            "GDRIVE_REQUEST_TIMEOUT_SECONDS": "12.5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.service_account_file == "/secrets/key.json"
        assert config.service_account_json == '{"type": "service_account"}'
        assert config.api_base_url == "http://localhost:8080/drive/v3"
        assert config.request_timeout_seconds == 12.5

    def test_empty_credential_values_treated_as_unset(self) -> None:
        env = {
            **_clean_env(),
            **_REQUIRED_ENV,
            "GDRIVE_SERVICE_ACCOUNT_FILE": "",
            "GDRIVE_SERVICE_ACCOUNT_JSON": "",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.service_account_file is None
        assert config.service_account_json is None
