"""Path resolution and cached folder listings over the Google Drive v3 API."""

__version__ = "0.1.0"
