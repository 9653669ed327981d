"""Data models for Google Drive items and folder listings."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Drive API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_MIME_TYPE = "mimeType"
FIELD_SIZE = "size"
FIELD_IMAGE_MEDIA_METADATA = "imageMediaMetadata"
FIELD_HEIGHT = "height"
FIELD_WIDTH = "width"
FIELD_ROTATION = "rotation"

# files.list response keys
FIELD_FILES = "files"
FIELD_NEXT_PAGE_TOKEN = "nextPageToken"

# Partial-response field selectors sent with every request
FILE_FIELDS = "id, name, mimeType, size, imageMediaMetadata"
LISTING_FIELDS = f"nextPageToken, files({FILE_FIELDS})"


@dataclass(frozen=True)
class ImageMediaMetadata:
    """Image dimensions and rotation reported for image items."""

    height: int | None = None
    width: int | None = None
    rotation: int | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> ImageMediaMetadata:
        return cls(
            height=raw.get(FIELD_HEIGHT),
            width=raw.get(FIELD_WIDTH),
            rotation=raw.get(FIELD_ROTATION),
        )

    def to_api(self) -> dict[str, Any]:
        return {FIELD_HEIGHT: self.height, FIELD_WIDTH: self.width, FIELD_ROTATION: self.rotation}


@dataclass(frozen=True)
class DriveItem:
    """A single file or folder as returned by the Drive API.

    Attributes:
        id: Stable item ID assigned by Drive.
        name: Item name. Bare as returned by Drive, or path-qualified
            (e.g. "photos/2023/trip.jpg") when produced by a prefixed or
            recursive listing or by path resolution.
        mime_type: MIME type; FOLDER_MIME_TYPE marks a folder.
        size: Size in bytes, string-encoded as Drive sends it. Files only.
        image_media_metadata: Present for image items only.
    """

    id: str
    name: str
    mime_type: str
    size: str | None = None
    image_media_metadata: ImageMediaMetadata | None = None

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE

    def with_name(self, name: str) -> DriveItem:
        """Return a copy of this item carrying a different name."""
        return replace(self, name=name)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> DriveItem:
        """Map a raw Drive API file resource to a DriveItem."""
        image = raw.get(FIELD_IMAGE_MEDIA_METADATA)
        return cls(
            id=raw[FIELD_ID],
            name=raw.get(FIELD_NAME, ""),
            mime_type=raw.get(FIELD_MIME_TYPE, ""),
            size=raw.get(FIELD_SIZE),
            image_media_metadata=ImageMediaMetadata.from_api(image) if image else None,
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the Drive API field names, omitting absent fields."""
        data: dict[str, Any] = {
            FIELD_ID: self.id,
            FIELD_NAME: self.name,
            FIELD_MIME_TYPE: self.mime_type,
        }
        if self.size is not None:
            data[FIELD_SIZE] = self.size
        if self.image_media_metadata is not None:
            data[FIELD_IMAGE_MEDIA_METADATA] = self.image_media_metadata.to_api()
        return data


@dataclass
class Listing:
    """One folder's contents: a page, or all pages concatenated.

    Items keep the order Drive returned them in, followed by anything appended
    by recursive expansion. next_page_token is set while more pages remain.
    """

    items: list[DriveItem] = field(default_factory=list)
    next_page_token: str | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Listing:
        return cls(
            items=[DriveItem.from_api(f) for f in raw.get(FIELD_FILES, [])],
            next_page_token=raw.get(FIELD_NEXT_PAGE_TOKEN) or None,
        )
