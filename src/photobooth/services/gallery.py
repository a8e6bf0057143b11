"""Gallery operations over a photo store."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol
from urllib.parse import quote

from photobooth.domain.errors import InvalidPayload, NotFound, PayloadTooLarge
from photobooth.domain.photos import Photo, PhotoInfo, UploadResult
from photobooth.services import codec

_logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_SUFFIX = ".png"


class PhotoStore(Protocol):
    """Persistence interface for photo files."""

    def store(self, data: bytes, filename: str) -> None:
        """Write photo bytes under the given name, replacing any previous file."""

    def list(self) -> list[Photo]:
        """Return stored photos, newest first."""

    def delete(self, filename: str) -> None:
        """Delete a stored photo."""


@dataclass
class GalleryService:
    """Application service for listing, creating and removing photos."""

    store: PhotoStore
    public_mount: str = "/uploads"
    max_upload_bytes: int | None = None

    def url_for(self, filename: str) -> str:
        """Return the public url of a stored photo."""
        return f"{self.public_mount.rstrip('/')}/{quote(filename, safe='')}"

    def list_photos(self) -> list[PhotoInfo]:
        """Return every stored photo with its public url."""
        photos = self.store.list()
        return [
            PhotoInfo(
                filename=photo.filename,
                url=self.url_for(photo.filename),
                size=photo.size,
                created_at=photo.created_at,
            )
            for photo in photos
        ]

    def create_from_data_url(
        self, image: object, filename: str | None = None
    ) -> UploadResult:
        """Decode an inline image payload and store it."""
        decoded = codec.decode(image)
        self._check_size(len(decoded.data))
        name = codec.generate_filename(filename, decoded.media_type)
        self.store.store(decoded.data, name)
        _logger.info("Stored photo: filename=%s bytes=%s", name, len(decoded.data))
        return UploadResult(filename=name, url=self.url_for(name))

    def create_from_upload(
        self, data: bytes, original_name: str | None = None
    ) -> UploadResult:
        """Store an uploaded file under a generated name."""
        if not data:
            raise InvalidPayload("No file uploaded (field: photo)")
        self._check_size(len(data))
        safe_name = codec.sanitize_filename(original_name)
        suffix = PurePosixPath(safe_name).suffix if safe_name else ""
        name = codec.unique_filename(suffix or DEFAULT_UPLOAD_SUFFIX)
        self.store.store(data, name)
        _logger.info("Stored upload: filename=%s bytes=%s", name, len(data))
        return UploadResult(filename=name, url=self.url_for(name))

    def remove(self, filename: str) -> None:
        """Delete a stored photo by name."""
        safe_name = codec.sanitize_filename(filename)
        if safe_name is None:
            raise NotFound("File not found")
        self.store.delete(safe_name)
        _logger.info("Deleted photo: filename=%s", safe_name)

    def _check_size(self, size: int) -> None:
        if self.max_upload_bytes is not None and size > self.max_upload_bytes:
            raise PayloadTooLarge(
                f"Image exceeds the {self.max_upload_bytes} byte upload limit"
            )
