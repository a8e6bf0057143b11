"""Flat-file photo store on a local directory."""

import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from photobooth.domain.errors import NotFound, StorageError
from photobooth.domain.photos import Photo
from photobooth.services.codec import sanitize_filename
from photobooth.services.gallery import PhotoStore

_logger = logging.getLogger(__name__)


@dataclass
class FileSystemPhotoStore(PhotoStore):
    """Stores each photo as one file named by its filename."""

    root: Path

    @classmethod
    def create(cls, directory: Path | str) -> "FileSystemPhotoStore":
        """Create a store, making the directory if it does not exist yet."""
        root = Path(directory).resolve()
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create upload directory {root}") from exc
        return cls(root=root)

    def store(self, data: bytes, filename: str) -> None:
        """Write bytes to ``<root>/<filename>``, last write wins."""
        target = self._path_for(filename)
        if target is None:
            raise StorageError(f"Refusing to write unsafe filename {filename!r}")
        try:
            target.write_bytes(data)
        except OSError as exc:
            _logger.exception("Failed to write photo: filename=%s", filename)
            raise StorageError("Failed to save image") from exc

    def list(self) -> list[Photo]:
        """Return every regular file in the store, newest first."""
        photos: list[Photo] = []
        try:
            entries = list(os.scandir(self.root))
        except OSError as exc:
            _logger.exception("Failed to read upload directory: %s", self.root)
            raise StorageError("Failed to read uploads folder") from exc
        for entry in entries:
            try:
                if not entry.is_file():
                    continue
                stat = entry.stat()
            except FileNotFoundError:
                # deleted between scandir and stat
                continue
            created = getattr(stat, "st_birthtime", None) or stat.st_mtime
            photos.append(
                Photo(
                    filename=entry.name,
                    size=stat.st_size,
                    created_at=datetime.fromtimestamp(created, tz=UTC),
                )
            )
        photos.sort(key=lambda photo: photo.filename)
        photos.sort(key=lambda photo: photo.created_at, reverse=True)
        return photos

    def delete(self, filename: str) -> None:
        """Remove a stored photo; the name is reduced to its base name first."""
        target = self._path_for(filename)
        if target is None or not target.is_file():
            raise NotFound("File not found")
        try:
            target.unlink()
        except FileNotFoundError as exc:
            raise NotFound("File not found") from exc
        except OSError as exc:
            _logger.exception("Failed to delete photo: filename=%s", filename)
            raise StorageError("Failed to delete file") from exc

    def _path_for(self, filename: str) -> Path | None:
        safe_name = sanitize_filename(filename)
        if safe_name is None:
            return None
        return self.root / safe_name
