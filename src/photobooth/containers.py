"""Dependency container wiring for the application."""

from dataclasses import dataclass

from photobooth.adapters.filesystem_photo_store import FileSystemPhotoStore
from photobooth.config import Settings
from photobooth.services.gallery import GalleryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_store: FileSystemPhotoStore
    gallery_service: GalleryService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    photo_store = FileSystemPhotoStore.create(resolved_settings.upload_dir)
    gallery_service = GalleryService(
        store=photo_store,
        public_mount=resolved_settings.public_mount,
        max_upload_bytes=resolved_settings.max_upload_bytes,
    )
    return AppContainer(
        settings=resolved_settings,
        photo_store=photo_store,
        gallery_service=gallery_service,
    )
