"""Tests for the gallery service."""

import base64
from dataclasses import dataclass, field

import pytest

from photobooth.adapters.filesystem_photo_store import FileSystemPhotoStore
from photobooth.domain.errors import (
    InvalidPayload,
    NotFound,
    PayloadTooLarge,
    StorageError,
)
from photobooth.domain.photos import Photo
from photobooth.services.gallery import GalleryService, PhotoStore
from tests.conftest import PNG_DATA_URL, PNG_SIGNATURE


@dataclass
class FailingPhotoStore(PhotoStore):
    """Store whose every operation fails with a disk error."""

    calls: list[str] = field(default_factory=list)

    def store(self, data: bytes, filename: str) -> None:
        self.calls.append(filename)
        raise StorageError("Failed to save image")

    def list(self) -> list[Photo]:
        raise StorageError("Failed to read uploads folder")

    def delete(self, filename: str) -> None:
        raise StorageError("Failed to delete file")


@pytest.fixture
def service(tmp_path) -> GalleryService:
    return GalleryService(
        store=FileSystemPhotoStore.create(tmp_path), max_upload_bytes=64
    )


def test_url_is_percent_encoded_under_public_mount() -> None:
    service = GalleryService(store=FailingPhotoStore(), public_mount="/uploads/")

    assert service.url_for("my photo#1.png") == "/uploads/my%20photo%231.png"


def test_list_photos_on_empty_store(service: GalleryService) -> None:
    assert service.list_photos() == []


def test_create_from_data_url_generates_png_name(service: GalleryService) -> None:
    result = service.create_from_data_url(PNG_DATA_URL)

    assert result.filename.endswith(".png")
    assert result.url == f"/uploads/{result.filename}"
    [photo] = service.list_photos()
    assert photo.filename == result.filename
    assert photo.size == len(PNG_SIGNATURE)


def test_create_from_data_url_strips_directories_from_requested_name(
    service: GalleryService, tmp_path
) -> None:
    result = service.create_from_data_url(PNG_DATA_URL, filename="../../evil.png")

    assert result.filename == "evil.png"
    assert (tmp_path / "evil.png").read_bytes() == PNG_SIGNATURE


def test_create_from_data_url_rejects_missing_image(service: GalleryService) -> None:
    with pytest.raises(InvalidPayload):
        service.create_from_data_url(None)


def test_create_from_data_url_enforces_size_limit(service: GalleryService) -> None:
    payload = "data:image/png;base64," + base64.b64encode(b"x" * 65).decode()

    with pytest.raises(PayloadTooLarge):
        service.create_from_data_url(payload)

    assert service.list_photos() == []


def test_create_from_upload_keeps_original_extension(service: GalleryService) -> None:
    jpg = service.create_from_upload(b"jpeg-bytes", "holiday/beach.jpg")
    unnamed = service.create_from_upload(b"png-bytes", None)

    assert jpg.filename.endswith(".jpg")
    assert "beach" not in jpg.filename
    assert unnamed.filename.endswith(".png")


def test_create_from_upload_rejects_empty_file(service: GalleryService) -> None:
    with pytest.raises(InvalidPayload):
        service.create_from_upload(b"", "empty.png")


def test_storage_failure_propagates_after_decode() -> None:
    store = FailingPhotoStore()
    service = GalleryService(store=store)

    with pytest.raises(StorageError):
        service.create_from_data_url(PNG_DATA_URL)

    assert len(store.calls) == 1


def test_remove_deletes_and_reports_missing(service: GalleryService) -> None:
    result = service.create_from_data_url(PNG_DATA_URL)

    service.remove(result.filename)

    assert service.list_photos() == []
    with pytest.raises(NotFound):
        service.remove(result.filename)
    with pytest.raises(NotFound):
        service.remove("..")
