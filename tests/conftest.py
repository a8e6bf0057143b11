"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photobooth.api.app import create_app
from photobooth.client.camera import CameraError, CameraStream, Facing
from photobooth.client.gallery_client import GalleryClient, GalleryClientError
from photobooth.client.renderer import GalleryView, PhotoCard
from photobooth.config import Settings
from photobooth.containers import AppContainer, build_container
from photobooth.domain.photos import PhotoInfo, UploadResult

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


@dataclass
class FakeStream(CameraStream):
    """Camera stream that returns a fixed still."""

    native_width: int | None = 640
    native_height: int | None = 480
    still: bytes = PNG_SIGNATURE
    fail: bool = False
    snapshots: list[tuple[int, int]] = field(default_factory=list)
    stopped: bool = False

    @property
    def width(self) -> int | None:
        return self.native_width

    @property
    def height(self) -> int | None:
        return self.native_height

    async def snapshot(self, width: int, height: int) -> bytes:
        self.snapshots.append((width, height))
        if self.fail:
            raise CameraError("sensor error")
        return self.still

    async def stop(self) -> None:
        self.stopped = True


@dataclass
class FakeCamera:
    """Camera that hands out fake streams and records every open."""

    fail: bool = False
    delay: float = 0.0
    native_width: int | None = 640
    native_height: int | None = 480
    opened: list[Facing] = field(default_factory=list)
    streams: list[FakeStream] = field(default_factory=list)

    async def open(self, facing: Facing) -> FakeStream:
        self.opened.append(facing)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise CameraError("permission denied")
        stream = FakeStream(
            native_width=self.native_width, native_height=self.native_height
        )
        self.streams.append(stream)
        return stream


@dataclass
class FakeGalleryClient(GalleryClient):
    """In-memory gallery client."""

    photos: list[PhotoInfo] = field(default_factory=list)
    uploads: list[tuple[str, str | None]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    list_calls: int = 0
    fail_list: bool = False
    fail_upload: bool = False
    fail_delete: bool = False

    async def list_photos(self) -> list[PhotoInfo]:
        self.list_calls += 1
        if self.fail_list:
            raise GalleryClientError("Failed to load gallery", status_code=500)
        return list(self.photos)

    async def upload_data_url(
        self, image: str, filename: str | None = None
    ) -> UploadResult:
        self.uploads.append((image, filename))
        if self.fail_upload:
            raise GalleryClientError("Failed to save image", status_code=500)
        name = filename or f"1700000000000-abc{len(self.uploads):03d}.png"
        self.photos.insert(0, make_photo(name))
        return UploadResult(filename=name, url=f"/uploads/{name}")

    async def delete_photo(self, filename: str) -> None:
        if self.fail_delete:
            raise GalleryClientError("File not found", status_code=404)
        self.deleted.append(filename)
        self.photos = [photo for photo in self.photos if photo.filename != filename]


@dataclass
class RecordingView(GalleryView):
    """Gallery view that records what it was asked to show."""

    cards: list[PhotoCard] = field(default_factory=list)
    empty: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    clears: int = 0

    def clear(self) -> None:
        self.clears += 1
        self.cards.clear()
        self.empty.clear()
        self.errors.clear()

    def show_empty(self, message: str) -> None:
        self.empty.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def add_item(self, card: PhotoCard) -> None:
        self.cards.append(card)


def make_photo(filename: str, size: int = 8) -> PhotoInfo:
    return PhotoInfo(
        filename=filename,
        url=f"/uploads/{filename}",
        size=size,
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads", max_upload_bytes=1024)


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)


@pytest.fixture
def api_client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
