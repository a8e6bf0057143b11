"""HTTP client for the gallery API."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from photobooth.domain.photos import PhotoInfo, UploadResult

_T = TypeVar("_T")


class GalleryClientError(RuntimeError):
    """Raised when the gallery API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GalleryClient(Protocol):
    """Interface for talking to the gallery API."""

    async def list_photos(self) -> list[PhotoInfo]:
        """Return the server's photos, newest first."""

    async def upload_data_url(
        self, image: str, filename: str | None = None
    ) -> UploadResult:
        """Upload an inline image payload."""

    async def delete_photo(self, filename: str) -> None:
        """Delete a photo by name."""


@dataclass
class HttpxGalleryClient(GalleryClient):
    """Gallery client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxGalleryClient":
        """Create a gallery client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def list_photos(self) -> list[PhotoInfo]:
        """Fetch the photo list via GET /api/photos."""
        response = await self._send(
            "GET", "/api/photos", fallback="Failed to load gallery"
        )
        return _parse(
            response,
            lambda body: [PhotoInfo.model_validate(item) for item in body],
            "Failed to load gallery",
        )

    async def upload_data_url(
        self, image: str, filename: str | None = None
    ) -> UploadResult:
        """Upload a ``data:`` URI via POST /api/upload-base64."""
        payload: dict[str, object] = {"image": image}
        if filename is not None:
            payload["filename"] = filename
        response = await self._send(
            "POST", "/api/upload-base64", fallback="Upload failed", json=payload
        )
        return _parse(response, UploadResult.model_validate, "Upload failed")

    async def upload_file(self, path: Path) -> UploadResult:
        """Upload a file from disk via multipart POST /api/upload."""
        files = {"photo": (path.name, path.read_bytes())}
        response = await self._send(
            "POST", "/api/upload", fallback="Upload failed", files=files
        )
        return _parse(response, UploadResult.model_validate, "Upload failed")

    async def delete_photo(self, filename: str) -> None:
        """Delete a photo via DELETE /api/photos/{filename}."""
        await self._send(
            "DELETE",
            f"/api/photos/{quote(filename, safe='')}",
            fallback="Delete failed",
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(
        self, method: str, path: str, *, fallback: str, **kwargs: object
    ) -> httpx.Response:
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            response = await self.http_client.request(
                method, url, timeout=20, **kwargs
            )
        except httpx.HTTPError as exc:
            raise GalleryClientError(f"{fallback}: {exc}") from exc
        if response.is_success:
            return response
        raise GalleryClientError(
            _error_message(response, fallback), status_code=response.status_code
        )


def _parse(
    response: httpx.Response, build: Callable[[object], _T], fallback: str
) -> _T:
    """Decode and validate a success body; bad bodies become client errors."""
    try:
        return build(response.json())
    except (ValueError, TypeError, ValidationError) as exc:
        raise GalleryClientError(
            f"{fallback}: unexpected response body", status_code=response.status_code
        ) from exc


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Return the server's ``error`` field, or the fallback text."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return fallback
