"""Gallery API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Request, Response, UploadFile, status

from photobooth.api.models import ErrorResponse, UploadBase64Request
from photobooth.domain.errors import InvalidPayload
from photobooth.domain.photos import PhotoInfo, UploadResult

if TYPE_CHECKING:
    from photobooth.services.gallery import GalleryService

router = APIRouter(prefix="/api", tags=["photos"])

_ERRORS: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _gallery(request: Request) -> GalleryService:
    return request.app.state.container.gallery_service


@router.get("/photos", response_model=list[PhotoInfo], responses=_ERRORS)
def list_photos(request: Request) -> list[PhotoInfo]:
    """Return saved photos, newest first."""
    return _gallery(request).list_photos()


@router.post("/upload-base64", response_model=UploadResult, responses=_ERRORS)
def upload_base64(payload: UploadBase64Request, request: Request) -> UploadResult:
    """Store an image sent as a ``data:`` URI."""
    return _gallery(request).create_from_data_url(payload.image, payload.filename)


@router.post("/upload", response_model=UploadResult, responses=_ERRORS)
def upload(
    request: Request, photo: UploadFile | None = File(default=None)
) -> UploadResult:
    """Store an image sent as multipart form data in the ``photo`` field."""
    if photo is None:
        raise InvalidPayload("No file uploaded (field: photo)")
    limit = request.app.state.container.settings.max_upload_bytes
    data = photo.file.read(limit + 1)
    return _gallery(request).create_from_upload(data, photo.filename)


@router.delete(
    "/photos/{filename}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}, **_ERRORS},
)
def delete_photo(filename: str, request: Request) -> Response:
    """Delete a saved photo."""
    _gallery(request).remove(filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
