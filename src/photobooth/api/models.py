"""Pydantic models for gallery API payloads."""

from typing import Any

from pydantic import BaseModel


class UploadBase64Request(BaseModel):
    """Inline image upload payload."""

    image: Any = None
    filename: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str
