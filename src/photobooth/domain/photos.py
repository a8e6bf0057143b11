"""Photo records and their wire shapes."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Photo:
    """A stored photo file as seen by the store."""

    filename: str
    size: int
    created_at: datetime


@dataclass(frozen=True)
class DecodedImage:
    """Raw bytes and media type extracted from an inline image payload."""

    media_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return self.media_type.split("/", 1)[1]


class PhotoInfo(BaseModel):
    """Photo entry returned by the gallery listing."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str
    url: str
    size: int
    created_at: datetime = Field(alias="createdAt")


class UploadResult(BaseModel):
    """Name and public url of a freshly stored photo."""

    filename: str
    url: str
