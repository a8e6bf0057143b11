"""Gallery rendering on top of the gallery client."""

import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, TextIO

from pydantic import ValidationError

from photobooth.client.gallery_client import GalleryClient, GalleryClientError
from photobooth.domain.photos import PhotoInfo

_logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "Gallery is empty"
LOAD_ERROR_MESSAGE = "Could not load gallery"


@dataclass(frozen=True)
class PhotoCard:
    """One rendered gallery entry."""

    photo: PhotoInfo
    timestamp: str
    delete: Callable[[], Awaitable[bool]]


class GalleryView(Protocol):
    """Surface the renderer draws into."""

    def clear(self) -> None:
        """Remove everything currently shown."""

    def show_empty(self, message: str) -> None:
        """Show the empty-gallery state."""

    def show_error(self, message: str) -> None:
        """Show the load-failure state."""

    def add_item(self, card: PhotoCard) -> None:
        """Append one photo card."""


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in local time for people."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class GalleryRenderer:
    """Keeps a view in sync with the server's photo list.

    Every change goes through a full re-fetch, so the view never holds state
    the server does not have.
    """

    client: GalleryClient
    view: GalleryView
    confirm: Callable[[str], bool]
    notify: Callable[[str], None]

    async def refresh(self) -> list[PhotoInfo] | None:
        """Fetch and render the gallery; returns ``None`` if loading failed."""
        try:
            photos = await self.client.list_photos()
        except (GalleryClientError, ValidationError) as exc:
            _logger.warning("Gallery refresh failed: %s", exc)
            self.view.clear()
            self.view.show_error(LOAD_ERROR_MESSAGE)
            return None
        self.render(photos)
        return photos

    def render(self, photos: list[PhotoInfo]) -> None:
        self.view.clear()
        if not photos:
            self.view.show_empty(EMPTY_MESSAGE)
            return
        for photo in photos:
            self.view.add_item(
                PhotoCard(
                    photo=photo,
                    timestamp=format_timestamp(photo.created_at),
                    delete=self._delete_action(photo),
                )
            )

    async def delete(self, photo: PhotoInfo) -> bool:
        """Confirm, remove on the server, then refresh the whole gallery."""
        if not self.confirm(f"Delete {photo.filename}?"):
            return False
        try:
            await self.client.delete_photo(photo.filename)
        except GalleryClientError as exc:
            _logger.warning("Delete failed: filename=%s", photo.filename)
            self.notify(f"Failed to delete: {exc.message}")
            return False
        await self.refresh()
        return True

    def _delete_action(self, photo: PhotoInfo) -> Callable[[], Awaitable[bool]]:
        async def delete() -> bool:
            return await self.delete(photo)

        return delete


@dataclass
class ConsoleGalleryView(GalleryView):
    """Writes the gallery as plain text lines."""

    out: TextIO = field(default_factory=lambda: sys.stdout)
    cards: list[PhotoCard] = field(default_factory=list)

    def clear(self) -> None:
        self.cards.clear()

    def show_empty(self, message: str) -> None:
        print(message, file=self.out)

    def show_error(self, message: str) -> None:
        print(f"! {message}", file=self.out)

    def add_item(self, card: PhotoCard) -> None:
        self.cards.append(card)
        print(
            f"{len(self.cards):>3}. {card.photo.filename}  "
            f"{card.timestamp}  {card.photo.size} B  {card.photo.url}",
            file=self.out,
        )
