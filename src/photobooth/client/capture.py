"""Capture controller: camera lifecycle, countdown, snapshot and upload."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from photobooth.client.camera import Camera, CameraStream, Facing
from photobooth.client.gallery_client import GalleryClient, GalleryClientError
from photobooth.domain.photos import UploadResult
from photobooth.services import codec

_logger = logging.getLogger(__name__)

SNAPSHOT_MEDIA_TYPE = "image/png"


class CameraState(str, Enum):
    """Lifecycle of the camera inside a capture session."""

    IDLE = "idle"
    STARTING = "starting"
    LIVE = "live"


class CountdownCancelled(Exception):
    """Raised when a running countdown is cancelled."""


class CancelToken:
    """One-shot cancellation signal shared with a running countdown."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class Countdown:
    """Counts down from ``start_from`` to 1 on a fixed cadence.

    Every value is reported once and held for a full ``step_seconds``. A final
    ``0`` is reported when the countdown ends so the caller can hide it.
    Deadlines are computed from the loop clock, so slow callbacks do not make
    the countdown drift.
    """

    start_from: int = 3
    step_seconds: float = 0.85

    async def run(self, on_tick: Callable[[int], None], token: CancelToken) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        remaining = self.start_from
        while remaining > 0:
            on_tick(remaining)
            deadline += self.step_seconds
            await _wait_until(loop, deadline, token)
            remaining -= 1
        on_tick(0)


async def _wait_until(
    loop: asyncio.AbstractEventLoop, deadline: float, token: CancelToken
) -> None:
    if token.cancelled:
        raise CountdownCancelled
    timeout = max(0.0, deadline - loop.time())
    try:
        await asyncio.wait_for(token.wait(), timeout=timeout)
    except TimeoutError:
        return
    raise CountdownCancelled


@dataclass
class CaptureSession:
    """Transient client-side state of one booth session."""

    camera_state: CameraState = CameraState.IDLE
    facing: Facing = Facing.USER
    countdown_remaining: int = 0
    busy: bool = False
    stream: CameraStream | None = None


def _ignore(*_: object) -> None:
    return None


@dataclass
class CaptureController:
    """Drives a capture session from user actions."""

    camera: Camera
    gallery: GalleryClient
    session: CaptureSession = field(default_factory=CaptureSession)
    countdown: Countdown = field(default_factory=Countdown)
    countdown_enabled: bool = True
    settle_seconds: float = 0.25
    default_width: int = 1280
    on_countdown: Callable[[int], None] = _ignore
    on_error: Callable[[str], None] = _ignore
    on_refresh: Callable[[], Awaitable[None]] | None = None
    _start_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)
    _countdown_token: CancelToken | None = field(default=None, init=False)
    _stop_generation: int = field(default=0, init=False)

    @property
    def live(self) -> bool:
        return self.session.camera_state is CameraState.LIVE

    async def start(self) -> bool:
        """Open the camera for the current facing; return whether it is live."""
        async with self._start_lock:
            if self.live:
                return True
            self.session.camera_state = CameraState.STARTING
            generation = self._stop_generation
            try:
                stream = await self.camera.open(self.session.facing)
            except Exception as exc:
                _logger.exception("Failed to start camera")
                self.session.camera_state = CameraState.IDLE
                self.on_error(f"Could not access the camera: {exc}")
                return False
            if generation != self._stop_generation:
                # stopped while the device was opening
                _logger.info("Camera stopped while starting; releasing stream")
                await stream.stop()
                return False
            self.session.stream = stream
            self.session.camera_state = CameraState.LIVE
            return True

    async def stop(self) -> None:
        """Release the camera and cancel any running countdown."""
        self._stop_generation += 1
        if self._countdown_token is not None:
            self._countdown_token.cancel()
        stream = self.session.stream
        self.session.stream = None
        self.session.camera_state = CameraState.IDLE
        if stream is not None:
            await stream.stop()

    async def toggle(self) -> None:
        """Start the camera when idle, stop it when live."""
        if self.live:
            await self.stop()
        else:
            await self.start()

    async def set_facing(self, facing: Facing) -> None:
        """Change the facing preference, restarting a live camera."""
        if facing is self.session.facing:
            return
        self.session.facing = facing
        if not self.live:
            return
        await self.stop()
        await asyncio.sleep(self.settle_seconds)
        await self.start()

    async def flip(self) -> None:
        await self.set_facing(self.session.facing.flipped())

    async def capture(self, filename: str | None = None) -> UploadResult | None:
        """Take one photo and upload it.

        Returns ``None`` when another capture is in flight or when any step
        fails; failures are reported through ``on_error``. The gallery is
        refreshed after every attempt that ran.
        """
        if self.session.busy:
            _logger.debug("Capture ignored: another capture is in progress")
            return None
        self.session.busy = True
        try:
            return await self._capture(filename)
        finally:
            self.session.busy = False
            await self._refresh()

    async def _capture(self, filename: str | None) -> UploadResult | None:
        if not await self.start():
            return None
        if self.countdown_enabled and self.countdown.start_from > 0:
            token = CancelToken()
            self._countdown_token = token
            try:
                await self.countdown.run(self._show_countdown, token)
            except CountdownCancelled:
                _logger.info("Countdown cancelled")
                self._show_countdown(0)
                return None
            finally:
                self._countdown_token = None

        stream = self.session.stream
        if stream is None:
            self.on_error("Camera stopped before the photo was taken")
            return None
        width = stream.width or self.default_width
        height = stream.height or round(width * 9 / 16)
        try:
            still = await stream.snapshot(width, height)
        except Exception as exc:
            _logger.exception("Snapshot failed")
            self.on_error(f"Failed to take photo: {exc}")
            return None

        try:
            result = await self.gallery.upload_data_url(
                codec.encode(still, SNAPSHOT_MEDIA_TYPE), filename
            )
        except GalleryClientError as exc:
            _logger.warning("Upload failed: %s", exc.message)
            self.on_error(f"Failed to upload photo: {exc.message}")
            return None
        _logger.info("Captured photo: filename=%s", result.filename)
        return result

    def _show_countdown(self, value: int) -> None:
        self.session.countdown_remaining = value
        self.on_countdown(value)

    async def _refresh(self) -> None:
        if self.on_refresh is None:
            return
        try:
            await self.on_refresh()
        except Exception:
            _logger.exception("Gallery refresh after capture failed")
