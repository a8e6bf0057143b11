"""Camera access for the capture controller."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import cv2

_logger = logging.getLogger(__name__)


class Facing(str, Enum):
    """Which sensor to open."""

    USER = "user"
    ENVIRONMENT = "environment"

    def flipped(self) -> "Facing":
        return Facing.ENVIRONMENT if self is Facing.USER else Facing.USER


class CameraError(RuntimeError):
    """Raised when a camera cannot be opened or read."""


class CameraStream(Protocol):
    """A live camera stream."""

    @property
    def width(self) -> int | None:
        """Native frame width, if the device reports one."""

    @property
    def height(self) -> int | None:
        """Native frame height, if the device reports one."""

    async def snapshot(self, width: int, height: int) -> bytes:
        """Grab the current frame as a PNG of the given size."""

    async def stop(self) -> None:
        """Release the underlying device."""


class Camera(Protocol):
    """Opens live streams for a facing preference."""

    async def open(self, facing: Facing) -> CameraStream:
        """Open a stream; raises ``CameraError`` when the device is unavailable."""


@dataclass
class OpenCvStream(CameraStream):
    """Stream backed by an ``cv2.VideoCapture``."""

    capture: cv2.VideoCapture

    @property
    def width(self) -> int | None:
        return int(self.capture.get(cv2.CAP_PROP_FRAME_WIDTH)) or None

    @property
    def height(self) -> int | None:
        return int(self.capture.get(cv2.CAP_PROP_FRAME_HEIGHT)) or None

    async def snapshot(self, width: int, height: int) -> bytes:
        return await asyncio.to_thread(self._snapshot, width, height)

    async def stop(self) -> None:
        await asyncio.to_thread(self.capture.release)

    def _snapshot(self, width: int, height: int) -> bytes:
        ok, frame = self.capture.read()
        if not ok or frame is None:
            raise CameraError("Camera returned no frame")
        if frame.shape[1] != width or frame.shape[0] != height:
            frame = cv2.resize(frame, (width, height))
        ok, encoded = cv2.imencode(".png", frame)
        if not ok:
            raise CameraError("Failed to encode frame as PNG")
        return encoded.tobytes()


@dataclass
class OpenCvCamera(Camera):
    """Camera that maps each facing to an OpenCV device index."""

    device_indices: dict[Facing, int] = field(
        default_factory=lambda: {Facing.USER: 0, Facing.ENVIRONMENT: 1}
    )

    async def open(self, facing: Facing) -> CameraStream:
        index = self.device_indices.get(facing, 0)
        capture = await asyncio.to_thread(cv2.VideoCapture, index)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Camera device {index} ({facing.value}) not available")
        _logger.info("Opened camera: device=%s facing=%s", index, facing.value)
        return OpenCvStream(capture=capture)
