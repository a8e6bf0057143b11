"""Inline image payload codec and photo filename derivation."""

import base64
import binascii
import re
import secrets
import string
import time
from pathlib import PurePosixPath

from photobooth.domain.errors import DecodeError, InvalidPayload
from photobooth.domain.photos import DecodedImage

DATA_URL_PATTERN = re.compile(r"data:(image/\w+);base64,(.+)", re.ASCII)

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase
_TOKEN_LENGTH = 6


def decode(payload: object) -> DecodedImage:
    """Decode a ``data:image/<type>;base64,<data>`` payload into raw bytes."""
    if not isinstance(payload, str) or not payload:
        raise InvalidPayload("Image data missing")
    match = DATA_URL_PATTERN.fullmatch(payload)
    if match is None:
        raise InvalidPayload("Invalid image data")
    media_type, encoded = match.groups()
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Image data is not valid base64") from exc
    return DecodedImage(media_type=media_type, data=data)


def encode(data: bytes, media_type: str) -> str:
    """Encode raw image bytes as an inline data payload."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def sanitize_filename(name: str | None) -> str | None:
    """Reduce a caller-supplied name to its base name.

    Both ``/`` and ``\\`` count as separators. Returns ``None`` when nothing
    usable is left (empty, ``.`` or ``..``).
    """
    if not name:
        return None
    base = PurePosixPath(name.replace("\\", "/")).name
    if base in {"", ".", ".."}:
        return None
    return base


def generate_filename(requested: str | None, media_type: str) -> str:
    """Return the requested base name, or synthesize a unique one."""
    safe_name = sanitize_filename(requested)
    if safe_name:
        return safe_name
    extension = media_type.split("/", 1)[-1] or "png"
    return unique_filename(f".{extension}")


def unique_filename(suffix: str) -> str:
    """Build ``<millis>-<token><suffix>`` from the wall clock and randomness."""
    millis = time.time_ns() // 1_000_000
    token = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(_TOKEN_LENGTH))
    return f"{millis}-{token}{suffix}"
