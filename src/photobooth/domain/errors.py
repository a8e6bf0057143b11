"""Error taxonomy shared by the store, the service and the API."""


class PhotoboothError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(PhotoboothError):
    """Malformed or missing input."""

    status_code = 400


class InvalidPayload(ClientError):
    """The inline image payload is missing or not an image data URI."""


class DecodeError(ClientError):
    """The payload's encoded data could not be decoded."""


class PayloadTooLarge(ClientError):
    """The decoded image exceeds the configured upload limit."""

    status_code = 413


class NotFound(PhotoboothError):
    """The requested photo does not exist in the store."""

    status_code = 404


class ServerError(PhotoboothError):
    """Unexpected server-side failure."""


class StorageError(ServerError):
    """Disk or permission failure while touching the store directory."""
