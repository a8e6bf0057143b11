"""Logging configuration helpers."""

import logging

ACCESS_LOGGER = "photobooth.access"

_APP_FORMAT = "%(levelname)s: %(name)s: %(message)s"
_ACCESS_FORMAT = "%(asctime)s %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Set up the ``photobooth`` logger and its per-request access log.

    Application records go to one stream handler. The access logger writes
    bare timestamped request lines through its own handler and does not
    repeat them on the application handler. Calling this again only
    updates the level.
    """
    logger = logging.getLogger("photobooth")
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(_stream_handler(_APP_FORMAT))
        logger.propagate = False
    access = logging.getLogger(ACCESS_LOGGER)
    if not access.handlers:
        access.addHandler(_stream_handler(_ACCESS_FORMAT))
        access.propagate = False


def _stream_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    return handler
