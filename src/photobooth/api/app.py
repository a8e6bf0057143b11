"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from photobooth.api.photos import router as photos_router
from photobooth.app_logging import ACCESS_LOGGER, configure_logging
from photobooth.config import parse_cors_origins
from photobooth.containers import AppContainer
from photobooth.domain.errors import PhotoboothError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    access_logger = logging.getLogger(ACCESS_LOGGER)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Photobooth backend serving %s at %s",
            container.photo_store.root,
            container.settings.public_mount,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error: %s %s", request.method, request.url.path
            )
            response = _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
            )
        elapsed_ms = (time.perf_counter() - started) * 1000
        access_logger.info(
            "%s %s %s %.1f ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(PhotoboothError)
    async def handle_photobooth_error(
        request: Request, exc: PhotoboothError
    ) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed: %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
        else:
            logger.warning(
                "Request rejected: %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
            )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Invalid request: %s %s: %s", request.method, request.url.path, exc
        )
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    app.include_router(photos_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.mount(
        container.settings.public_mount,
        StaticFiles(directory=container.photo_store.root),
        name="uploads",
    )

    return app


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
