"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from photobooth.api.photos import router as photos_router
from photobooth.app_logging import configure_logging
from photobooth.containers import AppContainer
from photobooth.errors import PhotoboothError, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(photos_router)

    @app.exception_handler(PhotoboothError)
    async def photobooth_error_handler(
        request: Request, exc: PhotoboothError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "code": exc.code},
            )
        return _error_response(exc, container)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            ValidationError("Invalid request payload", code="INVALID_REQUEST"),
            container,
            details=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _error_response(
            PhotoboothError("An unexpected error occurred"), container
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(
    exc: PhotoboothError,
    container: AppContainer,
    details: object | None = None,
) -> JSONResponse:
    """Build the error envelope; validation details are only exposed locally."""
    error = exc.to_dict()
    if details is not None and container.settings.environment == "local":
        error["details"] = details
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error},
    )
