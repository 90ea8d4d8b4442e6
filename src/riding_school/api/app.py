"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from riding_school.api.events import router as events_router
from riding_school.api.lessons import router as lessons_router
from riding_school.api.riders import router as riders_router
from riding_school.app_logging import configure_logging
from riding_school.containers import AppContainer
from riding_school.domain.errors import (
    LessonNotFoundError,
    PermissionDeniedError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.notifications.start()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(lessons_router)
    app.include_router(events_router)
    app.include_router(riders_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.info(
            "%s %s rejected (%s): %s",
            request.method,
            request.url.path,
            status_code,
            exc.message,
        )
        return _error_response(status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), exc.headers)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: ValidationError) -> int:
    if isinstance(exc, LessonNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_400_BAD_REQUEST


def _error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": message,
                "status": status_code,
                "timestamp": datetime.now(tz=UTC).isoformat(),
            }
        },
        headers=headers,
    )
