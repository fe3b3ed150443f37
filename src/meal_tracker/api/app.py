"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from meal_tracker.api.meals import router as meals_router
from meal_tracker.api.profile import router as profile_router
from meal_tracker.app_logging import configure_logging
from meal_tracker.containers import AppContainer
from meal_tracker.errors import (
    InvalidInput,
    MalformedUpstreamResponse,
    MealTrackerError,
    NotFound,
    QuotaExceeded,
    RateLimited,
    UpstreamError,
)

_STATUS_BY_ERROR: tuple[tuple[type[MealTrackerError], int], ...] = (
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (RateLimited, status.HTTP_429_TOO_MANY_REQUESTS),
    (QuotaExceeded, status.HTTP_402_PAYMENT_REQUIRED),
    (MalformedUpstreamResponse, status.HTTP_502_BAD_GATEWAY),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
)


def status_for_error(exc: MealTrackerError) -> int:
    """Return the HTTP status used for an application error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    expose_upstream_detail = container.settings.environment == "local"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(profile_router)
    app.include_router(meals_router)

    @app.exception_handler(MealTrackerError)
    async def handle_app_error(
        request: Request, exc: MealTrackerError
    ) -> JSONResponse:
        status_code = status_for_error(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(
                "Request failed path=%s kind=%s: %s",
                request.url.path,
                exc.kind,
                exc.message,
            )
        payload: dict[str, object] = dict(exc.as_dict())
        if expose_upstream_detail and isinstance(exc, UpstreamError):
            payload["detail"] = {"status_code": exc.status_code, "body": exc.body}
        return JSONResponse(status_code=status_code, content=payload)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = InvalidInput.from_errors(exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=error.as_dict()
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
