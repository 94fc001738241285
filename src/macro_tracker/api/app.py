"""FastAPI application factory."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from macro_tracker.api.foods import router as foods_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer
from macro_tracker.domain.errors import (
    InternalError,
    MacroTrackerError,
    TransientStorageError,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Macro Tracker")
    app.state.container = container

    app.include_router(foods_router)

    @app.exception_handler(MacroTrackerError)
    async def handle_domain_error(
        request: Request, exc: MacroTrackerError
    ) -> JSONResponse:
        if isinstance(exc, InternalError):
            logger.error(
                "Request failed: %s",
                exc.message,
                exc_info=exc,
                extra={"path": request.url.path},
            )
            return _error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
        if isinstance(exc, TransientStorageError):
            logger.warning("Storage throttled", extra={"path": request.url.path})
        return _error_response(exc.status_code, exc.message)

    @app.middleware("http")
    async def handle_unexpected_error(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error", extra={"path": request.url.path})
            return _error_response(500, INTERNAL_ERROR_MESSAGE)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
