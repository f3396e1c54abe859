"""FastAPI application for PsiPro."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from psipro import __version__
from psipro.api.middleware import AccessLogMiddleware
from psipro.api.routes import health, scheduling
from psipro.config import get_settings
from psipro.errors import (
    AppointmentNotFoundError,
    AppointmentValidationError,
    AuthError,
    ConflictError,
    PsiProError,
    StorageError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[PsiProError], int, str]] = [
    (ConflictError, 409, "conflict"),
    (AppointmentValidationError, 422, "validation_error"),
    (AuthError, 401, "unauthorized"),
    (AppointmentNotFoundError, 404, "not_found"),
    (StorageError, 502, "storage_error"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting PsiPro API")

    from psipro.core.database import close_db, init_db

    await init_db()

    logger.info("PsiPro API started successfully")

    yield

    logger.info("Shutting down PsiPro API")
    await close_db()


def _error_body(exc: PsiProError, error: str, debug: bool = False) -> dict:
    if isinstance(exc, StorageError):
        # Backend details stay in the logs unless debugging.
        return {
            "error": error,
            "detail": str(exc) if debug else "The operation could not be completed",
            "code": exc.code,
        }
    body = {"error": error, "detail": str(exc)}
    if isinstance(exc, ConflictError) and exc.conflicting_id:
        body["conflicting_id"] = exc.conflicting_id
    if isinstance(exc, AppointmentValidationError) and exc.field:
        body["field"] = exc.field
    return body


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="PsiPro API",
        description="Scheduling and billing for a single-practitioner clinical practice",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(scheduling.router, prefix="/api/v1", tags=["scheduling"])

    @app.exception_handler(PsiProError)
    async def domain_exception_handler(request: Request, exc: PsiProError):
        for error_type, status_code, error in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                if status_code >= 500:
                    logger.error(f"{error} on {request.method} {request.url.path}: {exc}")
                return JSONResponse(
                    status_code=status_code,
                    content=_error_body(exc, error, settings.debug_mode),
                )
        logger.exception(f"Unmapped domain error: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.debug_mode else None,
            },
        )

    return app
