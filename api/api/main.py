"""FastAPI application entry-point for the license authority API."""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api import __version__
from api.config import APISettings, load_api_settings
from api.dependencies import AppServices, build_services
from api.middleware.auth import APIKeyMiddleware
from api.middleware.json_formatter import configure_json_logging
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import health, licenses, validate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup / shutdown lifecycle.

    On startup, unless services were injected into :func:`create_app`:
    - Load the signing and verification keys.
    - Open the license store and create its tables if needed.

    On shutdown the database engine owned by the services is disposed.
    """
    settings: APISettings = app.state.settings

    if settings.production and settings.api_key is None:
        raise RuntimeError("API_API_KEY is required in production mode. Refusing to start.")

    if settings.structured_logging:
        configure_json_logging()
        logger.info("Structured JSON logging enabled")

    owned: AppServices | None = None
    if getattr(app.state, "services", None) is None:
        owned = await build_services(settings)
        app.state.services = owned
        logger.info("Signer and verifier loaded (%d-bit key)", owned.signer.key_size)

    yield

    if owned is not None:
        await owned.dispose()
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def _resolve_api_key(settings: APISettings) -> str | None:
    if settings.api_key is not None:
        return settings.api_key.get_secret_value()
    if settings.production:
        return None
    generated = str(uuid.uuid4())
    logger.warning("Running in development mode with generated API key: %s", generated)
    return generated


def create_app(settings: APISettings | None = None, services: AppServices | None = None) -> FastAPI:
    """Construct and configure the FastAPI application.

    Parameters
    ----------
    settings:
        API settings; read from the environment when omitted.
    services:
        Pre-built signer, verifier and session factory.  When omitted they
        are built from the environment during startup.
    """
    settings = settings or load_api_settings()

    app = FastAPI(
        title="License Authority API",
        description="Issues and validates RSA-signed software licenses.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    # -- Middleware (outermost last) -----------------------------------------

    app.add_middleware(APIKeyMiddleware, api_key=_resolve_api_key(settings))
    app.add_middleware(RequestLoggingMiddleware)

    # -- Routers -------------------------------------------------------------

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(licenses.router, prefix="/api/v1")
    app.include_router(validate.router, prefix="/api/v1")

    # -- Exception handlers --------------------------------------------------

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("ValueError on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": "Invalid request"})

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Database error: %s", exc, exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal database error"})

    return app


# Module-level application instance used by ``uvicorn api.main:app``.
app = create_app()
