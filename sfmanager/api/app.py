"""
FastAPI application for SFManager.

The auth pipeline is wired here: storage and the RequestAuthenticator are
built once at startup and placed on app state, and every AuthError is
rendered by a single exception handler.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sfmanager.auth import (
    AuthError,
    RequestAuthenticator,
    RoleAggregator,
    TokenCodec,
    UserLookup,
    auth_router,
)
from sfmanager.config import Settings, get_settings
from sfmanager.integrations.sentry import capture_exception, init_sentry
from sfmanager.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


def build_authenticator(settings: Settings, storage: StorageProvider) -> RequestAuthenticator:
    """
    Assemble the auth pipeline.

    Raises ServerConfigurationError when no signing secret is configured.
    """
    codec = TokenCodec(
        settings.require_jwt_secret(),
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(hours=settings.jwt_expire_hours),
    )
    return RequestAuthenticator(
        codec=codec,
        users=UserLookup(storage.metadata),
        roles=RoleAggregator(storage.metadata),
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and build the auth pipeline."""
    settings: Settings = app.state.settings

    init_sentry(settings)

    # No secret, no startup.
    app.state.authenticator = build_authenticator(settings, app.state.storage)

    logger.info("SFManager API starting in %s mode", settings.environment)
    yield
    logger.info("SFManager API shutting down")


# =============================================================================
# Exception Handlers
# =============================================================================


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    # 500s were already reported where they were raised
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # submitted values (passwords included) are not echoed back
    details = [
        {key: value for key, value in error.items() if key != "input"}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": jsonable_encoder(details)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    capture_exception(exc, path=request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """Build the API. Settings and storage are injectable for tests."""
    settings = settings or get_settings()

    app = FastAPI(
        title="SFManager API",
        description="Accounts, authentication and startup role resolution",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage or create_local_storage()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "sfmanager-api"}

    return app
