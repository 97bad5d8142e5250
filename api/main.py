"""
api/main.py -- FastAPI application entry point for FleetGate.

Exposes the credential and token core over HTTP:
  /v1/*  legacy scheme, X-API-Auth header re-validated on every request
  /v2/*  token scheme, Bearer access tokens + refresh tokens

Run with:  uvicorn asgi:app --reload
           python asgi.py

Middleware stack (outermost to innermost):
  1. CORSMiddleware      -- adds CORS headers for allowed browser origins
  2. log_requests        -- one log line per request with latency

Lifespan builds the shared state (credential directory, refresh registry and
the objects that wrap them) and puts it on app.state. Nothing is a module
level singleton, so tests can swap in fresh instances per module.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.v1.legacy import router as legacy_router
from api.routes.v2.auth import router as v2_auth_router
from api.routes.v2.vehicles import router as v2_vehicles_router
from auth.errors import (
    BadRequestError,
    ConflictError,
    FleetGateError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from auth.gate import AuthorizationGate
from auth.legacy import LegacyAuthenticator
from auth.registry import RefreshTokenRegistry
from auth.seed import demo_users
from auth.sessions import SessionManager
from auth.store import CredentialDirectory
from core.config import get_settings

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Config + logging
#
# get_settings() raises here if either signing key is missing, so a
# misconfigured process never starts serving.
# ---------------------------------------------------------------------------

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("fleetgate.api")


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------


def build_state(app: FastAPI, directory: CredentialDirectory, registry: RefreshTokenRegistry) -> None:
    """Attach the directory, registry and everything built on them to app.state."""
    app.state.directory = directory
    app.state.refresh_tokens = registry
    app.state.legacy = LegacyAuthenticator(directory)
    app.state.gate = AuthorizationGate(directory)
    app.state.sessions = SessionManager(directory, registry)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create process-lifetime stores on startup, release them on shutdown."""
    logger.info("FleetGate API starting up")
    directory = CredentialDirectory(db_url=settings.database_url)
    if settings.seed_demo_users:
        seeded = directory.seed(demo_users())
        logger.info("Seeded %d demo users", seeded)
    build_state(app, directory, RefreshTokenRegistry())

    yield

    app.state.directory.close()
    logger.info("FleetGate API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="FleetGate API",
    description="Legacy and token-based authentication in front of a per-user vehicle catalog.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-API-Auth"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Headers are never logged: they carry passwords and tokens.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(legacy_router, prefix="/v1", tags=["v1 Legacy"])
app.include_router(v2_auth_router, prefix="/v2", tags=["v2 Auth"])
app.include_router(v2_vehicles_router, prefix="/v2", tags=["v2 Vehicles"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------

# ConflictError maps to 400, not 409: existing clients treat a duplicate
# registration as a plain bad request.
_STATUS_BY_ERROR: dict[type[FleetGateError], int] = {
    BadRequestError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 400,
    InternalError: 500,
}


def status_for(exc: FleetGateError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 500


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(FleetGateError)
async def fleetgate_error_handler(request: Request, exc: FleetGateError) -> JSONResponse:
    """Translate a typed core failure into its status code and envelope."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when the request body has the wrong types."""
    return _error_response(422, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured error for framework-raised HTTP errors (unknown route, bad method)."""
    if exc.status_code == 404:
        return _error_response(404, "not_found", "Route not found")
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
