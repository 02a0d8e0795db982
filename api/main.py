"""
api/main.py -- FastAPI application entry point for TokenAuth.

Exposes the authentication core over HTTP: registration, login, token
refresh, and a bearer-protected profile route.

Run with:      python main.py serve
               uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- adds CORS headers for allowed browser origins
  2. log_requests    -- one log line per request with latency

Lifespan builds the collaborators exactly once -- CredentialStore,
TokenService (which receives the signing secret), and the AuthFlow that
composes them -- and parks them on app.state. Nothing in auth/ reads global
state; routes reach the collaborators through request.app.state.
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
from starlette.exceptions import HTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.profile import router as profile_router
from auth.errors import AuthFlowError, InputError, InternalError
from auth.flow import AuthFlow
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.config import get_settings
from core.log import configure_logging

VERSION = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

configure_logging(_settings.log_level)
logger = logging.getLogger("tokenauth.api")


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Construct the auth collaborators once and share them for the app's lifetime.

    The credential table is volatile: shutdown simply drops it.
    """
    logger.info("TokenAuth API starting up")
    app.state.store = CredentialStore(rounds=_settings.bcrypt_rounds)
    app.state.tokens = TokenService.from_settings(_settings)
    app.state.auth_flow = AuthFlow(app.state.store, app.state.tokens)
    logger.info(
        "Auth initialized (access_ttl=%ds, refresh_ttl=%ds, enforce_token_type=%s)",
        app.state.tokens.access_ttl,
        app.state.tokens.refresh_ttl,
        app.state.tokens.enforce_type,
    )

    yield

    logger.info("TokenAuth API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="TokenAuth API",
    description="Username/password registration with short-lived access tokens and rotating refresh tokens.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Headers are never logged -- they carry bearer tokens.
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

app.include_router(auth_router, tags=["Auth"])
app.include_router(profile_router, prefix="/api", tags=["Profile"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error body has the same shape, {"error": "<message>"}, so clients can
# parse failures without branching on status code. Messages are fixed per
# error class; details stay in the server log.
# ---------------------------------------------------------------------------


@app.exception_handler(AuthFlowError)
async def auth_flow_error_handler(request: Request, exc: AuthFlowError) -> JSONResponse:
    """Render InputError / AuthError / InternalError with their own status."""
    if isinstance(exc, InternalError):
        logger.error(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.detail or exc.message,
        )
    return JSONResponse(status_code=exc.status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing, malformed or out-of-range body fields are a 400, not FastAPI's default 422."""
    return JSONResponse(status_code=InputError.status, content=InputError().to_dict())


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return the common error envelope for FastAPI/Starlette HTTP exceptions (404, 405, ...)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail).lower()).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. No authentication.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and the number of registered users."""
    return HealthResponse(version=VERSION, users=request.app.state.store.count())
