"""
Storefront API — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn storefront.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:   Request ID → Logging → GZip → CORS        │
    │                                                          │
    │  Routes (/api/v1, /api/v2):                              │
    │    guards ─▶ [Rate Limit] ─▶ [Auth, v2 only] ─▶ handler  │
    │    /customers /products /orders /users /login /logout    │
    │                                                          │
    │  App state (one per app instance):                       │
    │    rate_limiter  FixedWindowRateLimiter                  │
    │    auth_service  AuthService (+ SessionRegistry)         │
    │                                                          │
    │  Exception Handlers:                                     │
    │    StorefrontError → its own status + kind               │
    │    unmatched route → 404   request body → 400            │
    │    anything else   → 500 (RequestIDMiddleware)           │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront import __version__
from storefront.config import settings
from storefront.database import dispose_engine
from storefront.exceptions import StoreError, StorefrontError
from storefront.middleware.logging import RequestLoggingMiddleware
from storefront.middleware.rate_limit import FixedWindowRateLimiter
from storefront.middleware.request_id import RequestIDMiddleware, request_id_var
from storefront.responses import error_response
from storefront.routes.api import register_routes
from storefront.services.auth_service import AuthService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, check configuration, log the limits in force.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Storefront API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: development runs use the default secret
        logger.error("Configuration error: %s", str(e))

    limiter: FixedWindowRateLimiter = app.state.rate_limiter
    logger.info(
        "Rate limit: %d requests per %ss per client",
        limiter.max_requests,
        limiter.window_seconds,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Storefront API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    kind: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return error_response(
        status_code, kind, message, details, headers, request_id=request_id_var.get("")
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the shared error envelope.

    Handler hierarchy:
        StorefrontError         → exc.status_code / exc.kind (400/401/404/429/500)
        HTTPException 404, 405  → 404 not_found (no route for method + path)
        HTTPException (other)   → its own status
        RequestValidationError  → 400 validation_error
        Exception (fallback)    → 500 internal_error, rendered by RequestIDMiddleware
    """

    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError):
        details = exc.context
        if isinstance(exc, StoreError):
            logger.error(
                "[%s] Store error on %s %s: %s | Context: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                exc.message,
                exc.context,
            )
            if not settings.expose_store_errors:
                details = {"resource": exc.context.get("resource")}
        return _error_response(
            exc.status_code, exc.kind, exc.message, jsonable_encoder(details), exc.headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return _error_response(
                404,
                "not_found",
                f"No route matches {request.method} {request.url.path}",
            )
        return _error_response(
            exc.status_code,
            "http_error",
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error_response(
            400,
            "validation_error",
            "Request validation failed",
            {"errors": jsonable_encoder(exc.errors())},
        )



# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
    auth_service: Optional[AuthService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        rate_limiter:  Limiter state for this app; built from settings when omitted
        auth_service:  Token/session service; built from settings when omitted

    Both are owned by the returned app (app.state), so separate app instances
    never share rate limit windows or sessions.
    """
    app = FastAPI(
        title="Storefront API",
        description="CRUD and search for customers, products, orders and users.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if rate_limiter is None:
        rate_limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window,
        )
    if auth_service is None:
        auth_service = AuthService(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            token_ttl=settings.token_ttl_seconds,
        )
    app.state.rate_limiter = rate_limiter
    app.state.auth_service = auth_service

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: Request ID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # auth cookie
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    register_routes(app)

    return app


app = create_app()
