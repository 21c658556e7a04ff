"""
Journeo Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn journeo.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────┐ ┌──────────┐  │
    │  │ Login limit  │→│ Req ID   │→│ Logging │→│ GZip/CORS│  │
    │  └──────────────┘ └──────────┘ └─────────┘ └──────────┘  │
    │                                                          │
    │  Routes:                                                 │
    │  /auth  /users  /guides  /guides/{id}/comments           │
    │  /guides/{id}/media  /media/files  /activities  /health  │
    │                                                          │
    │  Exception Handlers (one body shape for all):            │
    │  {status, error, message, path}                          │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Warn about development-only configuration
    3. Optionally create the schema and seed demo data
    Shutdown:
    1. Dispose database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from journeo import __version__
from journeo.config import settings
from journeo.database import async_session_factory, create_schema, dispose_engine
from journeo.exceptions import (
    DatabaseError,
    JourneoError,
    RateLimitExceededError,
    ValidationError,
    error_payload,
)
from journeo.middleware.logging import RequestLoggingMiddleware
from journeo.middleware.rate_limit import LoginRateLimitMiddleware
from journeo.middleware.request_id import RequestIDMiddleware, request_id_var
from journeo.routes import activities, auth, comments, guides, health, media, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════


def setup_logging() -> None:
    """
    Configure logging once for the whole process.

    Format: 2026-01-15T12:00:00 [INFO] journeo.services.guide_service: Guide 3 created
    Output goes to stdout so container runtimes capture it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo only at DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Journeo Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.warning("%s", str(e))
        logger.warning("Acceptable for local development only.")

    if settings.auto_create_schema:
        await create_schema()
        logger.info("Database schema ensured from ORM metadata")

    if settings.seed_demo_data:
        from journeo.seed import seed_demo_data

        async with async_session_factory() as session:
            async with session.begin():
                await seed_demo_data(session)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Journeo Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════


def _format_validation_errors(exc: RequestValidationError) -> str:
    """'field: message' per error, joined by '; '."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "request"
        msg = err.get("msg", "invalid value")
        # pydantic prefixes errors raised in validators with "Value error, "
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{field}: {msg}")
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Single boundary translator: every failure becomes {status, error, message, path}.

    Handler hierarchy:
        JourneoError            → its own status_code / error label
        RequestValidationError  → 400 Validation Failed
        HTTPException           → its status (unknown route 404, wrong method 405)
        SQLAlchemyError         → 500, generic message
        Exception (fallback)    → 500, generic message, stack trace logged

    Internal details (SQL, paths, stack traces) are logged server-side only.
    """

    @app.exception_handler(JourneoError)
    async def handle_journeo_error(request: Request, exc: JourneoError):
        rid = request_id_var.get("")
        path = request.url.path
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s on %s: %s | Context: %s",
                rid, type(exc).__name__, path, exc.message, exc.context,
            )
        else:
            logger.info("[%s] %s on %s: %s", rid, type(exc).__name__, path, exc.message)

        headers = {}
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)
        if exc.status_code == 401:
            headers["WWW-Authenticate"] = "Bearer"

        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.status_code, exc.error, exc.message, path),
            headers=headers or None,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _format_validation_errors(exc)
        logger.info("[%s] Validation failed on %s: %s", request_id_var.get(""), request.url.path, message)
        return JSONResponse(
            status_code=ValidationError.status_code,
            content=error_payload(
                ValidationError.status_code, ValidationError.error, message, request.url.path
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        try:
            label = HTTPStatus(exc.status_code).phrase
        except ValueError:
            label = "Error"
        message = exc.detail if isinstance(exc.detail, str) else label
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.status_code, label, message, request.url.path),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_sqlalchemy_error(request: Request, exc: SQLAlchemyError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error on %s: %s", rid, request.url.path, str(exc), exc_info=exc)
        generic = DatabaseError()
        return JSONResponse(
            status_code=generic.status_code,
            content=error_payload(generic.status_code, generic.error, generic.message, request.url.path),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error on %s: %s",
            rid,
            request.url.path,
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=error_payload(
                500,
                "Internal Server Error",
                "An unexpected error occurred. Please try again later.",
                request.url.path,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════


def create_app() -> FastAPI:
    app = FastAPI(
        title="Journeo API",
        description=(
            "Travel guide management: guides made of day-by-day activities, "
            "user assignments, comments with ratings and guide media. "
            "Authenticate with POST /auth/login and send the token as a Bearer header."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-Total-Count",
            "Retry-After",
            "Location",
        ],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(LoginRateLimitMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    prefix = settings.api_prefix
    app.include_router(auth.router, prefix=prefix)
    app.include_router(users.router, prefix=prefix)
    app.include_router(guides.router, prefix=prefix)
    app.include_router(comments.router, prefix=prefix)
    app.include_router(media.router, prefix=prefix)
    app.include_router(activities.router, prefix=prefix)
    app.include_router(health.router)

    return app


app = create_app()
