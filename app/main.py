"""
Roster Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       that owns its own StudentRegistry.
Who:   Called by uvicorn to start the server (uvicorn app.main:app) and by
       tests, which build a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /students    │ │ /health  │ │ /__test__/reset │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  State:   app.state.registry (StudentRegistry)      │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ NotFound→404 │ else→500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, settings
from app.exceptions import NotFoundError, RosterError, ValidationError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, students, testing
from app.services.student_registry import StudentRegistry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # uvicorn's own access log duplicates roster.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and announce the server.
    Shutdown: log how many students are dropped with the process.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("%s %s starting up...", app_settings.app_name, __version__)
    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )
    logger.info(
        "API docs: http://%s:%d/docs", app_settings.backend_host, app_settings.backend_port
    )
    if app_settings.expose_test_routes:
        logger.warning("Test routes enabled: DELETE /__test__/reset wipes the roster")
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    # The roster is in memory only; it does not survive a restart.
    logger.info(
        "%s shutting down, discarding %d students",
        app_settings.app_name,
        len(app.state.registry),
    )


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def current_request_id(request: Request) -> str:
    """Request ID from the context var, or from request.state outside the middleware."""
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse body.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        NotFoundError            → 404 Not Found
        RequestValidationError   → 400 (body) / 404 (path id not an integer)
        HTTPException            → its own status (unknown route, wrong verb,
                                   undecodable body) in the same body shape
        RosterError (base)       → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Stack traces are logged server-side only, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = current_request_id(request)
        logger.warning("[%s] Validation error: %s %s", rid, exc.message, exc.fields)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = current_request_id(request)
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        FastAPI's own parsing failures.

        A path id that is not an integer cannot name any student, so it is a
        404 like any other unknown id. Everything else (malformed JSON body)
        is the client's payload problem: 400.
        """
        rid = current_request_id(request)
        errors = exc.errors()
        if errors and all(tuple(err.get("loc") or ("",))[0] == "path" for err in errors):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "not_found",
                    "message": "The requested student was not found",
                    "request_id": rid,
                },
            )

        logger.warning("[%s] Malformed request: %s", rid, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid student payload",
                "details": {"errors": [err.get("msg", "") for err in errors]},
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Errors raised by the framework itself: unknown route (404), wrong verb
        (405, keeps the Allow header), or a body that cannot be decoded (400).
        """
        rid = current_request_id(request)
        if exc.status_code == 400:
            error = "validation_error"
            message = "Invalid student payload"
        elif exc.status_code == 404:
            error = "not_found"
            message = "The requested resource was not found"
        else:
            error = HTTPStatus(exc.status_code).name.lower()
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": error,
                "message": message,
                "details": {"detail": str(exc.detail)},
                "request_id": rid,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RosterError)
    async def handle_roster_error(request: Request, exc: RosterError):
        """Any other application error: generic message, details logged."""
        rid = current_request_id(request)
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = current_request_id(request)
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    registry: Optional[StudentRegistry] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry:      Registry the app will own; a new empty one by default
        app_settings:  Settings to use instead of the module singleton

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description=(
            "In-memory student roster used to teach CRUD over HTTP. "
            "Data lives only as long as the server process."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.registry = registry if registry is not None else StudentRegistry()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
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
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window,
        enabled=app_settings.rate_limit_enabled,
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(students.router)
    if app_settings.expose_test_routes:
        app.include_router(testing.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
