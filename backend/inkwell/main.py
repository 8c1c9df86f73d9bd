"""
Inkwell Backend: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance; the module-level `app` is what uvicorn serves.
Who:   uvicorn (`uvicorn inkwell.main:app` or the `inkwell` console script),
       and tests, which build their own app around a throwaway database.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /posts/...   │ │ /auth/...    │ │ / , /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Auth→401 │ NotAuthorized→401 │ NotFound→404  │   │
    │  │ Validation→400 │ Database→500 │ other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, validate settings, open the Database
    Shutdown: dispose the Database (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inkwell import __version__
from inkwell.config import Settings, settings as default_settings
from inkwell.database import Database
from inkwell.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from inkwell.middleware.logging import RequestLoggingMiddleware
from inkwell.middleware.request_id import RequestIDMiddleware, request_id_var
from inkwell.routes import auth, health, posts

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries that log every operation at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the store at startup and close it at shutdown.

    The Database object is attached to app.state; request dependencies read
    it from there.
    """
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Inkwell Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving public routes and /health; the verifier rejects every token
        logger.error("Configuration error: %s", str(e))

    database = Database.from_settings(settings)
    app.state.database = database
    logger.info("Database engine created for %s", database.engine.url.render_as_string(hide_password=True))
    logger.info("Server running on port %d", settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Inkwell Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    The correlation ID of the failing request.

    The catch-all handler runs in ServerErrorMiddleware, outside
    RequestIDMiddleware, where the ContextVar is already unset; the ID is
    still on request.state because the scope is shared.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": _request_id(request),
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        AuthenticationError → 401 (missing_credential / invalid_credential)
        NotAuthorizedError  → 401 (not_authorized)
        NotFoundError       → 404
        ValidationError     → 400
        DatabaseError       → 500 (generic message, context logged)
        Exception           → 500 (generic message, traceback logged)

    Security: handlers NEVER return stack traces, SQL or exception context.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error(
            request,
            401,
            exc.failure.code,
            exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotAuthorizedError)
    async def handle_not_authorized(request: Request, exc: NotAuthorizedError):
        return _error(request, 401, "not_authorized", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(request, 404, "not_found", exc.message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error(request, 400, "validation_error", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return _error(request, 500, "server_error", "Server Error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: full traceback to the log, generic body to the client."""
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        # RequestIDMiddleware never sees this response, so echo the header here
        rid = _request_id(request)
        headers = {"X-Request-ID": rid} if rid else None
        return _error(request, 500, "internal_server_error", "Server Error", headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build the app with. Defaults to the
                  environment-loaded module settings.

    Returns:
        Fully configured FastAPI instance. The Database is attached by the
        lifespan; callers that skip the lifespan (tests) attach their own.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Inkwell API",
        description="Minimal blogging backend: posts, likes and token authentication.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` on the configured host and port."""
    uvicorn.run(
        "inkwell.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
