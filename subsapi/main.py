"""
SubsAPI: FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the
       lifespan that owns the Database handle.
Who:   uvicorn (`uvicorn subsapi.main:app`) and the test-suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /api/v1/subscriptions[...]   │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/other→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → Database handle (unless one was
              passed to create_app)
    Shutdown: dispose the Database handle
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from subsapi import __version__
from subsapi.config import settings
from subsapi.database import Database
from subsapi.exceptions import (
    DatabaseError,
    NotFoundError,
    SubsAPIError,
    ValidationError,
)
from subsapi.middleware.logging import RequestLoggingMiddleware
from subsapi.middleware.request_id import RequestIDMiddleware, request_id_var
from subsapi.routes import health, subscriptions

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] subsapi.services.subscription_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from these is covered by subsapi.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the Database handle for the lifetime of the process.

    A handle passed to create_app() is used as-is and still disposed on
    shutdown.
    """
    setup_logging()
    logger.info("SubsAPI starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if getattr(app.state, "database", None) is None:
        app.state.database = Database.from_settings(settings)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)

    yield

    logger.info("SubsAPI shutting down...")
    await app.state.database.dispose()
    app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError   → 400 Bad Request
        NotFoundError     → 404 Not Found
        DatabaseError     → 500 (generic message, context logged)
        SubsAPIError      → 500 (catch-all for application errors)
        Exception         → 500 (unexpected errors, stack trace logged)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
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
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client; details stay in the server log."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(SubsAPIError)
    async def handle_app_error(request: Request, exc: SubsAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Never expose a stack trace; log it with the request ID instead."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
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

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Pre-built Database handle. When omitted, the lifespan
                  builds one from settings at startup.
    """
    app = FastAPI(
        title="SubsAPI",
        description=(
            "Tracks users' recurring subscriptions and reports how much a user spent "
            "on a service, and over how many distinct months, within a period."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(subscriptions.router)
    app.include_router(health.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "subsapi.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
