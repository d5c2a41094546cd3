"""
Shoe Store Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn shoestore.main:app), the `shoestore` script, and tests.

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
    │  /create /getall /getbyid /update /delete /health   │
    │                                                     │
    │  Exception Handlers (plain-text bodies):            │
    │  Validation→400 │ NotFound→404 │ Method→405         │
    │  Decode→500/400 │ Database→500                      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Build the AsyncMongoClient (unless a collection was injected)
    3. Ensure the unique index on `id`

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shoestore import __version__
from shoestore.config import Settings, settings as default_settings
from shoestore.database import (
    close_client,
    create_mongo_client,
    ensure_indexes,
    get_collection,
)
from shoestore.exceptions import (
    DatabaseError,
    DecodeError,
    NotFoundError,
    ShoeStoreError,
    ValidationError,
    describe_validation_errors,
)
from shoestore.middleware.logging import RequestLoggingMiddleware
from shoestore.middleware.request_id import RequestIDMiddleware, request_id_var
from shoestore.routes import health, shoes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] shoestore.access: GET /getall 200 2B 4.1ms [a1b2c3d4]
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the MongoDB client for the life of the process.

    When create_app() was given a collection, it is used as-is and no client
    is created or closed here.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info("Shoe Store Backend %s starting up...", __version__)

    client = None
    if app.state.shoe_collection is None:
        client = create_mongo_client(settings)
        app.state.mongo_client = client
        app.state.shoe_collection = get_collection(client, settings)
        logger.info(
            "Using MongoDB collection %s.%s",
            settings.mongodb_database,
            settings.mongodb_collection,
        )

    if settings.mongodb_create_indexes:
        try:
            await ensure_indexes(app.state.shoe_collection)
        except PyMongoError as e:
            # Requests still get served; each one reports its own database error
            logger.error("Could not ensure indexes: %s", e)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Shoe Store Backend shutting down...")
    if client is not None:
        await close_client(client)
        app.state.shoe_collection = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _text(status_code: int, message: str, headers: Optional[dict] = None) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to status codes and plain-text bodies.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        NotFoundError           → 404 Not Found ("Shoe not found.")
        StarletteHTTPException  → its own status; 405 names the accepted verb
        DecodeError             → settings.decode_error_status
        RequestValidationError  → rendered as DecodeError
        DatabaseError           → 500 with driver message
        ShoeStoreError (base)   → its status_code
        Exception (fallback)    → 500 generic message, traceback logged
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _text(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _text(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers or {})
        if exc.status_code == 405:
            allowed = [
                method.strip()
                for method in headers.get("Allow", "").split(",")
                if method.strip() and method.strip() != "HEAD"
            ]
            verbs = " or ".join(sorted(allowed)) or "one"
            return _text(405, f"Only {verbs} method is supported.", headers)
        return _text(exc.status_code, str(exc.detail), headers)

    @app.exception_handler(DecodeError)
    async def handle_decode_error(request: Request, exc: DecodeError):
        status = request.app.state.settings.decode_error_status
        logger.warning("[%s] Decode error: %s", request_id_var.get(""), exc.message)
        return _text(status, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return await handle_decode_error(request, DecodeError(describe_validation_errors(exc.errors())))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _text(500, exc.message)

    @app.exception_handler(ShoeStoreError)
    async def handle_shoe_store_error(request: Request, exc: ShoeStoreError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _text(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _text(500, "An unexpected error occurred.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    collection: Optional[AsyncCollection] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:   Configuration; defaults to the module-level singleton.
        collection: A ready shoe collection. When given, the lifespan handler
                    skips building its own MongoDB client.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Shoe Store API",
        description="Create, list, fetch, update and delete shoe records stored in MongoDB.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.shoe_collection = collection

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(shoes.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Entry point for the `shoestore` console script."""
    import uvicorn

    uvicorn.run(
        "shoestore.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
    )


# uvicorn expects `shoestore.main:app` to be importable
app = create_app()
