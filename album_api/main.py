"""
Album API: FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers,
       and wires an AlbumStore into app.state. The module-level `app` is what
       uvicorn serves (uvicorn album_api.main:app, or python -m album_api).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:                                            │
    │    GET /ping   GET /health                          │
    │    GET /albums   GET /albums/{id}   POST /albums    │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404  Store→500     │
    │                                                     │
    │  app.state.albums: AlbumStore                       │
    │    DatabaseAlbumStore (pooled AsyncEngine)          │
    │    MemoryAlbumStore   (locked in-process list)      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. If no store was injected, build one from settings; for the database
       backend, verify connectivity (fatal on failure: the exception
       propagates and the server never starts serving)

    Shutdown:
    1. Close the store (disposes the connection pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from album_api import __version__
from album_api.config import settings
from album_api.database import build_engine, dispose_engine, verify_connection
from album_api.exceptions import (
    AlbumServiceError,
    ValidationError,
    NotFoundError,
    StoreError,
)
from album_api.middleware.logging import RequestLoggingMiddleware
from album_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from album_api.routes import albums, health
from album_api.services.album_store import AlbumStore
from album_api.services.database_store import DatabaseAlbumStore
from album_api.services.memory_store import MemoryAlbumStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Store Construction
# ══════════════════════════════════════════════════════════════════════════

async def build_album_store() -> AlbumStore:
    """
    Build the store selected by settings.album_store.

    Raises:
        Any connection error from the startup check, or asyncio.TimeoutError
        when the database does not answer within settings.connect_timeout.
        The engine is disposed before the error propagates.
    """
    if settings.album_store == "memory":
        logger.info("Using in-memory album store")
        return MemoryAlbumStore()

    engine = build_engine()
    try:
        await verify_connection(engine, timeout=settings.connect_timeout)
    except BaseException:
        await dispose_engine(engine)
        raise
    return DatabaseAlbumStore(engine)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    An injected store (create_app(store=...)) is used as-is and is not
    closed here; its owner closes it.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Album API %s starting up...", __version__)

    owns_store = getattr(app.state, "albums", None) is None
    if owns_store:
        try:
            app.state.albums = await build_album_store()
        except Exception as e:
            logger.critical("Unable to initialize %s album store: %s", settings.album_store, e)
            raise

    logger.info(
        "Server ready at http://%s:%d (store: %s)",
        settings.backend_host,
        settings.backend_port,
        app.state.albums.name,
    )

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Album API shutting down...")
    if owns_store:
        await app.state.albums.close()
        app.state.albums = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        RequestValidationError   → 400 Bad Request (FastAPI body/param parsing)
        NotFoundError            → 404 Not Found
        StoreError               → 500 Internal Server Error
        AlbumServiceError (base) → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Store error context (operation, underlying error text) is always logged,
    and included in the response only when settings.expose_error_details is on.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON or a body that does not match the schema."""
        errors = [
            {
                "loc": [str(part) for part in err.get("loc", ())],
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Invalid request", {"errors": errors}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        details = exc.context if settings.expose_error_details else None
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "store_error",
                "An internal error occurred. Please try again later.",
                details,
            ),
        )

    @app.exception_handler(AlbumServiceError)
    async def handle_service_error(request: Request, exc: AlbumServiceError):
        logger.error("[%s] Service error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all; the traceback is logged, never returned.

        Starlette runs this handler in ServerErrorMiddleware, outside
        RequestIDMiddleware, so the id is read back from request.state and
        the X-Request-ID header is set here.
        """
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        body = _error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )
        body["request_id"] = rid
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        return JSONResponse(status_code=500, content=body, headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[AlbumStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: AlbumStore to serve from. When omitted, the lifespan builds
               one from settings at startup.

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Album API",
        description="Record album catalogue: list, look up and add albums.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.albums = store

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(albums.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
