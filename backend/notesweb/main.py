"""
Notes Web — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the store and renderer, wires
       middleware, exception handlers, routes, and the static mount.
Who:   Called by uvicorn (`notesweb.main:app`), `python -m notesweb`, and tests.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  [Request ID] → [Access log]           │
    │                                                     │
    │  Routes:      GET /notes   GET /healthz   /static   │
    │                                                     │
    │  app.state:   store (NoteStore)                     │
    │               renderer (NoteRenderer)               │
    │                                                     │
    │  Errors:      NotFound→404  Constraint→409          │
    │               Storage/Connection→500                │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → open store → create schema (optional)
    Shutdown: close store
    A store that cannot be opened aborts startup.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from notesweb import __version__
from notesweb.config import Settings, settings as default_settings
from notesweb.exceptions import (
    ConstraintError,
    NotFoundError,
    NotesWebError,
    StorageError,
    StoreConnectionError,
)
from notesweb.middleware.logging import RequestLoggingMiddleware
from notesweb.middleware.request_id import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    request_id_var,
)
from notesweb.routes import health, notes
from notesweb.routes.static import StylesheetFiles
from notesweb.services.note_store import NoteStore
from notesweb.services.renderer import NoteRenderer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s] %(message)s"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s] %(message)s
    The request_id field is filled by RequestIDLogFilter from the ContextVar
    set by RequestIDMiddleware ("-" outside a request).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Quieten third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the note store on startup and close it on shutdown.

    A StoreConnectionError during open() is logged and re-raised, which
    makes uvicorn abort startup instead of serving requests without a store.
    Once open, the store is closed on shutdown and on any later startup
    failure such as create_schema() raising.
    """
    app_settings: Settings = app.state.settings
    store: NoteStore = app.state.store

    setup_logging(app_settings.log_level)
    logger.info("Notes Web %s starting up...", __version__)

    try:
        await store.open()
    except StoreConnectionError as e:
        logger.critical("Could not open note store: %s | Context: %s", e.message, e.context)
        raise

    try:
        if app_settings.create_schema:
            await store.create_schema()

        logger.info("Note store ready: %s", store.database_url)
        logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)

        yield

        logger.info("Notes Web shutting down...")
    finally:
        await store.close()
        logger.info("Note store closed.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(exc: NotesWebError) -> str:
    return f"error: {exc.message}"


def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map store exceptions to plain-text responses with distinct status codes.

    Handler hierarchy:
        NotFoundError          → 404 Not Found
        ConstraintError        → 409 Conflict
        StorageError           → 500 Internal Server Error
        StoreConnectionError   → 500 Internal Server Error
        NotesWebError (base)   → 500 Internal Server Error
        Exception (fallback)   → 500 Internal Server Error

    5xx bodies never include driver details; those stay in the log.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(_error_body(exc), status_code=404)

    @app.exception_handler(ConstraintError)
    async def handle_constraint(request: Request, exc: ConstraintError):
        logger.warning("[%s] Constraint violation: %s", _request_id(request), exc.message)
        return PlainTextResponse(_error_body(exc), status_code=409)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
            exc_info=exc,
        )
        return PlainTextResponse(_error_body(exc), status_code=500)

    @app.exception_handler(StoreConnectionError)
    async def handle_connection_error(request: Request, exc: StoreConnectionError):
        logger.error(
            "[%s] Note store unavailable: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return PlainTextResponse(_error_body(exc), status_code=500)

    @app.exception_handler(NotesWebError)
    async def handle_app_error(request: Request, exc: NotesWebError):
        logger.error("[%s] Application error: %s", _request_id(request), exc.message)
        return PlainTextResponse(_error_body(exc), status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        return PlainTextResponse("error: an unexpected error occurred", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[NoteStore] = None,
    renderer: Optional[NoteRenderer] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the module singleton)
        store: A NoteStore to serve from; one is built from
               app_settings.database_url when omitted. The lifespan opens it.
        renderer: A NoteRenderer; one is built from app_settings.templates_dir
                  when omitted.
        id_factory: Request-ID generator for requests without X-Request-Id.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Notes Web",
        description="A small note-taking site: notes and their authors, rendered as HTML.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.store = store or NoteStore(app_settings.database_url)
    app.state.renderer = renderer or NoteRenderer(app_settings.templates_dir)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID runs first, then the access logger.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RequestIDMiddleware,
        header_name=app_settings.request_id_header,
        id_factory=id_factory,
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)
    app.mount("/static", StylesheetFiles(directory=app_settings.static_dir), name="static")

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notesweb.main:app` to be importable. Building the app
# does not touch the database; the store is opened by the lifespan.
app = create_app()
