"""
MemoPad Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error shaping
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn memopad.main:app) and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌────────┐ ┌─────────┐ ┌───────────────┐ ┌──────┐  │
    │  │ Req ID │→│ Logging │→│ Origin Policy │→│ CORS │  │
    │  └────────┘ └─────────┘ └───────────────┘ └──────┘  │
    │             → Error Guard (unexpected → JSON 500)   │
    │                                                     │
    │  Routes:                                            │
    │  /memo/  /memo/submit/  /memo/edit/{id}             │
    │  /memo/delete/{id}  /health                         │
    │                                                     │
    │  Error Responder (JSON {"error": message}):         │
    │  MemoPadError→declared status │ HTTP→its status     │
    │  RequestValidation→400 │ anything else→500          │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → database directory → MemoStore + schema →
              loop exception handler
    Shutdown: restore loop exception handler → dispose engine
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from memopad import __version__
from memopad.config import Settings, settings as default_settings
from memopad.database import ensure_database_directory
from memopad.exceptions import DatabaseError, MemoPadError
from memopad.middleware.error_guard import UnexpectedErrorMiddleware
from memopad.middleware.logging import RequestLoggingMiddleware
from memopad.middleware.origin_policy import OriginPolicy, OriginPolicyMiddleware
from memopad.middleware.request_id import RequestIDMiddleware, request_id_var
from memopad.routes import health, memo
from memopad.services.memo_store import MemoStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_unhandled_async_error(
    loop: asyncio.AbstractEventLoop, context: Dict[str, Any]
) -> None:
    """
    Event loop exception handler.

    Receives failures nothing awaited (e.g. a task whose exception was never
    retrieved). Logs them and leaves the process running.
    """
    exc = context.get("exception")
    logger.error(
        "Unhandled async failure: %s",
        context.get("message", "no message"),
        exc_info=exc,
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the MemoStore for the life of the app.

    The store (and its single connection) is created here, published on
    app.state for the get_memo_store dependency, and disposed on shutdown.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("MemoPad Backend starting up...")

    db_path = ensure_database_directory(app_settings.database_url)
    logger.info("Database file: %s", db_path)

    store = MemoStore.from_settings(app_settings)
    await store.create_schema()
    app.state.memo_store = store

    loop = asyncio.get_running_loop()
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(log_unhandled_async_error)

    logger.info("Allowed origins: %s", ", ".join(app_settings.cors_origins_list))
    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )

    try:
        yield
    finally:
        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("MemoPad Backend shutting down...")
        loop.set_exception_handler(previous_handler)
        await store.close()
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers (Error Responder)
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    """The one failure shape the API returns."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the handlers every failure is forwarded to.

    Handler hierarchy:
        MemoPadError (and subclasses) → exc.status_code
        StarletteHTTPException         → exc.status_code (unknown route 404, 405)
        RequestValidationError         → 400
        Exception (fallback)           → 500

    Unexpected exceptions are normally answered by UnexpectedErrorMiddleware
    inside the middleware stack; the Exception handler below only sees
    failures raised by the middleware itself.

    Internal details (SQL, driver messages, stack traces) are logged only.
    """

    @app.exception_handler(MemoPadError)
    async def handle_app_error(request: Request, exc: MemoPadError):
        rid = request_id_var.get("")
        if isinstance(exc, DatabaseError):
            logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        else:
            message = "Invalid request"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return error_response(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500, "Internal Server Error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Explicit configuration; defaults to the environment-loaded settings.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="MemoPad API",
        description="Create, list and look up short to-do memos stored in SQLite.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    policy = OriginPolicy(app_settings.cors_origins_list)
    app.state.origin_policy = policy

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first:
    # RequestID → Logging → OriginPolicy → CORS → UnexpectedError → routes
    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(CORSMiddleware, **policy.cors_options())
    app.add_middleware(OriginPolicyMiddleware, policy=policy)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(memo.router)
    app.include_router(health.router)

    return app


app = create_app()
