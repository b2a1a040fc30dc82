"""
DumbPad Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the services (rate limiter, access gate, registry,
       note store) for one Settings object, stores them on app.state, and
       wires middleware, exception handlers and routers around them.
Who:   uvicorn imports `dumbpad.main:app`; tests call create_app(Settings(...)).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain (outermost first):                │
    │  CORS → Request ID → Logging → PIN Gate             │
    │                                                     │
    │  Routes:                                            │
    │  /api/verify-pin  /api/pin-required  /api/config    │
    │  /api/notepads[/{id}]   /api/notes/{id}   /health   │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation/Format/InvalidOp→400 │ Auth→401         │
    │  NotFound→404 │ LockedOut→429 │ Storage→500         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the data directory, repair notepads.json, ensure default.txt
    3. Start the lockout sweeper task

    Shutdown:
    1. Cancel the sweeper task
"""

import asyncio
import contextlib
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dumbpad import __version__
from dumbpad.config import Settings, settings as default_settings
from dumbpad.exceptions import DumbPadError, LockedOutError, StorageError, ValidationError
from dumbpad.middleware.logging import RequestLoggingMiddleware
from dumbpad.middleware.pin_gate import PinGateMiddleware
from dumbpad.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from dumbpad.routes import auth, health, notepads, notes
from dumbpad.services.access_gate import AccessGate
from dumbpad.services.file_service import FileService
from dumbpad.services.note_store import NoteStore
from dumbpad.services.rate_limiter import RateLimiter
from dumbpad.services.registry import NotepadRegistry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure application-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Bootstrap the data directory and run the lockout sweeper while serving."""
    cfg: Settings = app.state.settings

    setup_logging(cfg.log_level)
    logger.info("=" * 60)
    logger.info("DumbPad Backend %s starting up...", __version__)

    await app.state.registry.initialize()

    gate: AccessGate = app.state.access_gate
    logger.info("PIN protection %s", "enabled" if gate.enabled else "disabled")

    limiter: RateLimiter = app.state.rate_limiter
    sweeper = asyncio.create_task(limiter.run_sweeper(cfg.lockout_sweep_interval))

    logger.info("Server ready at http://%s:%d", cfg.host, cfg.port)
    logger.info("=" * 60)

    yield

    logger.info("DumbPad Backend shutting down...")
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → 400 validation_error
        LockedOutError          → 429 with Retry-After
        StorageError            → 500, generic message, details logged
        DumbPadError (base)     → exc.status_code (400/401/404)
        Exception (fallback)    → 500, generic message, stack trace logged

    Response bodies never contain stack traces, file paths or PINs.
    """

    @app.exception_handler(LockedOutError)
    async def handle_locked_out(request: Request, exc: LockedOutError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload(rid),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        field = ".".join(str(part) for part in errors[0]["loc"][1:]) if errors else None
        error = ValidationError("Invalid request body", field=field or None)
        return JSONResponse(
            status_code=error.status_code, content=error.payload(request_id_var.get(""))
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=exc.payload(rid))

    @app.exception_handler(DumbPadError)
    async def handle_app_error(request: Request, exc: DumbPadError):
        rid = request_id_var.get("")
        logger.info("[%s] %s: %s", rid, exc.error_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.payload(rid))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from; the environment-loaded
                      singleton when omitted.
    """
    cfg = app_settings or default_settings

    app = FastAPI(
        title="DumbPad API",
        description="Minimal PIN-protected notepad backend.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Services ──────────────────────────────────────────────────────────
    files = FileService(cfg.data_dir)
    note_store = NoteStore(files)
    rate_limiter = RateLimiter(
        max_attempts=cfg.max_attempts,
        lockout_seconds=cfg.lockout_seconds,
    )
    access_gate = AccessGate(cfg.pin, rate_limiter)

    app.state.settings = cfg
    app.state.note_store = note_store
    app.state.registry = NotepadRegistry(files, note_store)
    app.state.rate_limiter = rate_limiter
    app.state.access_gate = access_gate

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost. The PIN gate runs innermost so its denials
    # still get a request ID, an access-log line and CORS headers.
    app.add_middleware(PinGateMiddleware, gate=access_gate)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(notepads.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
