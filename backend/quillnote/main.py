"""
Quillnote Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn (uvicorn quillnote.main:app) and the test suite.

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
    │  ┌──────────────────────────┐ ┌──────────────────┐  │
    │  │ /api/notes (CRUD, summ.) │ │ /health          │  │
    │  └──────────────────────────┘ └──────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ LLM→503 │ …  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from quillnote import __version__
from quillnote.config import settings
from quillnote.database import dispose_engine
from quillnote.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    DatabaseError,
    LLMServiceError,
    NotFoundError,
    QuillnoteError,
    RateLimitExceededError,
    ValidationError,
)
from quillnote.middleware.logging import RequestLoggingMiddleware
from quillnote.middleware.rate_limit import RateLimitMiddleware
from quillnote.middleware.request_id import RequestIDMiddleware, request_id_var
from quillnote.routes import health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once at startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every operation at DEBUG/INFO
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, banner.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Quillnote Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # CRUD works without a provider key; only summarization is affected
        logger.error("Configuration error: %s", str(e))

    logger.info("Summarization provider: %s (model=%s)", settings.llm_provider, settings.active_model)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Quillnote Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        NotFoundError           → 404 Not Found
        RateLimitExceededError  → 429 Too Many Requests
        ConfigurationError      → 500 Internal Server Error
        DatabaseError           → 500 Internal Server Error
        LLMServiceError         → 503 Service Unavailable
        CircuitBreakerOpenError → 503 Service Unavailable
        QuillnoteError (base)   → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Stack traces, SQL and provider error bodies are logged, never returned.
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

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "configuration_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(CircuitBreakerOpenError)
    async def handle_circuit_breaker(request: Request, exc: CircuitBreakerOpenError):
        rid = request_id_var.get("")
        logger.warning("[%s] Circuit breaker open: %s", rid, exc.message)
        return JSONResponse(
            status_code=503,
            content={
                "error": "service_unavailable",
                "message": exc.message,
                "details": {"recovery_time": exc.recovery_time},
                "request_id": rid,
            },
            headers={"Retry-After": str(exc.recovery_time)},
        )

    @app.exception_handler(LLMServiceError)
    async def handle_llm_error(request: Request, exc: LLMServiceError):
        rid = request_id_var.get("")
        logger.error("[%s] LLM service error: %s | Context: %s", rid, exc.message, exc.context)
        headers = {}
        if exc.retry_after:
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(
            status_code=503,
            content={
                "error": "llm_service_error",
                "message": exc.message,
                "request_id": rid,
            },
            headers=headers,
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
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

    @app.exception_handler(QuillnoteError)
    async def handle_app_error(request: Request, exc: QuillnoteError):
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
        """Catch-all: generic 500 with the request ID; stack trace goes to the log."""
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

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Factory so tests can build a fresh app (and override dependencies on it)
    without touching the module-level instance.
    """
    app = FastAPI(
        title="Quillnote API",
        description=(
            "Note-taking backend: create, list, edit and delete notes, "
            "and summarize a note with an LLM (summary cached on the note)."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `quillnote.main:app`
app = create_app()
