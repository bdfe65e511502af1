"""
Artfolio Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn artfolio.main:app) or the `artfolio` console script.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:   Request ID → Logging → GZip → CORS        │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────┐ ┌────────┐ ┌──────────┐ ┌────────────┐       │
    │  │ /auth  │ │ /user  │ │/artworks │ │/categories │       │
    │  └────────┘ └────────┘ └──────────┘ └────────────┘       │
    │  ┌────────────┐ ┌──────────┐ ┌────────────────┐          │
    │  │ /enquiries │ │ /uploads │ │  / and /health │          │
    │  └────────────┘ └──────────┘ └────────────────┘          │
    │                                                          │
    │  Exception Handlers:                                     │
    │  400 │ 401 │ 403 │ 404 │ 409 │ 413 │ 415 │ 500           │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, not fatal)
    3. Create tables when AUTO_CREATE_TABLES is on
    4. Install the event-loop exception handler
    Shutdown:
    1. Dispose database engine (close all connections)
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from artfolio import __version__
from artfolio.config import settings
from artfolio.database import create_tables, dispose_engine
from artfolio.exceptions import (
    ArtfolioError,
    ConflictError,
    DatabaseError,
    FileStorageError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PayloadTooLargeError,
    UnauthorizedError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from artfolio.middleware.logging import RequestLoggingMiddleware
from artfolio.middleware.request_id import RequestIDMiddleware, request_id_var
from artfolio.routes import artworks, auth, categories, enquiries, health, media, users

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] artfolio.services.auth_service: ...
    Output goes to stdout so container runtimes capture it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Chatty at INFO; our access log already covers requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def log_loop_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """
    Event-loop exception handler.

    Exceptions from fire-and-forget tasks end up here instead of being
    printed by the default handler; the server keeps running.
    """
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error("Uncaught async error: %s", message, exc_info=exc)
    else:
        logger.error("Uncaught async error: %s", message)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Artfolio Backend %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health and error responses still work
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    asyncio.get_running_loop().set_exception_handler(log_loop_exception)

    logger.info("Storage directory: %s", settings.storage_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Artfolio Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def current_request_id(request: Request) -> str:
    """
    The id RequestIDMiddleware assigned to this request.

    The fallback Exception handler runs outside that middleware, after the
    ContextVar has been reset; request.state shares the scope and still
    holds the id there.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id if request_id is not None else request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 bad_request
        UnauthorizedError                        → 401 unauthorized
        InvalidCredentialsError                  → 401 invalid_credentials
        ForbiddenError                           → 403 forbidden
        NotFoundError                            → 404 not_found
        ConflictError                            → 409 conflict
        PayloadTooLargeError                     → 413 payload_too_large
        UnsupportedMediaTypeError                → 415 unsupported_media_type
        DatabaseError / FileStorageError         → 500 server_error
        ArtfolioError (base)                     → 500 server_error
        HTTPException (routing, 404/405)         → its own status
        Exception (fallback)                     → 500 internal_server_error

    Security: 500 responses carry a generic message. Context dicts, stack
    traces and driver errors are logged server-side only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, "bad_request", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body/query validation done by FastAPI itself; reported as 400, not 422."""
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return error_response(400, "bad_request", message, {"errors": errors})

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        logger.info("[%s] Failed login attempt", request_id_var.get(""))
        return error_response(401, "invalid_credentials", exc.message)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return error_response(401, "unauthorized", exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        logger.warning("[%s] Forbidden: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return error_response(409, "conflict", exc.message)

    @app.exception_handler(PayloadTooLargeError)
    async def handle_payload_too_large(request: Request, exc: PayloadTooLargeError):
        return error_response(
            413,
            "payload_too_large",
            exc.message,
            {"max_size_mb": exc.context.get("max_size_mb")},
        )

    @app.exception_handler(UnsupportedMediaTypeError)
    async def handle_unsupported_media_type(request: Request, exc: UnsupportedMediaTypeError):
        return error_response(415, "unsupported_media_type", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, "server_error", exc.message)

    @app.exception_handler(ArtfolioError)
    async def handle_artfolio_error(request: Request, exc: ArtfolioError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Framework-level errors such as unknown routes (404) and wrong methods (405)."""
        return error_response(
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            str(exc.detail),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = current_request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
            request_id=rid,
        )
        if rid:
            response.headers["X-Request-ID"] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Artfolio API",
        description=(
            "Backend for an art-portfolio marketplace: artists publish profiles and "
            "artworks, clients browse, save artists and send enquiries."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(artworks.router)
    app.include_router(categories.router)
    app.include_router(enquiries.router)
    app.include_router(media.router)

    return app


app = create_app()


def run() -> None:
    """Console-script entry point: `artfolio`."""
    import uvicorn

    uvicorn.run(
        "artfolio.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
