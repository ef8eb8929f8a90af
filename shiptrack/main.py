"""
ShipTrack Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       uvicorn serves the module-level `app` (uvicorn shiptrack.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: RateLimit → RequestID → Logging → GZip/CORS │
    │                                                          │
    │  Routes:                                                 │
    │    /api/shipments      /api/issue-reports                │
    │    /api/stats/overview /api/app-feedback   /health       │
    │                                                          │
    │  Exception Handlers:                                     │
    │    Validation→400  Auth→401  NotFound→404  DB→500        │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from shiptrack import __version__
from shiptrack.config import settings
from shiptrack.database import dispose_engine
from shiptrack.exceptions import (
    AuthenticationRequiredError,
    DatabaseError,
    NotFoundError,
    ShipTrackError,
    ValidationError,
)
from shiptrack.middleware.logging import RequestLoggingMiddleware
from shiptrack.middleware.rate_limit import RateLimitMiddleware
from shiptrack.middleware.request_id import RequestIDMiddleware, request_id_var
from shiptrack.routes import feedback, health, issue_reports, shipments, stats

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once at startup.

    Format: 2025-03-15T09:30:00 [INFO] shiptrack.services.shipment_service: ...
    Output goes to stdout (collected by Docker).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check.
    Shutdown: dispose the engine (closes pooled connections).
    """
    setup_logging()
    logger.info("ShipTrack Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report; shipment creation will reject
        # requests with a validation error until this is fixed.
        logger.error("Configuration error: %s", str(e))

    logger.info("Initial shipment status: %r", settings.initial_shipment_status)
    logger.info("Actor header: %s", settings.actor_header)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("ShipTrack Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """
    Converts Pydantic request errors into {field: [messages]}.

    loc tuples look like ("body", "shipment_id") or ("query", "date"); the
    leading source segment is dropped.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        field = ".".join(loc) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


def _error_response(
    status_code: int,
    error: str,
    message: str,
    errors: Optional[Dict[str, List[str]]] = None,
) -> JSONResponse:
    """Builds an ErrorResponse-shaped body tagged with the current request id."""
    content = {"error": error, "message": message}
    if errors is not None:
        content["errors"] = errors
    content["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses.

        ValidationError / RequestValidationError → 400 (field errors)
        AuthenticationRequiredError               → 401
        NotFoundError                             → 404
        DatabaseError                             → 500 (generic message)
        ShipTrackError / Exception                → 500 (generic message)

    Response bodies never contain stack traces or SQL; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.errors)
        return _error_response(400, "validation_error", exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), errors)
        return _error_response(400, "validation_error", "Validation failed", errors)

    @app.exception_handler(AuthenticationRequiredError)
    async def handle_authentication_required(request: Request, exc: AuthenticationRequiredError):
        return _error_response(401, "authentication_required", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "server_error", GENERIC_FAILURE_MESSAGE)

    @app.exception_handler(ShipTrackError)
    async def handle_application_error(request: Request, exc: ShipTrackError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "server_error", GENERIC_FAILURE_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(500, "internal_server_error", GENERIC_FAILURE_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="ShipTrack API",
        description=(
            "Shipment tracking backend for the ShipTrack driver app and dashboard: "
            "shipments, issue reports, statistics and app feedback."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(shipments.router)
    app.include_router(issue_reports.router)
    app.include_router(stats.router)
    app.include_router(feedback.router)
    app.include_router(health.router)

    return app


app = create_app()
