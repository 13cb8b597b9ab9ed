"""FastAPI application factory.

Every error leaves the API as ``{"error": message}``: 400 for validation,
preview-mode and connectivity problems, 500 for anything unexpected.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pg_console.__about__ import __version__
from pg_console.api.routes import router
from pg_console.core.config import ServerSettings, load_config, resolve_server_settings
from pg_console.core.exceptions import PgConsoleError
from pg_console.core.logging import get_logger, setup_logging
from pg_console.core.monitoring import setup_sentry
from pg_console.core.session import ConnectionManager

API_PREFIX = "/api/db"


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a one-line message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    if not loc:
        return "Request body is required"
    if first.get("type") == "missing":
        return f"Missing required field: {loc}"
    return f"Invalid value for '{loc}': {first.get('msg', 'invalid')}"


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PgConsoleError)
    async def handle_console_error(request: Request, exc: PgConsoleError) -> JSONResponse:
        get_logger("pg_console.api").warning(
            "request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
        )
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(describe_validation_error(exc), 400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        get_logger("pg_console.api").error(
            "unhandled error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _error_response(str(exc) or "Unknown error", 500)


def create_app(
    settings: ServerSettings | None = None,
    manager: ConnectionManager | None = None,
) -> FastAPI:
    """Build the API. Without arguments, settings come from the config file."""
    if settings is None:
        settings = resolve_server_settings(load_config())
        setup_logging(level=settings.log_level, json_format=settings.log_json)
    if manager is None:
        manager = ConnectionManager(settings)
    setup_sentry(settings.sentry_dsn, settings.sentry_environment)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log = structlog.get_logger()
        log.info("starting pg-console api", preview_mode=settings.preview_mode)
        yield
        manager.disconnect()
        log.info("pg-console api stopped")

    app = FastAPI(
        title="pg-console",
        description="Postgres administration console API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connections = manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(router)
    app.include_router(router, prefix=API_PREFIX, include_in_schema=False)
    return app
