"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from pg_console.core.client import PgClient
from pg_console.core.config import ServerSettings
from pg_console.core.exceptions import PreviewModeError
from pg_console.core.session import ConnectionManager


def get_manager(request: Request) -> ConnectionManager:
    return request.app.state.connections


def get_settings(request: Request) -> ServerSettings:
    return request.app.state.settings


def require_live_client(request: Request) -> PgClient:
    """The active client; refused in preview mode or before /connect."""
    manager = get_manager(request)
    if manager.settings.preview_mode:
        raise PreviewModeError(
            "This operation is disabled in preview mode. "
            "Restart the server without preview mode to use it."
        )
    return manager.require()
