"""Process-wide database handle.

The API keeps exactly one live PgClient. Connecting again replaces it,
closing the previous pool on a best-effort basis.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from pg_console.core.client import PgClient
from pg_console.core.config import ServerSettings
from pg_console.core.exceptions import NotConnectedError
from pg_console.core.models import ConnectionConfig

ClientFactory = Callable[[ConnectionConfig, ServerSettings], PgClient]


class ConnectionManager:
    """Owns the single active PgClient of the server process."""

    def __init__(
        self,
        settings: ServerSettings | None = None,
        client_factory: ClientFactory = PgClient,
    ) -> None:
        self.settings = settings or ServerSettings()
        self._client_factory = client_factory
        self._client: PgClient | None = None
        self._config: ConnectionConfig | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    @property
    def config(self) -> ConnectionConfig | None:
        return self._config

    def connect(self, config: ConnectionConfig) -> PgClient:
        """Open a pool for ``config`` and make it the active client."""
        self.disconnect()
        client = self._client_factory(config, self.settings)
        client.open()
        self._client = client
        self._config = config
        return client

    def require(self) -> PgClient:
        if self._client is None:
            raise NotConnectedError("Database not connected")
        return self._client

    def disconnect(self) -> None:
        """Drop the active client. Close failures are logged and ignored."""
        client, self._client, self._config = self._client, None, None
        if client is None:
            return
        try:
            client.close()
        except Exception as e:
            structlog.get_logger().debug("ignoring close failure", error=str(e))

    def status(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "connected": self.connected,
            "previewMode": self.settings.preview_mode,
        }
        if self._config is not None:
            info.update(self._config.describe())
        return info
