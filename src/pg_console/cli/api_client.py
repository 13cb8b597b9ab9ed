"""httpx client for the pg-console HTTP API.

Translates transport failures into NetworkError and ``{"error": ...}``
responses into ApiError so the console reports both the same way.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pg_console.api.schemas import QueryResponse
from pg_console.core.exceptions import ApiError, NetworkError, TimeoutError
from pg_console.core.models import (
    ColumnInfo,
    ConnectionConfig,
    SchemaInfo,
    TableInfo,
    TablePage,
)


class ConsoleClient:
    """Typed wrapper around the API endpoints."""

    def __init__(
        self,
        base_url: str,
        http: httpx.Client | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=self.base_url, timeout=timeout)

    def __enter__(self) -> ConsoleClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        log = structlog.get_logger()
        log.debug("api request", method=method, path=path)
        try:
            response = self._http.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request to {self.base_url}{path} timed out: {e}") from e
        except httpx.HTTPError as e:
            msg = f"Cannot reach pg-console server at {self.base_url}: {e}"
            raise NetworkError(msg) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"value": payload}

        if response.is_error:
            message = payload.get("error") or f"HTTP {response.status_code}"
            raise ApiError(str(message), status_code=response.status_code)
        return payload

    # -- connection --

    def connect(self, config: ConnectionConfig) -> dict[str, Any]:
        return self._request(
            "POST", "/connect", json=config.model_dump(exclude_none=True)
        )

    def disconnect(self) -> dict[str, Any]:
        return self._request("POST", "/disconnect")

    def status(self) -> dict[str, Any]:
        return self._request("GET", "/status")

    def server_info(self) -> dict[str, str]:
        return self._request("GET", "/server-info").get("properties", {})

    # -- query gateway --

    def query(self, sql: str) -> QueryResponse:
        return QueryResponse.model_validate(
            self._request("POST", "/query", json={"query": sql})
        )

    # -- catalog --

    def schemas(self) -> list[SchemaInfo]:
        payload = self._request("GET", "/schemas")
        return [SchemaInfo.model_validate(s) for s in payload.get("schemas", [])]

    def tables(self, schema: str = "public") -> list[TableInfo]:
        payload = self._request("GET", "/tables", params={"schema": schema})
        return [TableInfo.model_validate(t) for t in payload.get("tables", [])]

    def table_structure(self, schema: str, table: str) -> list[ColumnInfo]:
        payload = self._request(
            "GET", "/table-structure", params={"schema": schema, "table": table}
        )
        return [ColumnInfo.model_validate(c) for c in payload.get("columns", [])]

    def table_data(
        self, schema: str, table: str, page: int = 1, limit: int = 50
    ) -> TablePage:
        payload = self._request(
            "GET",
            "/table-data",
            params={"schema": schema, "table": table, "page": page, "limit": limit},
        )
        return TablePage.model_validate(payload)

    # -- rows --

    def insert_row(
        self, schema: str, table: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        payload = self._request(
            "POST", "/row", json={"schema": schema, "table": table, "data": data}
        )
        return payload.get("row")

    def update_row(
        self,
        schema: str,
        table: str,
        data: dict[str, Any],
        where: dict[str, Any],
    ) -> dict[str, Any] | None:
        payload = self._request(
            "PUT",
            "/row",
            json={"schema": schema, "table": table, "data": data, "where": where},
        )
        return payload.get("row")

    def delete_row(self, schema: str, table: str, where: dict[str, Any]) -> int:
        payload = self._request(
            "DELETE", "/row", json={"schema": schema, "table": table, "where": where}
        )
        return int(payload.get("rowCount", 0))
