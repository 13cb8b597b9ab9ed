"""HTTP endpoints: connection, query gateway, catalog and row mutation.

Handlers are plain functions; FastAPI runs them on its thread pool so a
blocking driver call never stalls the event loop.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query

from pg_console.__about__ import __version__
from pg_console.api.dependencies import get_manager, require_live_client
from pg_console.api.schemas import (
    DeleteResponse,
    DeleteRowRequest,
    InsertRowRequest,
    QueryRequest,
    QueryResponse,
    RowResponse,
    SchemasResponse,
    StructureResponse,
    TablesResponse,
    UpdateRowRequest,
)
from pg_console.core import catalog, preview, rows
from pg_console.core.client import GENERIC_CONNECT_MESSAGE, PgClient, test_connection
from pg_console.core.exceptions import InputError, NetworkError, PreviewModeError
from pg_console.core.models import ConnectionConfig, TablePage
from pg_console.core.session import ConnectionManager

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000

router = APIRouter()


def _require_table(table: str | None) -> str:
    if not table:
        raise InputError("Table name is required")
    return table


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


@router.post("/connect")
def connect(
    config: ConnectionConfig,
    manager: ConnectionManager = Depends(get_manager),
) -> dict[str, Any]:
    """Test the credentials, then replace the active connection pool."""
    log = structlog.get_logger()
    if manager.settings.preview_mode:
        log.info("preview mode: simulating successful connection")
        return {"success": True, "previewMode": True}

    result = test_connection(config, manager.settings.connect_timeout)
    if not result.success:
        raise NetworkError(result.error or GENERIC_CONNECT_MESSAGE)

    manager.connect(config)
    log.info("connected", **config.describe())
    return {"success": True}


@router.post("/disconnect")
def disconnect(manager: ConnectionManager = Depends(get_manager)) -> dict[str, bool]:
    manager.disconnect()
    return {"success": True}


@router.get("/status")
def status(manager: ConnectionManager = Depends(get_manager)) -> dict[str, Any]:
    return manager.status()


@router.get("/server-info")
def server_info(
    client: PgClient = Depends(require_live_client),
) -> dict[str, dict[str, str]]:
    return {"properties": catalog.server_info(client)}


# ---------------------------------------------------------------------------
# Query gateway
# ---------------------------------------------------------------------------


@router.post("/query", response_model=QueryResponse)
def run_query(
    body: QueryRequest,
    manager: ConnectionManager = Depends(get_manager),
) -> QueryResponse:
    """Run the submitted SQL verbatim with the connection's privileges."""
    if manager.settings.preview_mode:
        raise PreviewModeError("Query execution is disabled in preview mode.")
    if not isinstance(body.query, str) or not body.query.strip():
        raise InputError("Query is required")
    client = manager.require()

    start_time = time.monotonic()
    result = client.execute_query(body.query)
    execution_time = (time.monotonic() - start_time) * 1000

    structlog.get_logger().info(
        "query executed",
        command=result.status_message,
        row_count=result.row_count,
        execution_ms=f"{execution_time:.1f}",
    )
    return QueryResponse.from_result(result, execution_time)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@router.get("/schemas", response_model=SchemasResponse)
def get_schemas(manager: ConnectionManager = Depends(get_manager)) -> SchemasResponse:
    if manager.settings.preview_mode:
        return SchemasResponse(schemas=preview.list_schemas())
    return SchemasResponse(schemas=catalog.list_schemas(manager.require()))


@router.get("/tables", response_model=TablesResponse)
def get_tables(
    schema: str = Query("public"),
    manager: ConnectionManager = Depends(get_manager),
) -> TablesResponse:
    if manager.settings.preview_mode:
        return TablesResponse(tables=preview.list_tables(schema))
    return TablesResponse(tables=catalog.list_tables(manager.require(), schema))


@router.get("/table-structure", response_model=StructureResponse)
def get_table_structure(
    schema: str = Query("public"),
    table: str | None = Query(None),
    manager: ConnectionManager = Depends(get_manager),
) -> StructureResponse:
    name = _require_table(table)
    if manager.settings.preview_mode:
        return StructureResponse(columns=preview.describe_table(name))
    return StructureResponse(
        columns=catalog.describe_table(manager.require(), schema, name)
    )


@router.get("/table-data", response_model=TablePage)
def get_table_data(
    schema: str = Query("public"),
    table: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    manager: ConnectionManager = Depends(get_manager),
) -> TablePage:
    name = _require_table(table)
    limit = min(limit, MAX_PAGE_SIZE)
    if manager.settings.preview_mode:
        return preview.table_page(name, page, limit)
    return catalog.table_page(manager.require(), schema, name, page, limit)


# ---------------------------------------------------------------------------
# Row mutation
# ---------------------------------------------------------------------------


@router.post("/row", response_model=RowResponse)
def insert_row(
    body: InsertRowRequest,
    client: PgClient = Depends(require_live_client),
) -> RowResponse:
    row = rows.insert_row(client, body.schema_name, body.table, body.data)
    return RowResponse(row=row)


@router.put("/row", response_model=RowResponse)
def update_row(
    body: UpdateRowRequest,
    client: PgClient = Depends(require_live_client),
) -> RowResponse:
    row = rows.update_row(client, body.schema_name, body.table, body.data, body.where)
    return RowResponse(row=row)


@router.delete("/row", response_model=DeleteResponse)
def delete_row(
    body: DeleteRowRequest,
    client: PgClient = Depends(require_live_client),
) -> DeleteResponse:
    count = rows.delete_row(client, body.schema_name, body.table, body.where)
    return DeleteResponse(success=True, row_count=count)
