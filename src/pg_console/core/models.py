"""Query result and catalog models for pg-console.

Pydantic models shared by the database client, the HTTP API and the
console. Rows travel as tuples inside QueryResult and become JSON-safe
dicts at the API boundary.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Mapping from psycopg type OIDs to human-readable names.
# Covers the most common PostgreSQL types; unknown OIDs fall back to "unknown".
_TYPE_NAMES: dict[int, str] = {
    16: "bool",
    17: "bytea",
    20: "int8",
    21: "int2",
    23: "int4",
    25: "text",
    26: "oid",
    114: "json",
    142: "xml",
    700: "float4",
    701: "float8",
    790: "money",
    1042: "bpchar",
    1043: "varchar",
    1082: "date",
    1083: "time",
    1114: "timestamp",
    1184: "timestamptz",
    1186: "interval",
    1700: "numeric",
    2950: "uuid",
    3802: "jsonb",
}


def type_name(type_oid: int | None) -> str:
    if type_oid is None:
        return "unknown"
    return _TYPE_NAMES.get(type_oid, "unknown")


_NON_FINITE = {"nan": "NaN", "inf": "Infinity", "-inf": "-Infinity"}


def to_json_value(val: Any) -> Any:
    """Convert a driver value into something json.dumps accepts.

    numeric stays an exact string; NaN and the infinities of float and
    numeric become "NaN", "Infinity" and "-Infinity".
    """
    if val is None or isinstance(val, (bool, int, str)):
        return val
    if isinstance(val, float):
        return val if math.isfinite(val) else _NON_FINITE[repr(val)]
    if isinstance(val, Decimal):
        return "NaN" if val.is_nan() else str(val)
    if isinstance(val, (datetime, date, time)):
        return val.isoformat()
    if isinstance(val, timedelta):
        return str(val)
    if isinstance(val, UUID):
        return str(val)
    if isinstance(val, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(val).hex()
    if isinstance(val, dict):
        return {str(k): to_json_value(v) for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return [to_json_value(v) for v in val]
    return str(val)


class ColumnMeta(BaseModel):
    """Metadata for a single result column."""

    name: str
    type_oid: int
    type_name: str


class QueryResult(BaseModel):
    """Result of a SQL query execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[ColumnMeta]
    rows: list[tuple[Any, ...]]
    row_count: int
    status_message: str

    def as_dicts(self) -> list[dict[str, Any]]:
        """Rows keyed by column name with JSON-safe values."""
        names = [col.name for col in self.columns]
        return [
            {name: to_json_value(val) for name, val in zip(names, row, strict=True)}
            for row in self.rows
        ]

    def first(self) -> dict[str, Any] | None:
        rows = self.as_dicts()
        return rows[0] if rows else None


class ConnectionConfig(BaseModel):
    """Connection parameters submitted by the operator."""

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    database: str = Field(min_length=1)
    user: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    sslmode: str | None = None

    def describe(self) -> dict[str, Any]:
        """Connection summary that is safe to log or display."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
        }


class ConnectionTestResult(BaseModel):
    success: bool
    error: str | None = None


class Statement(BaseModel):
    """SQL text with its bound parameters."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    sql: str
    params: list[Any] = []


class SchemaInfo(BaseModel):
    schema_name: str


class TableInfo(BaseModel):
    table_name: str
    column_count: int
    table_size: int


class ColumnInfo(BaseModel):
    column_name: str
    data_type: str
    is_nullable: str
    column_default: str | None = None
    constraint_type: str | None = None
    is_primary: bool = False


class TablePage(BaseModel):
    """One page of table rows with offset pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    data: list[dict[str, Any]]
    total_count: int = Field(alias="totalCount")
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")


def total_pages(total_count: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total_count / limit)


def page_offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit
