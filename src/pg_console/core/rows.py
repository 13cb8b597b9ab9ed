"""Single-row INSERT/UPDATE/DELETE and paged reads.

Statement builders are pure: they return SQL text plus bound parameters.
Schema, table and column names are interpolated as quoted identifiers
because the protocol cannot bind them; every value is a %s parameter.
Callers are trusted operators.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from psycopg.types.json import Jsonb

from pg_console.core.exceptions import InputError
from pg_console.core.models import Statement, page_offset

if TYPE_CHECKING:
    from pg_console.core.client import PgClient


def quote_ident(name: str) -> str:
    """Double-quote an identifier, doubling any embedded quotes."""
    if not isinstance(name, str) or not name:
        raise InputError("Identifiers must be non-empty strings")
    if "\x00" in name:
        raise InputError("Identifiers must not contain NUL characters")
    return '"' + name.replace('"', '""') + '"'


def _ident(name: str) -> str:
    # %s is the placeholder syntax, so a literal % in a name must be doubled.
    return quote_ident(name).replace("%", "%%")


def qualified_name(schema: str, table: str) -> str:
    return f"{_ident(schema)}.{_ident(table)}"


def _bind(value: Any) -> Any:
    if isinstance(value, dict):
        return Jsonb(value)
    return value


def _where_clause(where: Mapping[str, Any]) -> tuple[str, list[Any]]:
    if not where:
        raise InputError("A non-empty 'where' object is required")
    clauses: list[str] = []
    params: list[Any] = []
    for column, value in where.items():
        if value is None:
            clauses.append(f"{_ident(column)} IS NULL")
        else:
            clauses.append(f"{_ident(column)} = %s")
            params.append(_bind(value))
    return " AND ".join(clauses), params


def build_insert(schema: str, table: str, data: Mapping[str, Any]) -> Statement:
    target = qualified_name(schema, table)
    if not data:
        return Statement(sql=f"INSERT INTO {target} DEFAULT VALUES RETURNING *")
    columns = ", ".join(_ident(col) for col in data)
    placeholders = ", ".join("%s" for _ in data)
    return Statement(
        sql=f"INSERT INTO {target} ({columns}) VALUES ({placeholders}) RETURNING *",
        params=[_bind(v) for v in data.values()],
    )


def build_update(
    schema: str,
    table: str,
    data: Mapping[str, Any],
    where: Mapping[str, Any],
) -> Statement:
    if not data:
        raise InputError("A non-empty 'data' object is required")
    set_clause = ", ".join(f"{_ident(col)} = %s" for col in data)
    where_sql, where_params = _where_clause(where)
    return Statement(
        sql=(
            f"UPDATE {qualified_name(schema, table)} SET {set_clause} "
            f"WHERE {where_sql} RETURNING *"
        ),
        params=[_bind(v) for v in data.values()] + where_params,
    )


def build_delete(schema: str, table: str, where: Mapping[str, Any]) -> Statement:
    where_sql, where_params = _where_clause(where)
    return Statement(
        sql=f"DELETE FROM {qualified_name(schema, table)} WHERE {where_sql}",
        params=where_params,
    )


def build_count(schema: str, table: str) -> Statement:
    return Statement(sql=f"SELECT COUNT(*) AS count FROM {qualified_name(schema, table)}")


def build_select_page(schema: str, table: str, page: int, limit: int) -> Statement:
    return Statement(
        sql=f"SELECT * FROM {qualified_name(schema, table)} LIMIT %s OFFSET %s",
        params=[limit, page_offset(page, limit)],
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def insert_row(
    client: PgClient, schema: str, table: str, data: Mapping[str, Any]
) -> dict[str, Any] | None:
    """Insert one row and return it as stored, server defaults included."""
    stmt = build_insert(schema, table, data)
    return client.execute_query(stmt.sql, stmt.params).first()


def update_row(
    client: PgClient,
    schema: str,
    table: str,
    data: Mapping[str, Any],
    where: Mapping[str, Any],
) -> dict[str, Any] | None:
    """Update rows matching ``where``; returns the first updated row or None."""
    stmt = build_update(schema, table, data, where)
    return client.execute_query(stmt.sql, stmt.params).first()


def delete_row(
    client: PgClient, schema: str, table: str, where: Mapping[str, Any]
) -> int:
    """Delete rows matching ``where``. Returns the affected row count."""
    stmt = build_delete(schema, table, where)
    return client.execute_query(stmt.sql, stmt.params).row_count
