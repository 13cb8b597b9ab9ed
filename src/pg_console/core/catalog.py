"""Catalog introspection and table browsing.

Framework-agnostic reads against information_schema and pg_catalog.
Every call is a fresh round trip; nothing is cached.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pg_console.core.models import (
    ColumnInfo,
    SchemaInfo,
    TableInfo,
    TablePage,
    total_pages,
)
from pg_console.core.rows import build_count, build_select_page

if TYPE_CHECKING:
    from pg_console.core.client import PgClient

HIDDEN_SCHEMAS = ("pg_catalog", "information_schema", "pg_toast")

_SCHEMAS_SQL = """
SELECT schema_name
FROM information_schema.schemata
WHERE schema_name NOT IN (%s, %s, %s)
ORDER BY schema_name
"""

_TABLES_SQL = """
SELECT
    t.table_name,
    (SELECT COUNT(*)
     FROM information_schema.columns c
     WHERE c.table_schema = t.table_schema
       AND c.table_name = t.table_name) AS column_count,
    pg_catalog.pg_total_relation_size(
        quote_ident(t.table_schema) || '.' || quote_ident(t.table_name)
    ) AS table_size
FROM information_schema.tables t
WHERE t.table_schema = %(schema)s AND t.table_type = 'BASE TABLE'
ORDER BY t.table_name
"""

# A column may sit in several key constraints; report the strongest one.
_STRUCTURE_SQL = """
SELECT
    c.column_name,
    c.data_type,
    c.is_nullable,
    c.column_default,
    (SELECT tc.constraint_type
     FROM information_schema.key_column_usage kcu
     JOIN information_schema.table_constraints tc
       ON tc.constraint_name = kcu.constraint_name
      AND tc.table_schema = kcu.table_schema
      AND tc.table_name = kcu.table_name
     WHERE kcu.table_schema = c.table_schema
       AND kcu.table_name = c.table_name
       AND kcu.column_name = c.column_name
     ORDER BY CASE tc.constraint_type
         WHEN 'PRIMARY KEY' THEN 0
         WHEN 'UNIQUE' THEN 1
         ELSE 2
     END
     LIMIT 1) AS constraint_type
FROM information_schema.columns c
WHERE c.table_schema = %(schema)s AND c.table_name = %(table)s
ORDER BY c.ordinal_position
"""


def list_schemas(client: PgClient) -> list[SchemaInfo]:
    """User-visible schemas, system schemas excluded, ordered by name."""
    result = client.execute_query(_SCHEMAS_SQL, list(HIDDEN_SCHEMAS))
    return [SchemaInfo(schema_name=row[0]) for row in result.rows]


def list_tables(client: PgClient, schema: str = "public") -> list[TableInfo]:
    """Base tables of ``schema`` with column counts and total size in bytes."""
    result = client.execute_query(_TABLES_SQL, {"schema": schema})
    return [
        TableInfo(table_name=name, column_count=count or 0, table_size=size or 0)
        for name, count, size in result.rows
    ]


def describe_table(client: PgClient, schema: str, table: str) -> list[ColumnInfo]:
    """Column metadata in ordinal order."""
    result = client.execute_query(_STRUCTURE_SQL, {"schema": schema, "table": table})
    return [
        ColumnInfo(
            column_name=name,
            data_type=data_type,
            is_nullable=is_nullable,
            column_default=default,
            constraint_type=constraint_type,
            is_primary=constraint_type == "PRIMARY KEY",
        )
        for name, data_type, is_nullable, default, constraint_type in result.rows
    ]


def table_page(
    client: PgClient, schema: str, table: str, page: int = 1, limit: int = 50
) -> TablePage:
    """Fetch one page of rows plus the total row count."""
    count_stmt = build_count(schema, table)
    count_result = client.execute_query(count_stmt.sql, count_stmt.params)
    total_count = int(count_result.rows[0][0]) if count_result.rows else 0

    page_stmt = build_select_page(schema, table, page, limit)
    data = client.execute_query(page_stmt.sql, page_stmt.params).as_dicts()

    return TablePage(
        data=data,
        total_count=total_count,
        page=page,
        limit=limit,
        total_pages=total_pages(total_count, limit),
    )


def server_info(client: PgClient) -> dict[str, str]:
    """Server version, current database and user, and start time."""
    queries = [
        ("version", "SELECT version()"),
        ("database", "SELECT current_database()"),
        ("user", "SELECT current_user"),
        ("uptime", "SELECT pg_postmaster_start_time()"),
    ]

    info: dict[str, str] = {}
    for key, sql in queries:
        result = client.execute_query(sql)
        if result.rows:
            info[key] = str(result.rows[0][0])
    return info
