"""Static sample catalog served when the API runs in preview mode.

Preview mode answers the read-only browsing endpoints from the data
below instead of a live connection. Query execution and row edits are
refused.
"""

from __future__ import annotations

from typing import Any

from pg_console.core.models import (
    ColumnInfo,
    SchemaInfo,
    TableInfo,
    TablePage,
    page_offset,
    total_pages,
)

PREVIEW_SCHEMAS: dict[str, dict[str, int]] = {
    "public": {"users": 6, "posts": 5, "comments": 4},
    "auth": {"sessions": 4, "tokens": 3},
}

PREVIEW_ROWS: dict[str, list[dict[str, Any]]] = {
    "users": [
        {
            "id": 1,
            "name": "Alice Johnson",
            "email": "alice@example.com",
            "created_at": "2024-01-15T10:30:00Z",
            "role": "admin",
            "active": True,
        },
        {
            "id": 2,
            "name": "Bob Smith",
            "email": "bob@example.com",
            "created_at": "2024-02-20T14:22:00Z",
            "role": "user",
            "active": True,
        },
        {
            "id": 3,
            "name": "Carol Williams",
            "email": "carol@example.com",
            "created_at": "2024-03-10T09:15:00Z",
            "role": "user",
            "active": False,
        },
    ],
    "posts": [
        {
            "id": 1,
            "user_id": 1,
            "title": "Getting Started with PostgreSQL",
            "content": "A comprehensive guide...",
            "created_at": "2024-01-20T11:00:00Z",
        },
        {
            "id": 2,
            "user_id": 2,
            "title": "Database Best Practices",
            "content": "Learn about indexing...",
            "created_at": "2024-02-25T16:30:00Z",
        },
    ],
    "comments": [
        {
            "id": 1,
            "post_id": 1,
            "user_id": 2,
            "content": "Great article!",
            "created_at": "2024-01-21T12:00:00Z",
        },
        {
            "id": 2,
            "post_id": 1,
            "user_id": 3,
            "content": "Very helpful, thanks!",
            "created_at": "2024-01-22T09:30:00Z",
        },
    ],
}

_SERIAL = "nextval('{}_id_seq'::regclass)"
_VARCHAR = "character varying"
_TIMESTAMPTZ = "timestamp with time zone"

# (column_name, data_type, is_nullable, column_default)
_STRUCTURE: dict[str, list[tuple[str, str, str, str | None]]] = {
    "users": [
        ("id", "integer", "NO", _SERIAL.format("users")),
        ("name", _VARCHAR, "NO", None),
        ("email", _VARCHAR, "NO", None),
        ("created_at", _TIMESTAMPTZ, "NO", "now()"),
        ("role", _VARCHAR, "NO", "'user'::character varying"),
        ("active", "boolean", "NO", "true"),
    ],
    "posts": [
        ("id", "integer", "NO", _SERIAL.format("posts")),
        ("user_id", "integer", "NO", None),
        ("title", _VARCHAR, "NO", None),
        ("content", "text", "YES", None),
        ("created_at", _TIMESTAMPTZ, "NO", "now()"),
    ],
    "comments": [
        ("id", "integer", "NO", _SERIAL.format("comments")),
        ("post_id", "integer", "NO", None),
        ("user_id", "integer", "NO", None),
        ("content", "text", "NO", None),
        ("created_at", _TIMESTAMPTZ, "NO", "now()"),
    ],
}


def list_schemas() -> list[SchemaInfo]:
    return [SchemaInfo(schema_name=name) for name in PREVIEW_SCHEMAS]


def list_tables(schema: str = "public") -> list[TableInfo]:
    tables = PREVIEW_SCHEMAS.get(schema, {})
    return [
        TableInfo(table_name=name, column_count=count, table_size=0)
        for name, count in tables.items()
    ]


def describe_table(table: str) -> list[ColumnInfo]:
    return [
        ColumnInfo(
            column_name=name,
            data_type=data_type,
            is_nullable=nullable,
            column_default=default,
            constraint_type="PRIMARY KEY" if name == "id" else None,
            is_primary=name == "id",
        )
        for name, data_type, nullable, default in _STRUCTURE.get(table, [])
    ]


def table_page(table: str, page: int = 1, limit: int = 50) -> TablePage:
    rows = PREVIEW_ROWS.get(table, [])
    offset = page_offset(page, limit)
    return TablePage(
        data=rows[offset : offset + limit],
        total_count=len(rows),
        page=page,
        limit=limit,
        total_pages=total_pages(len(rows), limit),
    )
