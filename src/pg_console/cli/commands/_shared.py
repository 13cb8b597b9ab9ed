"""Plumbing the console commands have in common.

Reaching the API, loading and saving console state, turning the global
format flags into a formatter, and small argument parsers. Pure text
helpers live in cli.helpers.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pg_console.cli.api_client import ConsoleClient
from pg_console.cli.output import get_formatter, resolve_format, write_output
from pg_console.core.config import load_config, resolve_server_settings
from pg_console.core.exceptions import InputError
from pg_console.core.models import ColumnMeta, QueryResult, type_name
from pg_console.core.state import ConsoleState, load_state, save_state

if TYPE_CHECKING:
    import typer


def server_url(ctx: typer.Context) -> str:
    obj = ctx.ensure_object(dict)
    if obj.get("server"):
        return obj["server"]
    settings = resolve_server_settings(load_config(obj.get("config_file")))
    return settings.base_url


def get_api(ctx: typer.Context) -> ConsoleClient:
    """API client for the configured server; tests inject ``http_client``."""
    obj = ctx.ensure_object(dict)
    return ConsoleClient(server_url(ctx), http=obj.get("http_client"))


@contextmanager
def console_state() -> Iterator[ConsoleState]:
    """Load the console state and save it back when the block succeeds."""
    state = load_state()
    yield state
    save_state(state)


def format_options(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    return {
        "format_flag": obj.get("format"),
        "default": obj.get("default_format"),
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_result(
    ctx: typer.Context, result: QueryResult, caption: str | None = None
) -> None:
    formatter = get_formatter(**format_options(ctx))
    write_output(formatter, result, caption)


def is_table_format(ctx: typer.Context) -> bool:
    obj = ctx.ensure_object(dict)
    return resolve_format(obj.get("format"), obj.get("default_format")) == "table"


def result_from_rows(
    rows: list[dict[str, Any]],
    fields: list[tuple[str, int]] | None = None,
    status_message: str = "",
) -> QueryResult:
    """Build a QueryResult from API rows so the formatters can render it."""
    if fields is None:
        names = list(rows[0]) if rows else []
        fields = [(name, 25) for name in names]
    columns = [
        ColumnMeta(name=name, type_oid=oid, type_name=type_name(oid))
        for name, oid in fields
    ]
    return QueryResult(
        columns=columns,
        rows=[tuple(row.get(col.name) for col in columns) for row in rows],
        row_count=len(rows),
        status_message=status_message,
    )


def text_result(header: tuple[str, ...], rows: list[tuple[Any, ...]]) -> QueryResult:
    return QueryResult(
        columns=[ColumnMeta(name=h, type_oid=25, type_name="text") for h in header],
        rows=rows,
        row_count=len(rows),
        status_message=f"SELECT {len(rows)}",
    )


def parse_table_arg(table_arg: str) -> tuple[str, str]:
    if "." in table_arg:
        schema, table = table_arg.split(".", 1)
        return schema, table
    return "public", table_arg


def resolve_table(table_arg: str | None, state: ConsoleState) -> tuple[str, str]:
    """Explicit SCHEMA.TABLE, else the table picked with ``use``."""
    if table_arg:
        return parse_table_arg(table_arg)
    if state.selected is None:
        raise InputError("No table given. Pass SCHEMA.TABLE or pick one with 'use'.")
    return state.selected.schema_name, state.selected.table


def parse_json_object(value: str | None, option: str) -> dict[str, Any]:
    if value is None:
        return {}
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise InputError(f"{option} is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise InputError(f"{option} must be a JSON object")
    return parsed
