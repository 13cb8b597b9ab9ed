"""Catalog browsing: schemas, tables, use, describe, data."""

from __future__ import annotations

from typing import Annotated

import typer

from pg_console.cli.commands._shared import (
    console_state,
    get_api,
    is_table_format,
    output_result,
    parse_table_arg,
    resolve_table,
    result_from_rows,
    text_result,
)
from pg_console.cli.helpers import fmt_size, page_caption
from pg_console.core.exceptions import InputError
from pg_console.core.state import load_state


def schemas_command(ctx: typer.Context) -> None:
    """List schemas, system schemas excluded."""
    with get_api(ctx) as api:
        schemas = api.schemas()
    output_result(
        ctx, text_result(("schema_name",), [(s.schema_name,) for s in schemas])
    )


def tables_command(
    ctx: typer.Context,
    schema: Annotated[
        str | None,
        typer.Option("--schema", "-s", help="Schema to list (default: selected or public)"),
    ] = None,
) -> None:
    """List base tables with column counts and total size."""
    if schema is None:
        selected = load_state().selected
        schema = selected.schema_name if selected else "public"

    with get_api(ctx) as api:
        tables = api.tables(schema)

    human = is_table_format(ctx)
    rows = [
        (
            t.table_name,
            t.column_count,
            fmt_size(t.table_size) if human else t.table_size,
        )
        for t in tables
    ]
    output_result(ctx, text_result(("table_name", "column_count", "table_size"), rows))


def use_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table as SCHEMA.TABLE or TABLE")],
) -> None:
    """Select the table that describe, data and row commands default to."""
    schema_name, table_name = parse_table_arg(table)
    with console_state() as state:
        selected = state.select(schema_name, table_name)
    typer.echo(f"Selected {selected.ref}")


def describe_command(
    ctx: typer.Context,
    table: Annotated[
        str | None,
        typer.Argument(help="Table as SCHEMA.TABLE (default: selected table)"),
    ] = None,
) -> None:
    """Show column names, types, nullability, defaults and key constraints."""
    schema_name, table_name = resolve_table(table, load_state())
    with get_api(ctx) as api:
        columns = api.table_structure(schema_name, table_name)

    rows = [
        (
            c.column_name,
            c.data_type,
            c.is_nullable,
            c.column_default,
            c.constraint_type,
        )
        for c in columns
    ]
    output_result(
        ctx,
        text_result(
            ("column_name", "data_type", "is_nullable", "column_default", "constraint_type"),
            rows,
        ),
    )


def data_command(
    ctx: typer.Context,
    table: Annotated[
        str | None,
        typer.Argument(help="Table as SCHEMA.TABLE (default: selected table)"),
    ] = None,
    page: Annotated[
        int | None,
        typer.Option("--page", help="Page number, starting at 1"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Rows per page"),
    ] = None,
    next_page: Annotated[
        bool,
        typer.Option("--next", help="Move to the next page of the selected table"),
    ] = False,
    prev_page: Annotated[
        bool,
        typer.Option("--prev", help="Move to the previous page of the selected table"),
    ] = False,
) -> None:
    """Browse table rows one page at a time.

    The page and limit of the selected table are remembered, so --next and
    --prev step through it. The page is clamped to the last page reported
    by the server.
    """
    if next_page and prev_page:
        raise InputError("Use either --next or --prev, not both")
    if page is not None and page < 1:
        raise InputError("--page must be 1 or greater")
    if limit is not None and limit < 1:
        raise InputError("--limit must be 1 or greater")

    with console_state() as state:
        schema_name, table_name = resolve_table(table, state)
        selected = state.select(schema_name, table_name)
        if limit is not None and limit != selected.limit:
            selected.limit = limit
            selected.page = 1
        if page is not None:
            selected.page = page
        elif next_page:
            selected.page += 1
        elif prev_page:
            selected.page = max(selected.page - 1, 1)

        with get_api(ctx) as api:
            result = api.table_data(
                schema_name, table_name, selected.page, selected.limit
            )
            if result.total_pages and selected.page > result.total_pages:
                selected.page = result.total_pages
                result = api.table_data(
                    schema_name, table_name, selected.page, selected.limit
                )

    output_result(
        ctx,
        result_from_rows(result.data),
        caption=page_caption(result.page, result.total_pages, result.total_count),
    )
