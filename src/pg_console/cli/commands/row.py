"""Single-row insert, update and delete."""

from __future__ import annotations

from typing import Annotated

import typer

from pg_console.cli.commands._shared import (
    get_api,
    output_result,
    parse_json_object,
    resolve_table,
    result_from_rows,
)
from pg_console.core.exceptions import InputError
from pg_console.core.state import load_state

row_app = typer.Typer(help="Insert, update or delete a single row")

TableArg = Annotated[
    str | None,
    typer.Argument(help="Table as SCHEMA.TABLE (default: selected table)"),
]
DataOption = Annotated[
    str | None,
    typer.Option("--data", help='Column values as a JSON object, e.g. {"name": "Dana"}'),
]
WhereOption = Annotated[
    str | None,
    typer.Option("--where", help="Equality match as a JSON object, usually the full row"),
]


@row_app.callback(invoke_without_command=True)
def row_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@row_app.command("insert")
def row_insert(
    ctx: typer.Context,
    table: TableArg = None,
    data: DataOption = None,
) -> None:
    """Insert a row and print it as stored, server defaults included."""
    schema_name, table_name = resolve_table(table, load_state())
    values = parse_json_object(data, "--data")
    with get_api(ctx) as api:
        row = api.insert_row(schema_name, table_name, values)
    output_result(ctx, result_from_rows([row] if row else []))


@row_app.command("update")
def row_update(
    ctx: typer.Context,
    table: TableArg = None,
    data: DataOption = None,
    where: WhereOption = None,
) -> None:
    """Update the rows matching --where and print the first updated row."""
    schema_name, table_name = resolve_table(table, load_state())
    values = parse_json_object(data, "--data")
    match = parse_json_object(where, "--where")
    if not values:
        raise InputError("--data is required")
    if not match:
        raise InputError("--where is required")
    with get_api(ctx) as api:
        row = api.update_row(schema_name, table_name, values, match)
    if row is None:
        typer.echo("No row matched")
        return
    output_result(ctx, result_from_rows([row]))


@row_app.command("delete")
def row_delete(
    ctx: typer.Context,
    table: TableArg = None,
    where: WhereOption = None,
) -> None:
    """Delete the rows matching --where."""
    schema_name, table_name = resolve_table(table, load_state())
    match = parse_json_object(where, "--where")
    if not match:
        raise InputError("--where is required")
    with get_api(ctx) as api:
        count = api.delete_row(schema_name, table_name, match)
    typer.echo(f"Deleted {count} row{'' if count == 1 else 's'}")
