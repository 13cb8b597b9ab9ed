from __future__ import annotations

import sys
from typing import Annotated

import typer

from pg_console.cli.commands._shared import (
    console_state,
    get_api,
    output_result,
    result_from_rows,
)
from pg_console.cli.helpers import query_caption
from pg_console.core.exceptions import InputError
from pg_console.core.exit_codes import ExitCode
from pg_console.core.query_source import resolve_query_source
from pg_console.core.state import load_state


def query_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="SQL file to execute"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Execute inline SQL query"),
    ] = None,
    last: Annotated[
        int | None,
        typer.Option("--last", "-l", help="Re-run history entry N (1 = newest)"),
    ] = None,
) -> None:
    """Execute a SQL query from file, inline (-e), history (--last), or stdin.

    The text runs verbatim on the server's connection; successful queries
    are added to the history.
    """
    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if execute is None and file is None and last is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        history_entry = load_state().history.get(last) if last is not None else None
        sql = resolve_query_source(
            inline=execute, file_path=file, history_entry=history_entry
        )
    except InputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(ExitCode.INPUT_ERROR) from exc

    with get_api(ctx) as api:
        response = api.query(sql)

    with console_state() as state:
        state.history.add(sql)

    result = result_from_rows(
        response.rows,
        [(f.name, f.data_type_id) for f in response.fields],
        status_message=response.command,
    )
    output_result(
        ctx,
        result,
        caption=query_caption(response.row_count, response.execution_time, response.command),
    )
