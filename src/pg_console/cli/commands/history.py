"""Query history commands."""

from __future__ import annotations

from typing import Annotated

import typer

from pg_console.cli.commands._shared import console_state, output_result, text_result
from pg_console.cli.commands.query import query_command
from pg_console.core.state import MAX_HISTORY, load_state

history_app = typer.Typer(help=f"Recent queries (newest first, at most {MAX_HISTORY})")


@history_app.callback(invoke_without_command=True)
def history_callback(
    ctx: typer.Context,
    clear: Annotated[
        bool,
        typer.Option("--clear", help="Forget all recorded queries"),
    ] = False,
) -> None:
    """List recorded queries, or clear them with --clear."""
    if ctx.invoked_subcommand:
        return
    if clear:
        with console_state() as state:
            state.history.clear()
        typer.echo("History cleared")
        return

    entries = load_state().history.entries
    if not entries:
        typer.echo("History is empty")
        return
    rows = [(str(i), " ".join(q.split())) for i, q in enumerate(entries, start=1)]
    output_result(ctx, text_result(("#", "query"), rows))


@history_app.command("run")
def history_run(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Entry number, 1 = newest")],
) -> None:
    """Re-run a recorded query."""
    query_command(ctx, file=None, execute=None, last=index)
