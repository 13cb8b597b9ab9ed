"""pg-console entry point and command registration."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from pg_console.__about__ import __version__
from pg_console.cli.commands.browse import (
    data_command,
    describe_command,
    schemas_command,
    tables_command,
    use_command,
)
from pg_console.cli.commands.config import config_app
from pg_console.cli.commands.connection import (
    connect_command,
    disconnect_command,
    server_info_command,
    status_command,
)
from pg_console.cli.commands.history import history_app
from pg_console.cli.commands.query import query_command
from pg_console.cli.commands.row import row_app
from pg_console.cli.output import OutputFormat
from pg_console.core.config import load_config, resolve_server_settings
from pg_console.core.exceptions import PgConsoleError
from pg_console.core.exit_codes import ExitCode
from pg_console.core.logging import setup_logging
from pg_console.core.monitoring import setup_sentry

app = typer.Typer(
    help="pg-console - Postgres administration console",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.add_typer(history_app, name="history")
app.add_typer(row_app, name="row")
app.command("connect")(connect_command)
app.command("disconnect")(disconnect_command)
app.command("status")(status_command)
app.command("server-info")(server_info_command)
app.command("query")(query_command)
app.command("schemas")(schemas_command)
app.command("tables")(tables_command)
app.command("use")(use_command)
app.command("describe")(describe_command)
app.command("data")(data_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pg-console {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    server: Annotated[
        str | None,
        typer.Option("--server", help="Base URL of the pg-console API"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """pg-console - Postgres administration console."""
    setup_logging(verbose)
    app_config = load_config(config_file)
    settings = resolve_server_settings(app_config)
    setup_sentry(settings.sentry_dsn, settings.sentry_environment)

    ctx.ensure_object(dict).update(
        verbose=verbose,
        server=server,
        config_file=config_file,
        default_format=app_config.default_format,
        format=OutputFormat.TABLE.value if table else (format and format.value),
        compact=compact,
        width=width,
        no_header=no_header,
    )


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: Annotated[
        str | None,
        typer.Option("--host", help="Bind address"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", help="Bind port"),
    ] = None,
    preview: Annotated[
        bool | None,
        typer.Option("--preview/--no-preview", help="Serve sample data instead of a database"),
    ] = None,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from pg_console.api.app import create_app

    obj = ctx.ensure_object(dict)
    settings = resolve_server_settings(
        load_config(obj.get("config_file")),
        host=host,
        port=port,
        preview_mode=preview,
        log_level="debug" if obj.get("verbose") else None,
    )
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    typer.echo(f"pg-console API listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except PgConsoleError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.GENERAL_ERROR) from None
