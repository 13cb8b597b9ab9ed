"""Connection commands: connect, disconnect, status, server-info."""

from __future__ import annotations

from typing import Annotated

import typer

from pg_console.cli.commands._shared import (
    console_state,
    get_api,
    output_result,
    text_result,
)
from pg_console.core.config import load_config, resolve_config


def connect_command(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named connection profile"),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option("--host", "-H", help="PostgreSQL host"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="PostgreSQL port"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Database name"),
    ] = None,
    user: Annotated[
        str | None,
        typer.Option("--user", "-U", help="User name"),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option("--password", "-W", help="Password"),
    ] = None,
    dsn: Annotated[
        str | None,
        typer.Option("--dsn", help="Connection DSN"),
    ] = None,
    sslmode: Annotated[
        str | None,
        typer.Option("--sslmode", help="SSL mode (default: chosen from the host)"),
    ] = None,
) -> None:
    """Connect the server to a database.

    Parameters resolve as flags > --dsn > PG* environment > profile >
    config defaults. The server tests the credentials before switching.
    """
    obj = ctx.ensure_object(dict)
    resolved = resolve_config(
        load_config(obj.get("config_file")),
        profile_name=profile,
        dsn=dsn,
        host=host,
        port=port,
        database=database,
        user=user,
        password=password,
        sslmode=sslmode,
    )
    config = resolved.to_connection_config()

    with get_api(ctx) as api:
        response = api.connect(config)

    with console_state() as state:
        state.mark_connected(config.describe())

    target = f"{config.user}@{config.host}:{config.port}/{config.database}"
    if response.get("previewMode"):
        typer.echo(f"Connected (preview mode, sample data only): {target}")
    else:
        typer.echo(f"Connected: {target}")


def disconnect_command(ctx: typer.Context) -> None:
    """Close the server's database connection."""
    with get_api(ctx) as api:
        api.disconnect()
    with console_state() as state:
        state.mark_disconnected()
    typer.echo("Disconnected")


def status_command(ctx: typer.Context) -> None:
    """Show the server's connection status and the selected table."""
    with get_api(ctx) as api:
        info = api.status()

    with console_state() as state:
        if info.get("connected"):
            state.mark_connected(
                {k: info[k] for k in ("host", "port", "database", "user") if k in info}
            )
        elif not info.get("previewMode"):
            state.mark_disconnected()
        selected = state.selected.ref if state.selected else "-"

    rows = [
        ("connected", str(bool(info.get("connected"))).lower()),
        ("preview_mode", str(bool(info.get("previewMode"))).lower()),
    ]
    for key in ("host", "port", "database", "user"):
        if key in info:
            rows.append((key, str(info[key])))
    rows.append(("selected_table", selected))
    output_result(ctx, text_result(("property", "value"), rows))


def server_info_command(ctx: typer.Context) -> None:
    """Show server version, database, user and start time."""
    with get_api(ctx) as api:
        props = api.server_info()
    output_result(ctx, text_result(("property", "value"), list(props.items())))
