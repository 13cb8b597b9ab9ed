"""``pg-console config``: inspect the layered configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import typer

from pg_console.core.config import (
    DEFAULT_CONFIG_PATH,
    load_config,
    resolve_config,
    resolve_server_settings,
)
from pg_console.core.state import state_path

if TYPE_CHECKING:
    from pg_console.core.config import ResolvedConfig, ServerSettings

config_app = typer.Typer(help="Configuration management commands")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _echo_section(title: str, rows: list[tuple[str, str]]) -> None:
    typer.echo(f"{title}:")
    label_width = max(len(label) for label, _ in rows) + 2
    for label, value in rows:
        typer.echo(f"  {label:<{label_width}}{value}")
    typer.echo("")


def _connection_rows(resolved: ResolvedConfig) -> list[tuple[str, str]]:
    # The password value is never printed, only whether one is set.
    shown = {
        "host": resolved.host,
        "port": str(resolved.port),
        "dbname": resolved.dbname,
        "user": resolved.user or "not set",
        "password": "***" if resolved.password else "not set",
        "sslmode": resolved.sslmode or "auto",
    }
    return [
        ("database" if field == "dbname" else field,
         f"{value:<30} ({resolved.sources.get(field, 'default')})")
        for field, value in shown.items()
    ]


def _server_rows(server: ServerSettings, url_override: str | None) -> list[tuple[str, str]]:
    return [
        ("url", url_override or server.base_url),
        ("bind", f"{server.host}:{server.port}"),
        ("preview_mode", str(server.preview_mode).lower()),
        ("pool_max_size", str(server.pool_max_size)),
        ("idle_timeout", f"{server.idle_timeout}s"),
        ("connect_timeout", f"{server.connect_timeout}s"),
        ("sentry", "enabled" if server.sentry_dsn else "disabled"),
    ]


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named connection profile"),
    ] = None,
) -> None:
    """Show the resolved connection and server settings and where each came from."""
    config_path = ctx.obj.get("config_file")
    app_config = load_config(config_path)
    resolved = resolve_config(app_config, profile_name=profile)

    _echo_section("Connection Settings (resolved)", _connection_rows(resolved))
    _echo_section(
        "Server Settings",
        _server_rows(resolve_server_settings(app_config), ctx.obj.get("server")),
    )

    path = config_path or DEFAULT_CONFIG_PATH
    _echo_section(
        "Files",
        [
            ("Active Profile:", resolved.active_profile or "none"),
            ("Config File:", f"{path} ({'found' if path.exists() else 'not found'})"),
            ("State File:", str(state_path())),
        ],
    )
