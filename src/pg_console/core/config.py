"""Configuration for pg-console.

Settings live in a TOML file (default ~/.config/pg-console/config.toml)
with named connection profiles and a [server] table:

    default_profile = "local"

    [profiles.local]
    dsn = "postgresql://postgres@localhost:5432/app?sslmode=disable"

    [server]
    port = 8000
    preview_mode = false

Connection parameters are layered, later layers winning:
built-in defaults, profile (--profile, PG_CONSOLE_PROFILE or
default_profile), PG* environment, --dsn, explicit flags.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, Field, ValidationError, computed_field, model_validator

from pg_console.core.exceptions import ConfigError
from pg_console.core.models import ConnectionConfig

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "pg-console" / "config.toml"

APPLICATION_NAME = "pg-console"

SslMode = Literal["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]

# Flag name -> ResolvedConfig field.
_FLAG_FIELDS = {
    "host": "host",
    "port": "port",
    "database": "dbname",
    "user": "user",
    "password": "password",  # pragma: allowlist secret
    "sslmode": "sslmode",
}

_ENV_FIELDS = {
    "PGHOST": "host",
    "PGPORT": "port",
    "PGDATABASE": "dbname",
    "PGUSER": "user",
    "PGPASSWORD": "password",  # pragma: allowlist secret
}

_TRUTHY = {"1", "true", "yes", "on"}


def parse_dsn(dsn: str) -> dict[str, Any]:
    """Split a postgresql:// (or postgres://) URL into connection fields.

    Only the parts present in the URL are returned.
    """
    url = urlparse(dsn)
    if url.scheme not in ("postgresql", "postgres"):
        raise ConfigError(
            f"Invalid DSN scheme: '{url.scheme}'. Expected 'postgresql' or 'postgres'"
        )
    parts = {
        "host": url.hostname,
        "port": url.port,
        "dbname": url.path.strip("/") or None,
        "user": url.username,
        "password": url.password,
        "sslmode": parse_qs(url.query).get("sslmode", [None])[0],
    }
    return {key: value for key, value in parts.items() if value}


class PgProfile(BaseModel):
    """A named connection profile. ``dsn`` fills fields not set explicitly."""

    dsn: str | None = None
    host: str = "localhost"
    port: int = Field(default=5432, ge=1, le=65535)
    dbname: str = "postgres"
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    sslmode: SslMode | None = None

    @model_validator(mode="before")
    @classmethod
    def expand_dsn(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("dsn"):
            return {**parse_dsn(data["dsn"]), **data}
        return data


class ServerSettings(BaseModel):
    """Settings for the HTTP API process."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    url: str | None = None
    preview_mode: bool = False
    allowed_origins: list[str] = ["*"]
    pool_max_size: int = Field(default=10, ge=1)
    idle_timeout: float = 30.0
    connect_timeout: int = 30
    statement_timeout: float = 0.0
    log_level: str = "info"
    log_json: bool = False
    sentry_dsn: str | None = None
    sentry_environment: str = "local"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def base_url(self) -> str:
        """Where the console reaches the API."""
        if self.url:
            return self.url.rstrip("/")
        host = "127.0.0.1" if self.host in ("0.0.0.0", "::") else self.host
        return f"http://{host}:{self.port}"


class AppConfig(BaseModel):
    default_format: str = "table"
    default_profile: str | None = None
    profiles: dict[str, PgProfile] = {}
    server: ServerSettings = ServerSettings()


class ResolvedConfig(BaseModel):
    """Connection parameters after layering, with where each one came from."""

    host: str = "localhost"
    port: int = 5432
    dbname: str = "postgres"
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    sslmode: SslMode | None = None
    active_profile: str | None = None
    sources: dict[str, str] = {}

    def to_connection_config(self) -> ConnectionConfig:
        """Build the /connect payload. Raises ConfigError if incomplete."""
        missing = [name for name in ("user", "password") if not getattr(self, name)]
        if missing:
            raise ConfigError(
                f"Missing connection parameters: {', '.join(missing)}. "
                "Use flags, a profile, or PGUSER/PGPASSWORD."
            )
        return ConnectionConfig(
            host=self.host,
            port=self.port,
            database=self.dbname,
            user=self.user,
            password=self.password,
            sslmode=self.sslmode,
        )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Read the TOML config; a missing file yields the defaults."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return AppConfig()

    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed TOML in {path}: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def _pick_profile(config: AppConfig, name: str | None) -> tuple[str | None, PgProfile | None]:
    name = name or os.environ.get("PG_CONSOLE_PROFILE") or config.default_profile
    if not name:
        return None, None
    if name not in config.profiles:
        available = ", ".join(sorted(config.profiles)) or "none"
        raise ConfigError(f"Unknown profile: '{name}'. Available profiles: {available}")
    return name, config.profiles[name]


def _env_layer() -> list[tuple[str, Any, str]]:
    layer = []
    for var, field in _ENV_FIELDS.items():
        raw = os.environ.get(var)
        if raw is None:
            continue
        value: Any = raw
        if field == "port":
            try:
                value = int(raw)
            except ValueError:
                raise ConfigError(
                    f"Invalid {var} value: '{raw}'. Must be an integer"
                ) from None
        layer.append((field, value, f"env: {var}"))
    return layer


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    dsn: str | None = None,
    **flags: Any,
) -> ResolvedConfig:
    """Layer profile, environment, DSN and flags over the built-in defaults.

    ``flags`` takes the console option names: host, port, database, user,
    password, sslmode. None values are ignored.
    """
    active, profile = _pick_profile(config, profile_name)

    layers: list[tuple[str, Any, str]] = []
    if profile is not None:
        layers += [
            (field, getattr(profile, field), f"profile: {active}")
            for field in sorted(profile.model_fields_set - {"dsn"})
        ]
    layers += _env_layer()
    if dsn:
        layers += [(field, value, "dsn") for field, value in parse_dsn(dsn).items()]
    layers += [
        (field, flags[flag], f"cli: --{flag}")
        for flag, field in _FLAG_FIELDS.items()
        if flags.get(flag) is not None
    ]

    values: dict[str, Any] = {}
    sources = {field: "default" for field in _FLAG_FIELDS.values()}
    for field, value, source in layers:
        values[field] = value
        sources[field] = source

    try:
        return ResolvedConfig(**values, active_profile=active, sources=sources)
    except ValidationError as e:
        raise ConfigError(f"Invalid connection settings: {e}") from e


def resolve_server_settings(config: AppConfig, **overrides: Any) -> ServerSettings:
    """Apply PG_CONSOLE_PREVIEW, PG_CONSOLE_URL, SENTRY_DSN and explicit overrides."""
    data = config.server.model_dump(exclude={"base_url"})

    preview = os.environ.get("PG_CONSOLE_PREVIEW")
    if preview is not None:
        data["preview_mode"] = preview.strip().lower() in _TRUTHY
    if os.environ.get("PG_CONSOLE_URL"):
        data["url"] = os.environ["PG_CONSOLE_URL"]
    if os.environ.get("SENTRY_DSN"):
        data["sentry_dsn"] = os.environ["SENTRY_DSN"]
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ServerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid server settings: {e}") from e
