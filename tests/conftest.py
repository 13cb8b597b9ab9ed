"""Shared test fixtures for pg-console."""

import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from pg_console.api.app import create_app
from pg_console.cli.main import app
from pg_console.core.config import ServerSettings
from pg_console.core.session import ConnectionManager
from tests.fakes import CONFIG, FakeClient

_ENV_VARS = (
    "PGHOST",
    "PGPORT",
    "PGDATABASE",
    "PGUSER",
    "PGPASSWORD",
    "PG_CONSOLE_PROFILE",
    "PG_CONSOLE_PREVIEW",
    "PG_CONSOLE_URL",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the user's PG* variables and state file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PG_CONSOLE_STATE", str(tmp_path / "state.json"))


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def settings():
    return ServerSettings()


@pytest.fixture
def manager(settings, fake_client):
    """ConnectionManager whose clients are the shared FakeClient."""
    return ConnectionManager(settings, client_factory=lambda config, s: fake_client)


@pytest.fixture
def connected_manager(manager):
    manager.connect(CONFIG)
    return manager


@pytest.fixture
def api(connected_manager, settings):
    """HTTP client for an API that is already connected to the fake database."""
    return TestClient(create_app(settings, connected_manager))


@pytest.fixture
def idle_api(manager, settings):
    """HTTP client for an API with no connection yet."""
    return TestClient(create_app(settings, manager))


@pytest.fixture
def preview_api():
    settings = ServerSettings(preview_mode=True)
    return TestClient(create_app(settings, ConnectionManager(settings)))


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner, tmp_path):
    """Invoke the console against an in-process API client.

    Usage: cli_runner(http_client, "query", "-e", "SELECT 1")
    """
    config_file = tmp_path / "config.toml"

    def invoke(http_client, *args, **kwargs):
        return runner.invoke(
            app,
            ["--config", str(config_file), *args],
            obj={"http_client": http_client},
            **kwargs,
        )

    return invoke
