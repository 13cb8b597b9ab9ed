"""Console-side session state.

Keeps the connection flag, the selected table with its current page, and
the query history between console invocations in a small JSON file.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from pg_console.core.exceptions import ConfigError, InputError

DEFAULT_STATE_PATH = Path.home() / ".config" / "pg-console" / "state.json"

MAX_HISTORY = 20


def state_path() -> Path:
    override = os.environ.get("PG_CONSOLE_STATE")
    return Path(override) if override else DEFAULT_STATE_PATH


class QueryHistory(BaseModel):
    """Recent queries, newest first, capped and de-duplicated by exact text."""

    entries: list[str] = []

    def add(self, query: str) -> None:
        text = query.strip()
        if not text:
            return
        self.entries = [text, *(q for q in self.entries if q != text)][:MAX_HISTORY]

    def get(self, index: int) -> str:
        """Return entry ``index`` counted from 1 (the newest)."""
        if not 1 <= index <= len(self.entries):
            raise InputError(
                f"No history entry {index}. History holds {len(self.entries)} entries."
            )
        return self.entries[index - 1]

    def clear(self) -> None:
        self.entries = []


class SelectedTable(BaseModel):
    schema_name: str = "public"
    table: str
    page: int = 1
    limit: int = 50

    @property
    def ref(self) -> str:
        return f"{self.schema_name}.{self.table}"


class ConsoleState(BaseModel):
    connected: bool = False
    connection: dict[str, str | int] = {}
    selected: SelectedTable | None = None
    history: QueryHistory = Field(default_factory=QueryHistory)

    def select(self, schema: str, table: str) -> SelectedTable:
        if self.selected is None or self.selected.ref != f"{schema}.{table}":
            self.selected = SelectedTable(schema_name=schema, table=table)
        return self.selected

    def mark_connected(self, connection: dict[str, str | int]) -> None:
        self.connected = True
        self.connection = connection

    def mark_disconnected(self) -> None:
        self.connected = False
        self.connection = {}
        self.selected = None


def load_state(path: Path | None = None) -> ConsoleState:
    """Read the state file; a missing file yields a fresh state."""
    path = path or state_path()
    if not path.exists():
        return ConsoleState()
    try:
        return ConsoleState.model_validate(json.loads(path.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Corrupt console state in {path}: {e}") from e


def save_state(state: ConsoleState, path: Path | None = None) -> None:
    path = path or state_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(state.model_dump_json(indent=2))
