"""Rich grid formatter for QueryResult output."""

from __future__ import annotations

import json
import shutil
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from pg_console.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pg_console.core.models import QueryResult

_NO_RESULTS = "No results"
_NULL = "NULL"


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


def _cell(value: Any, width: int) -> Text:
    if value is None:
        return Text(_NULL, style="dim italic")
    if isinstance(value, (dict, list)):
        value = json.dumps(value, default=str)
    return Text(_truncate(str(value), width))


@registry.register("table")
class TableFormatter:
    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, result: QueryResult, caption: str | None = None) -> Iterator[str]:
        if not result.columns:
            yield result.status_message or _NO_RESULTS
            return
        if not result.rows:
            yield _NO_RESULTS
            if caption:
                yield caption
            return

        table = Table(show_edge=True, pad_edge=True)
        for col in result.columns:
            table.add_column(col.name, no_wrap=True)

        for row in result.rows:
            table.add_row(*(_cell(v, self.width) for v in row))

        buf = StringIO()
        term_width = shutil.get_terminal_size((120, 24)).columns
        console = Console(file=buf, force_terminal=True, width=term_width)
        console.print(table)
        yield buf.getvalue().rstrip("\n")
        if caption:
            yield caption
