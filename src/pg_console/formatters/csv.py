"""CSV formatter for QueryResult output (RFC 4180 compliant)."""

from __future__ import annotations

import csv
import json
from io import StringIO
from typing import TYPE_CHECKING, Any

from pg_console.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pg_console.core.models import QueryResult


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def _write_row(values: list[str]) -> str:
    buf = StringIO()
    writer = csv.writer(buf)
    writer.writerow(values)
    return buf.getvalue().rstrip("\r\n")


@registry.register("csv")
class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, result: QueryResult, caption: str | None = None) -> Iterator[str]:
        if not self.no_header and result.columns:
            yield _write_row([col.name for col in result.columns])

        for row in result.rows:
            yield _write_row([_text(v) for v in row])
