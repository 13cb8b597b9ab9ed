"""JSON formatter for QueryResult output."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pg_console.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pg_console.core.models import QueryResult


@registry.register("json")
class JSONFormatter:
    """Rows as a JSON array of objects keyed by column name."""

    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: QueryResult, caption: str | None = None) -> Iterator[str]:
        rows = result.as_dicts()
        if self.compact:
            yield json.dumps(rows, default=str)
        else:
            yield json.dumps(rows, indent=2, default=str)
