"""Picking an output format for console commands and printing results."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING

import pg_console.formatters  # noqa: F401  (registers csv/json/table)
from pg_console.formatters.base import registry

if TYPE_CHECKING:
    from pg_console.core.models import QueryResult
    from pg_console.formatters.base import Formatter


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_format(format_flag: str | None, default: str | None = None) -> str:
    """--format if given; otherwise the configured default on a terminal, csv in a pipe."""
    if format_flag is not None:
        return format_flag
    return (default or OutputFormat.TABLE) if detect_tty() else OutputFormat.CSV


def get_formatter(
    format_flag: str | None = None,
    *,
    default: str | None = None,
    compact: bool = False,
    width: int = 40,
    no_header: bool = False,
) -> Formatter:
    name = resolve_format(format_flag, default)
    # Each formatter only takes the option that applies to it.
    options: dict[str, dict[str, object]] = {
        OutputFormat.TABLE: {"width": width},
        OutputFormat.JSON: {"compact": compact},
        OutputFormat.CSV: {"no_header": no_header},
    }
    return registry.get(str(name), **options.get(name, {}))


def write_output(
    formatter: Formatter, result: QueryResult, caption: str | None = None
) -> None:
    sys.stdout.writelines(f"{line}\n" for line in formatter.format(result, caption))
