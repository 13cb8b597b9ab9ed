"""Output formatters for pg-console."""

from pg_console.formatters.base import Formatter, FormatterRegistry, registry
from pg_console.formatters.csv import CSVFormatter
from pg_console.formatters.json import JSONFormatter
from pg_console.formatters.table import TableFormatter
