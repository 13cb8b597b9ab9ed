"""pg-console - Postgres administration console."""

from pg_console.__about__ import __version__

__all__ = ["__version__"]
