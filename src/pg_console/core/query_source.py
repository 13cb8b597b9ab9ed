"""Query source resolution for the console.

Resolves the SQL text from one of four sources:
1. Inline (-e flag)        highest priority
2. History entry (--last)
3. File path
4. stdin                   lowest priority
"""

from __future__ import annotations

import sys
from pathlib import Path

from pg_console.core.exceptions import InputError


def resolve_query_source(
    inline: str | None,
    file_path: str | None,
    history_entry: str | None = None,
) -> str:
    """Resolve SQL query from inline, history, file, or stdin.

    Raises InputError when no source is available or the text is blank.
    """
    if inline is not None:
        sql = inline
    elif history_entry is not None:
        sql = history_entry
    elif file_path is not None:
        p = Path(file_path)
        if not p.exists():
            msg = (
                f"Query file not found: {file_path}\n"
                "Use -e for inline queries or pipe query via stdin."
            )
            raise InputError(msg)
        sql = p.read_text()
    elif not sys.stdin.isatty():
        sql = sys.stdin.read()
    else:
        msg = "No query provided. Use -e, file path, or pipe to stdin."
        raise InputError(msg)

    if not sql.strip():
        raise InputError("Query is empty")
    return sql
