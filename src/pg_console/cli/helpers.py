"""Pure formatting helpers for console output."""

from __future__ import annotations


def fmt_size(b: int | None) -> str:
    """Format bytes as human-readable size for table output."""
    if not b:
        return "-"
    units = [("TB", 1 << 40), ("GB", 1 << 30), ("MB", 1 << 20), ("KB", 1 << 10)]
    for suffix, threshold in units:
        if b >= threshold:
            value = b / threshold
            return f"{value:.0f} {suffix}" if value >= 10 else f"{value:.1f} {suffix}"
    return f"{b}B"


def fmt_duration_ms(ms: float | None) -> str:
    """Format a query duration: 0.42 ms, 12 ms, 3.1 s."""
    if ms is None:
        return ""
    if ms < 1:
        return f"{ms:.2f} ms"
    if ms < 1000:
        return f"{ms:.0f} ms"
    return f"{ms / 1000:.1f} s"


def page_caption(page: int, total_pages: int, total_count: int) -> str:
    noun = "row" if total_count == 1 else "rows"
    return f"Page {page} of {max(total_pages, 1)} ({total_count} {noun})"


def query_caption(row_count: int, execution_ms: float, command: str = "") -> str:
    noun = "row" if row_count == 1 else "rows"
    parts = [f"{row_count} {noun}", fmt_duration_ms(execution_ms)]
    if command:
        parts.insert(0, command)
    return " · ".join(parts)
