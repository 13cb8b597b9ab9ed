"""Tests for query source resolution."""

import io
from unittest.mock import patch

import pytest

from pg_console.core.exceptions import InputError
from pg_console.core.query_source import resolve_query_source


@pytest.fixture
def sql_file(tmp_path):
    path = tmp_path / "select_42.sql"
    path.write_text("SELECT 42 AS answer\n")
    return str(path)


@pytest.mark.unit
def test_inline_query():
    assert resolve_query_source(inline="SELECT 1", file_path=None) == "SELECT 1"


@pytest.mark.unit
def test_inline_takes_precedence_over_file(sql_file):
    assert resolve_query_source(inline="SELECT 1", file_path=sql_file) == "SELECT 1"


@pytest.mark.unit
def test_history_entry_beats_file(sql_file):
    result = resolve_query_source(
        inline=None, file_path=sql_file, history_entry="SELECT 7"
    )
    assert result == "SELECT 7"


@pytest.mark.unit
def test_file_query(sql_file):
    assert resolve_query_source(inline=None, file_path=sql_file) == "SELECT 42 AS answer\n"


@pytest.mark.unit
def test_file_not_found_raises_input_error():
    with pytest.raises(InputError, match="Query file not found"):
        resolve_query_source(inline=None, file_path="/nonexistent/file.sql")


@pytest.mark.unit
def test_stdin_query():
    fake_stdin = io.StringIO("SELECT 99")
    fake_stdin.isatty = lambda: False
    with patch("sys.stdin", fake_stdin):
        assert resolve_query_source(inline=None, file_path=None) == "SELECT 99"


@pytest.mark.unit
def test_no_source_on_tty():
    fake_stdin = io.StringIO("")
    fake_stdin.isatty = lambda: True
    with (
        patch("sys.stdin", fake_stdin),
        pytest.raises(InputError, match="No query provided"),
    ):
        resolve_query_source(inline=None, file_path=None)


@pytest.mark.unit
def test_blank_query_rejected():
    with pytest.raises(InputError, match="Query is empty"):
        resolve_query_source(inline="   \n", file_path=None)
