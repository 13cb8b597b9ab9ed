"""Tests for CSVFormatter."""

import pytest

from pg_console.formatters.base import Formatter
from pg_console.formatters.csv import CSVFormatter
from tests.fakes import make_result

_COLUMNS = [("id", 23), ("name", 25)]


def _result(rows=None):
    return make_result(rows if rows is not None else [(1, "alice"), (2, "bob")], _COLUMNS)


@pytest.mark.unit
def test_csv_formatter_implements_protocol():
    assert isinstance(CSVFormatter(), Formatter)


@pytest.mark.unit
def test_csv_formatter_outputs_header_and_data():
    lines = list(CSVFormatter().format(_result()))
    assert lines == ["id,name", "1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_no_header():
    lines = list(CSVFormatter(no_header=True).format(_result()))
    assert lines == ["1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_escapes_commas_and_quotes():
    lines = list(CSVFormatter().format(_result([(1, "last, first"), (2, 'he said "hi"')])))
    assert lines[1] == '1,"last, first"'
    assert lines[2] == '2,"he said ""hi"""'


@pytest.mark.unit
def test_csv_formatter_null_is_empty():
    lines = list(CSVFormatter().format(_result([(1, None)])))
    assert lines[1] == "1,"


@pytest.mark.unit
def test_csv_formatter_bool_and_json():
    result = make_result([(True, {"a": 1})], [("active", 16), ("meta", 3802)])
    lines = list(CSVFormatter(no_header=True).format(result))
    assert lines == ['true,"{""a"": 1}"']


@pytest.mark.unit
def test_csv_formatter_empty_result_header_only():
    assert list(CSVFormatter().format(_result([]))) == ["id,name"]


@pytest.mark.unit
def test_csv_formatter_ignores_caption():
    lines = list(CSVFormatter().format(_result(), caption="Page 1 of 3"))
    assert "Page 1 of 3" not in lines
