"""Tests for result, connection and pagination models."""

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

import pytest
from pydantic import ValidationError

from pg_console.core.models import (
    ColumnInfo,
    ConnectionConfig,
    TablePage,
    page_offset,
    to_json_value,
    total_pages,
    type_name,
)
from tests.fakes import make_result


@pytest.mark.unit
def test_type_name_known_and_unknown():
    assert type_name(23) == "int4"
    assert type_name(3802) == "jsonb"
    assert type_name(99999) == "unknown"
    assert type_name(None) == "unknown"


@pytest.mark.unit
class TestToJsonValue:
    def test_scalars_pass_through(self):
        assert to_json_value(None) is None
        assert to_json_value(True) is True
        assert to_json_value(3) == 3
        assert to_json_value("x") == "x"

    def test_decimal_is_exact_string(self):
        assert to_json_value(Decimal("10")) == "10"
        assert to_json_value(Decimal("1.50")) == "1.50"
        assert to_json_value(Decimal("1234567890.1234567891")) == "1234567890.1234567891"

    def test_non_finite_decimal(self):
        assert to_json_value(Decimal("NaN")) == "NaN"
        assert to_json_value(Decimal("Infinity")) == "Infinity"
        assert to_json_value(Decimal("-Infinity")) == "-Infinity"

    def test_float(self):
        assert to_json_value(2.5) == 2.5
        assert to_json_value(float("nan")) == "NaN"
        assert to_json_value(float("inf")) == "Infinity"
        assert to_json_value(float("-inf")) == "-Infinity"

    def test_temporal(self):
        assert to_json_value(date(2024, 1, 15)) == "2024-01-15"
        ts = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        assert to_json_value(ts) == "2024-01-15T10:30:00+00:00"

    def test_uuid_and_bytes(self):
        uid = UUID("12345678-1234-5678-1234-567812345678")
        assert to_json_value(uid) == "12345678-1234-5678-1234-567812345678"
        assert to_json_value(b"\x01\xff") == "\\x01ff"

    def test_nested_json(self):
        value = {"tags": ["a", Decimal("2")], "at": date(2024, 1, 1)}
        assert to_json_value(value) == {"tags": ["a", "2"], "at": "2024-01-01"}


@pytest.mark.unit
class TestQueryResult:
    def test_as_dicts_keys_by_column(self):
        result = make_result([(1, "alice"), (2, None)], [("id", 23), ("name", 25)])
        assert result.as_dicts() == [
            {"id": 1, "name": "alice"},
            {"id": 2, "name": None},
        ]

    def test_first(self):
        result = make_result([(1,), (2,)], [("id", 23)])
        assert result.first() == {"id": 1}

    def test_first_of_empty(self):
        assert make_result([], [("id", 23)]).first() is None


@pytest.mark.unit
class TestConnectionConfig:
    def test_valid(self):
        config = ConnectionConfig(
            host="localhost", port=5432, database="app", user="u", password="p"
        )
        assert config.sslmode is None

    @pytest.mark.parametrize("field", ["host", "database", "user", "password"])
    def test_empty_field_rejected(self, field):
        data = {
            "host": "localhost",
            "port": 5432,
            "database": "app",
            "user": "u",
            "password": "p",
        }
        data[field] = ""
        with pytest.raises(ValidationError):
            ConnectionConfig(**data)

    def test_port_range(self):
        with pytest.raises(ValidationError):
            ConnectionConfig(
                host="localhost", port=70000, database="app", user="u", password="p"
            )

    def test_describe_and_repr_hide_password(self):
        config = ConnectionConfig(
            host="localhost", port=5432, database="app", user="u", password="hunter2"
        )
        assert "password" not in config.describe()
        assert "hunter2" not in repr(config)


@pytest.mark.unit
class TestPagination:
    def test_total_pages_rounds_up(self):
        assert total_pages(120, 50) == 3
        assert total_pages(100, 50) == 2
        assert total_pages(0, 50) == 0

    def test_total_pages_without_limit(self):
        assert total_pages(10, 0) == 0

    def test_page_offset(self):
        assert page_offset(1, 50) == 0
        assert page_offset(3, 50) == 100
        assert page_offset(0, 50) == 0

    def test_table_page_serializes_camel_case(self):
        page = TablePage(data=[], total_count=120, page=1, limit=50, total_pages=3)
        dumped = page.model_dump(by_alias=True)
        assert dumped["totalCount"] == 120
        assert dumped["totalPages"] == 3

    def test_table_page_accepts_camel_case(self):
        page = TablePage.model_validate(
            {"data": [], "totalCount": 5, "page": 1, "limit": 2, "totalPages": 3}
        )
        assert page.total_count == 5
        assert page.total_pages == 3


@pytest.mark.unit
def test_column_info_defaults():
    col = ColumnInfo(column_name="id", data_type="integer", is_nullable="NO")
    assert col.column_default is None
    assert col.constraint_type is None
    assert col.is_primary is False
