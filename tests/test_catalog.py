"""Tests for catalog introspection and table browsing."""

import pytest

from pg_console.core import catalog
from tests.fakes import FakeClient, make_result


@pytest.mark.unit
def test_list_schemas_hides_system_schemas():
    client = FakeClient([make_result([("auth",), ("public",)], [("schema_name", 19)])])
    schemas = catalog.list_schemas(client)
    assert [s.schema_name for s in schemas] == ["auth", "public"]
    sql, params = client.calls[0]
    assert "information_schema.schemata" in sql
    assert params == ["pg_catalog", "information_schema", "pg_toast"]


@pytest.mark.unit
def test_list_tables_binds_schema():
    client = FakeClient(
        [
            make_result(
                [("posts", 5, 16384), ("users", 6, None)],
                [("table_name", 19), ("column_count", 20), ("table_size", 20)],
            )
        ]
    )
    tables = catalog.list_tables(client, "public")
    assert tables[0].table_name == "posts"
    assert tables[0].column_count == 5
    assert tables[0].table_size == 16384
    assert tables[1].table_size == 0
    sql, params = client.calls[0]
    assert "BASE TABLE" in sql
    assert params == {"schema": "public"}


@pytest.mark.unit
def test_describe_table_marks_primary_key():
    client = FakeClient(
        [
            make_result(
                [
                    ("id", "integer", "NO", "nextval('users_id_seq'::regclass)", "PRIMARY KEY"),
                    ("email", "character varying", "NO", None, "UNIQUE"),
                    ("name", "character varying", "YES", None, None),
                ],
                [
                    ("column_name", 19),
                    ("data_type", 25),
                    ("is_nullable", 25),
                    ("column_default", 25),
                    ("constraint_type", 25),
                ],
            )
        ]
    )
    columns = catalog.describe_table(client, "public", "users")
    assert [c.column_name for c in columns] == ["id", "email", "name"]
    assert columns[0].is_primary is True
    assert columns[1].constraint_type == "UNIQUE"
    assert columns[1].is_primary is False
    assert columns[2].constraint_type is None
    assert client.calls[0][1] == {"schema": "public", "table": "users"}


@pytest.mark.unit
def test_table_page_counts_then_reads_page():
    rows = [(i, f"user{i}") for i in range(1, 51)]
    client = FakeClient(
        [
            make_result([(120,)], [("count", 20)]),
            make_result(rows, [("id", 23), ("name", 25)]),
        ]
    )
    page = catalog.table_page(client, "public", "users", page=1, limit=50)
    assert page.total_count == 120
    assert page.total_pages == 3
    assert len(page.data) == 50
    assert page.data[0] == {"id": 1, "name": "user1"}

    count_sql, _ = client.calls[0]
    page_sql, page_params = client.calls[1]
    assert count_sql.startswith("SELECT COUNT(*)")
    assert page_sql == 'SELECT * FROM "public"."users" LIMIT %s OFFSET %s'
    assert page_params == [50, 0]


@pytest.mark.unit
def test_table_page_third_page_offset():
    client = FakeClient(
        [
            make_result([(120,)], [("count", 20)]),
            make_result([(101,)], [("id", 23)]),
        ]
    )
    page = catalog.table_page(client, "public", "users", page=3, limit=50)
    assert page.page == 3
    assert client.calls[1][1] == [50, 100]


@pytest.mark.unit
def test_server_info():
    client = FakeClient(
        [
            make_result([("PostgreSQL 16.2",)], [("version", 25)]),
            make_result([("app",)], [("current_database", 19)]),
            make_result([("admin",)], [("current_user", 19)]),
            make_result([("2024-01-01 00:00:00+00",)], [("start", 1184)]),
        ]
    )
    info = catalog.server_info(client)
    assert info == {
        "version": "PostgreSQL 16.2",
        "database": "app",
        "user": "admin",
        "uptime": "2024-01-01 00:00:00+00",
    }
