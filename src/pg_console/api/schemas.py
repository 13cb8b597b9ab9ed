"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pg_console.core.models import ColumnInfo, QueryResult, SchemaInfo, TableInfo


class QueryRequest(BaseModel):
    # Checked in the route so every bad value gets the same message.
    query: Any = None


class RowRequest(BaseModel):
    """Target table of a row mutation; ``schema`` in JSON."""

    model_config = ConfigDict(populate_by_name=True)

    schema_name: str = Field(alias="schema", min_length=1)
    table: str = Field(min_length=1)


class InsertRowRequest(RowRequest):
    data: dict[str, Any]


class UpdateRowRequest(RowRequest):
    data: dict[str, Any]
    where: dict[str, Any]


class DeleteRowRequest(RowRequest):
    where: dict[str, Any]


class FieldInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    data_type_id: int = Field(alias="dataTypeID")


class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rows: list[dict[str, Any]]
    row_count: int = Field(alias="rowCount")
    fields: list[FieldInfo]
    execution_time: float = Field(alias="executionTime")
    command: str = ""

    @classmethod
    def from_result(cls, result: QueryResult, execution_time: float) -> QueryResponse:
        return cls(
            rows=result.as_dicts(),
            row_count=result.row_count,
            fields=[
                FieldInfo(name=col.name, data_type_id=col.type_oid)
                for col in result.columns
            ],
            execution_time=round(execution_time, 2),
            command=result.status_message,
        )


class SchemasResponse(BaseModel):
    schemas: list[SchemaInfo]


class TablesResponse(BaseModel):
    tables: list[TableInfo]


class StructureResponse(BaseModel):
    columns: list[ColumnInfo]


class RowResponse(BaseModel):
    row: dict[str, Any] | None


class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    row_count: int = Field(alias="rowCount")
