"""Data models for stdb-console.

Pydantic models mirroring the JSON shapes of the SpacetimeDB HTTP API,
plus ResultTable, the tabular shape consumed by the output formatters.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ColumnInfo(BaseModel):
    """A single column of a table schema."""

    name: str
    type: str
    nullable: bool = False


class TableInfo(BaseModel):
    """A table as reported by the schema endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    columns: list[ColumnInfo] = []
    primary_key: list[str] | None = Field(default=None, alias="primaryKey")

    def column(self, name: str) -> ColumnInfo | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None


class QueryResult(BaseModel):
    """Outcome of a SQL statement. Failures carry `error` instead of raising."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: list[dict[str, Any]] | None = None
    error: str | None = None
    rows_affected: int | None = Field(default=None, alias="rowsAffected")


class DatabaseInfo(BaseModel):
    identity: str | None = None
    name: str
    owner_identity: str = ""
    host_type: str = "unknown"


class CreateDatabaseResult(BaseModel):
    success: bool
    database: DatabaseInfo | None = None
    error: str | None = None


class PublishResult(BaseModel):
    success: bool
    database_identity: str | None = None
    database_name: str | None = None
    error: str | None = None


class ResultTable(BaseModel):
    """Column names plus positional rows, ready for formatting."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[str]
    rows: list[tuple[Any, ...]]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> ResultTable:
        """Build a table from row dicts.

        Column order follows first appearance across all records;
        keys a record lacks become None.
        """
        columns: list[str] = []
        seen: set[str] = set()
        for record in records:
            for key in record:
                if key not in seen:
                    seen.add(key)
                    columns.append(key)
        rows = [tuple(record.get(col) for col in columns) for record in records]
        return cls(columns=columns, rows=rows)
