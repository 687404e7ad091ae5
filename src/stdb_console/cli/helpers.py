"""Pure data-shaping helpers for CLI commands."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from stdb_console.core.exceptions import InputError
from stdb_console.core.models import ResultTable

if TYPE_CHECKING:
    from stdb_console.core.models import DatabaseInfo, TableInfo


def parse_assignments(items: list[str] | None) -> dict[str, str]:
    """Parse ["name=alice", "age=30"] into {"name": "alice", "age": "30"}.

    Only the first "=" splits, so values may contain "=". Later
    assignments to the same column win.
    """
    result: dict[str, str] = {}
    for item in items or []:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            msg = f"Invalid assignment: {item!r}. Expected column=value"
            raise InputError(msg)
        result[name] = value
    return result


def results_filename(day: date | None = None) -> str:
    """Default file name for downloaded query results."""
    day = day or date.today()
    return f"query-results-{day.isoformat()}.json"


def tables_to_result(tables: list[TableInfo]) -> ResultTable:
    rows = [
        (
            t.name,
            len(t.columns),
            ", ".join(t.primary_key) if t.primary_key else "",
        )
        for t in tables
    ]
    return ResultTable(columns=["name", "columns", "primary_key"], rows=rows)


def columns_to_result(table: TableInfo) -> ResultTable:
    keys = set(table.primary_key or [])
    rows = [
        (col.name, col.type, col.nullable, col.name in keys) for col in table.columns
    ]
    return ResultTable(columns=["column", "type", "nullable", "primary_key"], rows=rows)


def database_info_to_result(info: DatabaseInfo) -> ResultTable:
    return ResultTable(
        columns=["name", "identity", "owner_identity", "host_type"],
        rows=[(info.name, info.identity, info.owner_identity, info.host_type)],
    )


def databases_to_result(names: list[str]) -> ResultTable:
    return ResultTable(columns=["name"], rows=[(name,) for name in names])


def page_summary(page: int, limit: int, row_count: int) -> str:
    """Human description of a data page, e.g. "Page 2: rows 51-100"."""
    if row_count == 0:
        return f"Page {page + 1}: no rows"
    first = page * limit + 1
    last = page * limit + row_count
    return f"Page {page + 1}: rows {first}-{last}"
