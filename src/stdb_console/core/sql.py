"""SQL statement templates for row operations.

Values never appear in the SQL text: every builder returns the statement
with `?` placeholders plus the positional parameters, in placeholder order.
Table and column names are interpolated, so they must be plain identifiers.
"""

from __future__ import annotations

import re
from typing import Any

from stdb_console.core.exceptions import InputError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        msg = f"Invalid identifier: {name!r}"
        raise InputError(msg)
    return name


def _assignments(columns: Any) -> list[str]:
    return [f"{check_identifier(col)} = ?" for col in columns]


def build_select_sql(table: str, limit: int = 100, offset: int = 0) -> str:
    if limit < 1:
        msg = f"Invalid limit: {limit}. Must be at least 1"
        raise InputError(msg)
    if offset < 0:
        msg = f"Invalid offset: {offset}. Must not be negative"
        raise InputError(msg)
    return f"SELECT * FROM {check_identifier(table)} LIMIT {limit} OFFSET {offset}"


def build_insert_sql(table: str, data: dict[str, Any]) -> tuple[str, list[Any]]:
    if not data:
        msg = "Insert requires at least one column value"
        raise InputError(msg)
    columns = ", ".join(check_identifier(col) for col in data)
    placeholders = ", ".join("?" for _ in data)
    sql = f"INSERT INTO {check_identifier(table)} ({columns}) VALUES ({placeholders})"
    return sql, list(data.values())


def build_update_sql(
    table: str, data: dict[str, Any], where: dict[str, Any]
) -> tuple[str, list[Any]]:
    if not data:
        msg = "Update requires at least one column value"
        raise InputError(msg)
    if not where:
        msg = "Update requires at least one WHERE column"
        raise InputError(msg)
    set_clause = ", ".join(_assignments(data))
    where_clause = " AND ".join(_assignments(where))
    sql = f"UPDATE {check_identifier(table)} SET {set_clause} WHERE {where_clause}"
    return sql, [*data.values(), *where.values()]


def build_delete_sql(table: str, where: dict[str, Any]) -> tuple[str, list[Any]]:
    if not where:
        msg = "Delete requires at least one WHERE column"
        raise InputError(msg)
    where_clause = " AND ".join(_assignments(where))
    sql = f"DELETE FROM {check_identifier(table)} WHERE {where_clause}"
    return sql, list(where.values())
