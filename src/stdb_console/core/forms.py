"""Row payload shaping.

Turns user-typed strings into typed column values using the table schema,
and derives the key columns that identify an existing row.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from stdb_console.core.exceptions import InputError

if TYPE_CHECKING:
    from stdb_console.core.models import ColumnInfo, TableInfo

MODULE_SUFFIX = ".wasm"

# SpacetimeDB algebraic primitives: u8..u256, i8..i256, f32, f64.
_SIZED_INT = re.compile(r"^[ui](8|16|32|64|128|256)$")
_SIZED_FLOAT = re.compile(r"^f(32|64)$")

# Leading numeric text, as a form field reads it: "12abc" is 12.
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_int(value: str) -> int:
    """Integer from the leading digits of `value`, or 0.

    "12.7" is 12 and "1e3" is 1. Words such as "inf" or "nan" have no
    leading digits and give 0.
    """
    match = _INT_PREFIX.match(value)
    if match is None:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        # Past the interpreter's int string length limit.
        return 0


def _parse_float(value: str) -> float:
    """Finite float from the leading numeric text of `value`, or 0.0.

    Overflowing input such as "1e400" gives 0.0, since NaN and infinity
    cannot be sent in a JSON body.
    """
    match = _FLOAT_PREFIX.match(value)
    if match is None:
        return 0.0
    result = float(match.group(1))
    if not math.isfinite(result):
        return 0.0
    return result


def coerce_value(column: ColumnInfo, value: str) -> Any:
    """Coerce one raw string by column type.

    Empty input on a nullable column is NULL. Unparseable numbers become 0.
    """
    if value == "" and column.nullable:
        return None
    type_name = column.type.lower()
    if "int" in type_name or "number" in type_name or _SIZED_INT.match(type_name):
        return _parse_int(value)
    if "float" in type_name or "double" in type_name or _SIZED_FLOAT.match(type_name):
        return _parse_float(value)
    if "bool" in type_name:
        return value.lower() == "true"
    return value


def coerce_row(table: TableInfo, raw: dict[str, str]) -> dict[str, Any]:
    """Coerce every supplied value; unknown column names raise InputError."""
    row: dict[str, Any] = {}
    for name, value in raw.items():
        column = table.column(name)
        if column is None:
            available = ", ".join(col.name for col in table.columns)
            msg = (
                f"Unknown column '{name}' for table '{table.name}'. "
                f"Columns: {available}"
            )
            raise InputError(msg)
        row[name] = coerce_value(column, value)
    return row


def key_columns(table: TableInfo) -> list[str]:
    """Primary key columns, or the first column when none is declared."""
    if table.primary_key:
        return list(table.primary_key)
    if table.columns:
        return [table.columns[0].name]
    return []


def row_key(table: TableInfo, row: dict[str, Any]) -> dict[str, Any]:
    """WHERE map identifying `row`; empty when no key column is present."""
    return {col: row[col] for col in key_columns(table) if col in row}


def validate_module_path(path: Path) -> Path:
    if path.suffix != MODULE_SUFFIX:
        msg = f"Please select a WebAssembly ({MODULE_SUFFIX}) file: {path}"
        raise InputError(msg)
    if not path.is_file():
        msg = f"Module file not found: {path}"
        raise InputError(msg)
    return path
