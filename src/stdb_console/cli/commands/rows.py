"""Row CRUD commands.

Values are given as column=value pairs and coerced against the live
table schema before the statement is sent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

import typer

from stdb_console.cli.commands._shared import (
    DatabaseOption,
    apply_local_database,
    get_client,
    get_table_info,
    notify,
    require_success,
)
from stdb_console.cli.helpers import parse_assignments
from stdb_console.core.exceptions import InputError
from stdb_console.core.forms import coerce_row, key_columns, row_key

if TYPE_CHECKING:
    from stdb_console.core.models import TableInfo

row_app = typer.Typer(help="Insert, update and delete table rows", no_args_is_help=True)

ValuesArgument = Annotated[
    list[str] | None,
    typer.Argument(help="Column values as column=value"),
]
WhereOption = Annotated[
    list[str] | None,
    typer.Option("--where", "-w", help="Row key as column=value (repeatable)"),
]


def _key_where(info: TableInfo, items: list[str] | None) -> dict[str, Any]:
    """Coerced WHERE map; must name at least one key column."""
    raw = parse_assignments(items)
    if not raw:
        msg = "Use --where column=value to identify the row"
        raise InputError(msg)
    where = coerce_row(info, raw)
    if not row_key(info, where):
        expected = ", ".join(key_columns(info)) or "none"
        msg = (
            "Cannot identify row: --where must include a primary key column "
            f"({expected})"
        )
        raise InputError(msg)
    return where


def _require_values(raw: dict[str, str]) -> None:
    if not raw:
        msg = "Give at least one column=value"
        raise InputError(msg)


def _describe(where: dict[str, Any]) -> str:
    return " AND ".join(f"{k} = {v!r}" for k, v in where.items())


@row_app.command("insert")
def row_insert(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    values: ValuesArgument = None,
    database: DatabaseOption = None,
) -> None:
    """Add a row. Empty values on nullable columns are stored as NULL."""
    apply_local_database(ctx, database)
    raw = parse_assignments(values)
    _require_values(raw)

    with get_client(ctx) as client:
        info = get_table_info(client, table)
        result = client.insert_data(table, coerce_row(info, raw))
    require_success(result, "Operation failed")
    notify(f"Row added successfully ({result.rows_affected} affected)")


@row_app.command("update")
def row_update(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    values: ValuesArgument = None,
    where: WhereOption = None,
    database: DatabaseOption = None,
) -> None:
    """Change columns of the row identified by --where."""
    apply_local_database(ctx, database)
    raw = parse_assignments(values)
    _require_values(raw)

    with get_client(ctx) as client:
        info = get_table_info(client, table)
        key = _key_where(info, where)
        result = client.update_data(table, coerce_row(info, raw), key)
    require_success(result, "Operation failed")
    notify(f"Row updated successfully ({result.rows_affected} affected)")


@row_app.command("delete")
def row_delete(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    where: WhereOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
    database: DatabaseOption = None,
) -> None:
    """Delete the row identified by --where."""
    apply_local_database(ctx, database)

    with get_client(ctx) as client:
        info = get_table_info(client, table)
        key = _key_where(info, where)
        if not yes:
            typer.confirm(
                f"Delete from '{table}' where {_describe(key)}?", abort=True
            )
        result = client.delete_data(table, key)
    require_success(result, "Failed to delete row")
    notify(f"Row deleted successfully ({result.rows_affected} affected)")
