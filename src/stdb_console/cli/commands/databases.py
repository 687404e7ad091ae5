"""Database and module management commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from stdb_console.cli.commands._shared import (
    CompactFlag,
    FormatOption,
    NoHeaderFlag,
    TableFlag,
    WidthOption,
    apply_local_format_options,
    get_client,
    notify,
    output_result,
    require_success,
)
from stdb_console.cli.helpers import database_info_to_result, databases_to_result
from stdb_console.core.exceptions import ApiError, InputError
from stdb_console.core.forms import validate_module_path
from stdb_console.core.models import ResultTable

db_app = typer.Typer(help="Database and module management", no_args_is_help=True)

NameArgument = Annotated[str, typer.Argument(help="Database name or identity")]


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        msg = "Database name must not be empty"
        raise InputError(msg)
    return name


@db_app.command("list")
def db_list(
    ctx: typer.Context,
    format: FormatOption = None,
    table: TableFlag = False,
    compact: CompactFlag = False,
    width: WidthOption = None,
    no_header: NoHeaderFlag = False,
) -> None:
    """List databases on the server."""
    apply_local_format_options(
        ctx,
        format=format,
        table=table,
        compact=compact,
        width=width,
        no_header=no_header,
    )
    with get_client(ctx) as client:
        names = client.list_databases()
    output_result(ctx, databases_to_result(names))


@db_app.command("create")
def db_create(ctx: typer.Context, name: NameArgument) -> None:
    """Create a new, empty database."""
    name = _clean_name(name)
    with get_client(ctx) as client:
        result = client.create_database(name)
    require_success(result, "Failed to create database")
    notify(f'Database "{name}" created successfully!')
    if result.database is not None:
        output_result(ctx, database_info_to_result(result.database))


@db_app.command("info")
def db_info(ctx: typer.Context, name: NameArgument) -> None:
    """Show identity, owner and host type of a database."""
    name = _clean_name(name)
    with get_client(ctx) as client:
        info = client.get_database_info(name)
    if info is None:
        msg = f"Failed to fetch database info for '{name}'"
        raise ApiError(msg)
    output_result(ctx, database_info_to_result(info))


@db_app.command("delete")
def db_delete(
    ctx: typer.Context,
    name: NameArgument,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Delete a database. This cannot be undone."""
    name = _clean_name(name)
    if not yes:
        typer.confirm(
            f'Are you sure you want to delete the database "{name}"? '
            "This action cannot be undone.",
            abort=True,
        )
    with get_client(ctx) as client:
        deleted = client.delete_database(name)
    if not deleted:
        msg = f"Failed to delete database '{name}'"
        raise ApiError(msg)
    notify(f'Database "{name}" deleted successfully!')


@db_app.command("publish")
def db_publish(
    ctx: typer.Context,
    name: NameArgument,
    module: Annotated[Path, typer.Argument(help="Compiled WebAssembly module (.wasm)")],
) -> None:
    """Publish a compiled module to a database, creating it if needed."""
    name = _clean_name(name)
    module = validate_module_path(module)
    with get_client(ctx) as client:
        result = client.publish_module(name, module)
    require_success(result, "Failed to publish module")
    notify(f'Module published to "{name}" successfully!')
    output_result(
        ctx,
        ResultTable(
            columns=["database", "identity"],
            rows=[(result.database_name, result.database_identity)],
        ),
    )
