"""Schema browsing commands: table list, column definitions, row pages."""

from __future__ import annotations

from typing import Annotated

import typer

from stdb_console.cli.commands._shared import (
    CompactFlag,
    DatabaseOption,
    FormatOption,
    NoHeaderFlag,
    TableFlag,
    WidthOption,
    apply_local_database,
    apply_local_format_options,
    get_client,
    get_table_info,
    notify,
    output_format,
    output_result,
    require_success,
)
from stdb_console.cli.helpers import columns_to_result, page_summary, tables_to_result
from stdb_console.core.models import ResultTable

DEFAULT_PAGE_SIZE = 50


def tables_command(
    ctx: typer.Context,
    database: DatabaseOption = None,
    format: FormatOption = None,
    table: TableFlag = False,
    compact: CompactFlag = False,
    width: WidthOption = None,
    no_header: NoHeaderFlag = False,
) -> None:
    """
    List tables in the database.

    Shows each table with its column count and primary key.
    """
    apply_local_database(ctx, database)
    apply_local_format_options(
        ctx,
        format=format,
        table=table,
        compact=compact,
        width=width,
        no_header=no_header,
    )

    with get_client(ctx) as client:
        tables = client.get_tables()
    output_result(ctx, tables_to_result(tables))


def table_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Table name")],
    database: DatabaseOption = None,
    data: Annotated[
        bool,
        typer.Option("--data", help="Show table rows instead of column definitions"),
    ] = False,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Rows per page"),
    ] = DEFAULT_PAGE_SIZE,
    page: Annotated[
        int,
        typer.Option("--page", min=0, help="Page number, starting at 0"),
    ] = 0,
    format: FormatOption = None,
    table: TableFlag = False,
    compact: CompactFlag = False,
    width: WidthOption = None,
    no_header: NoHeaderFlag = False,
) -> None:
    """
    Show column definitions or rows of a table.

    Without --data, lists columns with type, nullability and primary key.
    With --data, shows one page of rows; use --limit and --page to move.
    """
    apply_local_database(ctx, database)
    apply_local_format_options(
        ctx,
        format=format,
        table=table,
        compact=compact,
        width=width,
        no_header=no_header,
    )

    if not data:
        with get_client(ctx) as client:
            info = get_table_info(client, name)
        output_result(ctx, columns_to_result(info))
        return

    with get_client(ctx) as client:
        result = client.get_table_data(name, limit=limit, offset=page * limit)
    require_success(result, "Failed to load table data")

    records = result.data or []
    output_result(ctx, ResultTable.from_records(records))

    if output_format(ctx) == "table":
        notify(page_summary(page, limit, len(records)))
        if len(records) == limit:
            notify(f"More rows may follow: --page {page + 1}")
