from __future__ import annotations

import json
import sys
from pathlib import Path
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
    notify,
    output_result,
    require_success,
)
from stdb_console.cli.helpers import results_filename
from stdb_console.core.exceptions import InputError
from stdb_console.core.exit_codes import ExitCode
from stdb_console.core.models import ResultTable

EXAMPLE_QUERIES = [
    "SELECT * FROM users LIMIT 10;",
    "SELECT COUNT(*) FROM orders;",
    "SELECT * FROM products WHERE price > 100;",
    "INSERT INTO users (name, email) VALUES ('John Doe', 'john@example.com');",
    "UPDATE users SET last_login = NOW() WHERE id = 1;",
]


def _read_sql(execute: str | None, file: str | None) -> str:
    """SQL text from -e, then FILE, then piped stdin, stripped.

    Raises InputError when no source is given or the text is blank.
    """
    if execute is not None:
        sql = execute
    elif file is not None:
        path = Path(file)
        if not path.is_file():
            msg = (
                f"Query file not found: {file}\n"
                "Use -e for inline queries or pipe query via stdin."
            )
            raise InputError(msg)
        sql = path.read_text()
    elif not sys.stdin.isatty():
        sql = sys.stdin.read()
    else:
        msg = "No query provided. Use -e, file path, or pipe to stdin."
        raise InputError(msg)

    sql = sql.strip()
    if not sql:
        msg = "Query is empty."
        raise InputError(msg)
    return sql


def _save_results(path: Path, records: list[dict[str, object]]) -> None:
    path.write_text(json.dumps(records, indent=2, default=str) + "\n")
    notify(f"Results saved to {path}")


def query_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="SQL file to execute"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Execute inline SQL query"),
    ] = None,
    database: DatabaseOption = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Request timeout in seconds"),
    ] = None,
    save: Annotated[
        Path | None,
        typer.Option("--save", help="Also write result rows to this JSON file"),
    ] = None,
    download: Annotated[
        bool,
        typer.Option(
            "--download",
            help="Also write result rows to query-results-<date>.json",
        ),
    ] = False,
    examples: Annotated[
        bool,
        typer.Option("--examples", help="Print example queries and exit"),
    ] = False,
    format: FormatOption = None,
    table: TableFlag = False,
    compact: CompactFlag = False,
    width: WidthOption = None,
    no_header: NoHeaderFlag = False,
) -> None:
    """Execute a SQL query from file, inline (-e), or stdin."""
    if examples:
        for example in EXAMPLE_QUERIES:
            typer.echo(example)
        return

    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if execute is None and file is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        sql = _read_sql(execute, file)
    except InputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(ExitCode.INPUT_ERROR) from exc

    apply_local_database(ctx, database)
    apply_local_format_options(
        ctx,
        format=format,
        table=table,
        compact=compact,
        width=width,
        no_header=no_header,
    )

    with get_client(ctx, timeout=timeout) as client:
        result = client.query(sql)
    require_success(result, "Query failed")

    records = result.data or []
    if save is not None:
        _save_results(save, records)
    if download:
        _save_results(Path(results_filename()), records)

    output_result(ctx, ResultTable.from_records(records))
    if result.rows_affected is not None:
        notify(f"{result.rows_affected} row(s) affected")
