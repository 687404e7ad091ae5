"""stdb-console main entry point and command registration."""

from __future__ import annotations

import atexit
from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from stdb_console.__about__ import __version__
from stdb_console.cli.commands.config import config_app
from stdb_console.cli.commands.connection import (
    connect_command,
    disconnect_command,
    status_command,
)
from stdb_console.cli.commands.databases import db_app
from stdb_console.cli.commands.query import query_command
from stdb_console.cli.commands.rows import row_app
from stdb_console.cli.commands.tables import table_command, tables_command
from stdb_console.cli.output import OutputFormat  # noqa: TC001
from stdb_console.core.exceptions import StdbConsoleError
from stdb_console.core.logging import setup_logging
from stdb_console.core.monitoring import setup_sentry

app = typer.Typer(
    help="stdb-console - SpacetimeDB administration console",
    no_args_is_help=True,
)

app.command("connect")(connect_command)
app.command("disconnect")(disconnect_command)
app.command("status")(status_command)
app.add_typer(config_app, name="config")
app.command("query")(query_command)
app.command("tables")(tables_command)
app.command("table")(table_command)
app.add_typer(row_app, name="row")
app.add_typer(db_app, name="db")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"stdb-console {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named connection profile"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="Server URL, e.g. http://localhost:3000"),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option("--host", "-H", help="Server host (used with --port)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Server port"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Database name or identity"),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option("--token", "-T", help="Bearer token for authentication"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """stdb-console - SpacetimeDB administration console."""
    setup_logging(verbose)
    setup_sentry()

    transaction = sentry_sdk.start_transaction(
        op="cli", name=ctx.invoked_subcommand or "stdb-console"
    )
    transaction.__enter__()

    def cleanup() -> None:
        transaction.__exit__(None, None, None)
        sentry_sdk.flush(timeout=2)

    atexit.register(cleanup)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["url"] = url
    ctx.obj["host"] = host
    ctx.obj["port"] = port
    ctx.obj["database"] = database
    ctx.obj["token"] = token
    ctx.obj["config_file"] = config_file

    # Format options (global)
    fmt = "table" if table else (format.value if format else None)
    ctx.obj["format"] = fmt
    ctx.obj["compact"] = compact
    ctx.obj["width"] = width
    ctx.obj["no_header"] = no_header


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except StdbConsoleError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
