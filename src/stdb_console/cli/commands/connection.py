"""connect / disconnect / status commands."""

from __future__ import annotations

import typer

from stdb_console.cli.commands._shared import get_config, notify
from stdb_console.core.client import StdbClient
from stdb_console.core.exceptions import NetworkError
from stdb_console.core.exit_codes import ExitCode
from stdb_console.core.session import ConsoleSession, load_saved_connection


def connect_command(ctx: typer.Context) -> None:
    """
    Connect to a SpacetimeDB server and remember the connection.

    Probes the server, loads the table list when a database is given,
    and saves the settings so later commands need no connection flags.
    """
    config = get_config(ctx)
    base_url = config.base_url

    with ConsoleSession() as session:
        if not session.connect(config):
            if config.url:
                msg = (
                    f"Failed to connect to {config.url}. "
                    "Please check the URL and ensure SpacetimeDB is running."
                )
            else:
                msg = (
                    f"Failed to connect to {config.host}:{config.port}. "
                    "Please check the host, port, and ensure SpacetimeDB is running."
                )
            raise NetworkError(msg)

        notify(f"Connected to SpacetimeDB at {base_url}")
        if config.database:
            notify(f"Database: {config.database} ({len(session.tables)} tables)")
        else:
            notify("No database selected. Use --database to browse tables.")


def disconnect_command() -> None:
    """Forget the saved connection."""
    session = ConsoleSession()
    if session.disconnect():
        notify("Disconnected.")
    else:
        notify("No saved connection.")


def status_command(ctx: typer.Context) -> None:
    """Show the active connection and check that the server answers."""
    config = get_config(ctx)
    sources = config.sources
    saved = load_saved_connection()

    typer.echo(f"Endpoint: {config.base_url}")
    for field_name in ("url", "host", "port", "database"):
        value = getattr(config, field_name)
        if value is not None:
            source = sources.get(field_name, "default")
            typer.echo(f"  {field_name}: {value} ({source})")
    token_state = "set" if config.token else "not set"
    typer.echo(f"  token: {token_state}")
    typer.echo(f"Saved Session: {'yes' if saved else 'none'}")

    with StdbClient(config) as client:
        reachable = client.connect()
    if not reachable:
        typer.echo("Status: unreachable")
        raise typer.Exit(ExitCode.NETWORK_ERROR)
    typer.echo("Status: connected")
