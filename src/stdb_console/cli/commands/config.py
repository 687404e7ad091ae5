"""Configuration management CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from stdb_console.cli.commands._shared import get_config
from stdb_console.core.config import DEFAULT_CONFIG_PATH, build_base_url, load_config
from stdb_console.core.exceptions import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

config_app = typer.Typer(help="Configuration management commands")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _mask_token(value: str | None) -> str:
    if value is None:
        return "not set"
    return "***"


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display resolved configuration with source attribution."""
    resolved = get_config(ctx)
    config_path: Path | None = ctx.obj.get("config_file")
    sources = resolved.sources

    typer.echo("Connection Settings (resolved):")
    connection_fields = [
        ("url", resolved.url or "not set"),
        ("host", resolved.host or "not set"),
        ("port", str(resolved.port) if resolved.port else "not set"),
        ("database", resolved.database or "not set"),
        ("token", _mask_token(resolved.token)),
    ]
    for field_name, value in connection_fields:
        source = sources.get(field_name, "default")
        typer.echo(f"  {field_name}: {value} ({source})")

    try:
        endpoint = resolved.base_url
    except ConfigError:
        endpoint = "not configured"
    typer.echo(f"  endpoint: {endpoint}")

    typer.echo("")
    typer.echo("General:")
    timeout_source = sources.get("timeout", "default")
    typer.echo(f"  timeout: {resolved.timeout}s ({timeout_source})")
    format_source = sources.get("default_format", "default")
    typer.echo(f"  format: {resolved.default_format} ({format_source})")

    typer.echo("")
    if resolved.active_profile:
        typer.echo(f"Active Profile: {resolved.active_profile}")
    else:
        typer.echo("Active Profile: none")

    display_path = config_path or DEFAULT_CONFIG_PATH
    typer.echo(f"Config File: {display_path}")


@config_app.command("profiles")
def config_profiles(ctx: typer.Context) -> None:
    """List available connection profiles."""
    config_path: Path | None = ctx.obj.get("config_file")
    app_config = load_config(config_path)
    active_profile = ctx.obj.get("profile") or app_config.default_profile

    if not app_config.profiles:
        typer.echo("No profiles configured.")
        display_path = config_path or DEFAULT_CONFIG_PATH
        typer.echo(f"Add profiles to: {display_path}")
        return

    typer.echo("Available Profiles:")
    typer.echo("")
    for name, profile in sorted(app_config.profiles.items()):
        is_active = name == active_profile
        marker = "* " if is_active else "  "
        label = " (active)" if is_active else ""
        typer.echo(f"{marker}{name}{label}")

        try:
            endpoint = build_base_url(profile.url, profile.host, profile.port)
        except ConfigError:
            endpoint = "incomplete"
        display_fields = [("endpoint", endpoint)]
        if profile.database:
            display_fields.append(("database", profile.database))
        if profile.token:
            display_fields.append(("token", _mask_token(profile.token)))

        for field_name, value in display_fields:
            typer.echo(f"      {field_name}: {value}")
        typer.echo("")
