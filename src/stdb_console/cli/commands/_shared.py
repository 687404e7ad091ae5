"""Shared CLI plumbing for command modules.

Config resolution, client creation, format options, result checks and
notifications. Distinct from cli.helpers, which only shapes data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

import typer

from stdb_console.cli.output import (
    OutputFormat,
    get_formatter,
    resolve_format,
    write_output,
)
from stdb_console.core.client import StdbClient
from stdb_console.core.config import load_config, resolve_config
from stdb_console.core.exceptions import ApiError, InputError
from stdb_console.core.session import load_saved_connection

if TYPE_CHECKING:
    from stdb_console.core.config import ResolvedConfig
    from stdb_console.core.models import ResultTable, TableInfo

DatabaseOption = Annotated[
    str | None,
    typer.Option("--database", "-d", help="Database name or identity"),
]
FormatOption = Annotated[
    OutputFormat | None,
    typer.Option("--format", "-f", help="Output format: table|json|csv"),
]
TableFlag = Annotated[
    bool,
    typer.Option("--table", help="Shorthand for --format table"),
]
CompactFlag = Annotated[
    bool,
    typer.Option("--compact", help="Compact JSON output (no indentation)"),
]
WidthOption = Annotated[
    int | None,
    typer.Option("--width", help="Column width for table format"),
]
NoHeaderFlag = Annotated[
    bool,
    typer.Option("--no-header", help="Suppress header row in CSV output"),
]

_CLI_KEYS = ("url", "host", "port", "database", "token")


def get_config(ctx: typer.Context, timeout: float | None = None) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_file"))

    cli_overrides: dict[str, Any] = {}
    for key in _CLI_KEYS:
        val = obj.get(key)
        if val is not None:
            cli_overrides[key] = val
    if timeout is not None:
        cli_overrides["timeout"] = timeout

    return resolve_config(
        config,
        profile_name=obj.get("profile"),
        session=load_saved_connection(),
        **cli_overrides,
    )


def get_client(ctx: typer.Context, timeout: float | None = None) -> StdbClient:
    return StdbClient(get_config(ctx, timeout=timeout))


def _configured_format(ctx: typer.Context) -> str | None:
    """default_format when the config file sets it explicitly."""
    config = load_config(ctx.ensure_object(dict).get("config_file"))
    if "default_format" in config.model_fields_set:
        return config.default_format
    return None


def format_options(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    return {
        "format_flag": obj.get("format"),
        "configured": _configured_format(ctx),
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_format(ctx: typer.Context) -> str:
    opts = format_options(ctx)
    return resolve_format(opts["format_flag"], opts["configured"])


def output_result(ctx: typer.Context, result: ResultTable) -> None:
    write_output(get_formatter(**format_options(ctx)), result)


def apply_local_format_options(
    ctx: typer.Context,
    *,
    format: OutputFormat | None = None,
    table: bool = False,
    compact: bool = False,
    width: int | None = None,
    no_header: bool = False,
) -> None:
    if format is not None or table or compact or width is not None or no_header:
        obj = ctx.ensure_object(dict)
        if format is not None:
            obj["format"] = format.value
        if table:
            obj["format"] = "table"
        if compact:
            obj["compact"] = compact
        if width is not None:
            obj["width"] = width
        if no_header:
            obj["no_header"] = no_header


def apply_local_database(ctx: typer.Context, database: str | None) -> None:
    if database is not None:
        ctx.ensure_object(dict)["database"] = database


def notify(message: str) -> None:
    """User-facing status line; stderr keeps stdout clean for data."""
    typer.echo(message, err=True)


def require_success(result: Any, fallback: str) -> None:
    """Raise ApiError for a failed result object."""
    if not result.success:
        raise ApiError(result.error or fallback)


def get_table_info(client: StdbClient, name: str) -> TableInfo:
    tables = client.get_tables()
    for table in tables:
        if table.name == name:
            return table
    available = ", ".join(sorted(t.name for t in tables)) or "none"
    msg = f"Table '{name}' not found. Available tables: {available}"
    raise InputError(msg)
