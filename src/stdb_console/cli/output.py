"""Choosing the output format and writing formatted results to stdout."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING

import stdb_console.formatters as formatters

if TYPE_CHECKING:
    from stdb_console.core.models import ResultTable
    from stdb_console.formatters.base import Formatter


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_format(format_flag: str | None, configured: str | None = None) -> str:
    """Pick the output format.

    --format wins, then default_format from the config file. Without either,
    a terminal gets a table and a pipe gets CSV.
    """
    if format_flag is not None:
        return format_flag
    if configured is not None:
        return configured
    return OutputFormat.TABLE.value if detect_tty() else OutputFormat.CSV.value


def get_formatter(
    format_flag: str | None = None,
    *,
    configured: str | None = None,
    compact: bool = False,
    width: int = 40,
    no_header: bool = False,
) -> Formatter:
    return formatters.create(
        resolve_format(format_flag, configured),
        compact=compact,
        width=width,
        no_header=no_header,
    )


def write_output(formatter: Formatter, result: ResultTable) -> None:
    for line in formatter.format(result):
        sys.stdout.write(line + "\n")
