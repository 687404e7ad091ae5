"""CSV formatter for ResultTable output (RFC 4180 compliant)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING

from stdb_console.formatters.base import cell_text, register

if TYPE_CHECKING:
    from collections.abc import Iterator

    from stdb_console.core.models import ResultTable


def _write_row(values: list[str]) -> str:
    buf = StringIO()
    writer = csv.writer(buf)
    writer.writerow(values)
    return buf.getvalue().rstrip("\r\n")


@register("csv")
class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, result: ResultTable) -> Iterator[str]:
        if not self.no_header and result.columns:
            yield _write_row(list(result.columns))

        for row in result.rows:
            yield _write_row([cell_text(v) for v in row])
