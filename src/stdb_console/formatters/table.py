"""Rich table formatter for ResultTable output."""

from __future__ import annotations

import shutil
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from stdb_console.formatters.base import cell_text, register

if TYPE_CHECKING:
    from collections.abc import Iterator

    from stdb_console.core.models import ResultTable

_NO_RESULTS = "No results"
_NULL = "NULL"


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


@register("table")
class TableFormatter:
    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, result: ResultTable) -> Iterator[str]:
        if not result.rows:
            yield _NO_RESULTS
            return

        table = Table(show_edge=True, pad_edge=True)
        for col in result.columns:
            table.add_column(col, no_wrap=True)

        for row in result.rows:
            cells = (_truncate(cell_text(v, _NULL), self.width) for v in row)
            table.add_row(*(Text(c) for c in cells))

        buf = StringIO()
        term_width = shutil.get_terminal_size((120, 24)).columns
        console = Console(file=buf, force_terminal=True, width=term_width)
        console.print(table)
        yield buf.getvalue().rstrip("\n")
