"""JSON formatter: an array of row objects keyed by column name."""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any

from stdb_console.formatters.base import register

if TYPE_CHECKING:
    from collections.abc import Iterator

    from stdb_console.core.models import ResultTable


def _json_value(value: Any) -> Any:
    """Nested product and array values stay structured.

    Non-finite floats become null and anything else json cannot encode
    is stringified.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


@register("json")
class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: ResultTable) -> Iterator[str]:
        records = [
            dict(zip(result.columns, map(_json_value, row), strict=True))
            for row in result.rows
        ]
        indent = None if self.compact else 2
        yield json.dumps(records, indent=indent, allow_nan=False)
