"""Formatter protocol, the format-name registry and shared cell rendering."""

from __future__ import annotations

import inspect
import json
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from stdb_console.core.models import ResultTable


@runtime_checkable
class Formatter(Protocol):
    """Turns a ResultTable into output lines, yielded one at a time."""

    def format(self, result: ResultTable) -> Iterator[str]: ...


F = TypeVar("F")

_formatters: dict[str, type] = {}


def register(name: str) -> Callable[[F], F]:
    """Class decorator making a formatter selectable as --format NAME."""

    def decorator(cls: F) -> F:
        _formatters[name] = cls  # type: ignore[assignment]
        return cls

    return decorator


def available() -> list[str]:
    return sorted(_formatters)


def create(name: str, **options: Any) -> Formatter:
    """Instantiate the formatter registered as `name`.

    Only the options its constructor declares are passed on, so callers can
    hand over every display setting at once. Unknown names raise KeyError.
    """
    if name not in _formatters:
        msg = f"Unknown format {name!r}. Available: {', '.join(available())}"
        raise KeyError(msg)
    cls = _formatters[name]
    accepted = inspect.signature(cls).parameters
    return cls(**{k: v for k, v in options.items() if k in accepted})


def cell_text(value: Any, null: str = "") -> str:
    """Flat text for one cell.

    SpacetimeDB product, sum and array values arrive as nested JSON and are
    shown re-encoded on one line.
    """
    if value is None:
        return null
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)
