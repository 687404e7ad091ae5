"""Output formatters for stdb-console.

Importing this package registers the built-in table, json and csv formats.
"""

from stdb_console.formatters.base import Formatter, available, create
from stdb_console.formatters.csv import CSVFormatter
from stdb_console.formatters.json import JSONFormatter
from stdb_console.formatters.table import TableFormatter

__all__ = [
    "CSVFormatter",
    "Formatter",
    "JSONFormatter",
    "TableFormatter",
    "available",
    "create",
]
