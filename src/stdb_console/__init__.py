"""stdb-console - terminal administration console for SpacetimeDB."""

from stdb_console.__about__ import __version__

__all__ = ["__version__"]
