"""Connection state for stdb-console.

ConsoleSession holds the live client, connection flag and table list.
A successful connect() persists the connection settings to
session.json so later commands reuse them without flags; disconnect()
removes the file.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from stdb_console.core.client import StdbClient
from stdb_console.core.config import DEFAULT_CONFIG_DIR, ConnectionProfile
from stdb_console.core.exceptions import ConfigError, StdbConsoleError

if TYPE_CHECKING:
    from pathlib import Path

    from stdb_console.core.config import ResolvedConfig
    from stdb_console.core.models import TableInfo

DEFAULT_SESSION_PATH = DEFAULT_CONFIG_DIR / "session.json"


def load_saved_connection(path: Path | None = None) -> ConnectionProfile | None:
    """Return the saved connection, or None if absent or unreadable."""
    if path is None:
        path = DEFAULT_SESSION_PATH
    if not path.exists():
        return None
    try:
        return ConnectionProfile.model_validate_json(path.read_text())
    except (OSError, ValidationError) as e:
        structlog.get_logger().warning(
            "ignoring unreadable saved connection", path=str(path), error=str(e)
        )
        return None


def save_connection(profile: ConnectionProfile, path: Path | None = None) -> Path:
    """Write the connection to disk, readable by the owner only."""
    if path is None:
        path = DEFAULT_SESSION_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(profile.model_dump_json(exclude_unset=True, indent=2))
    return path


def clear_saved_connection(path: Path | None = None) -> bool:
    """Delete the saved connection. Returns True if a file was removed."""
    if path is None:
        path = DEFAULT_SESSION_PATH
    if not path.exists():
        return False
    path.unlink()
    return True


class ConsoleSession:
    """Current connection: client, state flag, tables and settings."""

    def __init__(self, session_path: Path | None = None) -> None:
        self.session_path = session_path
        self.client: StdbClient | None = None
        self.is_connected = False
        self.tables: list[TableInfo] = []
        self.connection_config: ResolvedConfig | None = None

    def __enter__(self) -> ConsoleSession:
        return self

    def __exit__(self, *exc: object) -> None:
        if self.client is not None:
            self.client.close()

    def connect(self, config: ResolvedConfig) -> bool:
        """Probe the endpoint and adopt it on success.

        Tables are only loaded when a database is configured; a server-only
        connection is valid. Failure leaves the previous state untouched.
        """
        log = structlog.get_logger()
        try:
            client = StdbClient(config)
        except ConfigError as e:
            log.error("connection failed", error=e.message)
            return False

        if not client.connect():
            client.close()
            return False

        if self.client is not None:
            self.client.close()
        self.client = client
        self.connection_config = config
        self.is_connected = True
        self.tables = client.get_tables() if config.database else []
        save_connection(config.to_profile(), self.session_path)
        return True

    def disconnect(self) -> bool:
        """Drop the connection. Returns True if a saved connection was removed."""
        if self.client is not None:
            self.client.close()
        self.client = None
        self.is_connected = False
        self.tables = []
        self.connection_config = None
        return clear_saved_connection(self.session_path)

    def refresh_tables(self) -> list[TableInfo]:
        if self.client is None:
            return self.tables
        try:
            self.tables = self.client.get_tables()
        except StdbConsoleError as e:
            structlog.get_logger().error("failed to refresh tables", error=e.message)
        return self.tables
