"""Shared test fixtures for stdb-console."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from stdb_console.cli.main import app
from stdb_console.core.models import ColumnInfo, TableInfo

BASE_URL = "http://localhost:3000"
URL_ARGS = ["--url", BASE_URL, "--database", "game"]

_STDB_ENV = (
    "STDB_URL",
    "STDB_HOST",
    "STDB_PORT",
    "STDB_DATABASE",
    "STDB_TOKEN",
    "STDB_PROFILE",
    "STDB_CONSOLE_SENTRY_DSN",
    "STDB_CONSOLE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep config and saved session out of the real home directory."""
    monkeypatch.setattr(
        "stdb_console.core.config.DEFAULT_CONFIG_PATH", tmp_path / "config.toml"
    )
    monkeypatch.setattr(
        "stdb_console.core.session.DEFAULT_SESSION_PATH", tmp_path / "session.json"
    )
    for name in _STDB_ENV:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def users_table():
    return TableInfo(
        name="users",
        columns=[
            ColumnInfo(name="id", type="u32"),
            ColumnInfo(name="name", type="String"),
            ColumnInfo(name="score", type="f64", nullable=True),
            ColumnInfo(name="active", type="bool"),
        ],
        primaryKey=["id"],
    )


@pytest.fixture
def schema_payload():
    """Body of GET /database/game/schema."""
    return {
        "tables": [
            {
                "name": "users",
                "columns": [
                    {"name": "id", "type": "u32", "nullable": False},
                    {"name": "name", "type": "String", "nullable": False},
                    {"name": "score", "type": "f64", "nullable": True},
                    {"name": "active", "type": "bool", "nullable": False},
                ],
                "primaryKey": ["id"],
            },
            {
                "name": "messages",
                "columns": [
                    {"name": "sender", "type": "Identity", "nullable": False},
                    {"name": "text", "type": "String", "nullable": False},
                ],
            },
        ]
    }
