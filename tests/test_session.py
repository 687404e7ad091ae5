"""Tests for saved connection persistence and ConsoleSession."""

import stat

import httpx
import pytest
import respx

from stdb_console.core.config import AppConfig, ConnectionProfile, resolve_config
from stdb_console.core.session import (
    ConsoleSession,
    clear_saved_connection,
    load_saved_connection,
    save_connection,
)

BASE_URL = "http://localhost:3000"


@pytest.mark.unit
class TestSavedConnection:
    def test_missing_file(self, temp_dir):
        assert load_saved_connection(temp_dir / "session.json") is None

    def test_round_trip_keeps_only_set_fields(self, temp_dir):
        path = temp_dir / "session.json"
        save_connection(ConnectionProfile(url=BASE_URL, token="t"), path)

        assert "timeout" not in path.read_text()
        loaded = load_saved_connection(path)
        assert loaded is not None
        assert loaded.url == BASE_URL
        assert loaded.token == "t"

    def test_file_is_private(self, temp_dir):
        path = temp_dir / "nested" / "session.json"
        save_connection(ConnectionProfile(url=BASE_URL), path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_unreadable_file_ignored(self, temp_dir):
        path = temp_dir / "session.json"
        path.write_text("{not json")
        assert load_saved_connection(path) is None

    def test_invalid_values_ignored(self, temp_dir):
        path = temp_dir / "session.json"
        path.write_text('{"port": 99999}')
        assert load_saved_connection(path) is None

    def test_clear(self, temp_dir):
        path = temp_dir / "session.json"
        save_connection(ConnectionProfile(url=BASE_URL), path)
        assert clear_saved_connection(path) is True
        assert not path.exists()
        assert clear_saved_connection(path) is False

    def test_default_path(self, isolated_state):
        save_connection(ConnectionProfile(url=BASE_URL))
        assert (isolated_state / "session.json").exists()
        assert load_saved_connection().url == BASE_URL


@pytest.mark.unit
class TestConsoleSession:
    def test_initial_state(self):
        session = ConsoleSession()
        assert session.client is None
        assert session.is_connected is False
        assert session.tables == []
        assert session.connection_config is None

    @respx.mock
    def test_connect_with_database_loads_tables(self, temp_dir, schema_payload):
        respx.get(f"{BASE_URL}/databases").mock(return_value=httpx.Response(200))
        respx.get(f"{BASE_URL}/database/game/schema").mock(
            return_value=httpx.Response(200, json=schema_payload)
        )
        path = temp_dir / "session.json"
        config = resolve_config(AppConfig(), url=BASE_URL, database="game")

        with ConsoleSession(path) as session:
            assert session.connect(config) is True
            assert session.is_connected
            assert [t.name for t in session.tables] == ["users", "messages"]
            assert session.connection_config is config

        saved = load_saved_connection(path)
        assert saved.url == BASE_URL
        assert saved.database == "game"

    @respx.mock
    def test_connect_without_database_skips_tables(self, temp_dir):
        respx.get(f"{BASE_URL}/databases").mock(return_value=httpx.Response(200))
        config = resolve_config(AppConfig(), url=BASE_URL)

        with ConsoleSession(temp_dir / "session.json") as session:
            assert session.connect(config) is True
            assert session.tables == []

    @respx.mock
    def test_failed_probe_keeps_state(self, temp_dir):
        for endpoint in ("/databases", "/v1/databases", "/status", "/health"):
            respx.get(f"{BASE_URL}{endpoint}").mock(return_value=httpx.Response(503))
        path = temp_dir / "session.json"
        config = resolve_config(AppConfig(), url=BASE_URL)

        session = ConsoleSession(path)
        assert session.connect(config) is False
        assert session.is_connected is False
        assert session.client is None
        assert not path.exists()

    def test_connect_without_endpoint(self, temp_dir):
        session = ConsoleSession(temp_dir / "session.json")
        assert session.connect(resolve_config(AppConfig())) is False
        assert session.is_connected is False

    @respx.mock
    def test_disconnect(self, temp_dir):
        respx.get(f"{BASE_URL}/databases").mock(return_value=httpx.Response(200))
        path = temp_dir / "session.json"
        session = ConsoleSession(path)
        session.connect(resolve_config(AppConfig(), url=BASE_URL))

        assert session.disconnect() is True
        assert session.client is None
        assert session.is_connected is False
        assert session.connection_config is None
        assert not path.exists()

    def test_refresh_tables_when_disconnected(self):
        assert ConsoleSession().refresh_tables() == []

    @respx.mock
    def test_refresh_tables(self, temp_dir, schema_payload):
        respx.get(f"{BASE_URL}/databases").mock(return_value=httpx.Response(200))
        schema = respx.get(f"{BASE_URL}/database/game/schema")
        schema.side_effect = [
            httpx.Response(200, json={"tables": []}),
            httpx.Response(200, json=schema_payload),
        ]
        config = resolve_config(AppConfig(), url=BASE_URL, database="game")

        with ConsoleSession(temp_dir / "session.json") as session:
            session.connect(config)
            assert session.tables == []
            tables = session.refresh_tables()
        assert len(tables) == 2
