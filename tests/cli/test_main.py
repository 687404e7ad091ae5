"""Tests for the CLI entry point."""

import pytest

from stdb_console import __version__
from stdb_console.cli.main import app


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "SpacetimeDB" in result.stdout

    def test_no_args_shows_help(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "Usage" in result.output

    @pytest.mark.parametrize(
        "command",
        ["connect", "disconnect", "status", "config", "query", "tables", "table"],
    )
    def test_commands_registered(self, runner, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    @pytest.mark.parametrize(
        ("group", "commands"),
        [
            ("row", ["insert", "update", "delete"]),
            ("db", ["list", "create", "info", "delete", "publish"]),
        ],
    )
    def test_groups_registered(self, runner, group, commands):
        result = runner.invoke(app, [group, "--help"])
        assert result.exit_code == 0
        for command in commands:
            assert command in result.stdout


@pytest.mark.unit
class TestCliVersion:
    def test_version_flag(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"stdb-console {__version__}" in result.stdout

    def test_version_short_flag(self, runner):
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert f"stdb-console {__version__}" in result.stdout


@pytest.mark.unit
class TestCliFlags:
    def test_verbose_flag_accepted(self, runner):
        result = runner.invoke(app, ["--help", "--verbose"])
        assert result.exit_code == 0

    def test_unknown_command_fails(self, runner):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0

    def test_invalid_format_rejected(self, runner):
        result = runner.invoke(app, ["--format", "xml", "tables"])
        assert result.exit_code == 2
