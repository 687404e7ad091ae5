"""Tests for SQL statement builders."""

import pytest

from stdb_console.core.exceptions import InputError
from stdb_console.core.sql import (
    build_delete_sql,
    build_insert_sql,
    build_select_sql,
    build_update_sql,
    check_identifier,
)


@pytest.mark.unit
class TestCheckIdentifier:
    @pytest.mark.parametrize("name", ["users", "_private", "Player2", "a_b_c"])
    def test_valid(self, name):
        assert check_identifier(name) == name

    @pytest.mark.parametrize(
        "name", ["", "2fast", "users;", "first name", "x OR 1=1", 'a"b']
    )
    def test_invalid(self, name):
        with pytest.raises(InputError, match="Invalid identifier"):
            check_identifier(name)


@pytest.mark.unit
class TestSelect:
    def test_page(self):
        assert build_select_sql("users", 50, 100) == (
            "SELECT * FROM users LIMIT 50 OFFSET 100"
        )

    def test_defaults(self):
        assert build_select_sql("users") == "SELECT * FROM users LIMIT 100 OFFSET 0"

    def test_invalid_limit(self):
        with pytest.raises(InputError, match="Invalid limit"):
            build_select_sql("users", 0)

    def test_invalid_offset(self):
        with pytest.raises(InputError, match="Invalid offset"):
            build_select_sql("users", 10, -5)


@pytest.mark.unit
class TestInsert:
    def test_placeholders_in_column_order(self):
        sql, params = build_insert_sql("users", {"id": 1, "name": "alice"})
        assert sql == "INSERT INTO users (id, name) VALUES (?, ?)"
        assert params == [1, "alice"]

    def test_values_never_inlined(self):
        sql, params = build_insert_sql("users", {"name": "x'); DROP TABLE users;--"})
        assert "DROP" not in sql
        assert params == ["x'); DROP TABLE users;--"]

    def test_empty(self):
        with pytest.raises(InputError, match="at least one column value"):
            build_insert_sql("users", {})

    def test_bad_column(self):
        with pytest.raises(InputError):
            build_insert_sql("users", {"name; --": "x"})


@pytest.mark.unit
class TestUpdate:
    def test_set_values_before_where_values(self):
        sql, params = build_update_sql(
            "users", {"name": "bob", "score": 1.5}, {"id": 7, "region": "eu"}
        )
        assert sql == (
            "UPDATE users SET name = ?, score = ? WHERE id = ? AND region = ?"
        )
        assert params == ["bob", 1.5, 7, "eu"]

    def test_empty_data(self):
        with pytest.raises(InputError, match="at least one column value"):
            build_update_sql("users", {}, {"id": 1})

    def test_empty_where(self):
        with pytest.raises(InputError, match="at least one WHERE column"):
            build_update_sql("users", {"name": "bob"}, {})


@pytest.mark.unit
class TestDelete:
    def test_where(self):
        sql, params = build_delete_sql("users", {"id": 7})
        assert sql == "DELETE FROM users WHERE id = ?"
        assert params == [7]

    def test_empty_where(self):
        with pytest.raises(InputError, match="at least one WHERE column"):
            build_delete_sql("users", {})
