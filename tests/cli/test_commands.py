"""
Tests for the rowlink CLI commands.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from rowlink.cli.app import app

runner = CliRunner()


def invoke(db_file, *args):
    return runner.invoke(app, ["--database", db_file, *args])


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "rowlink" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == "rowlink 0.1.0"

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)


class TestTables:
    def test_lists_tables(self, db_file):
        result = invoke(db_file, "tables")
        assert result.exit_code == 0
        assert result.output.split() == ["Countries", "Tasks", "TasksUsers", "Users"]

    def test_database_from_environment(self, db_file, monkeypatch):
        monkeypatch.setenv("ROWLINK_DATABASE_URL", db_file)
        result = runner.invoke(app, ["tables"])
        assert result.exit_code == 0
        assert "TasksUsers" in result.output

    def test_unsupported_url(self):
        result = runner.invoke(app, ["-d", "postgresql://localhost/app", "tables"])
        assert result.exit_code == 1
        assert "only SQLite" in result.output


class TestRows:
    def test_table_output(self, db_file):
        result = invoke(db_file, "rows", "Users")
        assert result.exit_code == 0
        assert "Ann" in result.output
        assert "Bo" in result.output

    def test_json_with_order(self, db_file):
        result = invoke(db_file, "rows", "Users", "--order", "name:desc", "--json")
        assert result.exit_code == 0
        assert [row["name"] for row in json.loads(result.output)] == ["Bo", "Ann"]

    def test_filter_values_are_coerced(self, db_file):
        result = invoke(db_file, "rows", "Users", "--filter", "age:>:35", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"id": 2, "name": "Bo", "age": 40, "countriesId": None}
        ]

    def test_limit_and_offset(self, db_file):
        result = invoke(
            db_file, "rows", "Users", "--order", "id", "--limit", "1", "--offset", "1", "--json"
        )
        assert [row["id"] for row in json.loads(result.output)] == [2]

    def test_no_rows(self, db_file):
        result = invoke(db_file, "rows", "Users", "-f", "id:=:99")
        assert result.exit_code == 0
        assert "No rows." in result.output

    def test_unknown_table(self, db_file):
        result = invoke(db_file, "rows", "Projects")
        assert result.exit_code == 1
        assert 'Table "Projects" does not exist.' in result.output

    def test_bad_column(self, db_file):
        result = invoke(db_file, "rows", "Users", "--filter", "nope:=:1")
        assert result.exit_code == 1
        assert "no such column" in result.output

    def test_malformed_filter(self, db_file):
        result = invoke(db_file, "rows", "Users", "--filter", "age>35")
        assert result.exit_code == 2


class TestCount:
    @pytest.mark.parametrize(
        "args,expected",
        [
            ((), "2"),
            (("--filter", "age:>:35"), "1"),
            (("--limit", "1"), "1"),
            (("--offset", "5"), "0"),
        ],
    )
    def test_count(self, db_file, args, expected):
        result = invoke(db_file, "count", "Users", *args)
        assert result.exit_code == 0
        assert result.output.strip() == expected


class TestRelated:
    def test_multiple_link(self, db_file):
        result = invoke(db_file, "related", "Users", "1", "tasks", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == [{"id": 1, "description": "Write report"}]

    def test_singular_link(self, db_file):
        result = invoke(db_file, "related", "Users", "1", "countries", "--json")
        assert json.loads(result.output) == [{"id": 1, "iso_code": "SE"}]

    def test_reverse_multiple_link(self, db_file):
        result = invoke(db_file, "related", "Tasks", "1", "users", "--json")
        assert [row["name"] for row in json.loads(result.output)] == ["Ann"]

    def test_column_is_not_a_relation(self, db_file):
        result = invoke(db_file, "related", "Users", "1", "name")
        assert result.exit_code == 1

    def test_unknown_relation(self, db_file):
        result = invoke(db_file, "related", "Users", "1", "projects")
        assert result.exit_code == 1
        assert "No relation 'projects' in 'Users'" in result.output

    def test_missing_row(self, db_file):
        result = invoke(db_file, "related", "Users", "99", "tasks")
        assert result.exit_code == 1
        assert "Collection is empty" in result.output
