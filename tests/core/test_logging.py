"""Tests for rowlink.core.logging and the events the core emits."""

import json

from structlog.testing import capture_logs

import rowlink
from rowlink.core.logging import configure_from_settings, configure_logging, get_logger
from rowlink.core.settings import RowLinkSettings


def events(logs, name):
    return [entry for entry in logs if entry["event"] == name]


class TestGetLogger:
    def test_package_imports(self):
        assert rowlink.get_logger is get_logger
        assert rowlink.Database is not None

    def test_name_carried_on_events(self):
        with capture_logs() as logs:
            get_logger("rowlink.tests").info("hello")
        assert logs == [{"event": "hello", "logger_name": "rowlink.tests", "log_level": "info"}]

    def test_module_loggers_carry_their_name(self, db):
        with capture_logs() as logs:
            db.all("Users").count()
        executed = events(logs, "statement_executed")
        assert executed[0]["logger_name"] == "rowlink.core.database"

    def test_unnamed(self):
        with capture_logs() as logs:
            get_logger().info("plain")
        assert logs == [{"event": "plain", "log_level": "info"}]


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True, service="rowlink-test")
        get_logger("tests").info("hello", table="Users")
        payload = json.loads(capsys.readouterr().err.strip())
        assert payload["event"] == "hello"
        assert payload["table"] == "Users"
        assert payload["level"] == "info"
        assert payload["logger_name"] == "tests"
        assert payload["service.name"] == "rowlink-test"
        assert "timestamp" in payload

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("tests")
        log.info("quiet")
        log.warning("loud")
        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["loud"]

    def test_configure_after_import_governs_module_loggers(self, db, capsys):
        configure_logging(level="WARNING", json_format=True)
        db.all("Users").count()
        assert capsys.readouterr().err == ""

        configure_logging(level="DEBUG", json_format=True, add_timestamp=False)
        db.all("Users").count()
        lines = capsys.readouterr().err.strip().splitlines()
        payload = json.loads(lines[-1])
        assert payload["event"] == "statement_executed"
        assert payload["logger_name"] == "rowlink.core.database"
        assert "timestamp" not in payload

    def test_from_settings(self, capsys):
        configure_from_settings(RowLinkSettings(log_level="ERROR", log_format="json"))
        log = get_logger("tests")
        log.warning("quiet")
        log.error("loud")
        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["loud"]


class TestCoreEvents:
    def test_statements_logged_at_debug(self, db):
        with capture_logs() as logs:
            db.all("Users").filter("id", "=", 1)["name"]
        executed = events(logs, "statement_executed")
        assert all(entry["log_level"] == "debug" for entry in executed)
        assert executed[-1]["sql"] == "SELECT * FROM Users WHERE id = :filter_0 ;"
        assert executed[-1]["params"] == {"filter_0": 1}

    def test_echo_sql_logs_at_info(self, db):
        db.echo_sql = True
        with capture_logs() as logs:
            db.all("Users").count()
        assert {entry["log_level"] for entry in events(logs, "statement_executed")} == {"info"}

    def test_registry_load_logged_once(self, db):
        with capture_logs() as logs:
            db.all("Users")
            db.all("Tasks")
        loaded = events(logs, "schema_registry_loaded")
        assert len(loaded) == 1
        assert loaded[0]["tables"] == 4

    def test_write_events(self, db):
        with capture_logs() as logs:
            users = db.all("Users").filter("id", "=", 1)
            users["age"] = 31
            users.save()
            users.link(db.all("Tasks").filter("id", "=", 2))
            db.all("Users").filter("id", "=", 2).delete()
        flushed = events(logs, "mutation_flushed")
        assert flushed[0]["table"] == "Users"
        assert flushed[0]["id"] == 1
        assert flushed[0]["fields"] == ["age"]
        assert events(logs, "relation_linked")[0]["relation"] == "tasks"
        assert events(logs, "row_deleted")[0]["id"] == 2
