"""Tests for rowlink.orm.registry."""

import pytest

from rowlink.core.errors import TableNotFoundError
from rowlink.orm.registry import SchemaRegistry


class TestSchemaRegistry:
    def test_loader_runs_once(self):
        calls = []

        def loader():
            calls.append(1)
            return ["Users", "Tasks"]

        registry = SchemaRegistry(loader)
        assert not registry.loaded
        assert "Users" in registry
        assert "Tasks" in registry
        assert len(registry) == 2
        assert calls == [1]
        assert registry.loaded

    def test_iteration_is_sorted(self):
        registry = SchemaRegistry.from_names(["Users", "Countries", "Tasks"])
        assert list(registry) == ["Countries", "Tasks", "Users"]

    def test_require(self):
        registry = SchemaRegistry.from_names(["Users"])
        registry.require("Users")
        with pytest.raises(TableNotFoundError, match='Table "Nope" does not exist.'):
            registry.require("Nope")

    def test_names_are_case_sensitive(self):
        registry = SchemaRegistry.from_names(["Users"])
        assert "users" not in registry

    def test_repr(self):
        registry = SchemaRegistry.from_names(["Users"])
        assert repr(registry) == "SchemaRegistry(unloaded)"
        registry.tables
        assert repr(registry) == "SchemaRegistry(1 tables)"

    def test_loaded_from_catalog(self, db):
        assert db.tables == ["Countries", "Tasks", "TasksUsers", "Users"]

    def test_catalog_not_reloaded(self, db, statements):
        db.tables
        db.all("Users")
        db.all("Tasks")
        catalog = [sql for sql in statements if "sqlite_master" in sql]
        assert len(catalog) == 1
