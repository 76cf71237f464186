"""Tests for rowlink.core.errors module."""

import sqlite3

import pytest

from rowlink.core.errors import (
    AmbiguousUpdateError,
    ConfigError,
    DatabaseError,
    DataError,
    EmptyResultError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    RelationError,
    ReentrantIterationError,
    RowLinkError,
    SchemaError,
    StatementError,
    TableNotFoundError,
    UnknownRelationError,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.table is None
        assert ctx.field is None
        assert ctx.sql is None
        assert ctx.metadata == {}

    def test_to_dict_includes_set_fields(self):
        """to_dict includes only non-None fields, metadata flattened."""
        ctx = ErrorContext(table="Users", metadata={"matched": 2})
        assert ctx.to_dict() == {"table": "Users", "matched": 2}

    def test_metadata_not_shared(self):
        a, b = ErrorContext(), ErrorContext()
        a.metadata["x"] = 1
        assert b.metadata == {}


class TestRowLinkError:
    """Test the base error."""

    def test_defaults(self):
        error = RowLinkError("boom")
        assert str(error) == "boom"
        assert error.category is ErrorCategory.INTERNAL
        assert error.cause is None

    def test_with_context_sets_known_fields_and_metadata(self):
        error = RowLinkError("boom").with_context(table="Users", filters=2)
        assert error.context.table == "Users"
        assert error.context.metadata == {"filters": 2}

    def test_cause_is_chained(self):
        cause = ValueError("driver")
        error = RowLinkError("boom", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "driver"

    def test_to_dict(self):
        error = EmptyResultError("Users")
        assert error.to_dict() == {
            "error_type": "EmptyResultError",
            "message": "Collection is empty",
            "category": "DATA",
            "context": {"table": "Users"},
        }

    def test_repr(self):
        assert repr(RowLinkError("boom")) == "RowLinkError('boom', category=INTERNAL)"


class TestHierarchy:
    """Each concrete error sits under its category base."""

    @pytest.mark.parametrize(
        "error,base,category",
        [
            (TableNotFoundError("Users"), SchemaError, ErrorCategory.SCHEMA),
            (UnknownRelationError("tasks", "Users"), RelationError, ErrorCategory.RELATION),
            (EmptyResultError("Users"), DataError, ErrorCategory.DATA),
            (AmbiguousUpdateError("Users", 2), DataError, ErrorCategory.DATA),
            (ReentrantIterationError("Users"), DataError, ErrorCategory.DATA),
            (StatementError("bad"), DatabaseError, ErrorCategory.DATABASE),
            (InvalidConfigError("database_url", "x://"), ConfigError, ErrorCategory.CONFIG),
        ],
    )
    def test_category(self, error, base, category):
        assert isinstance(error, base)
        assert isinstance(error, RowLinkError)
        assert error.category is category


class TestMessages:
    def test_table_not_found(self):
        error = TableNotFoundError("Projects")
        assert error.message == 'Table "Projects" does not exist.'
        assert error.context.table == "Projects"

    def test_unknown_relation(self):
        error = UnknownRelationError("projects", "Users")
        assert error.message == "No relation 'projects' in 'Users'"
        assert error.context.field == "projects"

    def test_ambiguous_update(self):
        error = AmbiguousUpdateError("Users", 0)
        assert error.matched == 0
        assert error.context.metadata == {"matched": 0}

    def test_reentrant_iteration(self):
        error = ReentrantIterationError("Users")
        assert error.message == "Collection 'Users' was iterated again before an earlier pass finished"
        assert error.context.table == "Users"

    def test_statement_error_keeps_sql_and_driver_error(self):
        cause = sqlite3.OperationalError("no such table: Nope")
        error = StatementError("Statement failed", sql="SELECT * FROM Nope ;", cause=cause)
        assert error.sql == "SELECT * FROM Nope ;"
        assert error.to_dict()["context"] == {"sql": "SELECT * FROM Nope ;"}
        assert error.__cause__ is cause

    def test_invalid_config_default_message(self):
        error = InvalidConfigError("log_level", "LOUD")
        assert error.message == "Invalid configuration for log_level: 'LOUD'"
        assert error.key == "log_level"
