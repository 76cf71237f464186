"""
Structured error types for rowlink.

Provides a small hierarchy of typed errors with metadata for error
categorization, structured logging and root cause analysis through error
chaining.

Instead of generic exceptions that lose context, RowLinkError and its
subclasses carry:
- **Category:** What kind of error (schema, relation, data, database, config)
- **Context:** Table, field and SQL text involved, plus free-form metadata
- **Cause:** Chained underlying exception (e.g. the sqlite3 driver error)

Manifesto:
    - **Typed Error Hierarchy:** One class per failure the core can report
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve driver exceptions while adding context
    - **Fail Loud:** Nothing is caught or retried inside the core

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       RowLinkError                               │
        │               (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  SchemaError         RelationError        DataError              │
        │  (SCHEMA)            (RELATION)           (DATA)                 │
        │       │                   │                    │                 │
        │  TableNotFoundError  UnknownRelationError EmptyResultError       │
        │                                           AmbiguousUpdateError   │
        │                                           ReentrantIterationError│
        │                                                                  │
        │  DatabaseError       ConfigError                                 │
        │  (DATABASE)          (CONFIG)                                    │
        │       │                   │                                      │
        │  StatementError      InvalidConfigError                          │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = TableNotFoundError("Userz")
    >>> error.category
    <ErrorCategory.SCHEMA: 'SCHEMA'>
    >>> error.context.table
    'Userz'

    >>> try:
    ...     raise sqlite3.OperationalError("no such column: agee")
    ... except sqlite3.OperationalError as e:
    ...     raise StatementError("Statement failed", sql="SELECT agee", cause=e)
    Traceback (most recent call last):
    ...
    StatementError: Statement failed

Guardrails:
    ❌ DON'T: Raise plain Exception from the core
    ✅ DO: Use the RowLinkError subclass that names the failure

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, rowlink
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dc_field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification and routing.

    Attributes:
        SCHEMA: Unknown table, catalog lookups
        RELATION: Field names that resolve to no column or link
        DATA: Missing rows, ambiguous row targets
        DATABASE: Statement preparation or execution failures
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    SCHEMA = "SCHEMA"
    RELATION = "RELATION"
    DATA = "DATA"
    DATABASE = "DATABASE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        table: Table (or join expression) the failing operation targeted
        field: Field or relation name involved
        sql: SQL text of the failing statement
        metadata: Additional key-value pairs
    """

    table: str | None = None
    field: str | None = None
    sql: str | None = None

    metadata: dict[str, Any] = dc_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "field", "sql"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RowLinkError(Exception):
    """
    Base exception for all rowlink errors.

    Every error raised by the core extends RowLinkError so callers can catch
    the whole family at once while still telling the failures apart.

    Subclasses set ``default_category`` to classify themselves.

    Examples:
        >>> error = RowLinkError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = RowLinkError("Lookup failed").with_context(table="Users")
        >>> error.context.table
        'Users'

        >>> RowLinkError("Test", category=ErrorCategory.DATA).to_dict()["category"]
        'DATA'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RowLinkError:
        """
        Add context to this error (fluent API).

        Usage:
            raise EmptyResultError("Users").with_context(filters=2)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEMA ERRORS
# =============================================================================


class SchemaError(RowLinkError):
    """Schema lookup error."""

    default_category = ErrorCategory.SCHEMA


class TableNotFoundError(SchemaError):
    """A collection was requested for a table the catalog does not list."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f'Table "{table}" does not exist.',
            context=ErrorContext(table=table),
        )


# =============================================================================
# RELATION ERRORS
# =============================================================================


class RelationError(RowLinkError):
    """Relation inference error."""

    default_category = ErrorCategory.RELATION


class UnknownRelationError(RelationError):
    """A field name resolves to neither a column nor an inferable link."""

    def __init__(self, field: str, table: str):
        self.field = field
        self.table = table
        super().__init__(
            f"No relation '{field}' in '{table}'",
            context=ErrorContext(table=table, field=field),
        )


# =============================================================================
# DATA ERRORS
# =============================================================================


class DataError(RowLinkError):
    """Row-level data error."""

    default_category = ErrorCategory.DATA


class EmptyResultError(DataError):
    """Row access was attempted while no current row exists."""

    def __init__(self, table: str):
        self.table = table
        super().__init__("Collection is empty", context=ErrorContext(table=table))


class AmbiguousUpdateError(DataError):
    """An un-iterated save matched zero or several rows instead of one."""

    def __init__(self, table: str, matched: int):
        self.table = table
        self.matched = matched
        super().__init__(
            f"Save on '{table}' must target exactly one row, filters match {matched}",
            context=ErrorContext(table=table, metadata={"matched": matched}),
        )


class ReentrantIterationError(DataError):
    """A collection was iterated again while an earlier pass was still open."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(
            f"Collection '{table}' was iterated again before an earlier pass finished",
            context=ErrorContext(table=table),
        )


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(RowLinkError):
    """Database driver error."""

    default_category = ErrorCategory.DATABASE


class StatementError(DatabaseError):
    """The database rejected a prepared statement or its execution."""

    def __init__(self, message: str, *, sql: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.context.sql = sql
        self.sql = sql


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(RowLinkError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "RowLinkError",
    # Schema
    "SchemaError",
    "TableNotFoundError",
    # Relation
    "RelationError",
    "UnknownRelationError",
    # Data
    "DataError",
    "EmptyResultError",
    "AmbiguousUpdateError",
    "ReentrantIterationError",
    # Database
    "DatabaseError",
    "StatementError",
    # Config
    "ConfigError",
    "InvalidConfigError",
]
