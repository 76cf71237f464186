"""SQL fragments for the SQLite backend.

The query builder and the schema registry take every backend-specific
piece of SQL from here instead of hard-coding it: the named-parameter
marker, the catalog query and the unbounded LIMIT literal.

Only SQLite is supported. SQLite rejects ORDER BY/LIMIT on UPDATE and
DELETE, which is why the builder wraps row windows in an ``id IN`` subquery.

Examples:
    >>> d = SQLiteDialect()
    >>> d.param("filter_0")
    ':filter_0'
    >>> d.table_names_query()
    "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract."""

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def param(self, name: str) -> str:
        """Named parameter marker for bind parameter ``name``."""
        ...

    def no_limit(self) -> str:
        """LIMIT literal meaning "unbounded" (needed before a bare OFFSET)."""
        ...

    def table_names_query(self) -> str:
        """Catalog query returning one ``name`` column per table."""
        ...


class SQLiteDialect:
    """SQLite dialect: ``:name`` placeholders, ``sqlite_master`` catalog."""

    @property
    def name(self) -> str:
        return "sqlite"

    def param(self, name: str) -> str:
        return f":{name}"

    def no_limit(self) -> str:
        return "-1"

    def table_names_query(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"


__all__ = [
    "Dialect",
    "SQLiteDialect",
]
