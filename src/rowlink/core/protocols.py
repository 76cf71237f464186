"""
Canonical protocol definitions for rowlink.

This module defines the structural contracts between the mapping core and
the database driver. Every module that needs a connection or a result
handle imports the protocol from here.

Manifesto:
    Protocols define contracts without inheritance. They enable:
    - **Decoupling:** The core depends on shape, not on ``sqlite3``
    - **Testability:** Any object matching the protocol works

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── ResultCursor  : live result handle of one executed statement
        └── Connection    : prepares/binds/executes named-parameter SQL

    Consumers:
        core/database.py, core/sqlite_conn.py, orm/cursor.py

Guardrails:
    ❌ DON'T: Share one cursor across statements
    ✅ DO: Return an independent ResultCursor from every execute()

    ❌ DON'T: Add implementation logic to protocol classes
    ✅ DO: Keep protocols pure contracts, implementations go in adapters

Tags:
    protocol, connection, cursor, database, contracts
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResultCursor(Protocol):
    """
    Result handle returned by :meth:`Connection.execute`.

    Rows are mapping-like (``dict(row)`` gives column → value). A collection
    keeps its handle open while iterating, so other statements issued in
    the meantime must not disturb it.
    """

    @property
    def lastrowid(self) -> Any:
        """Primary key generated by the last INSERT on this handle."""
        ...

    @property
    def rowcount(self) -> int:
        """Rows affected by an UPDATE/DELETE, ``-1`` for SELECT."""
        ...

    def fetchone(self) -> Any:
        """Fetch the next row, or None when the result is exhausted."""
        ...

    def fetchall(self) -> list:
        """Fetch all remaining rows."""
        ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal synchronous connection interface used by the core.

    Architecture:
        ::

            Connection Protocol:
            ┌────────────────────────────────────────────────────────┐
            │ execute(sql, params) → ResultCursor (named params)     │
            │ commit()             → Commit pending writes           │
            │ rollback()           → Discard pending writes          │
            │ close()              → Release the handle              │
            └────────────────────────────────────────────────────────┘

    Examples:
        >>> cursor = conn.execute("SELECT * FROM Users WHERE id = :id", {"id": 1})
        >>> row = cursor.fetchone()
    """

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        """Prepare, bind and execute one statement. SYNC."""
        ...

    def commit(self) -> None:
        """Commit current transaction. SYNC."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction. SYNC."""
        ...

    def close(self) -> None:
        """Close the connection. SYNC."""
        ...


__all__ = [
    "Connection",
    "ResultCursor",
]
