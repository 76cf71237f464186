"""SQLite connection adapter.

Wraps a raw :class:`sqlite3.Connection` to satisfy the
:class:`~rowlink.core.protocols.Connection` protocol.

Every ``execute`` opens its own cursor, so a collection can keep iterating
one result while relation lookups issue further statements.

Usage::

    from rowlink.core.sqlite_conn import SqliteConnection

    conn = SqliteConnection(":memory:")
    conn.execute("CREATE TABLE Users (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("INSERT INTO Users (name) VALUES (:name)", {"name": "Ann"})
    row = conn.execute("SELECT * FROM Users").fetchone()
    conn.commit()
    conn.close()
"""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from typing import Any


class SqliteConnection:
    """Adapter: ``sqlite3.Connection`` → ``Connection`` protocol."""

    def __init__(self, path: str = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = row_factory
        self._conn.execute("PRAGMA foreign_keys = ON")

    # -- Connection protocol -----------------------------------------------

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> sqlite3.Cursor:
        cursor = self._conn.cursor()
        cursor.execute(sql, dict(params or {}))
        return cursor

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    # -- convenience -------------------------------------------------------

    def executescript(self, script: str) -> None:
        """Run a multi-statement script (fixtures, schema bootstrap)."""
        self._conn.executescript(script)

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteConnection({self._conn!r})"
