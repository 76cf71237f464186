"""
Database context: the connection, dialect and schema registry a collection needs.

Hosts build one ``Database`` at startup and pass it to every collection,
instead of stashing a handle and a table list in process-wide globals.

Manifesto:
    - **Explicit state:** The handle and table registry travel with the
      collection that uses them
    - **One choke point:** Every statement goes through :meth:`Database.execute`,
      which logs it and turns driver failures into :class:`StatementError`
    - **No transactions:** :meth:`Database.write` commits each statement

Architecture:
    ::

        Database(conn, dialect, registry)
        ├── execute(sql, params) → ResultCursor     (reads)
        ├── write(sql, params)   → ResultCursor     (execute + commit)
        ├── registry             → SchemaRegistry   (catalog, loaded once)
        └── all(table) / collection(table) → Collection

Examples:
    >>> db = Database.connect("sqlite:///app.db")
    >>> users = db.all("Users")
    >>> users.count()
    2

Tags:
    database, context, dependency-injection, rowlink
"""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rowlink.core.connection import ConnectionInfo, create_connection
from rowlink.core.dialect import Dialect, SQLiteDialect
from rowlink.core.errors import StatementError
from rowlink.core.logging import get_logger
from rowlink.core.protocols import Connection, ResultCursor
from rowlink.core.settings import RowLinkSettings, get_settings
from rowlink.orm.registry import SchemaRegistry

if TYPE_CHECKING:
    from rowlink.orm.collection import Collection

logger = get_logger(__name__)


class Database:
    """Connection plus the schema knowledge shared by all collections.

    Parameters:
        conn: Any object satisfying the :class:`Connection` protocol.
        dialect: SQL fragments; defaults to :class:`SQLiteDialect`.
        registry: Table-name registry; defaults to one that reads the
            catalog through ``conn`` on first use.
        echo_sql: Log statements at INFO instead of DEBUG.
        info: Metadata from the connection factory, if known.
    """

    def __init__(
        self,
        conn: Connection,
        *,
        dialect: Dialect | None = None,
        registry: SchemaRegistry | None = None,
        echo_sql: bool = False,
        info: ConnectionInfo | None = None,
    ) -> None:
        self.conn = conn
        self.dialect: Dialect = dialect or SQLiteDialect()
        self.registry = registry if registry is not None else SchemaRegistry(self._load_table_names)
        self.echo_sql = echo_sql
        self.info = info

    @classmethod
    def connect(cls, url: str | None = None, **kwargs: Any) -> Database:
        """Open a connection via :func:`create_connection` and wrap it."""
        conn, info = create_connection(url)
        return cls(conn, info=info, **kwargs)

    @classmethod
    def from_settings(cls, settings: RowLinkSettings | None = None) -> Database:
        settings = settings or get_settings()
        return cls.connect(settings.database_url, echo_sql=settings.echo_sql)

    # -- statements --------------------------------------------------------

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        """Prepare, bind and execute one statement.

        Raises:
            StatementError: The driver rejected the statement.
        """
        params = dict(params or {})
        log = logger.info if self.echo_sql else logger.debug
        log("statement_executed", sql=sql, params=params)
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StatementError(f"Statement failed: {e}", sql=sql, cause=e) from e

    def write(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        """Execute a data-modifying statement and commit it on its own."""
        cursor = self.execute(sql, params)
        self.conn.commit()
        return cursor

    def _load_table_names(self) -> list[str]:
        cursor = self.execute(self.dialect.table_names_query())
        return [row[0] for row in cursor.fetchall()]

    # -- collections -------------------------------------------------------

    @property
    def tables(self) -> list[str]:
        return list(self.registry)

    def collection(
        self,
        table: str,
        *,
        entity: str | None = None,
        check_exists: bool = True,
    ) -> Collection:
        from rowlink.orm.collection import Collection

        return Collection(self, table, entity=entity, check_exists=check_exists)

    def all(self, table: str) -> Collection:
        """Every row of ``table``."""
        return self.collection(table)

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Database({self.info!r}, {self.registry!r})"


__all__ = [
    "Database",
]
