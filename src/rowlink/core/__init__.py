"""rowlink core -- database plumbing shared by the mapping layer.

Architecture::

    errors.py          Structured error hierarchy (RowLinkError and friends)
    protocols.py       Connection / ResultCursor protocols
    dialect.py         SQL fragments for the single SQLite backend
    sqlite_conn.py     sqlite3 adapter (fresh cursor per statement)
    connection.py      Connection factory (create_connection)
    database.py        Database context handed to every collection
    settings.py        RowLinkSettings (pydantic-settings, ROWLINK_* env)
    logging.py         structlog configuration and helpers
"""

from rowlink.core.connection import ConnectionInfo, create_connection
from rowlink.core.database import Database
from rowlink.core.dialect import Dialect, SQLiteDialect
from rowlink.core.protocols import Connection, ResultCursor
from rowlink.core.sqlite_conn import SqliteConnection

__all__ = [
    "Connection",
    "ConnectionInfo",
    "Database",
    "Dialect",
    "ResultCursor",
    "SQLiteDialect",
    "SqliteConnection",
    "create_connection",
]
