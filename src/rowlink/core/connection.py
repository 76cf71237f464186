"""Connection factory: create database connections from URL strings.

This is the single entry point for opening a database handle. The mapping
core never opens connections itself; the host calls ``create_connection()``
(usually through :meth:`rowlink.core.database.Database.connect`) once and
passes the result along.

Supported URL schemes
---------------------
==================  ==========================================  ============
Scheme              Example                                     Backend
==================  ==========================================  ============
``memory``          ``memory`` or ``:memory:`` or ``None``       SQLite RAM
``sqlite``          ``sqlite:///path/to/file.db``                SQLite file
``(file path)``     ``./data/app.db`` or ``/tmp/app.db``         SQLite file
==================  ==========================================  ============

Usage
-----
::

    from rowlink.core.connection import create_connection

    conn, info = create_connection()
    conn, info = create_connection("sqlite:///app.db")

    print(info)
    # ConnectionInfo(backend='sqlite', persistent=True, path='/abs/app.db')
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rowlink.core.errors import InvalidConfigError
from rowlink.core.logging import get_logger
from rowlink.core.sqlite_conn import SqliteConnection

logger = get_logger(__name__)


# ── ConnectionInfo ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier, always ``"sqlite"``."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The original URL or path used to create the connection."""

    resolved_path: str | None = None
    """For file-based SQLite, the resolved absolute path."""

    def __repr__(self) -> str:
        parts = [f"backend={self.backend!r}", f"persistent={self.persistent}"]
        if self.resolved_path:
            parts.append(f"path={self.resolved_path!r}")
        else:
            parts.append(f"url={self.url!r}")
        return f"ConnectionInfo({', '.join(parts)})"


# ── URL parsing ──────────────────────────────────────────────────────────


def _parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into ``(scheme, target)``.

    ``scheme`` is one of ``"memory"``, ``"sqlite"`` or ``"file"``.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    for prefix in ("sqlite:///", "sqlite://"):
        if db.startswith(prefix):
            path = db[len(prefix):]
            if not path or path == ":memory:":
                return "memory", ":memory:"
            return "sqlite", path

    if "://" in db:
        raise InvalidConfigError(
            "database_url",
            db,
            f"Unsupported database URL {db!r}: only SQLite is available",
        )

    return "file", db


# ── Main factory ─────────────────────────────────────────────────────────


def create_connection(
    db: str | None = None,
) -> tuple[SqliteConnection, ConnectionInfo]:
    """Create a database connection from a URL, path, or keyword.

    Parameters
    ----------
    db:
        ``None``/``"memory"`` for an in-memory database, ``"sqlite:///x.db"``
        or a bare file path for a file database.

    Returns
    -------
    tuple[SqliteConnection, ConnectionInfo]
    """
    scheme, target = _parse_url(db)

    if scheme == "memory":
        conn = SqliteConnection(":memory:")
        info = ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")
    else:
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        resolved = str(path.resolve())
        conn = SqliteConnection(resolved)
        info = ConnectionInfo(
            backend="sqlite",
            persistent=True,
            url=db or target,
            resolved_path=resolved,
        )

    logger.debug("connection_opened", backend=info.backend, persistent=info.persistent)
    return conn, info


__all__ = [
    "ConnectionInfo",
    "create_connection",
]
