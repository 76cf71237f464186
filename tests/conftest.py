"""
Shared pytest fixtures for rowlink tests.

This module provides:
- A seeded in-memory database following the naming conventions
  (``Users``, ``Countries``, ``Tasks`` and the ``TasksUsers`` junction)
- The same schema written to a SQLite file, for CLI and factory tests
- Logging and settings isolation between tests

Usage:
    def test_something(db):
        assert db.all("Users").count() == 2
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from rowlink.core.database import Database
from rowlink.core.settings import reset_settings
from rowlink.core.sqlite_conn import SqliteConnection

SCHEMA = """
CREATE TABLE Countries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    iso_code TEXT NOT NULL
);
CREATE TABLE Users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    age INTEGER,
    countriesId INTEGER
);
CREATE TABLE Tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL
);
CREATE TABLE TasksUsers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tasksId INTEGER NOT NULL,
    usersId INTEGER NOT NULL
);
"""

SEED = """
INSERT INTO Countries (id, iso_code) VALUES (1, 'SE');
INSERT INTO Countries (id, iso_code) VALUES (2, 'NO');
INSERT INTO Users (id, name, age, countriesId) VALUES (1, 'Ann', 30, 1);
INSERT INTO Users (id, name, age, countriesId) VALUES (2, 'Bo', 40, NULL);
INSERT INTO Tasks (id, description) VALUES (1, 'Write report');
INSERT INTO Tasks (id, description) VALUES (2, 'Review code');
INSERT INTO TasksUsers (tasksId, usersId) VALUES (1, 1);
"""


def build_database(path: str = ":memory:") -> Database:
    conn = SqliteConnection(path)
    conn.executescript(SCHEMA + SEED)
    return Database(conn)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_ambient_state() -> Generator[None, None, None]:
    """Reset structlog configuration and cached settings around each test."""
    structlog.reset_defaults()
    reset_settings()
    yield
    structlog.reset_defaults()
    reset_settings()


# =============================================================================
# Databases
# =============================================================================


@pytest.fixture
def db() -> Generator[Database, None, None]:
    """Seeded in-memory database: Ann (30, SE, one task) and Bo (40)."""
    database = build_database()
    yield database
    database.close()


@pytest.fixture
def db_file(tmp_path: Path) -> str:
    """Path of a seeded SQLite file."""
    path = tmp_path / "rowlink.db"
    build_database(str(path)).close()
    return str(path)


@pytest.fixture
def statements(db: Database) -> list[str]:
    """SQL text of every statement ``db`` executes from here on."""
    seen: list[str] = []
    execute = db.conn.execute

    def recording(sql, params=None):
        seen.append(sql)
        return execute(sql, params)

    db.conn.execute = recording
    return seen
