"""
CLI utility helpers -- option parsing, database opening and output.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rowlink.core.database import Database
from rowlink.core.errors import RowLinkError
from rowlink.core.logging import configure_from_settings
from rowlink.core.settings import get_settings
from rowlink.orm.collection import Collection

console = Console()
err_console = Console(stderr=True)


# ── Database helper ──────────────────────────────────────────────────────


def open_database(database: str | None = None) -> Database:
    """Open ``database``, or ``ROWLINK_DATABASE_URL`` when not given."""
    settings = get_settings()
    configure_from_settings(settings)
    if database is None:
        return Database.from_settings(settings)
    return Database.connect(database, echo_sql=settings.echo_sql)


# ── Option parsing ───────────────────────────────────────────────────────


def parse_filter(text: str) -> tuple[str, str, Any]:
    """``"age:>:35"`` → ``("age", ">", 35)``.

    The value is split off at the second colon so it may contain colons
    itself. Integer-looking values are bound as ints.
    """
    parts = text.split(":", 2)
    if len(parts) != 3 or not parts[0] or not parts[1]:
        raise typer.BadParameter(f"Expected field:operator:value, got {text!r}")
    field, operator, value = parts
    return field, operator, _coerce(value)


def parse_order(text: str) -> tuple[str, str]:
    """``"name"`` → ``("name", "ASC")``, ``"name:desc"`` → ``("name", "DESC")``."""
    field, _, direction = text.partition(":")
    direction = (direction or "ASC").upper()
    if not field or direction not in ("ASC", "DESC"):
        raise typer.BadParameter(f"Expected field[:ASC|DESC], got {text!r}")
    return field, direction


def _coerce(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        return value


def shape_collection(
    collection: Collection,
    *,
    filters: list[str] | None = None,
    orders: list[str] | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> Collection:
    """Apply CLI shaping options to ``collection``."""
    for text in filters or []:
        collection = collection.filter(*parse_filter(text))
    for text in orders or []:
        collection = collection.order(*parse_order(text))
    if limit is not None:
        collection = collection.limit(limit)
    if offset is not None:
        collection = collection.offset(offset)
    return collection


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: RowLinkError) -> NoReturn:
    """Print ``error`` in red and exit with status 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}",
        soft_wrap=True,
    )
    raise typer.Exit(code=1)


def output_rows(rows: list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render rows as a Rich table, or as a JSON array."""
    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return

    if not rows:
        console.print("[dim]No rows.[/dim]")
        return

    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row.values()))
    console.print(table)
