"""
Root Typer application for the rowlink CLI.

Inspection commands over any SQLite database that follows the naming
conventions: list tables, print and count rows, follow relations.
"""

from __future__ import annotations

import typer
from typer import Typer

from rowlink.cli.utils import console, fail, open_database, output_rows, shape_collection
from rowlink.core.errors import RowLinkError
from rowlink.orm.collection import Collection

app = Typer(
    name="rowlink",
    help="rowlink -- convention-driven relational mapping over SQLite.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from rowlink import __version__

        typer.echo(f"rowlink {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    database: str | None = typer.Option(
        None,
        "--database",
        "-d",
        help="Database URL or SQLite path (default: ROWLINK_DATABASE_URL).",
    ),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """rowlink CLI -- browse tables, rows and relations."""
    ctx.obj = {"database": database}


def _database(ctx: typer.Context):
    return open_database((ctx.obj or {}).get("database"))


FILTER_HELP = "Condition as field:operator:value (repeatable)."


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def tables(ctx: typer.Context) -> None:
    """List registered tables."""
    try:
        with _database(ctx) as db:
            names = db.tables
    except RowLinkError as e:
        fail(e)
    if not names:
        console.print("[dim]No tables.[/dim]")
    for name in names:
        console.print(name)


@app.command()
def rows(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table name"),
    filters: list[str] | None = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    orders: list[str] | None = typer.Option(None, "--order", "-o", help="field[:ASC|DESC]"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0),
    offset: int | None = typer.Option(None, "--offset", min=0),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Print the rows of TABLE."""
    try:
        with _database(ctx) as db:
            collection = shape_collection(
                db.all(table), filters=filters, orders=orders, limit=limit, offset=offset
            )
            data = collection.rows()
    except RowLinkError as e:
        fail(e)
    output_rows(data, as_json=json_out, title=table)


@app.command()
def count(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table name"),
    filters: list[str] | None = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0),
    offset: int | None = typer.Option(None, "--offset", min=0),
) -> None:
    """Count the rows of TABLE."""
    try:
        with _database(ctx) as db:
            total = shape_collection(
                db.all(table), filters=filters, limit=limit, offset=offset
            ).count()
    except RowLinkError as e:
        fail(e)
    console.print(total)


@app.command()
def related(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table name"),
    row_id: int = typer.Argument(..., metavar="ID", help="Row id"),
    relation: str = typer.Argument(..., help="Relation name, e.g. tasks or countries"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Follow RELATION from row ID of TABLE."""
    try:
        with _database(ctx) as db:
            target = db.all(table).filter("id", "=", row_id).get(relation)
            if not isinstance(target, Collection):
                typer.echo(f"{relation!r} is a column of {table}, not a relation", err=True)
                raise typer.Exit(code=1)
            data = target.rows()
            title = f"{table} {row_id} → {target.entity}"
    except RowLinkError as e:
        fail(e)
    output_rows(data, as_json=json_out, title=title)


if __name__ == "__main__":
    app()
