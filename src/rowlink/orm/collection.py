"""
Collection: a deferred, chainable view over the rows of one table.

A Collection is three things at once:

- a **query descriptor**: table plus filters, orderings, limit and offset,
  held in an immutable :class:`~rowlink.orm.query.QueryShape`;
- a **lazy cursor** over the matching rows, executed on first use;
- a **row proxy**: reading a field on the collection itself reads the
  current row, materializing the first row on demand.

Manifesto:
    - **Copy-on-write chaining:** ``filter``/``order``/``limit``/``offset``
      return new collections; the receiver's query shape never changes
    - **Lazy:** No SQL runs until rows, a field or a count are asked for
    - **Convention over configuration:** Relations come from column and
      table names (see :mod:`rowlink.orm.relations`)
    - **Deferred writes:** Field assignments wait in a mutation buffer until
      :meth:`Collection.save`
    - **No hidden transactions:** every flushed statement commits on its own

Architecture:
    ::

        db.all("Users")                      Collection(shape, cursor, buffer)
            .filter("age", ">", 35)   ──▶    new Collection (shape + filter)
            .order("name")            ──▶    new Collection (shape + ordering)
            .limit(1)                 ──▶    new Collection (shape + limit)

        for row in users:                    LazyCursor: rewind/advance
            row["name"]                      RowView snapshot read
            row["tasks"]                     RelationResolver → Collection
            row["age"] = 41                  MutationBuffer[position]
        users.save()                         one UPDATE ... WHERE id = :id per row

Examples:
    >>> users = db.all("Users")
    >>> users.filter("age", ">", 35).count()
    1
    >>> users.order("name", "ASC").limit(1)["name"]
    'Ann'
    >>> [task["description"] for task in users.filter("id", "=", 1)["tasks"]]
    ['Write report']

Guardrails:
    ❌ DON'T: Share one collection between threads (cursor state is mutable)
    ✅ DO: Derive a new collection per unit of work, derivation is cheap

    ❌ DON'T: Pass user input as a raw filter value
    ✅ DO: Use raw=True only for column-to-column conditions

Tags:
    orm, collection, cursor, lazy-loading, copy-on-write, rowlink
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from rowlink.core.errors import AmbiguousUpdateError, EmptyResultError, ReentrantIterationError
from rowlink.core.logging import get_logger
from rowlink.orm.cursor import CursorState, LazyCursor
from rowlink.orm.mutations import FIRST_ROW, UNITERATED, MutationBuffer
from rowlink.orm.query import (
    Filter,
    Ordering,
    QueryKind,
    QueryShape,
    build_query,
)
from rowlink.orm.relations import FieldValue, RelationResolver, unwrap
from rowlink.orm.row import RowView

if TYPE_CHECKING:
    from rowlink.core.database import Database
    from rowlink.core.protocols import ResultCursor

logger = get_logger(__name__)


class Collection:
    """Deferred, filterable, orderable view over one table.

    Parameters:
        db: Database context (connection, dialect, schema registry).
        table: Table name, or ``"Junction, Related"`` for an implicit join.
        entity: Table whose rows are exposed; defaults to ``table``. For an
            implicit join this is the related table, and SELECT projects
            ``entity.*``.
        check_exists: Raise :class:`~rowlink.core.errors.TableNotFoundError`
            when ``table`` is not registered. Disabled for join pseudo-tables.
    """

    def __init__(
        self,
        db: Database,
        table: str,
        *,
        entity: str | None = None,
        check_exists: bool = True,
    ) -> None:
        if check_exists:
            db.registry.require(table)

        self.db = db
        self.table = table
        self.entity = entity or table
        self.resolver = RelationResolver(db, self.entity)

        projection = "*" if self.entity == table else f"{self.entity}.*"
        self._shape = QueryShape(table, projection=projection)
        self._passes = 0
        self._reset_state()

    def _reset_state(self) -> None:
        self._cursor = LazyCursor(self._execute_select)
        self._buffer = MutationBuffer()
        self._count: int | None = None

    def _derive(self, shape: QueryShape) -> Collection:
        clone = copy.copy(self)
        clone._shape = shape
        clone._reset_state()
        return clone

    # -- query shape -------------------------------------------------------

    @property
    def shape(self) -> QueryShape:
        return self._shape

    @property
    def filters(self) -> tuple[Filter, ...]:
        return self._shape.filters

    @property
    def orderings(self) -> tuple[Ordering, ...]:
        return self._shape.orderings

    def filter(self, field: str, operator: str, value: Any, raw: bool = False) -> Collection:
        """New collection with one more AND-ed condition."""
        return self._derive(self._shape.with_filter(Filter(field, operator, value, raw)))

    def order(self, field: str, direction: str = "ASC") -> Collection:
        return self._derive(self._shape.with_ordering(Ordering(field, direction)))

    def limit(self, limit: int | None) -> Collection:
        return self._derive(self._shape.with_limit(limit))

    def offset(self, offset: int | None) -> Collection:
        return self._derive(self._shape.with_offset(offset))

    # -- execution ---------------------------------------------------------

    def _execute_select(self) -> ResultCursor:
        sql, params = build_query(QueryKind.SELECT, self._shape, dialect=self.db.dialect)
        return self.db.execute(sql, params)

    def _by_id(self, row_id: Any) -> Collection:
        return self.db.collection(self.entity).filter("id", "=", row_id)

    def rows(self) -> list[dict[str, Any]]:
        """All matching rows as dicts, from a fresh query.

        The receiver's cursor is left where it is.
        """
        return [dict(row) for row in self._execute_select().fetchall()]

    def count(self) -> int:
        """Number of rows in the window, cached for this collection."""
        if self._count is None:
            sql, params = build_query(QueryKind.COUNT, self._shape, dialect=self.db.dialect)
            total = int(self.db.execute(sql, params).fetchone()[0])
            if self._shape.offset:
                total = max(0, total - self._shape.offset)
            if self._shape.limit is not None and self._shape.limit < total:
                total = self._shape.limit
            self._count = total
        return self._count

    def is_empty(self) -> bool:
        return not self.count()

    def __len__(self) -> int:
        return self.count()

    # -- cursor protocol ---------------------------------------------------

    @property
    def position(self) -> int:
        return self._cursor.position

    @property
    def cursor_state(self) -> CursorState:
        return self._cursor.state

    def rewind(self) -> None:
        self._cursor.rewind()

    def advance(self) -> None:
        self._cursor.advance()

    def has_current(self) -> bool:
        return self._cursor.has_current

    def current(self) -> RowView:
        return RowView(self, self._current_row(), self._cursor.position)

    def __iter__(self) -> Iterator[RowView]:
        """Restart from the first row. Only one pass may be open at a time.

        Raises:
            ReentrantIterationError: the collection was iterated again, or
                its rows were deleted, while this pass was suspended.
        """
        self._passes += 1
        token = self._passes
        cursor = self._cursor
        if cursor.state is CursorState.ACTIVE and cursor.position > 0:
            cursor.reset()
        if not (cursor.state is CursorState.ACTIVE and cursor.position == 0):
            cursor.rewind()
        while cursor.has_current:
            yield self.current()
            if self._passes != token or cursor is not self._cursor:
                raise ReentrantIterationError(self.table)
            cursor.advance()

    def first(self) -> RowView:
        """First row of a fresh SELECT; the receiver's cursor is untouched.

        Writes through the returned row are staged on this collection and
        flushed by :meth:`save` against that row's id.
        """
        fresh = self._derive(self._shape)
        row = fresh._current_row()
        self._cursor.ids[FIRST_ROW] = row.get("id")
        return RowView(self, row, FIRST_ROW)

    def _current_row(self) -> dict[str, Any]:
        if not self._cursor.executed:
            self._cursor.rewind()
        if self._cursor.row is None:
            raise EmptyResultError(self.table)
        return self._cursor.row

    # -- field access ------------------------------------------------------

    def lookup(self, field: str) -> FieldValue:
        """Resolve ``field`` on the current row as a tagged value."""
        return self.resolver.lookup(self._current_row(), field)

    def get(self, field: str) -> Any:
        return unwrap(self.lookup(field))

    def __getitem__(self, field: str) -> Any:
        return self.get(field)

    def set(self, field: str, value: Any) -> None:
        """Stage ``field = value`` for the current position (``-1`` if never read)."""
        if self._cursor.executed and not self._cursor.has_current:
            raise EmptyResultError(self.table)
        self.stage(self._cursor.position, field, value)

    def __setitem__(self, field: str, value: Any) -> None:
        self.set(field, value)

    def stage(self, position: int, field: str, value: Any) -> None:
        self._buffer.stage(position, field, value)

    @property
    def pending(self) -> dict[int, dict[str, Any]]:
        return self._buffer.snapshot()

    # -- writes ------------------------------------------------------------

    def save(self) -> int:
        """Flush staged writes, one UPDATE per buffered position.

        Writes staged before any row was read target the collection's
        window, which must contain exactly one row.

        Returns:
            Number of UPDATE statements issued.

        Raises:
            AmbiguousUpdateError: un-iterated writes and the window does not
                hold exactly one row. Nothing is written for that entry.
        """
        flushed = 0
        for position in self._buffer:
            if position == UNITERATED:
                row_id = self._single_row_id()
            else:
                row_id = self._cursor.ids[position]

            fields = self._buffer.pending(position)
            target = self._by_id(row_id)
            sql, params = build_query(
                QueryKind.UPDATE, target.shape, fields, dialect=self.db.dialect
            )
            self.db.write(sql, params)
            self._buffer.pop(position)
            flushed += 1
            logger.debug(
                "mutation_flushed",
                table=self.entity,
                id=row_id,
                position=position,
                fields=sorted(fields),
            )
        return flushed

    def _single_row_id(self) -> Any:
        ids = [row["id"] for row in self.rows()]
        if len(ids) != 1:
            raise AmbiguousUpdateError(self.table, len(ids))
        return ids[0]

    def update(self, fields: Mapping[str, Any]) -> int:
        """Bulk UPDATE of every row in the window. Returns rows affected."""
        if not fields:
            return 0
        if self.entity != self.table:
            ids = [row["id"] for row in self.rows()]
            for row_id in ids:
                sql, params = build_query(
                    QueryKind.UPDATE, self._by_id(row_id).shape, fields, dialect=self.db.dialect
                )
                self.db.write(sql, params)
            return len(ids)

        sql, params = build_query(QueryKind.UPDATE, self._shape, fields, dialect=self.db.dialect)
        return self.db.write(sql, params).rowcount

    def create_new(self, fields: Mapping[str, Any]) -> Collection:
        """Insert one row; returns a collection filtered on its new id."""
        sql, params = build_query(
            QueryKind.INSERT, QueryShape(self.entity), fields, dialect=self.db.dialect
        )
        cursor = self.db.write(sql, params)
        return self._by_id(cursor.lastrowid)

    def delete(self) -> int:
        """Delete every row in the window, one statement per row.

        Returns:
            Number of rows deleted.
        """
        ids = [row["id"] for row in self.rows()]
        for row_id in ids:
            sql, params = build_query(
                QueryKind.DELETE, self._by_id(row_id).shape, dialect=self.db.dialect
            )
            self.db.write(sql, params)
            logger.debug("row_deleted", table=self.entity, id=row_id)
        self._reset_state()
        return len(ids)

    # -- relations ---------------------------------------------------------

    def link(self, other: Collection) -> None:
        """Link the current row to ``other``'s current row."""
        self.resolver.link(self._current_row(), other)

    def unlink(self, other: Collection) -> None:
        """Remove the link between the current row and ``other``'s current row."""
        self.resolver.unlink(self._current_row(), other)

    def __repr__(self) -> str:
        parts = [repr(self.table)]
        if self._shape.filters:
            parts.append(f"filters={len(self._shape.filters)}")
        if self._shape.orderings:
            parts.append(f"orderings={len(self._shape.orderings)}")
        if self._shape.limit is not None:
            parts.append(f"limit={self._shape.limit}")
        if self._shape.offset:
            parts.append(f"offset={self._shape.offset}")
        return f"Collection({', '.join(parts)})"


__all__ = [
    "Collection",
]
