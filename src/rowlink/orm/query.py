"""
Query builder: turn a collection's query shape into parameterized SQL.

A :class:`QueryShape` is the immutable description of a collection's rows
(table, filters, orderings, limit, offset). :func:`build_query` renders a
shape plus a :class:`QueryKind` into ``(sql, params)``. It never executes
anything and depends on nothing but its arguments.

Architecture:
    ::

        QueryShape(table, filters, orderings, limit, offset, projection)
                │
                ▼
        build_query(kind, shape, fields)
                │
                ├── SELECT  → SELECT <projection> FROM t [WHERE] [ORDER] [LIMIT/OFFSET] ;
                ├── COUNT   → SELECT COUNT(*) FROM t [WHERE] ;
                ├── INSERT  → INSERT INTO t (cols) VALUES (:value_0, ...) ;
                ├── UPDATE  → UPDATE t SET c = :set_0 [WHERE | WHERE id IN (window)] ;
                └── DELETE  → DELETE FROM t [WHERE | WHERE id IN (window)] ;

Parameter names:
    ``filter_<i>`` (``filter_<i>_low``/``filter_<i>_high`` for BETWEEN),
    ``set_<i>``, ``value_<i>``, ``limit``, ``offset``. Each family has its
    own prefix and every index is the position in its own list, so names
    never collide.

Raw filters:
    A filter built with ``raw=True`` inlines its value verbatim
    (``TasksUsers.tasksId = Tasks.id``). This is how column-to-column join
    conditions are expressed; callers must never pass user input as a raw
    value.

Examples:
    >>> shape = QueryShape("Users").with_filter(Filter("age", ">", 35))
    >>> build_query(QueryKind.SELECT, shape)
    ('SELECT * FROM Users WHERE age > :filter_0 ;', {'filter_0': 35})

    >>> build_query(QueryKind.UPDATE, shape.with_limit(1), {"age": 36})[0]
    'UPDATE Users SET age = :set_0 WHERE id IN (SELECT id FROM Users WHERE age > :filter_0 LIMIT :limit) ;'

Tags:
    sql, query-builder, parameters, rowlink
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from rowlink.core.dialect import Dialect, SQLiteDialect

STATEMENT_TERMINATOR = ";"

_DIRECTIONS = ("ASC", "DESC")


class QueryKind(str, Enum):
    """Statement kinds the builder can render."""

    SELECT = "SELECT"
    COUNT = "COUNT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Filter:
    """One WHERE condition.

    ``raw`` means ``value`` is a SQL fragment that is inlined rather than
    bound. With ``operator="BETWEEN"`` the value is a ``(low, high)`` pair.
    """

    field: str
    operator: str
    value: Any
    raw: bool = False

    @property
    def is_between(self) -> bool:
        return self.operator.strip().upper() == "BETWEEN"


@dataclass(frozen=True)
class Ordering:
    """One ORDER BY term. Field and direction are trusted identifiers."""

    field: str
    direction: str = "ASC"

    def __post_init__(self) -> None:
        direction = self.direction.strip().upper()
        if direction not in _DIRECTIONS:
            raise ValueError(f"Order direction must be ASC or DESC, got {self.direction!r}")
        object.__setattr__(self, "direction", direction)


@dataclass(frozen=True)
class QueryShape:
    """Immutable query-shaping state of a collection.

    Every ``with_*`` method returns a new shape; the receiver is unchanged.
    """

    table: str
    filters: tuple[Filter, ...] = ()
    orderings: tuple[Ordering, ...] = ()
    limit: int | None = None
    offset: int | None = None
    projection: str = "*"

    def with_filter(self, flt: Filter) -> QueryShape:
        return replace(self, filters=self.filters + (flt,))

    def with_ordering(self, ordering: Ordering) -> QueryShape:
        return replace(self, orderings=self.orderings + (ordering,))

    def with_limit(self, limit: int | None) -> QueryShape:
        return replace(self, limit=limit)

    def with_offset(self, offset: int | None) -> QueryShape:
        return replace(self, offset=offset)

    @property
    def has_window(self) -> bool:
        """True when ordering, limit or offset narrow the row set."""
        return bool(self.orderings) or self.limit is not None or bool(self.offset)


def build_query(
    kind: QueryKind,
    shape: QueryShape,
    fields: Mapping[str, Any] | None = None,
    *,
    dialect: Dialect | None = None,
) -> tuple[str, dict[str, Any]]:
    """Render ``shape`` as a ``kind`` statement.

    Args:
        kind: Statement kind.
        shape: Table, filters, orderings and bounds.
        fields: Column → value mapping for INSERT (the row) and UPDATE (the
            SET clause). Ignored by the other kinds.
        dialect: SQL fragments; defaults to :class:`SQLiteDialect`.

    Returns:
        ``(sql, params)`` where ``params`` maps bind names (without marker)
        to values.

    Raises:
        ValueError: UPDATE without fields, or a BETWEEN filter whose value
            is not a pair.
    """
    dialect = dialect or SQLiteDialect()
    params: dict[str, Any] = {}

    if kind is QueryKind.INSERT:
        return _build_insert(shape.table, fields or {}, params, dialect)

    if kind is QueryKind.SELECT:
        sql = f"SELECT {shape.projection} FROM {shape.table}"
        sql += _where(shape, params, dialect)
        sql += _window(shape, params, dialect)
        return f"{sql} {STATEMENT_TERMINATOR}", params

    if kind is QueryKind.COUNT:
        sql = f"SELECT COUNT(*) FROM {shape.table}"
        sql += _where(shape, params, dialect)
        return f"{sql} {STATEMENT_TERMINATOR}", params

    if kind is QueryKind.UPDATE:
        if not fields:
            raise ValueError("UPDATE needs at least one field to set")
        assignments = []
        for i, (column, value) in enumerate(fields.items()):
            name = f"set_{i}"
            assignments.append(f"{column} = {dialect.param(name)}")
            params[name] = value
        sql = f"UPDATE {shape.table} SET {', '.join(assignments)}"
    elif kind is QueryKind.DELETE:
        sql = f"DELETE FROM {shape.table}"
    else:  # pragma: no cover
        raise ValueError(f"Unknown query kind: {kind!r}")

    if shape.has_window:
        # UPDATE/DELETE take no ORDER BY/LIMIT: select the window by id instead
        inner = f"SELECT id FROM {shape.table}"
        inner += _where(shape, params, dialect)
        inner += _window(shape, params, dialect)
        sql += f" WHERE id IN ({inner})"
    else:
        sql += _where(shape, params, dialect)

    return f"{sql} {STATEMENT_TERMINATOR}", params


def _build_insert(
    table: str,
    fields: Mapping[str, Any],
    params: dict[str, Any],
    dialect: Dialect,
) -> tuple[str, dict[str, Any]]:
    if not fields:
        return f"INSERT INTO {table} DEFAULT VALUES {STATEMENT_TERMINATOR}", params

    columns = []
    markers = []
    for i, (column, value) in enumerate(fields.items()):
        name = f"value_{i}"
        columns.append(column)
        markers.append(dialect.param(name))
        params[name] = value
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({', '.join(markers)})"
    return f"{sql} {STATEMENT_TERMINATOR}", params


def _where(shape: QueryShape, params: dict[str, Any], dialect: Dialect) -> str:
    if not shape.filters:
        return ""

    conditions = []
    for i, flt in enumerate(shape.filters):
        operator = flt.operator.strip()
        if flt.raw:
            conditions.append(f"{flt.field} {operator} {flt.value}")
        elif flt.is_between:
            try:
                low, high = flt.value
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"BETWEEN filter on {flt.field!r} needs a (low, high) pair"
                ) from e
            low_name, high_name = f"filter_{i}_low", f"filter_{i}_high"
            conditions.append(
                f"{flt.field} BETWEEN {dialect.param(low_name)} AND {dialect.param(high_name)}"
            )
            params[low_name] = low
            params[high_name] = high
        else:
            name = f"filter_{i}"
            conditions.append(f"{flt.field} {operator} {dialect.param(name)}")
            params[name] = flt.value

    return " WHERE " + " AND ".join(conditions)


def _window(shape: QueryShape, params: dict[str, Any], dialect: Dialect) -> str:
    sql = ""
    if shape.orderings:
        terms = ", ".join(f"{o.field} {o.direction}" for o in shape.orderings)
        sql += f" ORDER BY {terms}"
    if shape.limit is not None:
        sql += f" LIMIT {dialect.param('limit')}"
        params["limit"] = shape.limit
    elif shape.offset:
        sql += f" LIMIT {dialect.no_limit()}"
    if shape.offset:
        sql += f" OFFSET {dialect.param('offset')}"
        params["offset"] = shape.offset
    return sql


__all__ = [
    "Filter",
    "Ordering",
    "QueryKind",
    "QueryShape",
    "STATEMENT_TERMINATOR",
    "build_query",
]
