"""
Relation resolver: infer links between tables from naming conventions.

Conventions:
    1. Tables are capitalized (``Users``, ``Tasks``, ``Countries``).
    2. Every table has an ``id`` primary key column.
    3. A column named ``<name>Id`` on a row is a **singular link** to the row
       of table ``<Name>`` with that id (``countriesId = 3`` → ``Countries``
       row 3).
    4. A **multiple link** between ``Users`` and ``Tasks`` lives in a junction
       table named ``TasksUsers`` or ``UsersTasks`` holding ``usersId`` and
       ``tasksId``.

Name mangling is deliberately naive: relation and column names are the
table name lowercased as a whole, table names are the relation name with
only its first letter uppercased.

Architecture:
    ::

        infer_relation(table, name, columns, tables)      ← pure, no I/O
              │
              ├── SingularRelation(column="tasksId", target="Tasks")
              ├── MultipleRelation(junction="TasksUsers", target="Tasks",
              │                    own_column="usersId", target_column="tasksId")
              └── UnknownRelationError

        RelationResolver(db, entity)                      ← materializes
              ├── lookup(row, name) → Scalar | SingularLink | MultipleLink
              ├── link(row, other)
              └── unlink(row, other)

Examples:
    >>> infer_relation("Users", "tasks", {"id", "name"}, {"Users", "Tasks", "TasksUsers"})
    MultipleRelation(name='tasks', junction='TasksUsers', target_table='Tasks', own_column='usersId', target_column='tasksId')

Tags:
    relations, conventions, foreign-key, many-to-many, rowlink
"""

from __future__ import annotations

from collections.abc import Container, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from rowlink.core.errors import UnknownRelationError
from rowlink.core.logging import get_logger

if TYPE_CHECKING:
    from rowlink.core.database import Database
    from rowlink.orm.collection import Collection

logger = get_logger(__name__)

LINK_SUFFIX = "Id"


# ── Naming conventions ────────────────────────────────────────────────────


def relation_name(table: str) -> str:
    """``"Users"`` → ``"users"``: accessor and column stem for a table."""
    return table.lower()


def table_name(relation: str) -> str:
    """``"users"`` → ``"Users"``: first letter uppercased, rest untouched."""
    return relation[:1].upper() + relation[1:]


def link_column(relation: str) -> str:
    """``"users"`` → ``"usersId"``."""
    return f"{relation}{LINK_SUFFIX}"


def find_junction(current_table: str, relation: str, tables: Container[str]) -> str | None:
    """Junction table between ``current_table`` and ``relation``, if registered.

    ``<Related><Current>`` is checked before ``<Current><Related>``.
    """
    related = table_name(relation)
    for candidate in (related + current_table, current_table + related):
        if candidate in tables:
            return candidate
    return None


# ── Relation kinds ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SingularRelation:
    """Foreign-key column on the current row."""

    name: str
    column: str
    target_table: str


@dataclass(frozen=True)
class MultipleRelation:
    """Pairs of foreign keys in a junction table."""

    name: str
    junction: str
    target_table: str
    own_column: str
    target_column: str


Relation = Union[SingularRelation, MultipleRelation]


def infer_relation(
    current_table: str,
    name: str,
    columns: Container[str],
    tables: Container[str],
) -> Relation:
    """Classify ``name`` as a singular or multiple link of ``current_table``.

    Args:
        current_table: Table whose row the name is read from.
        name: Relation accessor (``"tasks"``); lowercased before matching.
        columns: Column names present on the current row.
        tables: Registered table names.

    Raises:
        UnknownRelationError: Neither convention applies.
    """
    relation = relation_name(name)
    column = link_column(relation)

    if column in columns:
        return SingularRelation(name=relation, column=column, target_table=table_name(relation))

    junction = find_junction(current_table, relation, tables)
    if junction is not None:
        return MultipleRelation(
            name=relation,
            junction=junction,
            target_table=table_name(relation),
            own_column=link_column(relation_name(current_table)),
            target_column=column,
        )

    raise UnknownRelationError(name, current_table)


# ── Field values (tagged union) ───────────────────────────────────────────


@dataclass(frozen=True)
class Scalar:
    value: Any


@dataclass(frozen=True)
class SingularLink:
    collection: Collection


@dataclass(frozen=True)
class MultipleLink:
    collection: Collection


FieldValue = Union[Scalar, SingularLink, MultipleLink]


def unwrap(value: FieldValue) -> Any:
    """Plain value for a :class:`Scalar`, the collection for a link."""
    if isinstance(value, Scalar):
        return value.value
    return value.collection


# ── Resolver ──────────────────────────────────────────────────────────────


class RelationResolver:
    """Materialize relations of rows belonging to ``entity``."""

    def __init__(self, db: Database, entity: str) -> None:
        self.db = db
        self.entity = entity

    def infer(self, row: Mapping[str, Any], name: str) -> Relation:
        return infer_relation(self.entity, name, row, self.db.registry)

    def lookup(self, row: Mapping[str, Any], name: str) -> FieldValue:
        """Direct column first, then singular link, then multiple link."""
        if name in row:
            return Scalar(row[name])

        relation = self.infer(row, name)
        if isinstance(relation, SingularRelation):
            target = self.db.collection(relation.target_table)
            return SingularLink(target.filter("id", "=", row[relation.column]))
        return MultipleLink(self.joined(relation, row["id"]))

    def joined(self, relation: MultipleRelation, row_id: Any) -> Collection:
        """Collection over ``junction, target`` restricted to ``row_id``'s links."""
        junction, target = relation.junction, relation.target_table
        joined = self.db.collection(
            f"{junction}, {target}",
            entity=target,
            check_exists=False,
        )
        return joined.filter(f"{junction}.{relation.own_column}", "=", row_id).filter(
            f"{junction}.{relation.target_column}", "=", f"{target}.id", raw=True
        )

    def link(self, row: Mapping[str, Any], other: Collection) -> None:
        """Point ``row`` at ``other``'s current row.

        Singular: overwrite the foreign-key column and save.
        Multiple: insert one junction row (no de-duplication).
        """
        relation = self.infer(row, relation_name(other.entity))
        other_id = other.get("id")

        if isinstance(relation, SingularRelation):
            target = self.db.collection(self.entity).filter("id", "=", row["id"])
            target.set(relation.column, other_id)
            target.save()
        else:
            self.db.collection(relation.junction).create_new(
                {relation.own_column: row["id"], relation.target_column: other_id}
            )
        logger.debug(
            "relation_linked",
            table=self.entity,
            id=row["id"],
            relation=relation.name,
            other_id=other_id,
        )

    def unlink(self, row: Mapping[str, Any], other: Collection) -> None:
        """Remove the link between ``row`` and ``other``'s current row.

        Singular: null the foreign-key column and save.
        Multiple: delete every matching junction row.
        """
        relation = self.infer(row, relation_name(other.entity))
        other_id = other.get("id")

        if isinstance(relation, SingularRelation):
            target = self.db.collection(self.entity).filter("id", "=", row["id"])
            target.set(relation.column, None)
            target.save()
        else:
            (
                self.db.collection(relation.junction)
                .filter(relation.own_column, "=", row["id"])
                .filter(relation.target_column, "=", other_id)
                .delete()
            )
        logger.debug(
            "relation_unlinked",
            table=self.entity,
            id=row["id"],
            relation=relation.name,
            other_id=other_id,
        )


__all__ = [
    "FieldValue",
    "MultipleLink",
    "MultipleRelation",
    "Relation",
    "RelationResolver",
    "Scalar",
    "SingularLink",
    "SingularRelation",
    "find_junction",
    "infer_relation",
    "link_column",
    "relation_name",
    "table_name",
    "unwrap",
]
