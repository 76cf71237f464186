"""Read-only view of one fetched row.

Iterating a :class:`~rowlink.orm.collection.Collection` yields ``RowView``
objects. A view owns a copy of the row's data and remembers which
collection and iteration position it came from:

- reads (``row["name"]``, ``row.name``, ``row.get("tasks")``) come from the
  snapshot, relation names resolve through the collection's resolver;
- writes (``row["age"] = 41``, ``row.age = 41``) are staged in the
  collection's mutation buffer at this row's position and reach the
  database on ``collection.save()``. The snapshot keeps the fetched value.
"""

from __future__ import annotations

from collections.abc import KeysView
from typing import TYPE_CHECKING, Any

from rowlink.core.errors import UnknownRelationError
from rowlink.orm.relations import FieldValue, unwrap

if TYPE_CHECKING:
    from rowlink.orm.collection import Collection


class RowView:
    """Snapshot of one row bound to its collection and position."""

    def __init__(self, collection: Collection, data: dict[str, Any], position: int) -> None:
        object.__setattr__(self, "_collection", collection)
        object.__setattr__(self, "_data", dict(data))
        object.__setattr__(self, "_position", position)

    @property
    def collection(self) -> Collection:
        return self._collection

    @property
    def position(self) -> int:
        return self._position

    @property
    def entity(self) -> str:
        return self._collection.entity

    @property
    def id(self) -> Any:
        return self._data.get("id")

    # -- reads -------------------------------------------------------------

    def lookup(self, field: str) -> FieldValue:
        return self._collection.resolver.lookup(self._data, field)

    def get(self, field: str) -> Any:
        """Column value, or a collection for a relation name."""
        return unwrap(self.lookup(field))

    def __getitem__(self, field: str) -> Any:
        return self.get(field)

    def __getattr__(self, field: str) -> Any:
        if field.startswith("_"):
            raise AttributeError(field)
        try:
            return self.get(field)
        except UnknownRelationError as e:
            raise AttributeError(str(e)) from e

    def __contains__(self, field: object) -> bool:
        return field in self._data

    def keys(self) -> KeysView[str]:
        return self._data.keys()

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # -- writes ------------------------------------------------------------

    def set(self, field: str, value: Any) -> None:
        self._collection.stage(self._position, field, value)

    def __setitem__(self, field: str, value: Any) -> None:
        self.set(field, value)

    def __setattr__(self, field: str, value: Any) -> None:
        if field.startswith("_"):
            object.__setattr__(self, field, value)
        else:
            self.set(field, value)

    # -- relations ---------------------------------------------------------

    def link(self, other: Collection) -> None:
        self._collection.resolver.link(self._data, other)

    def unlink(self, other: Collection) -> None:
        self._collection.resolver.unlink(self._data, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RowView):
            return NotImplemented
        return self.entity == other.entity and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RowView({self.entity}, {self._data!r})"


__all__ = [
    "RowView",
]
