"""Schema registry: the set of table names the database knows about.

The registry is populated from the catalog on first use and never
invalidated afterwards; tables created or dropped mid-process are not
picked up. Every :class:`~rowlink.orm.collection.Collection` consults it
for existence checks, and the relation resolver uses it to find junction
tables.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from rowlink.core.errors import TableNotFoundError
from rowlink.core.logging import get_logger

logger = get_logger(__name__)


class SchemaRegistry:
    """Lazily loaded, write-once set of table names.

    Parameters:
        loader: Zero-argument callable returning the table names. Called at
            most once, on the first lookup.
    """

    def __init__(self, loader: Callable[[], Iterable[str]]) -> None:
        self._loader = loader
        self._tables: frozenset[str] | None = None

    @classmethod
    def from_names(cls, names: Iterable[str]) -> SchemaRegistry:
        """Build an already-populated registry (no catalog query)."""
        frozen = frozenset(names)
        return cls(lambda: frozen)

    @property
    def loaded(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> frozenset[str]:
        if self._tables is None:
            self._tables = frozenset(self._loader())
            logger.debug("schema_registry_loaded", tables=len(self._tables))
        return self._tables

    def require(self, table: str) -> None:
        """Raise :class:`TableNotFoundError` unless ``table`` is registered."""
        if table not in self.tables:
            raise TableNotFoundError(table)

    def __contains__(self, table: object) -> bool:
        return table in self.tables

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.tables))

    def __len__(self) -> int:
        return len(self.tables)

    def __repr__(self) -> str:
        state = f"{len(self._tables)} tables" if self._tables is not None else "unloaded"
        return f"SchemaRegistry({state})"


__all__ = [
    "SchemaRegistry",
]
