"""Mutation buffer: field writes staged per iteration position.

Position ``-1`` (:data:`UNITERATED`) holds writes made before the owning
collection fetched any row. Position ``-2`` (:data:`FIRST_ROW`) holds writes
made through the row returned by ``Collection.first()``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

UNITERATED = -1
FIRST_ROW = -2


class MutationBuffer:
    """Ordered ``position → {field: value}`` staging area.

    Later writes to the same field at the same position overwrite earlier
    ones. Flushing is the owner's job; the buffer only stores and hands
    entries out.
    """

    def __init__(self) -> None:
        self._entries: dict[int, dict[str, Any]] = {}

    def stage(self, position: int, field: str, value: Any) -> None:
        self._entries.setdefault(position, {})[field] = value

    def pending(self, position: int) -> Mapping[str, Any]:
        return MappingProxyType(self._entries.get(position, {}))

    def positions(self) -> list[int]:
        return list(self._entries)

    def pop(self, position: int) -> dict[str, Any]:
        return self._entries.pop(position)

    def discard(self) -> None:
        """Drop every staged write without flushing."""
        self._entries.clear()

    def snapshot(self) -> dict[int, dict[str, Any]]:
        return {position: dict(fields) for position, fields in self._entries.items()}

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"MutationBuffer({self._entries!r})"


__all__ = [
    "FIRST_ROW",
    "MutationBuffer",
    "UNITERATED",
]
