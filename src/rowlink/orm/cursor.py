"""Lazy, forward-only cursor over the rows of one SELECT.

States::

    UNEXECUTED ──rewind()──▶ ACTIVE ──advance() past last row──▶ EXHAUSTED
        ▲                                                           │
        └──────────────────────── rewind() ─────────────────────────┘

``rewind`` executes the statement only when no result is open; calling it
again mid-pass resets the position and keeps reading the same result.
Every fetched row's ``id`` is recorded against its position so buffered
writes can later be routed back to the right row.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from rowlink.core.protocols import ResultCursor


class CursorState(str, Enum):
    UNEXECUTED = "unexecuted"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class LazyCursor:
    """Single-pass iteration state for a collection.

    Parameters:
        execute: Zero-argument callable that runs the SELECT and returns a
            :class:`~rowlink.core.protocols.ResultCursor`.
    """

    def __init__(self, execute: Callable[[], ResultCursor]) -> None:
        self._execute = execute
        self._result: ResultCursor | None = None
        self.state = CursorState.UNEXECUTED
        self.row: dict[str, Any] | None = None
        self.position = -1
        self.ids: dict[int, Any] = {}

    @property
    def executed(self) -> bool:
        return self.state is not CursorState.UNEXECUTED

    @property
    def has_current(self) -> bool:
        return self.row is not None

    def rewind(self) -> None:
        if self.state is not CursorState.ACTIVE:
            self._result = self._execute()
            self.state = CursorState.ACTIVE
        self.position = -1
        self.advance()

    def reset(self) -> None:
        """Forget the open result; the next rewind re-executes."""
        self._result = None
        self.row = None
        self.position = -1
        self.state = CursorState.UNEXECUTED

    def advance(self) -> None:
        self.position += 1
        fetched = self._result.fetchone() if self._result is not None else None
        if fetched is None:
            self.row = None
            self._result = None
            self.state = CursorState.EXHAUSTED
            return
        self.row = dict(fetched)
        self.ids[self.position] = self.row.get("id")

    def __repr__(self) -> str:
        return f"LazyCursor(state={self.state.value}, position={self.position})"


__all__ = [
    "CursorState",
    "LazyCursor",
]
