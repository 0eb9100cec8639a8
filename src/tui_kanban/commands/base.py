"""Command protocol and helpers shared by every command kind."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from tui_kanban.core.errors import InvalidPosition

if TYPE_CHECKING:
    from tui_kanban.core.state import AppState


class Command(ABC):
    """
    A reversible mutation of an AppState.

    apply() either changes the state and returns the command that undoes
    the change, or raises a CommandError and leaves the state untouched.
    Every implementation validates all of its inputs before the first
    mutation, so a failure can never leave a half-applied change behind.

    Commands are immutable values: applying the same command object twice
    to equal states produces equal results.
    """

    @abstractmethod
    def apply(self, state: AppState) -> Command:
        """Apply to state and return the inverse command."""
        ...

    @abstractmethod
    def describe(self, state: AppState) -> str:
        """Human readable summary, evaluated before apply()."""
        ...


def clamp_position(position: int | None, length: int) -> int:
    """
    Clamp an insertion index into [0, length].

    None means "append". Out-of-range integers are clamped rather than
    rejected, since the UI may hold stale indexes.
    """
    if position is None:
        return length
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidPosition(f"Position must be an integer, got {position!r}")
    return max(0, min(position, length))


class _Unchanged:
    """Marker for 'leave this field as it is'."""

    _instance: _Unchanged | None = None

    def __new__(cls) -> _Unchanged:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"

    def __bool__(self) -> bool:
        return False


UNCHANGED = _Unchanged()


def quoted(name: str | None, fallback: str) -> str:
    """Format an entity name for activity messages."""
    return f"'{name}'" if name else fallback
