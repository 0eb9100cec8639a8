"""Bounded undo/redo history of inverse commands."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from tui_kanban.commands.base import Command
from tui_kanban.core.constants import DEFAULT_UNDO_LIMIT
from tui_kanban.core.errors import CommandError, StaleUndo
from tui_kanban.core.state import AppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """A command ready to be applied, labelled with the change it reverses."""
    command: Command
    label: str


class History:
    """
    Undo and redo stacks.

    The undo stack holds the inverses returned by applied commands, newest
    last, and keeps at most `limit` of them. Undoing applies the inverse
    and pushes the command it returns (the inverse of the inverse) onto the
    redo stack; redo mirrors that. Recording a new command clears redo.

    If an entry no longer applies, both stacks are cleared and StaleUndo is
    raised; the state is left as it was.
    """

    def __init__(self, limit: int = DEFAULT_UNDO_LIMIT) -> None:
        self._undo: deque[HistoryEntry] = deque(maxlen=max(1, limit))
        self._redo: list[HistoryEntry] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, inverse: Command, label: str) -> None:
        self._undo.append(HistoryEntry(inverse, label))
        self._redo.clear()

    def undo(self, state: AppState) -> str | None:
        """Undo the newest change. Returns its label, or None if empty."""
        if not self._undo:
            return None
        entry = self._undo.pop()
        redo_command = self._replay(entry, state)
        self._redo.append(HistoryEntry(redo_command, entry.label))
        return entry.label

    def redo(self, state: AppState) -> str | None:
        """Redo the newest undone change. Returns its label, or None if empty."""
        if not self._redo:
            return None
        entry = self._redo.pop()
        undo_command = self._replay(entry, state)
        self._undo.append(HistoryEntry(undo_command, entry.label))
        return entry.label

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _replay(self, entry: HistoryEntry, state: AppState) -> Command:
        try:
            return entry.command.apply(state)
        except CommandError as e:
            logger.warning("History entry %r no longer applies: %s", entry.label, e)
            self.clear()
            raise StaleUndo(f"Cannot replay '{entry.label}': {e}") from e
