"""Completion messages delivered from background tasks to the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Union


class TaskKind(Enum):
    """Kinds of background work the engine dispatches."""
    SAVE = auto()
    LOAD = auto()
    UPDATE_CHECK = auto()


@dataclass(frozen=True)
class TaskSuccess:
    """A task finished; payload is its return value."""
    ticket: int
    kind: TaskKind
    payload: Any = None
    coalesced: int = 0  # further requests this result also satisfies

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class TaskFailure:
    """A task raised; error is the exception it raised."""
    ticket: int
    kind: TaskKind
    error: BaseException
    coalesced: int = 0

    @property
    def ok(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return str(self.error) or type(self.error).__name__


TaskResult = Union[TaskSuccess, TaskFailure]
