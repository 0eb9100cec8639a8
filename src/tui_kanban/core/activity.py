"""Activity log - a display-only record of committed commands."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator

from tui_kanban.core.constants import DEFAULT_ACTIVITY_LIMIT, utc_now


@dataclass(frozen=True)
class ActivityLogEntry:
    """One committed change, as shown in the activity panel."""
    description: str
    by_user: bool = True
    timestamp: datetime = field(default_factory=utc_now)


class ActivityLog:
    """
    Append-only log of activity entries, oldest first.

    The log is bounded; when full, the oldest entries are dropped.
    It takes no part in undo and is not persisted.
    """

    def __init__(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> None:
        self._entries: deque[ActivityLogEntry] = deque(maxlen=max(1, limit))

    def append(self, description: str, by_user: bool = True) -> ActivityLogEntry:
        entry = ActivityLogEntry(description=description, by_user=by_user)
        self._entries.append(entry)
        return entry

    def recent(self, count: int) -> list[ActivityLogEntry]:
        """The newest `count` entries, newest first."""
        if count <= 0:
            return []
        return list(reversed(self._entries))[:count]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ActivityLogEntry]:
        return iter(self._entries)
