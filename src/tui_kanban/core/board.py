"""Board and BoardList - the containers that order cards."""

from dataclasses import dataclass, field
from datetime import datetime

from tui_kanban.core.constants import utc_now


@dataclass
class Board:
    """
    A named board holding an ordered sequence of list ids.

    Lists are referenced by id rather than contained, so reordering
    only swaps ids and every list stays reachable from AppState directly.
    """
    id: int
    name: str
    list_ids: list[int] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    modified_at: datetime = field(default_factory=utc_now)

    def copy(self) -> "Board":
        """Create an independent copy of this board."""
        return Board(
            id=self.id,
            name=self.name,
            list_ids=list(self.list_ids),
            created_at=self.created_at,
            modified_at=self.modified_at,
        )


@dataclass
class BoardList:
    """A column on a board: an ordered sequence of card ids."""
    id: int
    name: str
    board_id: int
    card_ids: list[int] = field(default_factory=list)

    def copy(self) -> "BoardList":
        """Create an independent copy of this list."""
        return BoardList(
            id=self.id,
            name=self.name,
            board_id=self.board_id,
            card_ids=list(self.card_ids),
        )
