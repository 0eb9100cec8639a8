"""Command layer - every mutation of AppState as a reversible value."""

from tui_kanban.commands.base import UNCHANGED, Command, clamp_position
from tui_kanban.commands.boards import CreateBoard, DeleteBoard, RenameBoard, RestoreBoard
from tui_kanban.commands.cards import (
    CreateCard,
    DeleteCard,
    EditCardFields,
    MoveCard,
    RestoreCard,
)
from tui_kanban.commands.history import History, HistoryEntry
from tui_kanban.commands.lists import (
    CreateList,
    DeleteList,
    MoveList,
    RenameList,
    RestoreList,
)
from tui_kanban.commands.tags import (
    AddTagToCard,
    CreateTag,
    DeleteTag,
    EditTag,
    RemoveTagFromCard,
    RestoreTag,
)

__all__ = [
    "UNCHANGED",
    "Command",
    "clamp_position",
    # Boards
    "CreateBoard",
    "RenameBoard",
    "DeleteBoard",
    "RestoreBoard",
    # Lists
    "CreateList",
    "RenameList",
    "MoveList",
    "DeleteList",
    "RestoreList",
    # Cards
    "CreateCard",
    "EditCardFields",
    "MoveCard",
    "DeleteCard",
    "RestoreCard",
    # Tags
    "CreateTag",
    "EditTag",
    "DeleteTag",
    "RestoreTag",
    "AddTagToCard",
    "RemoveTagFromCard",
    # History
    "History",
    "HistoryEntry",
]
