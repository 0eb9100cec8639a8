"""Core data model: boards, lists, cards, tags and the AppState root."""

from tui_kanban.core.activity import ActivityLog, ActivityLogEntry
from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card, CardPriority, CardStatus, Tag, TagColor
from tui_kanban.core.state import AppState

__all__ = [
    "ActivityLog",
    "ActivityLogEntry",
    "AppState",
    "Board",
    "BoardList",
    "Card",
    "CardPriority",
    "CardStatus",
    "Tag",
    "TagColor",
]
