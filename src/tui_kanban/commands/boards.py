"""Board commands: create, rename, delete and the delete inverse."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tui_kanban.commands.base import Command, quoted
from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card
from tui_kanban.core.constants import utc_now
from tui_kanban.core.errors import StaleUndo
from tui_kanban.core.state import AppState


@dataclass(frozen=True)
class CreateBoard(Command):
    name: str

    def apply(self, state: AppState) -> Command:
        board = Board(id=state._allocate_id(), name=self.name)
        state._put_board(board)
        return DeleteBoard(board.id)

    def describe(self, state: AppState) -> str:
        return f"Created board {quoted(self.name, 'board')}"


@dataclass(frozen=True)
class RenameBoard(Command):
    board_id: int
    name: str
    modified_at: datetime | None = None

    def apply(self, state: AppState) -> Command:
        board = state.board(self.board_id)
        inverse = RenameBoard(board.id, board.name, board.modified_at)
        board.name = self.name
        board.modified_at = self.modified_at or utc_now()
        state._touch(board.id)
        return inverse

    def describe(self, state: AppState) -> str:
        board = state.boards.get(self.board_id)
        old = quoted(board.name if board else None, f"board {self.board_id}")
        return f"Renamed board {old} to {quoted(self.name, 'an empty name')}"


@dataclass(frozen=True)
class DeleteBoard(Command):
    """Delete a board together with its lists and their cards."""
    board_id: int

    def apply(self, state: AppState) -> Command:
        board = state.board(self.board_id)
        lists = tuple(state.lists_in_board(board.id))
        cards = tuple(
            state.cards[card_id] for board_list in lists for card_id in board_list.card_ids
        )
        for card in cards:
            state._drop_card(card.id)
        for board_list in lists:
            state._drop_list(board_list.id)
        state._drop_board(board.id)
        return RestoreBoard(board, lists, cards)

    def describe(self, state: AppState) -> str:
        board = state.boards.get(self.board_id)
        return f"Deleted board {quoted(board.name if board else None, str(self.board_id))}"


@dataclass(frozen=True)
class RestoreBoard(Command):
    """Put back a deleted board with the same ids and ordering."""
    board: Board
    lists: tuple[BoardList, ...] = ()
    cards: tuple[Card, ...] = ()

    def apply(self, state: AppState) -> Command:
        ids = [self.board.id, *(bl.id for bl in self.lists), *(c.id for c in self.cards)]
        taken = [i for i in ids if i in state.boards or i in state.lists or i in state.cards]
        if taken:
            raise StaleUndo(f"Cannot restore board: ids {taken} are in use")
        for card in self.cards:
            for tag_id in card.tag_ids:
                state.tag(tag_id)

        state._put_board(self.board.copy())
        for board_list in self.lists:
            state._put_list(board_list.copy())
        for card in self.cards:
            state._put_card(card.copy())
        return DeleteBoard(self.board.id)

    def describe(self, state: AppState) -> str:
        return f"Restored board {quoted(self.board.name, str(self.board.id))}"
