"""Focus position on the board screen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card
from tui_kanban.core.state import AppState


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length - 1)) if length else 0


@dataclass
class Cursor:
    """
    Which board, list and card have focus.

    The board is tracked by id so it survives reordering; list and card
    are tracked by index so focus stays in place when the focused item is
    deleted. normalize() must run after every state change.
    """
    board_id: Optional[int] = None
    list_index: int = 0
    card_index: int = 0
    _board_index: int = 0

    def normalize(self, state: AppState) -> None:
        boards = state.board_order()
        if not boards:
            self.board_id = None
            self.list_index = self.card_index = self._board_index = 0
            return
        if self.board_id not in state.boards:
            self._board_index = _clamp(self._board_index, len(boards))
            self.board_id = boards[self._board_index].id
        else:
            self._board_index = [b.id for b in boards].index(self.board_id)

        lists = state.lists_in_board(self.board_id)
        self.list_index = _clamp(self.list_index, len(lists))
        cards = lists[self.list_index].card_ids if lists else []
        self.card_index = _clamp(self.card_index, len(cards))

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def board(self, state: AppState) -> Optional[Board]:
        if self.board_id is None:
            return None
        return state.boards.get(self.board_id)

    def board_list(self, state: AppState) -> Optional[BoardList]:
        board = self.board(state)
        if board is None or not board.list_ids:
            return None
        return state.lists[board.list_ids[_clamp(self.list_index, len(board.list_ids))]]

    def card(self, state: AppState) -> Optional[Card]:
        board_list = self.board_list(state)
        if board_list is None or not board_list.card_ids:
            return None
        card_ids = board_list.card_ids
        return state.cards[card_ids[_clamp(self.card_index, len(card_ids))]]

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    def step_board(self, state: AppState, step: int) -> None:
        boards = state.board_order()
        if not boards:
            return
        self._board_index = (self._board_index + step) % len(boards)
        self.board_id = boards[self._board_index].id
        self.list_index = self.card_index = 0

    def step_list(self, state: AppState, step: int) -> None:
        board = self.board(state)
        if board is None:
            return
        self.list_index = _clamp(self.list_index + step, len(board.list_ids))
        self.normalize(state)

    def step_card(self, state: AppState, step: int) -> None:
        self.card_index += step
        self.normalize(state)

    def focus_board(self, state: AppState, board_id: int) -> None:
        self.board_id = board_id
        self.list_index = self.card_index = 0
        self.normalize(state)

    def focus_list(self, state: AppState, list_id: int) -> None:
        board_list = state.board_list(list_id)
        self.board_id = board_list.board_id
        self.list_index = state.board(board_list.board_id).list_ids.index(list_id)
        self.card_index = 0
        self.normalize(state)

    def focus_card(self, state: AppState, card_id: int) -> None:
        card = state.card(card_id)
        self.focus_list(state, card.list_id)
        self.card_index = state.board_list(card.list_id).card_ids.index(card_id)
