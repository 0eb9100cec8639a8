"""List commands: create, rename, move, delete and the delete inverse."""

from __future__ import annotations

from dataclasses import dataclass

from tui_kanban.commands.base import Command, clamp_position, quoted
from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card
from tui_kanban.core.errors import DuplicateName, StaleUndo
from tui_kanban.core.state import AppState


def ensure_unique_list_name(
    state: AppState, board: Board, name: str, ignore_id: int | None = None,
) -> None:
    """List names are unique per board, compared case-insensitively."""
    wanted = name.casefold()
    for list_id in board.list_ids:
        if list_id == ignore_id:
            continue
        if state.lists[list_id].name.casefold() == wanted:
            raise DuplicateName(f"Board '{board.name}' already has a list named '{name}'")


@dataclass(frozen=True)
class CreateList(Command):
    board_id: int
    name: str
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        board = state.board(self.board_id)
        ensure_unique_list_name(state, board, self.name)
        index = clamp_position(self.position, len(board.list_ids))

        board_list = BoardList(id=state._allocate_id(), name=self.name, board_id=board.id)
        state._put_list(board_list)
        board.list_ids.insert(index, board_list.id)
        return DeleteList(board_list.id)

    def describe(self, state: AppState) -> str:
        return f"Created list {quoted(self.name, 'list')}"


@dataclass(frozen=True)
class RenameList(Command):
    list_id: int
    name: str

    def apply(self, state: AppState) -> Command:
        board_list = state.board_list(self.list_id)
        ensure_unique_list_name(
            state, state.board(board_list.board_id), self.name, ignore_id=board_list.id
        )
        inverse = RenameList(board_list.id, board_list.name)
        board_list.name = self.name
        state._touch(board_list.id)
        return inverse

    def describe(self, state: AppState) -> str:
        board_list = state.lists.get(self.list_id)
        old = quoted(board_list.name if board_list else None, f"list {self.list_id}")
        return f"Renamed list {old} to {quoted(self.name, 'an empty name')}"


@dataclass(frozen=True)
class MoveList(Command):
    """Reorder a list within its board, or move it to another board."""
    list_id: int
    position: int | None
    board_id: int | None = None

    def apply(self, state: AppState) -> Command:
        board_list = state.board_list(self.list_id)
        source = state.board(board_list.board_id)
        target = state.board(self.board_id) if self.board_id is not None else source
        if target.id != source.id:
            ensure_unique_list_name(state, target, board_list.name)
        old_index = source.list_ids.index(board_list.id)
        remaining = len(target.list_ids) - (1 if target is source else 0)
        index = clamp_position(self.position, remaining)

        source.list_ids.remove(board_list.id)
        target.list_ids.insert(index, board_list.id)
        board_list.board_id = target.id
        return MoveList(board_list.id, old_index, source.id)

    def describe(self, state: AppState) -> str:
        board_list = state.lists.get(self.list_id)
        return f"Moved list {quoted(board_list.name if board_list else None, str(self.list_id))}"


@dataclass(frozen=True)
class DeleteList(Command):
    """Delete a list and every card on it."""
    list_id: int

    def apply(self, state: AppState) -> Command:
        board_list = state.board_list(self.list_id)
        board = state.board(board_list.board_id)
        index = board.list_ids.index(board_list.id)
        cards = tuple(state.cards[card_id] for card_id in board_list.card_ids)

        for card in cards:
            state._drop_card(card.id)
        board.list_ids.remove(board_list.id)
        state._drop_list(board_list.id)
        return RestoreList(board_list, cards, index)

    def describe(self, state: AppState) -> str:
        board_list = state.lists.get(self.list_id)
        return f"Deleted list {quoted(board_list.name if board_list else None, str(self.list_id))}"


@dataclass(frozen=True)
class RestoreList(Command):
    """Put back a deleted list and its cards at their old position."""
    board_list: BoardList
    cards: tuple[Card, ...] = ()
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        board = state.board(self.board_list.board_id)
        ids = [self.board_list.id, *(c.id for c in self.cards)]
        taken = [i for i in ids if i in state.lists or i in state.cards]
        if taken:
            raise StaleUndo(f"Cannot restore list: ids {taken} are in use")
        ensure_unique_list_name(state, board, self.board_list.name)
        for card in self.cards:
            for tag_id in card.tag_ids:
                state.tag(tag_id)
        index = clamp_position(self.position, len(board.list_ids))

        state._put_list(self.board_list.copy())
        for card in self.cards:
            state._put_card(card.copy())
        board.list_ids.insert(index, self.board_list.id)
        return DeleteList(self.board_list.id)

    def describe(self, state: AppState) -> str:
        return f"Restored list {quoted(self.board_list.name, str(self.board_list.id))}"
