"""AppState - the aggregate root of the data model."""

from __future__ import annotations

from dataclasses import dataclass, field

from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card, Tag
from tui_kanban.core.constants import SCHEMA_VERSION
from tui_kanban.core.errors import InvariantViolation, NotFound


@dataclass
class AppState:
    """
    Id-indexed maps of every board, list, card and tag.

    Entities point at each other by id. Ids come from a single monotonic
    counter shared by all entity kinds, so an id is never reused and is
    unique across kinds. The counter is excluded from equality: undoing a
    creation restores the entity maps but never rewinds the counter.

    Only the command layer mutates an AppState, through the underscore
    methods below. Each of them records the touched id so the engine can
    update derived indexes incrementally (see drain_changes()).
    """
    boards: dict[int, Board] = field(default_factory=dict)
    lists: dict[int, BoardList] = field(default_factory=dict)
    cards: dict[int, Card] = field(default_factory=dict)
    tags: dict[int, Tag] = field(default_factory=dict)
    next_id: int = field(default=1, compare=False)
    schema_version: int = SCHEMA_VERSION
    _changes: set[int] = field(default_factory=set, compare=False, repr=False)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def board(self, board_id: int) -> Board:
        try:
            return self.boards[board_id]
        except KeyError:
            raise NotFound("Board", board_id) from None

    def board_list(self, list_id: int) -> BoardList:
        try:
            return self.lists[list_id]
        except KeyError:
            raise NotFound("List", list_id) from None

    def card(self, card_id: int) -> Card:
        try:
            return self.cards[card_id]
        except KeyError:
            raise NotFound("Card", card_id) from None

    def tag(self, tag_id: int) -> Tag:
        try:
            return self.tags[tag_id]
        except KeyError:
            raise NotFound("Tag", tag_id) from None

    def find_tag_by_name(self, name: str) -> Tag | None:
        """Find a tag by case-insensitive name."""
        wanted = name.strip().casefold()
        for tag in self.tags.values():
            if tag.name.casefold() == wanted:
                return tag
        return None

    def lists_in_board(self, board_id: int) -> list[BoardList]:
        """Lists of a board in display order."""
        return [self.lists[list_id] for list_id in self.board(board_id).list_ids]

    def cards_in_list(self, list_id: int) -> list[Card]:
        """Cards of a list in display order."""
        return [self.cards[card_id] for card_id in self.board_list(list_id).card_ids]

    def cards_with_tag(self, tag_id: int) -> list[Card]:
        return [card for card in self.cards.values() if tag_id in card.tag_ids]

    def board_order(self) -> list[Board]:
        """Boards in creation order."""
        return sorted(self.boards.values(), key=lambda b: b.id)

    @property
    def is_empty(self) -> bool:
        return not (self.boards or self.tags)

    # -------------------------------------------------------------------------
    # Mutation primitives (command layer only)
    # -------------------------------------------------------------------------

    def _allocate_id(self) -> int:
        new_id = self.next_id
        self.next_id += 1
        return new_id

    def _reserve_id(self, entity_id: int) -> None:
        """Keep the counter above an id restored from a snapshot."""
        if entity_id >= self.next_id:
            self.next_id = entity_id + 1

    def _touch(self, entity_id: int) -> None:
        self._changes.add(entity_id)

    def _put_board(self, board: Board) -> None:
        self._reserve_id(board.id)
        self.boards[board.id] = board
        self._touch(board.id)

    def _drop_board(self, board_id: int) -> Board:
        self._touch(board_id)
        return self.boards.pop(board_id)

    def _put_list(self, board_list: BoardList) -> None:
        self._reserve_id(board_list.id)
        self.lists[board_list.id] = board_list
        self._touch(board_list.id)

    def _drop_list(self, list_id: int) -> BoardList:
        self._touch(list_id)
        return self.lists.pop(list_id)

    def _put_card(self, card: Card) -> None:
        self._reserve_id(card.id)
        self.cards[card.id] = card
        self._touch(card.id)

    def _drop_card(self, card_id: int) -> Card:
        self._touch(card_id)
        return self.cards.pop(card_id)

    def _put_tag(self, tag: Tag) -> None:
        self._reserve_id(tag.id)
        self.tags[tag.id] = tag
        self._touch(tag.id)

    def _drop_tag(self, tag_id: int) -> Tag:
        self._touch(tag_id)
        return self.tags.pop(tag_id)

    def drain_changes(self) -> set[int]:
        """Return and forget the ids touched since the previous drain."""
        changes = self._changes
        self._changes = set()
        return changes

    # -------------------------------------------------------------------------
    # Copy & checks
    # -------------------------------------------------------------------------

    def copy(self) -> AppState:
        """Deep, independent copy (pending changes are not carried over)."""
        return AppState(
            boards={k: v.copy() for k, v in self.boards.items()},
            lists={k: v.copy() for k, v in self.lists.items()},
            cards={k: v.copy() for k, v in self.cards.items()},
            tags={k: v.copy() for k, v in self.tags.items()},
            next_id=self.next_id,
            schema_version=self.schema_version,
        )

    def check_invariants(self) -> None:
        """Raise InvariantViolation describing every broken invariant."""
        problems: list[str] = []
        used_ids = [*self.boards, *self.lists, *self.cards, *self.tags]

        if len(used_ids) != len(set(used_ids)):
            problems.append("an id is shared by two entities")
        if used_ids and max(used_ids) >= self.next_id:
            problems.append(f"id counter {self.next_id} is not above every used id")

        for board in self.boards.values():
            if len(board.list_ids) != len(set(board.list_ids)):
                problems.append(f"board {board.id} lists a list twice")
            names: set[str] = set()
            for list_id in board.list_ids:
                board_list = self.lists.get(list_id)
                if board_list is None:
                    problems.append(f"board {board.id} references missing list {list_id}")
                    continue
                if board_list.board_id != board.id:
                    problems.append(f"list {list_id} is ordered by board {board.id} but owned by {board_list.board_id}")
                key = board_list.name.casefold()
                if key in names:
                    problems.append(f"board {board.id} has duplicate list name {board_list.name!r}")
                names.add(key)

        for board_list in self.lists.values():
            owner = self.boards.get(board_list.board_id)
            if owner is None:
                problems.append(f"list {board_list.id} references missing board {board_list.board_id}")
            elif board_list.id not in owner.list_ids:
                problems.append(f"list {board_list.id} is missing from board {owner.id}")
            if len(board_list.card_ids) != len(set(board_list.card_ids)):
                problems.append(f"list {board_list.id} contains a card twice")
            owned = {c.id for c in self.cards.values() if c.list_id == board_list.id}
            if owned != set(board_list.card_ids):
                problems.append(f"list {board_list.id} card ids do not match owning cards")

        for card in self.cards.values():
            if card.list_id not in self.lists:
                problems.append(f"card {card.id} references missing list {card.list_id}")
            if len(card.tag_ids) != len(set(card.tag_ids)):
                problems.append(f"card {card.id} carries a tag twice")
            for tag_id in card.tag_ids:
                if tag_id not in self.tags:
                    problems.append(f"card {card.id} references missing tag {tag_id}")

        if problems:
            raise InvariantViolation(problems)
