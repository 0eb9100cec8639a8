"""Card commands: create, edit, move, delete and the delete inverse."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping

from tui_kanban.commands.base import UNCHANGED, Command, clamp_position, quoted
from tui_kanban.core.card import Card, CardPriority, CardStatus
from tui_kanban.core.constants import utc_now
from tui_kanban.core.errors import NotFound, StaleUndo
from tui_kanban.core.state import AppState


@dataclass(frozen=True)
class CreateCard(Command):
    list_id: int
    title: str
    description: str = ""
    due_date: date | None = None
    tag_ids: tuple[int, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        board_list = state.board_list(self.list_id)
        for tag_id in self.tag_ids:
            state.tag(tag_id)
        index = clamp_position(self.position, len(board_list.card_ids))

        card = Card(
            id=state._allocate_id(),
            title=self.title,
            list_id=board_list.id,
            description=self.description,
            tag_ids=list(dict.fromkeys(self.tag_ids)),
            due_date=self.due_date,
            metadata=dict(self.metadata),
        )
        state._put_card(card)
        board_list.card_ids.insert(index, card.id)
        return DeleteCard(card.id)

    def describe(self, state: AppState) -> str:
        return f"Created card {quoted(self.title, 'card')}"


@dataclass(frozen=True)
class DeleteCard(Command):
    card_id: int

    def apply(self, state: AppState) -> Command:
        card = state.card(self.card_id)
        board_list = state.board_list(card.list_id)
        index = board_list.card_ids.index(card.id)

        board_list.card_ids.remove(card.id)
        state._drop_card(card.id)
        return RestoreCard(card, index)

    def describe(self, state: AppState) -> str:
        card = state.cards.get(self.card_id)
        return f"Deleted card {quoted(card.title if card else None, str(self.card_id))}"


@dataclass(frozen=True)
class RestoreCard(Command):
    card: Card
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        if self.card.id in state.cards:
            raise StaleUndo(f"Cannot restore card: id {self.card.id} is in use")
        board_list = state.board_list(self.card.list_id)
        for tag_id in self.card.tag_ids:
            state.tag(tag_id)
        index = clamp_position(self.position, len(board_list.card_ids))

        state._put_card(self.card.copy())
        board_list.card_ids.insert(index, self.card.id)
        return DeleteCard(self.card.id)

    def describe(self, state: AppState) -> str:
        return f"Restored card {quoted(self.card.title, str(self.card.id))}"


@dataclass(frozen=True)
class MoveCard(Command):
    """
    Move a card to `position` in `dest_list_id`.

    The position is clamped into the destination's range; source and
    destination may be the same list (a reorder) or lists on different
    boards.
    """
    card_id: int
    source_list_id: int
    dest_list_id: int
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        card = state.card(self.card_id)
        source = state.board_list(self.source_list_id)
        dest = state.board_list(self.dest_list_id)
        if card.list_id != source.id or card.id not in source.card_ids:
            raise NotFound(f"Card in list {source.id}", card.id)
        old_index = source.card_ids.index(card.id)
        remaining = len(dest.card_ids) - (1 if dest is source else 0)
        index = clamp_position(self.position, remaining)

        source.card_ids.remove(card.id)
        dest.card_ids.insert(index, card.id)
        card.list_id = dest.id
        return MoveCard(card.id, dest.id, source.id, old_index)

    def describe(self, state: AppState) -> str:
        card = state.cards.get(self.card_id)
        dest = state.lists.get(self.dest_list_id)
        name = quoted(card.title if card else None, str(self.card_id))
        if self.source_list_id == self.dest_list_id:
            return f"Reordered card {name}"
        return f"Moved card {name} to {quoted(dest.name if dest else None, 'another list')}"


@dataclass(frozen=True)
class EditCardFields(Command):
    """
    Change any subset of a card's editable fields.

    Fields left as UNCHANGED keep their value. due_date=None clears the
    due date. status and priority take CardStatus and CardPriority
    values (or their names). modified_at pins the modification time; when
    omitted the current time is used.
    """
    card_id: int
    title: Any = UNCHANGED
    description: Any = UNCHANGED
    due_date: Any = UNCHANGED
    metadata: Any = UNCHANGED
    status: Any = UNCHANGED
    priority: Any = UNCHANGED
    modified_at: datetime | None = None

    def apply(self, state: AppState) -> Command:
        card = state.card(self.card_id)
        status = CardStatus(self.status) if self.status is not UNCHANGED else UNCHANGED
        priority = CardPriority(self.priority) if self.priority is not UNCHANGED else UNCHANGED
        inverse = EditCardFields(
            card.id,
            title=card.title if self.title is not UNCHANGED else UNCHANGED,
            description=card.description if self.description is not UNCHANGED else UNCHANGED,
            due_date=card.due_date if self.due_date is not UNCHANGED else UNCHANGED,
            metadata=dict(card.metadata) if self.metadata is not UNCHANGED else UNCHANGED,
            status=card.status if self.status is not UNCHANGED else UNCHANGED,
            priority=card.priority if self.priority is not UNCHANGED else UNCHANGED,
            modified_at=card.modified_at,
        )
        if self.title is not UNCHANGED:
            card.title = self.title
        if self.description is not UNCHANGED:
            card.description = self.description
        if self.due_date is not UNCHANGED:
            card.due_date = self.due_date
        if self.metadata is not UNCHANGED:
            card.metadata = dict(self.metadata)
        if status is not UNCHANGED:
            card.status = status
        if priority is not UNCHANGED:
            card.priority = priority
        card.modified_at = self.modified_at or utc_now()
        state._touch(card.id)
        return inverse

    def describe(self, state: AppState) -> str:
        card = state.cards.get(self.card_id)
        name = quoted(card.title if card else None, str(self.card_id))
        edited = [f for f in _EDITABLE if getattr(self, f) is not UNCHANGED]
        if edited == ["status"]:
            return f"Marked card {name} {CardStatus(self.status).value}"
        if edited == ["priority"]:
            return f"Set priority of card {name} to {CardPriority(self.priority).value}"
        return f"Edited card {name}"


_EDITABLE = ("title", "description", "due_date", "metadata", "status", "priority")
