"""Tag commands: create, edit, delete (cascading), attach and detach."""

from __future__ import annotations

from dataclasses import dataclass

from tui_kanban.commands.base import Command, clamp_position, quoted
from tui_kanban.core.card import Tag, TagColor
from tui_kanban.core.errors import DuplicateName, NotFound, StaleUndo
from tui_kanban.core.state import AppState


def ensure_unique_tag_name(state: AppState, name: str, ignore_id: int | None = None) -> None:
    existing = state.find_tag_by_name(name)
    if existing is not None and existing.id != ignore_id:
        raise DuplicateName(f"A tag named '{existing.name}' already exists")


@dataclass(frozen=True)
class CreateTag(Command):
    name: str
    color: TagColor = TagColor.GRAY

    def apply(self, state: AppState) -> Command:
        ensure_unique_tag_name(state, self.name)
        tag = Tag(id=state._allocate_id(), name=self.name, color=self.color)
        state._put_tag(tag)
        return DeleteTag(tag.id)

    def describe(self, state: AppState) -> str:
        return f"Created tag {quoted(self.name, 'tag')}"


@dataclass(frozen=True)
class EditTag(Command):
    tag_id: int
    name: str | None = None
    color: TagColor | None = None

    def apply(self, state: AppState) -> Command:
        tag = state.tag(self.tag_id)
        if self.name is not None:
            ensure_unique_tag_name(state, self.name, ignore_id=tag.id)
        inverse = EditTag(tag.id, tag.name, tag.color)
        if self.name is not None:
            tag.name = self.name
        if self.color is not None:
            tag.color = self.color
        state._touch(tag.id)
        return inverse

    def describe(self, state: AppState) -> str:
        tag = state.tags.get(self.tag_id)
        return f"Edited tag {quoted(tag.name if tag else None, str(self.tag_id))}"


@dataclass(frozen=True)
class DeleteTag(Command):
    """Delete a tag and remove it from every card that carries it."""
    tag_id: int

    def apply(self, state: AppState) -> Command:
        tag = state.tag(self.tag_id)
        placements = tuple(
            (card.id, card.tag_ids.index(tag.id)) for card in state.cards_with_tag(tag.id)
        )
        for card_id, _ in placements:
            state.cards[card_id].tag_ids.remove(tag.id)
        state._drop_tag(tag.id)
        return RestoreTag(tag, placements)

    def describe(self, state: AppState) -> str:
        tag = state.tags.get(self.tag_id)
        return f"Deleted tag {quoted(tag.name if tag else None, str(self.tag_id))}"


@dataclass(frozen=True)
class RestoreTag(Command):
    """Put back a deleted tag and re-attach it where it was."""
    tag: Tag
    placements: tuple[tuple[int, int], ...] = ()

    def apply(self, state: AppState) -> Command:
        if self.tag.id in state.tags:
            raise StaleUndo(f"Cannot restore tag: id {self.tag.id} is in use")
        ensure_unique_tag_name(state, self.tag.name)
        for card_id, _ in self.placements:
            state.card(card_id)

        state._put_tag(self.tag.copy())
        for card_id, index in self.placements:
            tag_ids = state.cards[card_id].tag_ids
            tag_ids.insert(clamp_position(index, len(tag_ids)), self.tag.id)
        return DeleteTag(self.tag.id)

    def describe(self, state: AppState) -> str:
        return f"Restored tag {quoted(self.tag.name, str(self.tag.id))}"


@dataclass(frozen=True)
class AddTagToCard(Command):
    card_id: int
    tag_id: int
    position: int | None = None

    def apply(self, state: AppState) -> Command:
        card = state.card(self.card_id)
        tag = state.tag(self.tag_id)
        if tag.id in card.tag_ids:
            raise DuplicateName(f"Card '{card.title}' is already tagged '{tag.name}'")
        card.tag_ids.insert(clamp_position(self.position, len(card.tag_ids)), tag.id)
        return RemoveTagFromCard(card.id, tag.id)

    def describe(self, state: AppState) -> str:
        tag = state.tags.get(self.tag_id)
        card = state.cards.get(self.card_id)
        return (
            f"Tagged {quoted(card.title if card else None, str(self.card_id))} "
            f"with {quoted(tag.name if tag else None, str(self.tag_id))}"
        )


@dataclass(frozen=True)
class RemoveTagFromCard(Command):
    card_id: int
    tag_id: int

    def apply(self, state: AppState) -> Command:
        card = state.card(self.card_id)
        if self.tag_id not in card.tag_ids:
            raise NotFound(f"Tag on card {card.id}", self.tag_id)
        index = card.tag_ids.index(self.tag_id)
        card.tag_ids.remove(self.tag_id)
        return AddTagToCard(card.id, self.tag_id, index)

    def describe(self, state: AppState) -> str:
        tag = state.tags.get(self.tag_id)
        card = state.cards.get(self.card_id)
        return (
            f"Removed {quoted(tag.name if tag else None, str(self.tag_id))} "
            f"from {quoted(card.title if card else None, str(self.card_id))}"
        )
