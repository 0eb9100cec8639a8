"""Screen modes and the transient state each one needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tui_kanban.commands.base import Command
    from tui_kanban.search.index import SearchHit


class Mode(Enum):
    """What the keyboard currently talks to."""
    BOARD = auto()
    CARD_EDITOR = auto()
    SEARCH = auto()
    CONFIRM_DELETE = auto()
    HELP = auto()
    PROMPT = auto()


class PromptPurpose(Enum):
    """What a submitted prompt does."""
    NEW_BOARD = "New board"
    NEW_LIST = "New list"
    NEW_CARD = "New card"
    RENAME_BOARD = "Rename board"
    RENAME_LIST = "Rename list"
    ADD_TAG = "Add tag"
    REMOVE_TAG = "Remove tag"
    DELETE_TAG = "Delete tag"

    @property
    def completes_tags(self) -> bool:
        return self in (PromptPurpose.ADD_TAG, PromptPurpose.REMOVE_TAG, PromptPurpose.DELETE_TAG)


class TextField:
    """Editable single-line buffer with a cursor."""

    def __init__(self, value: str = "", multiline: bool = False) -> None:
        self.value = value
        self.cursor = len(value)
        self.multiline = multiline

    def insert(self, text: str) -> None:
        if not self.multiline:
            text = " ".join(text.splitlines())
        self.value = self.value[:self.cursor] + text + self.value[self.cursor:]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.value = self.value[:self.cursor - 1] + self.value[self.cursor:]
            self.cursor -= 1

    def delete(self) -> None:
        self.value = self.value[:self.cursor] + self.value[self.cursor + 1:]

    def left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def right(self) -> None:
        self.cursor = min(len(self.value), self.cursor + 1)

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.value)

    def set(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)

    def __repr__(self) -> str:
        return f"TextField({self.value!r}, cursor={self.cursor})"


@dataclass
class PromptState:
    purpose: PromptPurpose
    target_id: Optional[int] = None  # board, list or card the prompt acts on
    text: TextField = field(default_factory=TextField)
    suggestions: list[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.purpose.value


EDITOR_FIELDS = ("title", "description", "due_date")


@dataclass
class EditorState:
    card_id: int
    fields: dict[str, TextField]
    focus: int = 0

    @property
    def focused_name(self) -> str:
        return EDITOR_FIELDS[self.focus]

    @property
    def focused(self) -> TextField:
        return self.fields[self.focused_name]

    def cycle(self, step: int) -> None:
        self.focus = (self.focus + step) % len(EDITOR_FIELDS)


@dataclass
class SearchState:
    text: TextField = field(default_factory=TextField)
    hits: list[SearchHit] = field(default_factory=list)
    selected: int = 0


@dataclass
class ConfirmState:
    command: Command
    message: str
