"""Immutable description of one frame, free of terminal styling.

Renderers map the semantic roles below onto colors; the engine never
emits escape sequences.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from tui_kanban.engine.modes import Mode

# Span roles
TITLE = "title"
MUTED = "muted"
ERROR = "error"
TAG = "tag"
DUE = "due"
OVERDUE = "overdue"
SELECTED = "selected"
COMPLETED = "completed"
STALE = "stale"
PRIORITY_MEDIUM = "priority_medium"
PRIORITY_HIGH = "priority_high"
PLAIN = "plain"


@dataclass(frozen=True)
class TextSpan:
    text: str
    role: str = PLAIN


@dataclass(frozen=True)
class ListItem:
    """One row of a ListView: spans laid out left to right."""
    spans: tuple[TextSpan, ...]
    entity_id: Optional[int] = None

    @property
    def text(self) -> str:
        return " ".join(span.text for span in self.spans if span.text)


@dataclass(frozen=True)
class ListView:
    items: tuple[ListItem, ...]
    selected: Optional[int] = None


@dataclass(frozen=True)
class TextInput:
    """An editable field with its cursor position."""
    label: str
    value: str
    cursor: int
    focused: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class Panel:
    title: str
    children: tuple[Node, ...] = ()
    focused: bool = False


Node = Union[TextSpan, ListView, TextInput, Panel]


@dataclass(frozen=True)
class StatusLine:
    text: str
    level: str = "info"  # "info" or "error"


@dataclass(frozen=True)
class ViewModel:
    mode: Mode
    title: str
    body: Panel
    overlay: Optional[Panel]
    status: Optional[StatusLine]
    size: tuple[int, int]
    hints: tuple[tuple[str, str], ...] = ()
    activity: tuple[TextSpan, ...] = ()
    dirty: bool = False
