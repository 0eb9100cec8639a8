"""Widget protocol and the mapping from span roles to terminal styles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Protocol, runtime_checkable

from tui_kanban.cli.core.ansi_text import RESET, one_line
from tui_kanban.engine.viewmodel import TextSpan


@dataclass
class Rect:
    """Rectangle bounds for widget positioning."""
    x: int
    y: int
    width: int
    height: int


@runtime_checkable
class Widget(Protocol):
    """Anything that can draw itself into a rectangle."""

    def render(self, bounds: Rect) -> list[str]:
        """Render widget content as a list of lines, one per row."""
        ...


class BaseWidget(ABC):
    """Base class for widgets drawn from view model nodes."""

    @abstractmethod
    def render(self, bounds: Rect) -> list[str]:
        pass


ROLE_STYLES = {
    "title": "",
    "plain": "",
    "muted": "\x1b[90m",
    "error": "\x1b[1;31m",
    "tag": "\x1b[36m",
    "due": "\x1b[33m",
    "overdue": "\x1b[31m",
    "selected": "\x1b[7m",
    "completed": "\x1b[92m",
    "stale": "\x1b[90m",
    "priority_medium": "\x1b[93m",
    "priority_high": "\x1b[1;91m",
}


def styled(span: TextSpan) -> str:
    """A span's text wrapped in its role's style."""
    style = ROLE_STYLES.get(span.role, "")
    text = one_line(span.text)
    return f"{style}{text}{RESET}" if style else text


def styled_spans(spans: Iterable[TextSpan], highlight: bool = False) -> str:
    """Spans joined by single spaces; highlight draws them reversed."""
    parts = [styled(span) for span in spans if span.text]
    line = " ".join(parts)
    if highlight:
        # Re-apply reverse video after each span's reset
        return ROLE_STYLES["selected"] + line.replace(RESET, RESET + ROLE_STYLES["selected"]) + RESET
    return line
