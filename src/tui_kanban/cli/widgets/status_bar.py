"""Status bar showing the transient message and shortcut hints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tui_kanban.cli.core.ansi_text import truncate, visible_len
from tui_kanban.cli.widgets.base import BaseWidget, Rect
from tui_kanban.engine.viewmodel import StatusLine

# Keep at least this much room for the message
MESSAGE_MIN_WIDTH = 20


@dataclass
class Shortcut:
    """A keyboard shortcut to display."""
    key: str
    label: str


class StatusBarWidget(BaseWidget):
    """Bottom status bar: message on the left, shortcuts on the right."""

    def __init__(self) -> None:
        self._status: Optional[StatusLine] = None
        self._shortcuts: list[Shortcut] = []
        self._dirty = False

    def set_status(self, status: Optional[StatusLine]) -> None:
        self._status = status

    def set_shortcuts(self, shortcuts: list[Shortcut]) -> None:
        self._shortcuts = shortcuts

    def set_dirty(self, dirty: bool) -> None:
        self._dirty = dirty

    def render(self, bounds: Rect) -> list[str]:
        width = bounds.width

        # Build shortcuts from the right, keeping only what fits
        shortcut_parts: list[str] = []
        shortcuts_len = 0
        for sc in reversed(self._shortcuts):
            part = f"\x1b[7m {sc.key} \x1b[0;100;36m {sc.label} "
            part_len = visible_len(part)
            if shortcuts_len + part_len + MESSAGE_MIN_WIDTH < width:
                shortcut_parts.insert(0, part)
                shortcuts_len += part_len
            else:
                break
        shortcuts_str = "".join(shortcut_parts)

        marker = "*" if self._dirty else " "
        message = ""
        color = "\x1b[97m"
        if self._status is not None:
            message = self._status.text
            if self._status.level == "error":
                color = "\x1b[1;91m"

        left = truncate(f"{marker} {message}", max(0, width - shortcuts_len))
        padding = " " * max(0, width - visible_len(left) - shortcuts_len)
        return [f"\x1b[100m{color}{left}\x1b[100m{padding}{shortcuts_str}\x1b[0m"]
