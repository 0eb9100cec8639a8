"""Terminal plumbing for the interactive board."""

from tui_kanban.cli.core.input import InputReader, KeyDecoder
from tui_kanban.cli.core.layout import BoardLayout, calculate_layout
from tui_kanban.cli.core.terminal import Terminal, TerminalSize

__all__ = [
    "InputReader",
    "KeyDecoder",
    "BoardLayout",
    "calculate_layout",
    "Terminal",
    "TerminalSize",
]
