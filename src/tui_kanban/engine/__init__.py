"""Interactive engine: events in, view models out."""

from tui_kanban.engine.events import Key, KeyPress, Paste, Resize, Tick
from tui_kanban.engine.facade import Engine, recovered_path
from tui_kanban.engine.modes import Mode
from tui_kanban.engine.viewmodel import ListItem, ListView, Panel, StatusLine, TextInput, TextSpan, ViewModel

__all__ = [
    "Engine",
    "recovered_path",
    "Mode",
    # Events
    "Key",
    "KeyPress",
    "Paste",
    "Resize",
    "Tick",
    # View model
    "ViewModel",
    "Panel",
    "ListView",
    "ListItem",
    "TextInput",
    "TextSpan",
    "StatusLine",
]
