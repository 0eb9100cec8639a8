"""Widgets that draw view model nodes."""

from tui_kanban.cli.widgets.base import Rect, Widget
from tui_kanban.cli.widgets.list_column import ListColumnWidget
from tui_kanban.cli.widgets.overlay import OverlayWidget
from tui_kanban.cli.widgets.status_bar import Shortcut, StatusBarWidget

__all__ = [
    "Widget",
    "Rect",
    "ListColumnWidget",
    "OverlayWidget",
    "Shortcut",
    "StatusBarWidget",
]
