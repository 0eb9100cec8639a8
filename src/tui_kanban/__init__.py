"""
tui-kanban: keyboard-driven kanban boards in the terminal

Boards hold ordered lists, lists hold ordered cards, and cards carry
tags and an optional due date. Every change is an undoable command, the
board file is saved atomically in the background and fuzzy search finds
cards as you type.

Quick Start:
    >>> from tui_kanban import Config, Engine, KeyPress
    >>> engine = Engine(Config.from_env())
    >>> view = engine.start()
    >>> view = engine.handle(KeyPress(char="b"))
"""

__version__ = "0.1.0"

# Data model
from tui_kanban.core import AppState, Board, BoardList, Card, Tag, TagColor

# Configuration
from tui_kanban.config import Config

# Engine
from tui_kanban.engine import Engine, KeyPress, Mode, Paste, Resize, Tick, ViewModel

__all__ = [
    # Version
    "__version__",
    # Data model
    "AppState",
    "Board",
    "BoardList",
    "Card",
    "Tag",
    "TagColor",
    # Configuration
    "Config",
    # Engine
    "Engine",
    "Mode",
    "KeyPress",
    "Paste",
    "Resize",
    "Tick",
    "ViewModel",
]
