"""Input events consumed by the engine.

The engine never talks to a terminal. A decoder (see
tui_kanban.cli.core.input) turns raw bytes into these values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union


class Key(Enum):
    """Named (non-printable) keys."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKTAB = auto()
    BACKSPACE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    DELETE = auto()
    INSERT = auto()
    F1 = auto()
    F2 = auto()
    F5 = auto()
    F10 = auto()


@dataclass(frozen=True)
class KeyPress:
    """A key press with its modifiers."""
    key: Optional[Key] = None  # Named key if recognized
    char: Optional[str] = None  # Character if printable (or the letter of a Ctrl combo)
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def is_char(self) -> bool:
        """Check if this is plain text input."""
        return self.char is not None and self.key is None and not (self.ctrl or self.alt)

    @classmethod
    def ctrl_key(cls, letter: str) -> KeyPress:
        return cls(char=letter.lower(), ctrl=True)


@dataclass(frozen=True)
class Resize:
    """The terminal changed size."""
    cols: int
    rows: int


@dataclass(frozen=True)
class Paste:
    """A block of pasted text."""
    text: str


@dataclass(frozen=True)
class Tick:
    """Idle heartbeat from the main loop, used for timers."""
    now: Optional[float] = None


InputEvent = Union[KeyPress, Resize, Paste]
LoopEvent = Union[KeyPress, Resize, Paste, Tick]
