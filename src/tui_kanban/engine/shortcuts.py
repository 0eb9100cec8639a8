"""Keyboard bindings for board mode and the help screen.

One table drives key dispatch, the help overlay and the status bar
hints, so they cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tui_kanban.engine.events import Key, KeyPress
from tui_kanban.engine.modes import Mode

CTRL_PREFIX = "ctrl+"


@dataclass
class ShortcutDef:
    """A key binding.

    Attributes:
        id: Unique identifier for the binding
        keys: Keys that trigger it; plain strings match typed characters
            and "ctrl+x" strings match Ctrl combinations
        label: Short label for the status bar ("" keeps it out of the bar)
        description: Text for the help overlay
        modes: Modes where the binding is active
        action: Name of the engine action to run
        category: Heading in the help overlay
    """
    id: str
    keys: list[str | Key]
    label: str
    description: str
    action: str
    modes: list[Mode] = field(default_factory=lambda: [Mode.BOARD])
    category: str = "General"

    def matches(self, event: KeyPress) -> bool:
        for key in self.keys:
            if isinstance(key, Key):
                if event.key == key and not event.ctrl:
                    return True
            elif key.startswith(CTRL_PREFIX):
                if event.ctrl and event.char == key[len(CTRL_PREFIX):]:
                    return True
            elif event.is_char and event.char == key:
                return True
        return False

    @property
    def key_display(self) -> str:
        displays = []
        for key in self.keys:
            if isinstance(key, Key):
                displays.append(_KEY_DISPLAY.get(key, key.name.title()))
            elif key.startswith(CTRL_PREFIX):
                displays.append("^" + key[len(CTRL_PREFIX):].upper())
            else:
                displays.append(key)
        return "/".join(displays)


_KEY_DISPLAY = {
    Key.UP: "↑",
    Key.DOWN: "↓",
    Key.LEFT: "←",
    Key.RIGHT: "→",
    Key.ENTER: "Enter",
    Key.ESCAPE: "Esc",
    Key.TAB: "Tab",
    Key.BACKTAB: "S-Tab",
    Key.BACKSPACE: "Bksp",
    Key.DELETE: "Del",
    Key.PAGE_UP: "PgUp",
    Key.PAGE_DOWN: "PgDn",
}


def key_to_text(key: str | Key) -> str:
    """Name of a key as written in the key bindings file."""
    return key.name.lower() if isinstance(key, Key) else key


def key_from_text(text: object) -> str | Key:
    """
    Parse a key from the bindings file: a single character ("k"), a Ctrl
    combination ("ctrl+z") or a named key ("up", "page_down", "f5").
    """
    if not isinstance(text, str) or not text:
        raise ValueError(f"not a key: {text!r}")
    if len(text) == 1:
        if not text.isprintable():
            raise ValueError(f"not a printable character: {text!r}")
        return text
    lowered = text.lower()
    if lowered.startswith(CTRL_PREFIX):
        letter = lowered[len(CTRL_PREFIX):]
        if len(letter) == 1 and "a" <= letter <= "z":
            return CTRL_PREFIX + letter
        raise ValueError(f"Ctrl combinations take one letter: {text!r}")
    try:
        return Key[lowered.upper()]
    except KeyError:
        raise ValueError(f"unknown key name: {text!r}") from None


class ShortcutRegistry:
    """Lookup of bindings by mode, in registration order."""

    def __init__(self) -> None:
        self._shortcuts: dict[str, ShortcutDef] = {}
        self._by_mode: dict[Mode, list[ShortcutDef]] = {mode: [] for mode in Mode}

    def register(self, shortcut: ShortcutDef) -> None:
        if shortcut.id in self._shortcuts:
            raise ValueError(f"Duplicate shortcut id: {shortcut.id}")
        self._shortcuts[shortcut.id] = shortcut
        for mode in shortcut.modes:
            self._by_mode[mode].append(shortcut)

    def register_many(self, shortcuts: list[ShortcutDef]) -> None:
        for shortcut in shortcuts:
            self.register(shortcut)

    def get(self, shortcut_id: str) -> Optional[ShortcutDef]:
        return self._shortcuts.get(shortcut_id)

    def match(self, event: KeyPress, mode: Mode) -> Optional[ShortcutDef]:
        """First binding in `mode` that the event triggers, if any."""
        for shortcut in self._by_mode[mode]:
            if shortcut.matches(event):
                return shortcut
        return None

    def rebind(self, shortcut_id: str, keys: list[str | Key]) -> None:
        """Replace the keys of a registered binding."""
        shortcut = self._shortcuts.get(shortcut_id)
        if shortcut is None:
            raise KeyError(shortcut_id)
        shortcut.keys = list(keys)

    def overlaps(self, mode: Mode) -> dict[str, list[str]]:
        """Keys (as text) bound to more than one binding in `mode`."""
        owners: dict[str, list[str]] = {}
        for shortcut in self._by_mode[mode]:
            for key in shortcut.keys:
                ids = owners.setdefault(key_to_text(key), [])
                if shortcut.id not in ids:
                    ids.append(shortcut.id)
        return {key: ids for key, ids in owners.items() if len(ids) > 1}

    def for_mode(self, mode: Mode) -> list[ShortcutDef]:
        return list(self._by_mode[mode])

    def by_category(self, mode: Mode) -> dict[str, list[ShortcutDef]]:
        grouped: dict[str, list[ShortcutDef]] = {}
        for shortcut in self._by_mode[mode]:
            grouped.setdefault(shortcut.category, []).append(shortcut)
        return grouped

    def hints(self, mode: Mode, max_hints: int = 8) -> list[tuple[str, str]]:
        """(key display, label) pairs for the status bar."""
        hints = []
        for shortcut in self._by_mode[mode]:
            if shortcut.label:
                hints.append((shortcut.key_display, shortcut.label))
                if len(hints) >= max_hints:
                    break
        return hints


# =============================================================================
# Default bindings
# =============================================================================

def _board(id: str, keys: list[str | Key], description: str, category: str,
           label: str = "") -> ShortcutDef:
    return ShortcutDef(id=id, keys=keys, label=label, description=description,
                       action=id, category=category)


def create_default_shortcuts() -> ShortcutRegistry:
    """Every board-mode binding, plus the hints shown in the other modes."""
    registry = ShortcutRegistry()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("focus_up", [Key.UP, "k"], "Previous card", "Navigation"),
        _board("focus_down", [Key.DOWN, "j"], "Next card", "Navigation"),
        _board("focus_left", [Key.LEFT, "h"], "Previous list", "Navigation"),
        _board("focus_right", [Key.RIGHT, "l"], "Next list", "Navigation"),
        _board("prev_board", ["["], "Previous board", "Navigation"),
        _board("next_board", ["]"], "Next board", "Navigation"),
    ])

    # -------------------------------------------------------------------------
    # Create and edit
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("new_board", ["b"], "New board", "Create", label="Board"),
        _board("new_list", ["a"], "New list", "Create", label="List"),
        _board("new_card", ["n"], "New card", "Create", label="Card"),
        _board("rename_board", ["r"], "Rename board", "Create"),
        _board("rename_list", ["R"], "Rename list", "Create"),
        _board("edit_card", ["e", Key.ENTER], "Edit card", "Create", label="Edit"),
        _board("add_tag", ["g"], "Add tag to card", "Tags"),
        _board("remove_tag", ["G"], "Remove tag from card", "Tags"),
        _board("delete_tag", ["T"], "Delete tag everywhere", "Tags"),
    ])

    # -------------------------------------------------------------------------
    # Status and priority
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("mark_completed", ["1"], "Mark card completed", "Status"),
        _board("mark_active", ["2"], "Mark card active", "Status"),
        _board("mark_stale", ["3"], "Mark card stale", "Status"),
        _board("cycle_priority", ["p"], "Cycle card priority (low, medium, high)", "Status"),
    ])

    # -------------------------------------------------------------------------
    # Move
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("move_card_left", ["H"], "Move card to previous list", "Move"),
        _board("move_card_right", ["L"], "Move card to next list", "Move"),
        _board("move_card_up", ["K"], "Move card up", "Move"),
        _board("move_card_down", ["J"], "Move card down", "Move"),
        _board("move_list_left", ["<"], "Move list left", "Move"),
        _board("move_list_right", [">"], "Move list right", "Move"),
    ])

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("delete_card", ["d"], "Delete card", "Delete", label="Del"),
        _board("delete_list", ["D"], "Delete list", "Delete"),
        _board("delete_board", ["X"], "Delete board", "Delete"),
    ])

    # -------------------------------------------------------------------------
    # General
    # -------------------------------------------------------------------------
    registry.register_many([
        _board("undo", ["u", "ctrl+z"], "Undo", "General", label="Undo"),
        _board("redo", ["U", "ctrl+y"], "Redo", "General", label="Redo"),
        _board("search", ["/"], "Search cards and tags", "General", label="Find"),
        _board("help", ["?"], "Show help", "General", label="Help"),
        _board("save", ["s", "ctrl+s"], "Save now", "General", label="Save"),
        _board("quit", ["q", "ctrl+c"], "Save and quit", "General", label="Quit"),
    ])

    # -------------------------------------------------------------------------
    # Hints for the other modes (dispatch there is handled by the engine)
    # -------------------------------------------------------------------------
    registry.register_many([
        ShortcutDef("prompt_submit", [Key.ENTER], "OK", "Confirm", "submit", [Mode.PROMPT]),
        ShortcutDef("prompt_complete", [Key.TAB], "Complete", "Accept suggestion",
                    "complete", [Mode.PROMPT]),
        ShortcutDef("prompt_cancel", [Key.ESCAPE], "Cancel", "Cancel", "cancel", [Mode.PROMPT]),
        ShortcutDef("editor_save", [Key.ENTER], "Save", "Save changes", "submit",
                    [Mode.CARD_EDITOR]),
        ShortcutDef("editor_next", [Key.TAB], "Next", "Next field", "next_field",
                    [Mode.CARD_EDITOR]),
        ShortcutDef("editor_cancel", [Key.ESCAPE], "Cancel", "Discard changes", "cancel",
                    [Mode.CARD_EDITOR]),
        ShortcutDef("search_open", [Key.ENTER], "Open", "Jump to result", "submit",
                    [Mode.SEARCH]),
        ShortcutDef("search_cancel", [Key.ESCAPE], "Close", "Close search", "cancel",
                    [Mode.SEARCH]),
        ShortcutDef("confirm_yes", ["y"], "Yes", "Delete", "confirm", [Mode.CONFIRM_DELETE]),
        ShortcutDef("confirm_no", ["n", Key.ESCAPE], "No", "Keep", "cancel",
                    [Mode.CONFIRM_DELETE]),
        ShortcutDef("help_close", [Key.ESCAPE, "?"], "Close", "Close help", "cancel",
                    [Mode.HELP]),
    ])

    return registry
