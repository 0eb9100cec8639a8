"""User key bindings stored as JSON in the config directory.

The file maps board action ids to the keys that trigger them:

    {"mark_completed": ["1", "ctrl+d"], "focus_up": ["up", "k"]}

Actions missing from the file keep their default keys. A file that binds
one key to two actions is rejected as a whole.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from tui_kanban.core.errors import ConfigError, KeybindingConflict
from tui_kanban.engine.events import Key
from tui_kanban.engine.modes import Mode
from tui_kanban.engine.shortcuts import (
    ShortcutRegistry,
    create_default_shortcuts,
    key_from_text,
    key_to_text,
)
from tui_kanban.io import atomic_write_bytes

logger = logging.getLogger(__name__)


def load_keybindings(path: str | Path) -> dict[str, list[str | Key]]:
    """
    Read a bindings file. A missing file means no overrides.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or maps an action
            to something other than a list of key names
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path.name}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path.name} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must map action names to key lists")

    bindings: dict[str, list[str | Key]] = {}
    for action, keys in raw.items():
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list) or not keys:
            raise ConfigError(f"Keys for {action!r} must be a non-empty list")
        try:
            bindings[action] = [key_from_text(k) for k in keys]
        except ValueError as e:
            raise ConfigError(f"Bad key for {action!r}: {e}") from e
    return bindings


def build_shortcuts(bindings: dict[str, list[str | Key]]) -> ShortcutRegistry:
    """
    Default shortcuts with `bindings` applied.

    Raises:
        ConfigError: For an action id that is not a board binding
        KeybindingConflict: If a key ends up bound to two board actions
    """
    registry = create_default_shortcuts()
    board_ids = {s.id for s in registry.for_mode(Mode.BOARD)}
    for action, keys in bindings.items():
        if action not in board_ids:
            raise ConfigError(f"Unknown action {action!r}")
        registry.rebind(action, keys)

    overlaps = registry.overlaps(Mode.BOARD)
    if overlaps:
        raise KeybindingConflict(overlaps)
    return registry


def load_shortcuts(path: str | Path) -> ShortcutRegistry:
    registry = build_shortcuts(load_keybindings(path))
    logger.debug("Key bindings loaded from %s", path)
    return registry


def default_keybindings() -> dict[str, list[str]]:
    """Every board action and its default keys, as written to the file."""
    return {
        s.id: [key_to_text(k) for k in s.keys]
        for s in create_default_shortcuts().for_mode(Mode.BOARD)
    }


def write_keybindings(path: str | Path, bindings: dict[str, list[str]]) -> Path:
    """Write `bindings` as a bindings file. Raises IoFailure on failure."""
    path = Path(path)
    data = json.dumps(bindings, indent=2, ensure_ascii=False).encode("utf-8") + b"\n"
    atomic_write_bytes(path, data)
    logger.info("Wrote key bindings to %s", path)
    return path
