"""Load the state file from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from tui_kanban.core.errors import IoFailure
from tui_kanban.core.state import AppState
from tui_kanban.savefile.reader import state_from_bytes

logger = logging.getLogger(__name__)


def read_bytes(path: str | Path) -> bytes | None:
    """Read the raw file, or None when it does not exist."""
    path = Path(path)
    try:
        with open(path, 'rb') as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise IoFailure(f"Cannot read {path}: {e.strerror or e}") from e


def load_state(path: str | Path) -> AppState:
    """
    Load an AppState from a save file.

    A missing file yields a fresh default state. Errors leave the file
    exactly as it was on disk.
    """
    path = Path(path)
    data = read_bytes(path)
    if data is None:
        logger.info("No save file at %s, starting with an empty state", path)
        return AppState()

    state = state_from_bytes(data)
    logger.info(
        "Loaded %d boards, %d lists, %d cards from %s",
        len(state.boards), len(state.lists), len(state.cards), path,
    )
    return state
