"""Write the state file to disk without ever leaving a torn file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from tui_kanban.core.errors import IoFailure
from tui_kanban.core.state import AppState
from tui_kanban.savefile.writer import state_to_bytes

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: str | Path, data: bytes) -> None:
    """
    Write data to path via a temporary sibling file and an atomic replace.

    Either the previous file stays intact or the new content fully
    replaces it.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise IoFailure(f"Cannot write {path}: {e.strerror or e}") from e

    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        raise IoFailure(f"Cannot write {path}: {e.strerror or e}") from e
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name, exc_info=True)


def save_state(state: AppState, path: str | Path) -> int:
    """Serialize and atomically write the state. Returns bytes written."""
    data = state_to_bytes(state)
    atomic_write_bytes(path, data)
    logger.info("Saved %d bytes to %s", len(data), path)
    return len(data)
