"""Versioned binary save format."""

from tui_kanban.savefile.header import SaveHeader
from tui_kanban.savefile.migrations import MIGRATIONS, migrate
from tui_kanban.savefile.reader import read_header, state_from_bytes
from tui_kanban.savefile.writer import state_to_bytes, state_to_payload

__all__ = [
    "SaveHeader",
    "MIGRATIONS",
    "migrate",
    "read_header",
    "state_from_bytes",
    "state_to_bytes",
    "state_to_payload",
]
