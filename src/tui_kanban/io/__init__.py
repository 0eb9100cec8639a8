"""File I/O for save files and exports."""

from tui_kanban.io.exporter import export_json
from tui_kanban.io.reader import load_state
from tui_kanban.io.writer import atomic_write_bytes, save_state

__all__ = ["load_state", "save_state", "atomic_write_bytes", "export_json"]
