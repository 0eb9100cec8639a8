"""Human readable JSON export of the whole state."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tui_kanban.core.constants import utc_now
from tui_kanban.core.state import AppState
from tui_kanban.io.writer import atomic_write_bytes


def export_dict(state: AppState, app_version: str) -> dict[str, Any]:
    """Nested, name-resolved view of every board for export."""
    boards = []
    for board in state.board_order():
        lists = []
        for board_list in state.lists_in_board(board.id):
            cards = []
            for card in state.cards_in_list(board_list.id):
                cards.append({
                    "title": card.title,
                    "description": card.description,
                    "due_date": card.due_date.isoformat() if card.due_date else None,
                    "tags": [state.tags[t].name for t in card.tag_ids],
                    "metadata": dict(card.metadata),
                    "status": card.status.value,
                    "priority": card.priority.value,
                    "created_at": card.created_at.isoformat(),
                    "modified_at": card.modified_at.isoformat(),
                })
            lists.append({"name": board_list.name, "cards": cards})
        boards.append({
            "name": board.name,
            "created_at": board.created_at.isoformat(),
            "lists": lists,
        })
    return {
        "kanban_version": app_version,
        "export_date": utc_now().isoformat(),
        "boards": boards,
    }


def unique_export_path(directory: Path, stem: str = "kanban_export") -> Path:
    """First of stem.json, stem_1.json, stem_2.json ... that does not exist."""
    candidate = directory / f"{stem}.json"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem}_{counter}.json"
        counter += 1
    return candidate


def export_json(state: AppState, path: str | Path, app_version: str) -> Path:
    """Write the export to path (or a fresh file inside it, if a directory)."""
    path = Path(path)
    if path.is_dir():
        path = unique_export_path(path)
    text = json.dumps(export_dict(state, app_version), indent=2, ensure_ascii=False)
    atomic_write_bytes(path, text.encode("utf-8"))
    return path
