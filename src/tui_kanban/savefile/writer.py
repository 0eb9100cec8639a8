"""Encode an AppState into save file bytes."""

from __future__ import annotations

import json
from typing import Any

from tui_kanban.core.constants import SCHEMA_VERSION
from tui_kanban.core.state import AppState
from tui_kanban.savefile.header import SaveHeader


def state_to_payload(state: AppState) -> dict[str, Any]:
    """Convert the state into the current schema's plain-data payload."""
    return {
        "next_id": state.next_id,
        "boards": [
            {
                "id": board.id,
                "name": board.name,
                "list_ids": list(board.list_ids),
                "created_at": board.created_at.isoformat(),
                "modified_at": board.modified_at.isoformat(),
            }
            for board in state.boards.values()
        ],
        "lists": [
            {
                "id": board_list.id,
                "name": board_list.name,
                "board_id": board_list.board_id,
                "card_ids": list(board_list.card_ids),
            }
            for board_list in state.lists.values()
        ],
        "cards": [
            {
                "id": card.id,
                "title": card.title,
                "description": card.description,
                "list_id": card.list_id,
                "tag_ids": list(card.tag_ids),
                "due_date": card.due_date.isoformat() if card.due_date else None,
                "metadata": dict(card.metadata),
                "status": card.status.value,
                "priority": card.priority.value,
                "created_at": card.created_at.isoformat(),
                "modified_at": card.modified_at.isoformat(),
            }
            for card in state.cards.values()
        ],
        "tags": [
            {"id": tag.id, "name": tag.name, "color": tag.color.value}
            for tag in state.tags.values()
        ],
    }


def state_to_bytes(state: AppState) -> bytes:
    """Serialize the state to header + UTF-8 JSON payload."""
    payload = json.dumps(
        state_to_payload(state), ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")
    return SaveHeader(schema_version=SCHEMA_VERSION).to_bytes() + payload
