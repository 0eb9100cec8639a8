"""Decode save file bytes into an AppState."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from tui_kanban.core.board import Board, BoardList
from tui_kanban.core.card import Card, CardPriority, CardStatus, Tag, TagColor
from tui_kanban.core.constants import SCHEMA_VERSION
from tui_kanban.core.errors import CorruptFile, InvariantViolation, UnsupportedSchema
from tui_kanban.core.state import AppState
from tui_kanban.savefile.header import HEADER_SIZE, SaveHeader
from tui_kanban.savefile.migrations import migrate


def read_header(data: bytes) -> SaveHeader:
    """Parse and return just the header."""
    return SaveHeader.from_bytes(data)


def state_from_bytes(data: bytes) -> AppState:
    """
    Parse save file bytes.

    Older schemas are migrated step by step; newer ones raise
    UnsupportedSchema. A wrong magic, an undecodable payload or a payload
    that breaks the model invariants raises CorruptFile.
    """
    header = SaveHeader.from_bytes(data)
    if header.schema_version > SCHEMA_VERSION:
        raise UnsupportedSchema(header.schema_version, SCHEMA_VERSION)

    try:
        payload = json.loads(bytes(data[HEADER_SIZE:]).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptFile(f"Payload is not valid: {e}") from e
    if not isinstance(payload, dict):
        raise CorruptFile("Payload is not a mapping")

    if not header.is_current:
        payload = migrate(payload, header.schema_version)
    return payload_to_state(payload)


def payload_to_state(payload: dict[str, Any]) -> AppState:
    """Build an AppState from a current-schema payload."""
    try:
        state = AppState(
            boards={b.id: b for b in map(_board, _records(payload, "boards"))},
            lists={bl.id: bl for bl in map(_board_list, _records(payload, "lists"))},
            cards={c.id: c for c in map(_card, _records(payload, "cards"))},
            tags={t.id: t for t in map(_tag, _records(payload, "tags"))},
            next_id=int(payload["next_id"]),
            schema_version=SCHEMA_VERSION,
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise CorruptFile(f"Payload is missing or has malformed fields: {e}") from e

    try:
        state.check_invariants()
    except InvariantViolation as e:
        raise CorruptFile(f"Payload is inconsistent: {e}") from e
    state.drain_changes()
    return state


def _records(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    records = payload[key]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise CorruptFile(f"Payload field {key!r} is not a list of records")
    return records


def _timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _board(raw: dict[str, Any]) -> Board:
    return Board(
        id=int(raw["id"]),
        name=str(raw["name"]),
        list_ids=[int(i) for i in raw["list_ids"]],
        created_at=_timestamp(raw["created_at"]),
        modified_at=_timestamp(raw["modified_at"]),
    )


def _board_list(raw: dict[str, Any]) -> BoardList:
    return BoardList(
        id=int(raw["id"]),
        name=str(raw["name"]),
        board_id=int(raw["board_id"]),
        card_ids=[int(i) for i in raw["card_ids"]],
    )


def _card(raw: dict[str, Any]) -> Card:
    due = raw.get("due_date")
    return Card(
        id=int(raw["id"]),
        title=str(raw["title"]),
        list_id=int(raw["list_id"]),
        description=str(raw.get("description", "")),
        tag_ids=[int(i) for i in raw.get("tag_ids", [])],
        due_date=date.fromisoformat(due) if due else None,
        metadata={str(k): str(v) for k, v in (raw.get("metadata") or {}).items()},
        status=CardStatus(raw.get("status", CardStatus.ACTIVE.value)),
        priority=CardPriority(raw.get("priority", CardPriority.LOW.value)),
        created_at=_timestamp(raw["created_at"]),
        modified_at=_timestamp(raw["modified_at"]),
    )


def _tag(raw: dict[str, Any]) -> Tag:
    return Tag(
        id=int(raw["id"]),
        name=str(raw["name"]),
        color=TagColor.parse(raw.get("color")),
    )
