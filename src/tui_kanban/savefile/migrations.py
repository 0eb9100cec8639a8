"""Stepwise upgrades of decoded payloads to the current schema."""

from __future__ import annotations

import logging
from typing import Any, Callable

from tui_kanban.core.constants import SCHEMA_VERSION
from tui_kanban.core.errors import CorruptFile, UnsupportedSchema

logger = logging.getLogger(__name__)

Payload = dict[str, Any]
Migration = Callable[[Payload], Payload]

# from_version -> step producing from_version + 1
MIGRATIONS: dict[int, Migration] = {}


def migration(from_version: int) -> Callable[[Migration], Migration]:
    """Register a step that upgrades a payload from `from_version`."""
    def register(step: Migration) -> Migration:
        MIGRATIONS[from_version] = step
        return step
    return register


def migrate(
    payload: Payload,
    from_version: int,
    to_version: int = SCHEMA_VERSION,
    steps: dict[int, Migration] | None = None,
) -> Payload:
    """
    Run registered steps in order until the payload is at `to_version`.

    Raises UnsupportedSchema when the file is newer than `to_version`
    or when no step exists for one of the versions on the way.
    """
    steps = MIGRATIONS if steps is None else steps
    if from_version > to_version or from_version < 1:
        raise UnsupportedSchema(from_version, to_version)

    version = from_version
    while version < to_version:
        step = steps.get(version)
        if step is None:
            raise UnsupportedSchema(from_version, to_version)
        logger.info("Migrating save payload from schema v%d to v%d", version, version + 1)
        try:
            payload = step(payload)
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            raise CorruptFile(f"Cannot migrate schema v{version} payload: {e}") from e
        version += 1
    return payload


@migration(1)
def _v1_to_v2(payload: Payload) -> Payload:
    """
    Schema v1 stored tag names inline on every card and had no card
    metadata. v2 turns distinct names into shared Tag entities.
    """
    next_id = int(payload["next_id"])
    tags: list[dict[str, Any]] = []
    by_name: dict[str, int] = {}
    cards = []
    for raw in payload["cards"]:
        card = dict(raw)
        tag_ids: list[int] = []
        for name in card.pop("tags", []) or []:
            name = str(name).strip()
            if not name:
                continue
            key = name.casefold()
            if key not in by_name:
                by_name[key] = next_id
                tags.append({"id": next_id, "name": name, "color": "gray"})
                next_id += 1
            if by_name[key] not in tag_ids:
                tag_ids.append(by_name[key])
        card["tag_ids"] = tag_ids
        card.setdefault("metadata", {})
        cards.append(card)

    upgraded = dict(payload)
    upgraded["cards"] = cards
    upgraded["tags"] = tags
    upgraded["next_id"] = next_id
    return upgraded


@migration(2)
def _v2_to_v3(payload: Payload) -> Payload:
    """v3 adds a status and a priority to every card."""
    cards = []
    for raw in payload["cards"]:
        card = dict(raw)
        card.setdefault("status", "active")
        card.setdefault("priority", "low")
        cards.append(card)
    upgraded = dict(payload)
    upgraded["cards"] = cards
    return upgraded
