"""Tests for the save file format, loading, saving and export."""

import json
from datetime import date

import pytest

from tui_kanban.commands import EditCardFields
from tui_kanban.core.card import CardPriority, CardStatus
from tui_kanban.core.constants import SAVE_MAGIC, SCHEMA_VERSION
from tui_kanban.core.errors import CorruptFile, IoFailure, UnsupportedSchema
from tui_kanban.core.state import AppState
from tui_kanban.io import atomic_write_bytes, export_json, load_state, save_state
from tui_kanban.io.exporter import export_dict
from tui_kanban.io.reader import read_bytes
from tui_kanban.savefile import SaveHeader, migrate, read_header, state_from_bytes, state_to_bytes

TS = "2024-01-01T09:30:00+00:00"

V1_PAYLOAD = {
    "next_id": 4,
    "boards": [{"id": 1, "name": "Home", "list_ids": [2], "created_at": TS, "modified_at": TS}],
    "lists": [{"id": 2, "name": "Todo", "board_id": 1, "card_ids": [3]}],
    "cards": [{
        "id": 3,
        "title": "Fix sink",
        "description": "",
        "list_id": 2,
        "tags": ["Urgent", "urgent", " home ", ""],
        "due_date": "2024-02-01",
        "created_at": TS,
        "modified_at": TS,
    }],
}


def encode(payload, version: int = SCHEMA_VERSION) -> bytes:
    return SaveHeader(schema_version=version).to_bytes() + json.dumps(payload).encode("utf-8")


class TestHeader:
    """Tests for the 8-byte header."""

    def test_layout(self, sample) -> None:
        data = state_to_bytes(sample.state)
        assert data[:4] == SAVE_MAGIC == b"TKBN"
        assert int.from_bytes(data[4:8], "little") == SCHEMA_VERSION
        assert read_header(data).is_current

    def test_short_data(self) -> None:
        with pytest.raises(CorruptFile):
            read_header(b"TKB")

    def test_wrong_magic(self) -> None:
        with pytest.raises(CorruptFile):
            read_header(b"PK\x03\x04\x00\x00\x00\x00")


class TestDecode:
    """Tests for state_from_bytes()."""

    def test_round_trip(self, sample) -> None:
        EditCardFields(sample.card_ids[1], description="Ünïcode ✓", due_date=date(2024, 6, 30),
                       metadata={"source": "import"}).apply(sample.state)
        restored = state_from_bytes(state_to_bytes(sample.state))
        assert restored == sample.state
        assert restored.next_id == sample.state.next_id
        assert restored.drain_changes() == set()

    def test_empty_state_round_trip(self) -> None:
        assert state_from_bytes(state_to_bytes(AppState())) == AppState()

    def test_newer_schema(self) -> None:
        with pytest.raises(UnsupportedSchema) as exc:
            state_from_bytes(encode({}, version=SCHEMA_VERSION + 1))
        assert exc.value.version == SCHEMA_VERSION + 1

    def test_payload_not_json(self) -> None:
        with pytest.raises(CorruptFile):
            state_from_bytes(SaveHeader().to_bytes() + b"\xff\xfe not json")

    def test_payload_not_mapping(self) -> None:
        with pytest.raises(CorruptFile):
            state_from_bytes(SaveHeader().to_bytes() + b"[1, 2]")

    def test_missing_fields(self) -> None:
        with pytest.raises(CorruptFile):
            state_from_bytes(encode({"next_id": 1, "boards": []}))

    def test_inconsistent_payload(self, sample) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        payload["lists"][0]["card_ids"].append(999)
        with pytest.raises(CorruptFile):
            state_from_bytes(encode(payload))

    @pytest.mark.parametrize("field, value", [
        ("cards", [[1]]),
        ("boards", {"id": 1}),
        ("tags", ["urgent"]),
    ])
    def test_records_of_wrong_shape(self, sample, field: str, value) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        payload[field] = value
        with pytest.raises(CorruptFile):
            state_from_bytes(encode(payload))

    def test_metadata_not_a_mapping(self, sample) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        payload["cards"][0]["metadata"] = [1]
        with pytest.raises(CorruptFile):
            state_from_bytes(encode(payload))

    def test_infinite_id_counter(self, sample) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        payload["next_id"] = float("inf")
        # json.dumps writes the non-standard Infinity literal that json.loads accepts
        with pytest.raises(CorruptFile):
            state_from_bytes(encode(payload))

    def test_unknown_status(self, sample) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        payload["cards"][0]["status"] = "archived"
        with pytest.raises(CorruptFile):
            state_from_bytes(encode(payload))

    def test_status_and_priority_round_trip(self, sample) -> None:
        EditCardFields(sample.card_ids[0], status=CardStatus.STALE,
                       priority=CardPriority.HIGH).apply(sample.state)
        restored = state_from_bytes(state_to_bytes(sample.state))
        card = restored.cards[sample.card_ids[0]]
        assert (card.status, card.priority) == (CardStatus.STALE, CardPriority.HIGH)


class TestMigration:
    """Tests for schema upgrades."""

    def test_v1_inline_tags_become_entities(self) -> None:
        state = state_from_bytes(encode(V1_PAYLOAD, version=1))
        assert sorted(t.name for t in state.tags.values()) == ["Urgent", "home"]
        card = state.cards[3]
        assert [state.tags[t].name for t in card.tag_ids] == ["Urgent", "home"]
        assert card.due_date == date(2024, 2, 1)
        assert card.metadata == {}
        assert state.next_id == 6
        assert card.status is CardStatus.ACTIVE
        assert card.priority is CardPriority.LOW
        state.check_invariants()

    def test_v2_cards_get_status_and_priority(self, sample) -> None:
        payload = json.loads(state_to_bytes(sample.state)[8:])
        for card in payload["cards"]:
            del card["status"], card["priority"]
        upgraded = migrate(payload, 2)
        assert {(c["status"], c["priority"]) for c in upgraded["cards"]} == {("active", "low")}
        assert "status" not in payload["cards"][0]
        assert state_from_bytes(encode(payload, version=2)) == sample.state

    def test_migration_does_not_modify_input(self) -> None:
        payload = json.loads(json.dumps(V1_PAYLOAD))
        migrate(payload, 1)
        assert payload == V1_PAYLOAD

    def test_missing_step(self) -> None:
        with pytest.raises(UnsupportedSchema):
            migrate({}, 1, 3, steps={1: lambda p: p})

    def test_broken_v1_payload(self) -> None:
        with pytest.raises(CorruptFile):
            migrate({"cards": []}, 1)

    def test_zero_version(self) -> None:
        with pytest.raises(UnsupportedSchema):
            migrate({}, 0)


class TestLoadSave:
    """Tests for load_state() and save_state()."""

    def test_missing_file_is_empty_state(self, tmp_path) -> None:
        assert load_state(tmp_path / "nothing.kanban") == AppState()
        assert read_bytes(tmp_path / "nothing.kanban") is None

    def test_save_then_load(self, sample, tmp_path) -> None:
        path = tmp_path / "nested" / "board.kanban"
        written = save_state(sample.state, path)
        assert written == path.stat().st_size
        assert load_state(path) == sample.state
        # No temporary files are left behind
        assert [p.name for p in path.parent.iterdir()] == ["board.kanban"]

    def test_corrupt_file_is_left_alone(self, tmp_path) -> None:
        path = tmp_path / "board.kanban"
        path.write_bytes(b"garbage!garbage!")
        with pytest.raises(CorruptFile):
            load_state(path)
        assert path.read_bytes() == b"garbage!garbage!"

    def test_save_replaces_existing(self, sample, tmp_path) -> None:
        path = tmp_path / "board.kanban"
        save_state(AppState(), path)
        save_state(sample.state, path)
        assert load_state(path) == sample.state

    def test_write_failure(self, tmp_path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(IoFailure):
            atomic_write_bytes(blocker / "board.kanban", b"data")

    def test_read_failure(self, tmp_path) -> None:
        with pytest.raises(IoFailure):
            read_bytes(tmp_path)


class TestExport:
    """Tests for the JSON export."""

    def test_export_dict(self, sample) -> None:
        exported = export_dict(sample.state, "1.2.3")
        assert exported["kanban_version"] == "1.2.3"
        assert "export_date" in exported
        board = exported["boards"][0]
        assert board["name"] == "Work"
        assert [bl["name"] for bl in board["lists"]] == ["Todo", "Done"]
        first = board["lists"][0]["cards"][0]
        assert first["title"] == "Write spec"
        assert first["tags"] == ["urgent"]

    def test_export_names_do_not_collide(self, sample, tmp_path) -> None:
        first = export_json(sample.state, tmp_path, "0.1.0")
        second = export_json(sample.state, tmp_path, "0.1.0")
        assert first.name == "kanban_export.json"
        assert second.name == "kanban_export_1.json"
        assert json.loads(second.read_text(encoding="utf-8"))["boards"][0]["name"] == "Work"

    def test_export_to_file(self, sample, tmp_path) -> None:
        target = tmp_path / "out.json"
        assert export_json(sample.state, target, "0.1.0") == target
        assert target.exists()
