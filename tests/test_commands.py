"""Tests for commands and undo/redo history."""

from datetime import date

import pytest

from tui_kanban.commands import (
    UNCHANGED,
    AddTagToCard,
    CreateBoard,
    CreateCard,
    CreateList,
    CreateTag,
    DeleteBoard,
    DeleteCard,
    DeleteList,
    DeleteTag,
    EditCardFields,
    EditTag,
    History,
    MoveCard,
    MoveList,
    RemoveTagFromCard,
    RenameBoard,
    RenameList,
    clamp_position,
)
from tui_kanban.core.card import CardPriority, CardStatus, TagColor
from tui_kanban.core.errors import DuplicateName, InvalidPosition, NotFound, StaleUndo

# Factories take the sample ids so the table stays readable.
ROUND_TRIP_CASES = {
    "create_board": lambda s: CreateBoard("Home"),
    "rename_board": lambda s: RenameBoard(s.board_id, "Office"),
    "delete_board": lambda s: DeleteBoard(s.board_id),
    "create_list": lambda s: CreateList(s.board_id, "Doing", 1),
    "rename_list": lambda s: RenameList(s.todo_id, "Backlog"),
    "move_list": lambda s: MoveList(s.todo_id, 5),
    "delete_list": lambda s: DeleteList(s.todo_id),
    "create_card": lambda s: CreateCard(s.done_id, "Ship it", due_date=date(2024, 5, 1)),
    "edit_card": lambda s: EditCardFields(s.card_ids[0], title="Write docs", due_date=date(2024, 1, 2)),
    "mark_card": lambda s: EditCardFields(s.card_ids[1], status=CardStatus.STALE, priority=CardPriority.MEDIUM),
    "move_card_across": lambda s: MoveCard(s.card_ids[0], s.todo_id, s.done_id, 0),
    "reorder_card": lambda s: MoveCard(s.card_ids[2], s.todo_id, s.todo_id, 0),
    "delete_card": lambda s: DeleteCard(s.card_ids[0]),
    "create_tag": lambda s: CreateTag("later", TagColor.BLUE),
    "edit_tag": lambda s: EditTag(s.tag_id, name="hot", color=TagColor.YELLOW),
    "delete_tag": lambda s: DeleteTag(s.tag_id),
    "add_tag": lambda s: AddTagToCard(s.card_ids[1], s.tag_id),
    "remove_tag": lambda s: RemoveTagFromCard(s.card_ids[0], s.tag_id),
}


class TestRoundTrip:
    """Applying a command and then its inverse restores the state."""

    @pytest.mark.parametrize("name", sorted(ROUND_TRIP_CASES))
    def test_inverse_restores_state(self, sample, name: str) -> None:
        state = sample.state
        before = state.copy()
        command = ROUND_TRIP_CASES[name](sample)

        inverse = command.apply(state)
        state.check_invariants()
        assert state != before

        inverse.apply(state)
        state.check_invariants()
        assert state == before

    @pytest.mark.parametrize("name", sorted(ROUND_TRIP_CASES))
    def test_redo_after_undo(self, sample, name: str) -> None:
        state = sample.state
        history = History()
        command = ROUND_TRIP_CASES[name](sample)
        history.record(command.apply(state), command.describe(state))
        after = state.copy()

        history.undo(state)
        assert history.redo(state) is not None
        assert state == after


class TestBoardCommands:
    """Tests for board commands."""

    def test_create_returns_delete(self) -> None:
        from tui_kanban.core.state import AppState

        state = AppState()
        inverse = CreateBoard("Work").apply(state)
        assert isinstance(inverse, DeleteBoard)
        assert state.board(inverse.board_id).name == "Work"

    def test_delete_cascades(self, sample) -> None:
        state = sample.state
        DeleteBoard(sample.board_id).apply(state)
        assert state.boards == {}
        assert state.lists == {}
        assert state.cards == {}
        # Tags are global and survive
        assert sample.tag_id in state.tags

    def test_restore_keeps_ids(self, sample) -> None:
        state = sample.state
        inverse = DeleteBoard(sample.board_id).apply(state)
        inverse.apply(state)
        assert state.lists_in_board(sample.board_id)[0].id == sample.todo_id
        assert [c.id for c in state.cards_in_list(sample.todo_id)] == sample.card_ids

    def test_board_names_may_repeat(self, sample) -> None:
        state = sample.state
        second = CreateBoard("work").apply(state).board_id
        RenameBoard(second, "Work").apply(state)
        assert [b.name for b in state.board_order()] == ["Work", "Work"]
        state.check_invariants()


class TestListCommands:
    """Tests for list commands."""

    def test_duplicate_name_is_case_insensitive(self, sample) -> None:
        before = sample.state.copy()
        with pytest.raises(DuplicateName):
            CreateList(sample.board_id, "TODO").apply(sample.state)
        assert sample.state == before

    def test_rename_to_own_name_is_allowed(self, sample) -> None:
        RenameList(sample.todo_id, "todo").apply(sample.state)
        assert sample.state.lists[sample.todo_id].name == "todo"

    def test_position_is_clamped(self, sample) -> None:
        first = CreateList(sample.board_id, "First", -3).apply(sample.state).list_id
        last = CreateList(sample.board_id, "Last", 99).apply(sample.state).list_id
        ids = sample.state.boards[sample.board_id].list_ids
        assert ids[0] == first
        assert ids[-1] == last

    def test_move_to_end(self, sample) -> None:
        MoveList(sample.todo_id, None).apply(sample.state)
        assert sample.state.boards[sample.board_id].list_ids == [sample.done_id, sample.todo_id]

    def test_delete_removes_cards(self, sample) -> None:
        DeleteList(sample.todo_id).apply(sample.state)
        assert all(card_id not in sample.state.cards for card_id in sample.card_ids)
        sample.state.check_invariants()


class TestCardCommands:
    """Tests for card commands."""

    def test_create_appends_by_default(self, sample) -> None:
        card_id = CreateCard(sample.todo_id, "Fourth").apply(sample.state).card_id
        assert sample.state.lists[sample.todo_id].card_ids[-1] == card_id

    def test_create_in_missing_list(self, sample) -> None:
        before = sample.state.copy()
        with pytest.raises(NotFound):
            CreateCard(999, "Nowhere").apply(sample.state)
        assert sample.state == before

    def test_non_integer_position(self, sample) -> None:
        with pytest.raises(InvalidPosition):
            CreateCard(sample.todo_id, "Odd", position="1").apply(sample.state)

    def test_move_from_wrong_source(self, sample) -> None:
        before = sample.state.copy()
        with pytest.raises(NotFound):
            MoveCard(sample.card_ids[1], sample.done_id, sample.todo_id).apply(sample.state)
        assert sample.state == before

    def test_move_within_list(self, sample) -> None:
        first, second, third = sample.card_ids
        MoveCard(first, sample.todo_id, sample.todo_id, 99).apply(sample.state)
        assert sample.state.lists[sample.todo_id].card_ids == [second, third, first]

    def test_move_across_updates_owner(self, sample) -> None:
        card_id = sample.card_ids[1]
        MoveCard(card_id, sample.todo_id, sample.done_id).apply(sample.state)
        assert sample.state.cards[card_id].list_id == sample.done_id
        assert sample.state.lists[sample.done_id].card_ids == [card_id]
        sample.state.check_invariants()

    def test_edit_leaves_unchanged_fields(self, sample) -> None:
        card = sample.state.cards[sample.card_ids[0]]
        card.description = "Keep me"
        EditCardFields(card.id, title="Retitled").apply(sample.state)
        assert card.title == "Retitled"
        assert card.description == "Keep me"

    def test_edit_clears_due_date(self, sample) -> None:
        card_id = sample.card_ids[0]
        EditCardFields(card_id, due_date=date(2024, 3, 1)).apply(sample.state)
        EditCardFields(card_id, due_date=None).apply(sample.state)
        assert sample.state.cards[card_id].due_date is None

    def test_status_and_priority_descriptions(self, sample) -> None:
        card_id = sample.card_ids[0]
        state = sample.state
        assert EditCardFields(card_id, status="completed").describe(state) == \
            "Marked card 'Write spec' completed"
        assert EditCardFields(card_id, priority=CardPriority.HIGH).describe(state) == \
            "Set priority of card 'Write spec' to high"
        assert EditCardFields(card_id, status="stale", priority="low").describe(state) == \
            "Edited card 'Write spec'"

    def test_unknown_status_changes_nothing(self, sample) -> None:
        before = sample.state.copy()
        with pytest.raises(ValueError):
            EditCardFields(sample.card_ids[0], title="New", status="archived").apply(sample.state)
        assert sample.state == before

    def test_unchanged_marker(self) -> None:
        assert not UNCHANGED
        assert repr(UNCHANGED) == "UNCHANGED"


class TestTagCommands:
    """Tests for tag commands."""

    def test_duplicate_tag_name(self, sample) -> None:
        with pytest.raises(DuplicateName):
            CreateTag("Urgent").apply(sample.state)

    def test_tag_added_twice(self, sample) -> None:
        with pytest.raises(DuplicateName):
            AddTagToCard(sample.card_ids[0], sample.tag_id).apply(sample.state)

    def test_remove_absent_tag(self, sample) -> None:
        with pytest.raises(NotFound):
            RemoveTagFromCard(sample.card_ids[1], sample.tag_id).apply(sample.state)

    def test_delete_detaches_everywhere(self, sample) -> None:
        AddTagToCard(sample.card_ids[2], sample.tag_id).apply(sample.state)
        DeleteTag(sample.tag_id).apply(sample.state)
        assert all(not card.tag_ids for card in sample.state.cards.values())
        sample.state.check_invariants()

    def test_remove_restores_position(self, sample) -> None:
        card_id = sample.card_ids[0]
        later = CreateTag("later").apply(sample.state).tag_id
        AddTagToCard(card_id, later).apply(sample.state)
        inverse = RemoveTagFromCard(card_id, sample.tag_id).apply(sample.state)
        inverse.apply(sample.state)
        assert sample.state.cards[card_id].tag_ids == [sample.tag_id, later]


class TestClampPosition:
    """Tests for clamp_position()."""

    def test_none_appends(self) -> None:
        assert clamp_position(None, 4) == 4

    def test_clamps(self) -> None:
        assert clamp_position(-1, 4) == 0
        assert clamp_position(10, 4) == 4
        assert clamp_position(2, 4) == 2

    def test_rejects_bool(self) -> None:
        with pytest.raises(InvalidPosition):
            clamp_position(True, 4)


class TestHistory:
    """Tests for History."""

    def _do(self, history: History, state, command) -> None:
        label = command.describe(state)
        history.record(command.apply(state), label)

    def test_empty(self, sample) -> None:
        history = History()
        assert history.undo(sample.state) is None
        assert history.redo(sample.state) is None

    def test_undo_returns_label(self, sample) -> None:
        history = History()
        self._do(history, sample.state, RenameBoard(sample.board_id, "Office"))
        assert history.undo(sample.state) == "Renamed board 'Work' to 'Office'"
        assert sample.state.boards[sample.board_id].name == "Work"
        assert history.can_redo

    def test_sequence_of_undos(self, sample) -> None:
        state = sample.state
        before = state.copy()
        history = History()
        self._do(history, state, CreateList(sample.board_id, "Doing"))
        self._do(history, state, MoveCard(sample.card_ids[0], sample.todo_id, sample.done_id))
        self._do(history, state, DeleteTag(sample.tag_id))
        while history.can_undo:
            history.undo(state)
        assert state == before
        assert history.redo_depth == 3

    def test_mixed_sequence_undone_and_redone(self, sample) -> None:
        state = sample.state
        initial = state.copy()
        history = History()

        def run(command):
            label = command.describe(state)
            inverse = command.apply(state)
            history.record(inverse, label)
            return inverse

        home_id = run(CreateBoard("Home")).board_id
        chores_id = run(CreateList(home_id, "Chores")).list_id
        card_id = run(CreateCard(chores_id, "Fix sink", due_date=date(2024, 6, 1))).card_id
        run(MoveCard(sample.card_ids[0], sample.todo_id, chores_id, 0))
        run(EditCardFields(card_id, title="Fix the sink", status=CardStatus.COMPLETED,
                           priority=CardPriority.HIGH))
        tag_id = run(CreateTag("home", TagColor.GREEN)).tag_id
        run(AddTagToCard(card_id, tag_id))
        run(RenameList(sample.todo_id, "Backlog"))
        run(MoveList(sample.done_id, 0))
        run(DeleteTag(sample.tag_id))
        run(DeleteList(sample.todo_id))
        state.check_invariants()
        final = state.copy()
        steps = history.undo_depth
        assert steps == 11

        while history.can_undo:
            history.undo(state)
            state.check_invariants()
        assert state == initial
        assert history.redo_depth == steps

        while history.can_redo:
            history.redo(state)
            state.check_invariants()
        assert state == final
        assert history.undo_depth == steps

    def test_record_clears_redo(self, sample) -> None:
        history = History()
        self._do(history, sample.state, CreateTag("later"))
        history.undo(sample.state)
        self._do(history, sample.state, CreateTag("soon"))
        assert not history.can_redo

    def test_limit_drops_oldest(self, sample) -> None:
        history = History(limit=2)
        for name in ("a", "b", "c"):
            self._do(history, sample.state, CreateTag(name))
        assert history.undo_depth == 2
        history.undo(sample.state)
        history.undo(sample.state)
        assert history.undo(sample.state) is None
        assert sample.state.find_tag_by_name("a") is not None

    def test_stale_entry_clears_history(self, sample) -> None:
        state = sample.state
        history = History()
        self._do(history, state, DeleteCard(sample.card_ids[0]))
        # The list goes away behind the history's back
        DeleteList(sample.todo_id).apply(state)
        before = state.copy()

        with pytest.raises(StaleUndo):
            history.undo(state)
        assert state == before
        assert not history.can_undo
        assert not history.can_redo
