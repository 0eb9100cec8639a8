"""The engine: one object that owns the state and reacts to events.

Front ends feed it events and draw the ViewModel it returns. All state
changes happen on the caller's thread; background work goes through the
TaskSupervisor and comes back through pump().
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from tui_kanban import __version__
from tui_kanban.commands import (
    AddTagToCard,
    Command,
    CreateBoard,
    CreateCard,
    CreateList,
    CreateTag,
    DeleteBoard,
    DeleteCard,
    DeleteList,
    DeleteTag,
    EditCardFields,
    History,
    MoveCard,
    MoveList,
    RemoveTagFromCard,
    RenameBoard,
    RenameList,
)
from tui_kanban.config import Config
from tui_kanban.core.activity import ActivityLog
from tui_kanban.core.card import CardStatus
from tui_kanban.core.constants import DATE_FORMAT, DEFAULT_SEARCH_LIMIT
from tui_kanban.core.errors import (
    CommandError,
    ConfigError,
    CorruptFile,
    IoFailure,
    NetworkError,
    StaleUndo,
    UnsupportedSchema,
)
from tui_kanban.core.state import AppState
from tui_kanban.engine.cursor import Cursor
from tui_kanban.engine.events import Key, KeyPress, LoopEvent, Paste, Resize, Tick
from tui_kanban.engine.modes import (
    EDITOR_FIELDS,
    ConfirmState,
    EditorState,
    Mode,
    PromptPurpose,
    PromptState,
    SearchState,
    TextField,
)
from tui_kanban.engine.keymap import load_shortcuts
from tui_kanban.engine.shortcuts import ShortcutRegistry, create_default_shortcuts
from tui_kanban.engine.view import build_view
from tui_kanban.engine.viewmodel import ViewModel
from tui_kanban.savefile import state_to_bytes
from tui_kanban.search import EntityKind, NGramScorer, SearchIndex
from tui_kanban.tasks import TaskKind, TaskResult, TaskSupervisor, is_newer

logger = logging.getLogger(__name__)

RECOVERED_SUFFIX = ".recovered"
SUGGESTION_LIMIT = 5


def recovered_path(path: Path) -> Path:
    """Where saves go after the original file could not be read."""
    return path.with_name(path.name + RECOVERED_SUFFIX)


@dataclass
class _Banner:
    text: str
    level: str
    expires_at: float


class Engine:
    """
    Interactive state engine for the kanban board.

    Typical use:
        engine = Engine(Config.from_env())
        view = engine.start()
        while engine.running:
            view = engine.handle(next_event())
            engine.pump()
        engine.shutdown()

    The engine keeps a revision counter that increases with every state
    change. A save records the revision it was taken at; when it lands,
    everything up to that revision is clean. Changes made while a save is
    in flight keep the engine dirty and trigger another save.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        supervisor: Optional[TaskSupervisor] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config or Config()
        self.supervisor = supervisor or TaskSupervisor()
        self._clock = clock or time.monotonic

        self.state = AppState()
        self.history = History(self.config.undo_limit)
        self.activity = ActivityLog(self.config.activity_limit)
        self.index = SearchIndex(
            NGramScorer(gram_size=self.config.search_gram_size),
            threshold=self.config.search_threshold,
        )
        self.keymap_error: Optional[str] = None
        self.registry = self._load_shortcuts()
        self.cursor = Cursor()

        self.mode = Mode.BOARD
        self.prompt: Optional[PromptState] = None
        self.editor: Optional[EditorState] = None
        self.search: Optional[SearchState] = None
        self.confirm: Optional[ConfirmState] = None

        self.size = (80, 24)
        self.running = False
        self.save_path = Path(self.config.save_path)
        self.latest_version: Optional[str] = None

        self._banner: Optional[_Banner] = None
        self._load_ticket: Optional[int] = None
        self._save_ticket: Optional[int] = None
        self._update_ticket: Optional[int] = None
        self._revision = 0
        self._saved_revision = 0
        self._save_revision = 0
        self._save_announce = False
        self._resave = False
        self._last_save_at = self._clock()

        self._key_handlers: dict[Mode, Callable[[KeyPress], None]] = {
            Mode.BOARD: self._handle_board,
            Mode.PROMPT: self._handle_prompt,
            Mode.CARD_EDITOR: self._handle_editor,
            Mode.SEARCH: self._handle_search,
            Mode.CONFIRM_DELETE: self._handle_confirm,
            Mode.HELP: self._handle_help,
        }

    def _load_shortcuts(self) -> ShortcutRegistry:
        try:
            return load_shortcuts(self.config.keybindings_path)
        except ConfigError as e:
            logger.warning("Using default key bindings: %s", e)
            self.keymap_error = str(e)
            return create_default_shortcuts()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self._load_ticket is not None

    @property
    def saving(self) -> bool:
        return self._save_ticket is not None

    @property
    def dirty(self) -> bool:
        return self._revision != self._saved_revision

    @property
    def revision(self) -> int:
        return self._revision

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, reset: bool = False, check_updates: bool = True) -> ViewModel:
        """Dispatch the initial load (unless reset) and the update check."""
        self.running = True
        if reset:
            logger.info("Starting from an empty state; %s will be overwritten", self.save_path)
            self._revision += 1
            if self.keymap_error:
                self._notify_keymap_error()
            else:
                self._notify("Started fresh; the old board file is replaced on save")
        else:
            logger.info("Loading %s", self.save_path)
            self._load_ticket = self.supervisor.submit_load(self.save_path)

        if check_updates and self.config.update_check_enabled:
            self._update_ticket = self.supervisor.submit_update_check(
                self.config.update_check_url, self.config.update_check_timeout,
            )
        return self.view()

    def shutdown(self, timeout: float = 5.0) -> None:
        """Save unsaved changes, wait for running tasks, stop the workers."""
        self.running = False
        if self.dirty and not self.loading:
            self.request_save()

        deadline = time.monotonic() + timeout
        while self.supervisor.busy:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning("Gave up waiting for background tasks at shutdown")
                break
            self._apply(self.supervisor.wait_idle(remaining))

        if self.dirty:
            logger.warning("Exiting with unsaved changes (revision %d)", self._revision)
        self.supervisor.shutdown(wait_for_tasks=False)

    def wait_for_tasks(self, timeout: float = 5.0) -> int:
        """Block until background work is done and apply its results."""
        results = self.supervisor.wait_idle(timeout)
        self._apply(results)
        return len(results)

    # -------------------------------------------------------------------------
    # Event entry points
    # -------------------------------------------------------------------------

    def handle(self, event: LoopEvent) -> ViewModel:
        """Apply one event and return the frame to draw."""
        if isinstance(event, Resize):
            self.size = (max(1, event.cols), max(1, event.rows))
        elif isinstance(event, Tick):
            self._on_tick(self._clock() if event.now is None else event.now)
        elif isinstance(event, Paste):
            self._handle_paste(event.text)
        elif isinstance(event, KeyPress):
            if event.ctrl and event.char == "c":
                self._action_quit()
            else:
                self._key_handlers[self.mode](event)
        return self.view()

    def pump(self) -> int:
        """Apply completed background tasks. Returns how many landed."""
        results = self.supervisor.poll()
        self._apply(results)
        return len(results)

    def view(self) -> ViewModel:
        return build_view(self)

    # -------------------------------------------------------------------------
    # Commands and history
    # -------------------------------------------------------------------------

    def execute(self, command: Command) -> Optional[Command]:
        """
        Apply a command and record it for undo.

        Returns the inverse command, or None if the command was refused.
        Refusals leave the state unchanged and show a status message.
        """
        if self.loading:
            self._refuse_while_loading()
            return None
        label = command.describe(self.state)
        try:
            inverse = command.apply(self.state)
        except CommandError as e:
            logger.info("Rejected %s: %s", type(command).__name__, e)
            self._notify(str(e), "error")
            return None
        self.history.record(inverse, label)
        self._changed(label)
        return inverse

    def undo(self) -> bool:
        return self._step_history(self.history.undo, "Undid", "Nothing to undo")

    def redo(self) -> bool:
        return self._step_history(self.history.redo, "Redid", "Nothing to redo")

    def _step_history(
        self,
        step: Callable[[AppState], Optional[str]],
        verb: str,
        empty_message: str,
    ) -> bool:
        if self.loading:
            self._refuse_while_loading()
            return False
        try:
            label = step(self.state)
        except StaleUndo as e:
            self._sync_derived()
            self._notify(str(e), "error")
            return False
        if label is None:
            self._notify(empty_message)
            return False
        message = f"{verb}: {label}"
        self._changed(message)
        self._notify(message)
        return True

    def _changed(self, description: str, by_user: bool = True) -> None:
        self.activity.append(description, by_user)
        self._revision += 1
        self._sync_derived()

    def _sync_derived(self) -> None:
        self.index.update(self.state, self.state.drain_changes())
        self.cursor.normalize(self.state)

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def request_save(self, announce: bool = False) -> Optional[int]:
        """
        Snapshot the state and hand it to a background save.

        While a save is running the request joins it and a follow-up save
        of the newest state is made once it lands.
        """
        if self.loading:
            self._refuse_while_loading()
            return None
        data = state_to_bytes(self.state)
        self._last_save_at = self._clock()
        if self.saving:
            self._resave = True
            self._save_announce = self._save_announce or announce
            return self.supervisor.submit_save(self.save_path, data)

        self._save_revision = self._revision
        self._save_announce = announce
        self._save_ticket = self.supervisor.submit_save(self.save_path, data)
        logger.debug("Saving revision %d to %s", self._revision, self.save_path)
        return self._save_ticket

    def _on_tick(self, now: float) -> None:
        interval = self.config.autosave_interval
        if interval <= 0 or self.loading or self.saving or not self.dirty:
            return
        if now - self._last_save_at >= interval:
            logger.debug("Autosave after %.1fs", now - self._last_save_at)
            self.request_save()

    # -------------------------------------------------------------------------
    # Task completions
    # -------------------------------------------------------------------------

    def _apply(self, results: list[TaskResult]) -> None:
        for result in results:
            if result.kind is TaskKind.LOAD:
                self._on_load(result)
            elif result.kind is TaskKind.SAVE:
                self._on_save(result)
            elif result.kind is TaskKind.UPDATE_CHECK:
                self._on_update_check(result)

    def _on_load(self, result: TaskResult) -> None:
        if result.ticket != self._load_ticket:
            return
        self._load_ticket = None

        if result.ok:
            self._install(result.payload)
            boards = len(self.state.boards)
            if self.keymap_error:
                self._notify_keymap_error()
            elif boards:
                self._notify(f"Loaded {boards} board(s) from {self.save_path.name}")
            else:
                self._notify("No boards yet. Press b to create one")
            return

        error = result.error
        if isinstance(error, IoFailure):
            logger.error("Load failed: %s", error)
            self._notify(f"Could not load board file: {error}", "error")
            return

        # The file exists but cannot be used; never save over it
        original = self.save_path
        self.save_path = recovered_path(original)
        if isinstance(error, (CorruptFile, UnsupportedSchema)):
            logger.warning("Could not read %s (%s); saving to %s", original, error, self.save_path)
            message = str(error)
        else:
            logger.error("Unexpected error reading %s; saving to %s",
                         original, self.save_path, exc_info=error)
            message = f"Load failed: {result.reason}"
        self._notify(f"{message}. Starting empty; saving to {self.save_path.name}", "error")

    def _notify_keymap_error(self) -> None:
        self._notify(f"{self.keymap_error}. Using default keys", "error")

    def _install(self, state: AppState) -> None:
        state.drain_changes()
        self.state = state
        self.history.clear()
        self.index.rebuild(state)
        self.cursor = Cursor()
        self.cursor.normalize(state)

    def _on_save(self, result: TaskResult) -> None:
        if result.ticket != self._save_ticket:
            return
        self._save_ticket = None
        announce, self._save_announce = self._save_announce, False
        resave, self._resave = self._resave, False

        if result.ok:
            self._saved_revision = max(self._saved_revision, self._save_revision)
            logger.info("Saved revision %d to %s", self._save_revision, self.save_path)
            if announce:
                self._notify(f"Saved to {self.save_path}")
        else:
            logger.error("Save to %s failed: %s", self.save_path, result.reason)
            self._notify(f"Save failed: {result.reason}", "error")
            return

        if resave and self.dirty:
            self.request_save(announce)

    def _on_update_check(self, result: TaskResult) -> None:
        if result.ticket != self._update_ticket:
            return
        self._update_ticket = None
        if not result.ok:
            level = logging.INFO if isinstance(result.error, NetworkError) else logging.WARNING
            logger.log(level, "Update check failed: %s", result.reason)
            self._notify(f"Update check skipped: {result.reason}")
            return
        self.latest_version = result.payload
        if is_newer(result.payload, __version__):
            logger.info("Version %s is available (running %s)", result.payload, __version__)
            self._notify(f"tui-kanban {result.payload} is available (you have {__version__})")

    # -------------------------------------------------------------------------
    # Status banner
    # -------------------------------------------------------------------------

    def _notify(self, text: str, level: str = "info") -> None:
        self._banner = _Banner(text, level, self._clock() + self.config.status_duration)

    def _refuse_while_loading(self) -> None:
        self._notify("Still loading the board file, try again in a moment")

    def banner(self) -> Optional[tuple[str, str]]:
        """(text, level) of the visible status message, if any."""
        if self._banner is not None and self._clock() < self._banner.expires_at:
            return self._banner.text, self._banner.level
        if self.loading:
            return "Loading...", "info"
        return None

    # -------------------------------------------------------------------------
    # Board mode
    # -------------------------------------------------------------------------

    def _handle_board(self, event: KeyPress) -> None:
        shortcut = self.registry.match(event, Mode.BOARD)
        if shortcut is not None:
            getattr(self, f"_action_{shortcut.action}")()

    def _action_focus_up(self) -> None:
        self.cursor.step_card(self.state, -1)

    def _action_focus_down(self) -> None:
        self.cursor.step_card(self.state, 1)

    def _action_focus_left(self) -> None:
        self.cursor.step_list(self.state, -1)

    def _action_focus_right(self) -> None:
        self.cursor.step_list(self.state, 1)

    def _action_prev_board(self) -> None:
        self.cursor.step_board(self.state, -1)

    def _action_next_board(self) -> None:
        self.cursor.step_board(self.state, 1)

    def _action_new_board(self) -> None:
        self._open_prompt(PromptPurpose.NEW_BOARD)

    def _action_new_list(self) -> None:
        board = self.cursor.board(self.state)
        if board is None:
            self._notify("Create a board first (b)")
            return
        self._open_prompt(PromptPurpose.NEW_LIST, board.id)

    def _action_new_card(self) -> None:
        board_list = self.cursor.board_list(self.state)
        if board_list is None:
            self._notify("Create a list first (a)")
            return
        self._open_prompt(PromptPurpose.NEW_CARD, board_list.id)

    def _action_rename_board(self) -> None:
        board = self.cursor.board(self.state)
        if board is not None:
            self._open_prompt(PromptPurpose.RENAME_BOARD, board.id, board.name)

    def _action_rename_list(self) -> None:
        board_list = self.cursor.board_list(self.state)
        if board_list is not None:
            self._open_prompt(PromptPurpose.RENAME_LIST, board_list.id, board_list.name)

    def _action_edit_card(self) -> None:
        card = self.cursor.card(self.state)
        if card is None:
            return
        due = card.due_date.strftime(DATE_FORMAT) if card.due_date else ""
        self.editor = EditorState(card.id, {
            "title": TextField(card.title),
            "description": TextField(card.description, multiline=True),
            "due_date": TextField(due),
        })
        self.mode = Mode.CARD_EDITOR

    def _action_add_tag(self) -> None:
        card = self.cursor.card(self.state)
        if card is not None:
            self._open_prompt(PromptPurpose.ADD_TAG, card.id)

    def _action_remove_tag(self) -> None:
        card = self.cursor.card(self.state)
        if card is None:
            return
        if not card.tag_ids:
            self._notify("This card has no tags")
            return
        self._open_prompt(PromptPurpose.REMOVE_TAG, card.id)

    def _action_delete_tag(self) -> None:
        if not self.state.tags:
            self._notify("There are no tags")
            return
        self._open_prompt(PromptPurpose.DELETE_TAG)

    def _action_mark_completed(self) -> None:
        self._set_status(CardStatus.COMPLETED)

    def _action_mark_active(self) -> None:
        self._set_status(CardStatus.ACTIVE)

    def _action_mark_stale(self) -> None:
        self._set_status(CardStatus.STALE)

    def _set_status(self, status: CardStatus) -> None:
        card = self.cursor.card(self.state)
        if card is None:
            return
        if card.status is status:
            self._notify(f"Card is already {status.value}")
            return
        self.execute(EditCardFields(card.id, status=status))

    def _action_cycle_priority(self) -> None:
        card = self.cursor.card(self.state)
        if card is not None:
            self.execute(EditCardFields(card.id, priority=card.priority.next()))

    def _action_move_card_left(self) -> None:
        self._move_card_across(-1)

    def _action_move_card_right(self) -> None:
        self._move_card_across(1)

    def _move_card_across(self, step: int) -> None:
        board = self.cursor.board(self.state)
        card = self.cursor.card(self.state)
        if board is None or card is None:
            return
        target = self.cursor.list_index + step
        if not 0 <= target < len(board.list_ids):
            return
        dest_id = board.list_ids[target]
        position = min(self.cursor.card_index, len(self.state.lists[dest_id].card_ids))
        if self.execute(MoveCard(card.id, card.list_id, dest_id, position)) is not None:
            self.cursor.focus_card(self.state, card.id)

    def _action_move_card_up(self) -> None:
        self._move_card_within(-1)

    def _action_move_card_down(self) -> None:
        self._move_card_within(1)

    def _move_card_within(self, step: int) -> None:
        board_list = self.cursor.board_list(self.state)
        card = self.cursor.card(self.state)
        if board_list is None or card is None:
            return
        target = self.cursor.card_index + step
        if not 0 <= target < len(board_list.card_ids):
            return
        if self.execute(MoveCard(card.id, board_list.id, board_list.id, target)) is not None:
            self.cursor.focus_card(self.state, card.id)

    def _action_move_list_left(self) -> None:
        self._move_list(-1)

    def _action_move_list_right(self) -> None:
        self._move_list(1)

    def _move_list(self, step: int) -> None:
        board = self.cursor.board(self.state)
        board_list = self.cursor.board_list(self.state)
        if board is None or board_list is None:
            return
        target = self.cursor.list_index + step
        if not 0 <= target < len(board.list_ids):
            return
        if self.execute(MoveList(board_list.id, target)) is not None:
            self.cursor.focus_list(self.state, board_list.id)

    def _action_delete_card(self) -> None:
        card = self.cursor.card(self.state)
        if card is not None:
            self._open_confirm(DeleteCard(card.id), f"Delete card '{card.title}'?")

    def _action_delete_list(self) -> None:
        board_list = self.cursor.board_list(self.state)
        if board_list is None:
            return
        count = len(board_list.card_ids)
        self._open_confirm(
            DeleteList(board_list.id),
            f"Delete list '{board_list.name}' and its {count} card(s)?",
        )

    def _action_delete_board(self) -> None:
        board = self.cursor.board(self.state)
        if board is None:
            return
        cards = sum(len(self.state.lists[list_id].card_ids) for list_id in board.list_ids)
        self._open_confirm(
            DeleteBoard(board.id),
            f"Delete board '{board.name}' with {len(board.list_ids)} list(s) and {cards} card(s)?",
        )

    def _action_undo(self) -> None:
        self.undo()

    def _action_redo(self) -> None:
        self.redo()

    def _action_search(self) -> None:
        self.search = SearchState()
        self.mode = Mode.SEARCH

    def _action_help(self) -> None:
        self.mode = Mode.HELP

    def _action_save(self) -> None:
        self.request_save(announce=True)

    def _action_quit(self) -> None:
        self.running = False

    # -------------------------------------------------------------------------
    # Shared text editing
    # -------------------------------------------------------------------------

    @staticmethod
    def _edit_text(text_field: TextField, event: KeyPress) -> bool:
        """Apply an editing key to a field. Returns False if not an edit key."""
        if event.is_char:
            text_field.insert(event.char)
        elif event.key == Key.BACKSPACE:
            text_field.backspace()
        elif event.key == Key.DELETE:
            text_field.delete()
        elif event.key == Key.LEFT:
            text_field.left()
        elif event.key == Key.RIGHT:
            text_field.right()
        elif event.key == Key.HOME:
            text_field.home()
        elif event.key == Key.END:
            text_field.end()
        elif event.ctrl and event.char == "u":
            text_field.set("")
        else:
            return False
        return True

    def _handle_paste(self, text: str) -> None:
        if self.mode is Mode.PROMPT and self.prompt is not None:
            self.prompt.text.insert(text)
            self._refresh_suggestions()
        elif self.mode is Mode.CARD_EDITOR and self.editor is not None:
            self.editor.focused.insert(text)
        elif self.mode is Mode.SEARCH and self.search is not None:
            self.search.text.insert(text)
            self._run_search()

    def _back_to_board(self) -> None:
        self.mode = Mode.BOARD
        self.prompt = self.editor = self.search = self.confirm = None

    # -------------------------------------------------------------------------
    # Prompt mode
    # -------------------------------------------------------------------------

    def _open_prompt(self, purpose: PromptPurpose, target_id: Optional[int] = None,
                     value: str = "") -> None:
        self.prompt = PromptState(purpose, target_id, TextField(value))
        self.mode = Mode.PROMPT
        self._refresh_suggestions()

    def _handle_prompt(self, event: KeyPress) -> None:
        prompt = self.prompt
        if event.key == Key.ESCAPE:
            self._back_to_board()
        elif event.key == Key.ENTER:
            self._submit_prompt(prompt)
        elif event.key == Key.TAB:
            if prompt.suggestions:
                prompt.text.set(prompt.suggestions[0])
                self._refresh_suggestions()
        elif self._edit_text(prompt.text, event):
            self._refresh_suggestions()

    def _refresh_suggestions(self) -> None:
        prompt = self.prompt
        if prompt is None or not prompt.purpose.completes_tags:
            return
        allowed: Optional[set[int]] = None
        if prompt.purpose is PromptPurpose.REMOVE_TAG:
            card = self.state.cards.get(prompt.target_id)
            allowed = set(card.tag_ids) if card else set()

        text = prompt.text.value
        if text.strip():
            hits = self.index.complete(text, (EntityKind.TAG,), limit=SUGGESTION_LIMIT * 2)
            tag_ids = [hit.entity_id for hit in hits]
        elif allowed is not None:
            tag_ids = sorted(allowed)
        else:
            tag_ids = []
        names = [
            self.state.tags[tag_id].name for tag_id in tag_ids
            if tag_id in self.state.tags and (allowed is None or tag_id in allowed)
        ]
        prompt.suggestions = names[:SUGGESTION_LIMIT]

    def _submit_prompt(self, prompt: PromptState) -> None:
        value = prompt.text.value.strip()
        if not value:
            self._notify("Name cannot be empty", "error")
            return

        purpose = prompt.purpose
        if purpose is PromptPurpose.DELETE_TAG:
            tag = self.state.find_tag_by_name(value)
            if tag is None:
                self._notify(f"No tag named '{value}'", "error")
                return
            count = len(self.state.cards_with_tag(tag.id))
            self._open_confirm(DeleteTag(tag.id), f"Delete tag '{tag.name}' from {count} card(s)?")
            return

        if self._apply_prompt(purpose, prompt.target_id, value):
            self._back_to_board()

    def _apply_prompt(self, purpose: PromptPurpose, target_id: Optional[int], value: str) -> bool:
        state = self.state
        if purpose is PromptPurpose.NEW_BOARD:
            created = self.execute(CreateBoard(value))
            if created is not None:
                self.cursor.focus_board(state, created.board_id)
            return created is not None

        if purpose is PromptPurpose.NEW_LIST:
            board = state.boards.get(target_id)
            position = self.cursor.list_index + 1 if board and board.list_ids else None
            created = self.execute(CreateList(target_id, value, position))
            if created is not None:
                self.cursor.focus_list(state, created.list_id)
            return created is not None

        if purpose is PromptPurpose.NEW_CARD:
            board_list = state.lists.get(target_id)
            position = self.cursor.card_index + 1 if board_list and board_list.card_ids else None
            created = self.execute(CreateCard(target_id, value, position=position))
            if created is not None:
                self.cursor.focus_card(state, created.card_id)
            return created is not None

        if purpose is PromptPurpose.RENAME_BOARD:
            return self.execute(RenameBoard(target_id, value)) is not None

        if purpose is PromptPurpose.RENAME_LIST:
            return self.execute(RenameList(target_id, value)) is not None

        if purpose is PromptPurpose.ADD_TAG:
            tag = state.find_tag_by_name(value)
            if tag is None:
                created = self.execute(CreateTag(value))
                if created is None:
                    return False
                tag_id = created.tag_id
            else:
                tag_id = tag.id
            return self.execute(AddTagToCard(target_id, tag_id)) is not None

        if purpose is PromptPurpose.REMOVE_TAG:
            tag = state.find_tag_by_name(value)
            if tag is None:
                self._notify(f"No tag named '{value}'", "error")
                return False
            return self.execute(RemoveTagFromCard(target_id, tag.id)) is not None

        raise ValueError(f"Unhandled prompt: {purpose}")

    # -------------------------------------------------------------------------
    # Card editor mode
    # -------------------------------------------------------------------------

    def _handle_editor(self, event: KeyPress) -> None:
        editor = self.editor
        if event.key == Key.ESCAPE:
            self._back_to_board()
        elif event.key == Key.ENTER or (event.ctrl and event.char == "s"):
            self._commit_editor(editor)
        elif event.key in (Key.TAB, Key.DOWN):
            editor.cycle(1)
        elif event.key in (Key.BACKTAB, Key.UP):
            editor.cycle(-1)
        else:
            self._edit_text(editor.focused, event)

    def _commit_editor(self, editor: EditorState) -> None:
        card = self.state.cards.get(editor.card_id)
        if card is None:
            self._notify("The card no longer exists", "error")
            self._back_to_board()
            return

        title = editor.fields["title"].value.strip()
        if not title:
            editor.focus = EDITOR_FIELDS.index("title")
            self._notify("Title cannot be empty", "error")
            return

        due_text = editor.fields["due_date"].value.strip()
        try:
            due = datetime.strptime(due_text, DATE_FORMAT).date() if due_text else None
        except ValueError:
            editor.focus = EDITOR_FIELDS.index("due_date")
            self._notify("Due date must look like YYYY-MM-DD", "error")
            return

        description = editor.fields["description"].value.rstrip()
        changes = {}
        if title != card.title:
            changes["title"] = title
        if description != card.description:
            changes["description"] = description
        if due != card.due_date:
            changes["due_date"] = due

        if not changes:
            self._back_to_board()
            return
        if self.execute(EditCardFields(card.id, **changes)) is not None:
            self._back_to_board()

    # -------------------------------------------------------------------------
    # Search mode
    # -------------------------------------------------------------------------

    def _handle_search(self, event: KeyPress) -> None:
        search = self.search
        if event.key == Key.ESCAPE:
            self._back_to_board()
        elif event.key == Key.ENTER:
            self._open_search_hit(search)
        elif event.key in (Key.UP, Key.BACKTAB):
            search.selected = max(0, search.selected - 1)
        elif event.key in (Key.DOWN, Key.TAB):
            search.selected = min(max(0, len(search.hits) - 1), search.selected + 1)
        elif self._edit_text(search.text, event):
            self._run_search()

    def _run_search(self) -> None:
        search = self.search
        search.hits = self.index.search(search.text.value, DEFAULT_SEARCH_LIMIT)
        search.selected = 0

    def _open_search_hit(self, search: SearchState) -> None:
        if not search.hits:
            return
        hit = search.hits[search.selected]
        if hit.kind is EntityKind.CARD and hit.entity_id in self.state.cards:
            self._back_to_board()
            self.cursor.focus_card(self.state, hit.entity_id)
            return

        tag = self.state.tags.get(hit.entity_id)
        if tag is None:
            return
        cards = sorted(self.state.cards_with_tag(tag.id), key=lambda c: c.modified_at,
                       reverse=True)
        self._back_to_board()
        if cards:
            self.cursor.focus_card(self.state, cards[0].id)
            self._notify(f"#{tag.name} is on {len(cards)} card(s)")
        else:
            self._notify(f"No cards are tagged #{tag.name}")

    # -------------------------------------------------------------------------
    # Confirm and help modes
    # -------------------------------------------------------------------------

    def _open_confirm(self, command: Command, message: str) -> None:
        self.prompt = None
        self.confirm = ConfirmState(command, message)
        self.mode = Mode.CONFIRM_DELETE

    def _handle_confirm(self, event: KeyPress) -> None:
        if event.key == Key.ENTER or (event.is_char and event.char in ("y", "Y")):
            command = self.confirm.command
            self._back_to_board()
            self.execute(command)
        elif event.key == Key.ESCAPE or (event.is_char and event.char in ("n", "N")):
            self._back_to_board()

    def _handle_help(self, event: KeyPress) -> None:
        if event.key in (Key.ESCAPE, Key.ENTER) or (event.is_char and event.char in ("?", "q")):
            self._back_to_board()
