"""Builds the ViewModel for the engine's current state and mode."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from tui_kanban.core.card import Card, CardPriority, CardStatus
from tui_kanban.core.constants import APP_NAME, DATE_FORMAT
from tui_kanban.core.state import AppState
from tui_kanban.engine.modes import EDITOR_FIELDS, Mode
from tui_kanban.engine.viewmodel import (
    COMPLETED,
    DUE,
    ERROR,
    MUTED,
    OVERDUE,
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
    STALE,
    TAG,
    TITLE,
    ListItem,
    ListView,
    Panel,
    StatusLine,
    TextInput,
    TextSpan,
    ViewModel,
)
from tui_kanban.search import EntityKind

if TYPE_CHECKING:
    from tui_kanban.engine.facade import Engine

ACTIVITY_LINES = 5

# Only the non-default values are shown on a card row
STATUS_MARKS = {
    CardStatus.COMPLETED: ("done", COMPLETED),
    CardStatus.STALE: ("stale", STALE),
}
PRIORITY_MARKS = {
    CardPriority.MEDIUM: ("!!", PRIORITY_MEDIUM),
    CardPriority.HIGH: ("!!!", PRIORITY_HIGH),
}

EDITOR_LABELS = {
    "title": "Title",
    "description": "Description",
    "due_date": "Due (YYYY-MM-DD)",
}


def build_view(engine: Engine, today: Optional[date] = None) -> ViewModel:
    today = today or date.today()
    state = engine.state
    board = engine.cursor.board(state)

    title = APP_NAME
    if board is not None:
        boards = state.board_order()
        title = f"{APP_NAME} | {board.name} ({boards.index(board) + 1}/{len(boards)})"

    banner = engine.banner()
    status = StatusLine(*banner) if banner else None

    return ViewModel(
        mode=engine.mode,
        title=title,
        body=_board_panel(engine, today),
        overlay=_overlay(engine),
        status=status,
        size=engine.size,
        hints=tuple(engine.registry.hints(engine.mode)),
        activity=tuple(
            TextSpan(entry.description, TITLE if entry.by_user else MUTED)
            for entry in engine.activity.recent(ACTIVITY_LINES)
        ),
        dirty=engine.dirty,
    )


# -----------------------------------------------------------------------------
# Board body
# -----------------------------------------------------------------------------

def card_item(state: AppState, card: Card, today: date) -> ListItem:
    spans = [TextSpan(card.title, TITLE)]
    spans.extend(
        TextSpan(f"#{state.tags[tag_id].name}", TAG)
        for tag_id in card.tag_ids if tag_id in state.tags
    )
    if card.due_date is not None:
        role = OVERDUE if card.due_date < today else DUE
        spans.append(TextSpan(card.due_date.strftime(DATE_FORMAT), role))
    for marks, value in ((PRIORITY_MARKS, card.priority), (STATUS_MARKS, card.status)):
        if value in marks:
            spans.append(TextSpan(*marks[value]))
    return ListItem(tuple(spans), card.id)


def _board_panel(engine: Engine, today: date) -> Panel:
    state = engine.state
    if engine.loading:
        return Panel("Loading", (TextSpan("Reading the board file...", MUTED),))

    board = engine.cursor.board(state)
    if board is None:
        return Panel("No boards", (TextSpan("Press b to create a board", MUTED),))

    columns = []
    for index, board_list in enumerate(state.lists_in_board(board.id)):
        focused = index == engine.cursor.list_index
        items = tuple(card_item(state, card, today) for card in state.cards_in_list(board_list.id))
        selected = engine.cursor.card_index if focused and items else None
        children: tuple = (ListView(items, selected),)
        if not items:
            children = (TextSpan("(empty)", MUTED),)
        columns.append(Panel(f"{board_list.name} ({len(items)})", children, focused))

    if not columns:
        return Panel(board.name, (TextSpan("Press a to add a list", MUTED),), True)
    return Panel(board.name, tuple(columns), True)


# -----------------------------------------------------------------------------
# Overlays
# -----------------------------------------------------------------------------

def _overlay(engine: Engine) -> Optional[Panel]:
    mode = engine.mode
    if mode is Mode.PROMPT and engine.prompt is not None:
        prompt = engine.prompt
        children: list = [TextInput(prompt.label, prompt.text.value, prompt.text.cursor)]
        if prompt.suggestions:
            children.append(ListView(
                tuple(ListItem((TextSpan(name, TAG),)) for name in prompt.suggestions), 0,
            ))
        return Panel(prompt.label, tuple(children), True)

    if mode is Mode.CARD_EDITOR and engine.editor is not None:
        editor = engine.editor
        inputs = tuple(
            TextInput(EDITOR_LABELS[name], editor.fields[name].value,
                      editor.fields[name].cursor, focused=index == editor.focus)
            for index, name in enumerate(EDITOR_FIELDS)
        )
        card = engine.state.cards.get(editor.card_id)
        if card is not None:
            summary = f"Status: {card.status.value}   Priority: {card.priority.value}"
            inputs += (TextSpan(summary, MUTED),)
        return Panel("Edit card", inputs, True)

    if mode is Mode.SEARCH and engine.search is not None:
        return _search_panel(engine)

    if mode is Mode.CONFIRM_DELETE and engine.confirm is not None:
        return Panel("Confirm", (
            TextSpan(engine.confirm.message, ERROR),
            TextSpan("y: delete   n: keep", MUTED),
        ), True)

    if mode is Mode.HELP:
        sections = tuple(
            Panel(category, tuple(
                TextSpan(f"{shortcut.key_display:<12} {shortcut.description}")
                for shortcut in shortcuts
            ))
            for category, shortcuts in engine.registry.by_category(Mode.BOARD).items()
        )
        return Panel("Help", sections, True)

    return None


def _search_panel(engine: Engine) -> Panel:
    state = engine.state
    search = engine.search
    children: list = [TextInput("Search", search.text.value, search.text.cursor)]

    items = []
    for hit in search.hits:
        if hit.kind is EntityKind.CARD and hit.entity_id in state.cards:
            card = state.cards[hit.entity_id]
            where = state.lists[card.list_id].name
            items.append(ListItem((TextSpan(card.title, TITLE), TextSpan(f"in {where}", MUTED)),
                                  card.id))
        elif hit.entity_id in state.tags:
            tag = state.tags[hit.entity_id]
            count = len(state.cards_with_tag(tag.id))
            items.append(ListItem((TextSpan(f"#{tag.name}", TAG),
                                   TextSpan(f"{count} card(s)", MUTED)), tag.id))

    if items:
        children.append(ListView(tuple(items), search.selected))
    elif search.text.value.strip():
        children.append(TextSpan("No matches", MUTED))
    return Panel("Search", tuple(children), True)

