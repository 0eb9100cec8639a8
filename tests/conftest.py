"""Shared fixtures: sample boards, a fake clock, engines and executors."""

from __future__ import annotations

from concurrent.futures import Executor, Future
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

import pytest

from tui_kanban.commands import AddTagToCard, CreateBoard, CreateCard, CreateList, CreateTag
from tui_kanban.config import Config
from tui_kanban.core.card import TagColor
from tui_kanban.core.state import AppState
from tui_kanban.engine import Engine, Key, KeyPress, ViewModel


@dataclass
class Sample:
    """A small board: Work / [Todo: 3 cards, Done: empty], one tag."""
    state: AppState
    board_id: int
    todo_id: int
    done_id: int
    card_ids: list[int]
    tag_id: int


def build_sample() -> Sample:
    state = AppState()
    board_id = CreateBoard("Work").apply(state).board_id
    todo_id = CreateList(board_id, "Todo").apply(state).list_id
    done_id = CreateList(board_id, "Done").apply(state).list_id
    card_ids = [
        CreateCard(todo_id, title).apply(state).card_id
        for title in ("Write spec", "Review PR", "Buy milk")
    ]
    tag_id = CreateTag("urgent", TagColor.RED).apply(state).tag_id
    AddTagToCard(card_ids[0], tag_id).apply(state)
    state.drain_changes()
    return Sample(state, board_id, todo_id, done_id, card_ids, tag_id)


@pytest.fixture
def sample() -> Sample:
    return build_sample()


class FakeClock:
    """Monotonic clock under test control."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class ManualExecutor(Executor):
    """Executor that runs submitted work only when told to."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self) -> None:
        while self.pending:
            future, fn, args, kwargs = self.pending.pop(0)
            try:
                result = fn(*args, **kwargs)
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(result)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.pending.clear()


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def save_path(tmp_path: Path) -> Path:
    return tmp_path / "board.kanban"


@pytest.fixture
def config(tmp_path: Path, save_path: Path) -> Config:
    return Config(
        save_path=save_path,
        log_path=tmp_path / "tui-kanban.log",
        keybindings_path=tmp_path / "keybindings.json",
        update_check_url="",
    )


@pytest.fixture
def engine(config: Config, clock: FakeClock) -> Iterator[Engine]:
    engine = Engine(config, clock=clock)
    yield engine
    engine.supervisor.shutdown(wait_for_tasks=True)


@pytest.fixture
def press(engine: Engine) -> Callable[..., ViewModel]:
    """Send keys to the engine: 1-char strings are typed, Key members are named keys."""
    def send(*keys: str | Key | KeyPress) -> ViewModel:
        view = engine.view()
        for key in keys:
            if isinstance(key, KeyPress):
                event = key
            elif isinstance(key, Key):
                event = KeyPress(key=key)
            else:
                event = KeyPress(char=key)
            view = engine.handle(event)
        return view
    return send


@pytest.fixture
def type_text(press: Callable[..., ViewModel]) -> Callable[[str], ViewModel]:
    def send(text: str) -> ViewModel:
        return press(*text)
    return send
