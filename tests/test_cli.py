"""Tests for the terminal front end: input decoding, layout, rendering and commands."""

import json

import pytest
from typer.testing import CliRunner

from tui_kanban.cli.app import create_app
from tui_kanban.cli.core import KeyDecoder, calculate_layout
from tui_kanban.cli.core.ansi_text import ELLIPSIS, fit, one_line, strip_ansi, truncate, visible_len
from tui_kanban.cli.render import BoardRenderer
from tui_kanban.cli.widgets import StatusBarWidget
from tui_kanban.cli.widgets.base import Rect
from tui_kanban.commands import CreateCard, CreateList
from tui_kanban.core.constants import SCHEMA_VERSION
from tui_kanban.engine import Key, KeyPress, Paste, Resize, StatusLine
from tui_kanban.io import save_state
from tui_kanban.savefile import SaveHeader, state_to_bytes

runner = CliRunner()


@pytest.fixture
def loaded_view(engine, sample, save_path):
    """Load the sample board and size the engine's screen."""
    def make(cols: int, rows: int):
        save_state(sample.state, save_path)
        engine.start(check_updates=False)
        engine.wait_for_tasks()
        return engine.handle(Resize(cols, rows))
    return make


class TestKeyDecoder:
    """Tests for KeyDecoder."""

    def test_plain_characters(self) -> None:
        assert KeyDecoder().feed("ab") == [KeyPress(char="a"), KeyPress(char="b")]

    def test_simple_keys(self) -> None:
        events = KeyDecoder().feed("\r\t\x7f")
        assert [e.key for e in events] == [Key.ENTER, Key.TAB, Key.BACKSPACE]

    def test_ctrl_letters(self) -> None:
        assert KeyDecoder().feed("\x03\x1a") == [KeyPress.ctrl_key("c"), KeyPress.ctrl_key("z")]

    @pytest.mark.parametrize("sequence, key", [
        ("\x1b[A", Key.UP),
        ("\x1bOB", Key.DOWN),
        ("\x1b[3~", Key.DELETE),
        ("\x1b[Z", Key.BACKTAB),
        ("\x1b[15~", Key.F5),
        ("\x1b[H", Key.HOME),
    ])
    def test_escape_sequences(self, sequence: str, key: Key) -> None:
        assert KeyDecoder().feed(sequence) == [KeyPress(key=key)]

    def test_modified_sequences(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("\x1b[1;5A") == [KeyPress(key=Key.UP, ctrl=True)]
        assert decoder.feed("\x1b[3;2~") == [KeyPress(key=Key.DELETE, shift=True)]

    def test_alt_character(self) -> None:
        assert KeyDecoder().feed("\x1bx") == [KeyPress(char="x", alt=True)]

    def test_split_sequence(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("\x1b[") == []
        assert decoder.pending
        assert decoder.feed("C") == [KeyPress(key=Key.RIGHT)]
        assert not decoder.pending

    def test_lone_escape_needs_flush(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("\x1b") == []
        assert decoder.flush() == [KeyPress(key=Key.ESCAPE)]
        assert not decoder.pending

    def test_unknown_sequence_is_dropped(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("\x1b[99zq") == [KeyPress(char="q")]

    def test_bracketed_paste(self) -> None:
        events = KeyDecoder().feed("\x1b[200~one\r\ntwo\x1b[201~x")
        assert events == [Paste("one\ntwo"), KeyPress(char="x")]

    def test_paste_split_across_reads(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("\x1b[200~ab") == []
        assert decoder.in_paste
        assert decoder.feed("c\x1b[20") == []
        assert decoder.feed("1~") == [Paste("abc")]
        assert not decoder.in_paste

    def test_paste_keeps_escape_bytes(self) -> None:
        events = KeyDecoder().feed("\x1b[200~q\x1b[Aw\x1b[201~")
        assert events == [Paste("q\x1b[Aw")]


class TestAnsiText:
    """Tests for width-aware string helpers."""

    def test_visible_len_ignores_escapes(self) -> None:
        assert visible_len("\x1b[1;31mred\x1b[0m") == 3

    def test_wide_characters(self) -> None:
        assert visible_len("日本") == 4
        cut = truncate("日本語テキスト", 5)
        assert visible_len(cut) == 5
        assert strip_ansi(cut).endswith(ELLIPSIS)

    def test_truncate_keeps_short_strings(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("anything", 0) == ""

    def test_fit_pads(self) -> None:
        assert fit("ab", 4) == "ab  "
        assert visible_len(fit("\x1b[7mlonger text\x1b[0m", 6)) == 6

    def test_one_line(self) -> None:
        assert one_line("a\nb\tc") == "a b c"


class TestLayout:
    """Tests for calculate_layout()."""

    def test_all_columns_fit(self) -> None:
        layout = calculate_layout(120, 40, 3)
        assert layout.column_count == 3
        assert layout.column_width == 39
        assert layout.hidden(3) == (0, 0)
        assert layout.activity_height == 4
        assert layout.content_height == 40 - 2 - 4

    def test_width_is_capped(self) -> None:
        assert calculate_layout(200, 40, 2).column_width == 40

    def test_scrolls_to_focused_column(self) -> None:
        layout = calculate_layout(50, 12, 6, focused=5)
        assert layout.column_count == 2
        assert layout.last_column == 6
        assert layout.hidden(6) == (4, 0)
        assert layout.activity_height == 0

    def test_no_lists(self) -> None:
        layout = calculate_layout(80, 24, 0)
        assert layout.column_count == 0
        assert layout.hidden(0) == (0, 0)


class TestStatusBar:
    """Tests for StatusBarWidget."""

    def test_exact_width_with_error(self) -> None:
        bar = StatusBarWidget()
        bar.set_status(StatusLine("Save failed: disk full", "error"))
        bar.set_dirty(True)
        [line] = bar.render(Rect(0, 0, 60, 1))
        assert visible_len(line) == 60
        assert strip_ansi(line).startswith("* Save failed")
        assert "\x1b[1;91m" in line


class TestBoardRenderer:
    """Frames always fill the terminal exactly."""

    def assert_frame(self, lines: list[str], width: int, height: int) -> None:
        assert len(lines) == height
        assert [visible_len(line) for line in lines] == [width] * height

    def test_board_frame(self, loaded_view) -> None:
        view = loaded_view(100, 30)
        lines = BoardRenderer().render(view)
        self.assert_frame(lines, 100, 30)
        text = strip_ansi("\n".join(lines))
        assert "Todo (3)" in text
        assert "Write spec #urgent" in text

    def test_narrow_terminal_hides_columns(self, loaded_view) -> None:
        view = loaded_view(30, 10)
        lines = BoardRenderer().render(view)
        self.assert_frame(lines, 30, 10)
        assert "▶" in strip_ansi(lines[0])

    def test_overlay_frame(self, loaded_view, engine) -> None:
        loaded_view(90, 25)
        engine.handle(KeyPress(char="e"))
        lines = BoardRenderer().render(engine.view())
        self.assert_frame(lines, 90, 25)
        assert "Edit card" in strip_ansi("\n".join(lines))

    def test_wide_titles(self, loaded_view, engine, sample) -> None:
        loaded_view(70, 20)
        engine.execute(CreateCard(sample.done_id, "日本語のタスクを書く、とても長いタイトル"))
        engine.handle(KeyPress(char="l"))
        self.assert_frame(BoardRenderer().render(engine.view()), 70, 20)

    def test_empty_state_frame(self, engine) -> None:
        engine.start(reset=True, check_updates=False)
        view = engine.handle(Resize(40, 8))
        lines = BoardRenderer().render(view)
        self.assert_frame(lines, 40, 8)
        assert "No boards" in strip_ansi(lines[1])

    def test_help_overlay_is_clipped(self, loaded_view, engine) -> None:
        loaded_view(80, 12)
        engine.handle(KeyPress(char="?"))
        self.assert_frame(BoardRenderer().render(engine.view()), 80, 12)


class TestCommands:
    """Tests for the Typer commands that do not take over the terminal."""

    def test_info_table(self, sample, save_path) -> None:
        save_state(sample.state, save_path)
        result = runner.invoke(create_app(), ["info", "--path", str(save_path)])
        assert result.exit_code == 0
        assert "Work" in result.stdout

    def test_info_json(self, sample, save_path) -> None:
        CreateList(sample.board_id, "Later").apply(sample.state)
        save_state(sample.state, save_path)
        result = runner.invoke(create_app(), ["info", "--path", str(save_path), "--json"])
        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        assert summary["boards"] == 1
        assert summary["lists"] == 3
        assert summary["cards"] == 3
        assert summary["schema_version"] == SCHEMA_VERSION

    def test_info_missing_file(self, tmp_path) -> None:
        result = runner.invoke(create_app(), ["info", "--path", str(tmp_path / "none.kanban")])
        assert result.exit_code == 1

    def test_info_corrupt_file(self, save_path) -> None:
        save_path.write_bytes(b"garbage!garbage!")
        result = runner.invoke(create_app(), ["info", "--path", str(save_path)])
        assert result.exit_code == 1

    def test_export(self, sample, save_path, tmp_path) -> None:
        save_state(sample.state, save_path)
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        result = runner.invoke(create_app(), [
            "export", "--path", str(save_path), "--output", str(out_dir),
        ])
        assert result.exit_code == 0
        exported = json.loads((out_dir / "kanban_export.json").read_text(encoding="utf-8"))
        assert exported["boards"][0]["lists"][0]["cards"][0]["title"] == "Write spec"

    def test_info_notes_older_format(self, sample, save_path) -> None:
        data = state_to_bytes(sample.state)
        save_path.write_bytes(SaveHeader(schema_version=2).to_bytes() + data[8:])
        result = runner.invoke(create_app(), ["info", "--path", str(save_path)], env={"COLUMNS": "200"})
        assert result.exit_code == 0
        assert "upgraded on the next save" in result.stdout

    def test_keys_write_then_list(self, tmp_path) -> None:
        target = tmp_path / "conf" / "keybindings.json"
        env = {"TUI_KANBAN_KEYBINDINGS_PATH": str(target), "COLUMNS": "200"}
        result = runner.invoke(create_app(), ["keys", "--write"], env=env)
        assert result.exit_code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["mark_completed"] == ["1"]

        # Refuses to replace an edited file without --force
        assert runner.invoke(create_app(), ["keys", "--write"], env=env).exit_code == 1

        result = runner.invoke(create_app(), ["keys"], env=env)
        assert result.exit_code == 0
        assert "cycle_priority" in result.stdout

    def test_keys_with_overlap(self, tmp_path) -> None:
        target = tmp_path / "keybindings.json"
        target.write_text(json.dumps({"undo": ["q"]}), encoding="utf-8")
        result = runner.invoke(create_app(), ["keys"], env={"TUI_KANBAN_KEYBINDINGS_PATH": str(target)})
        assert result.exit_code == 1
