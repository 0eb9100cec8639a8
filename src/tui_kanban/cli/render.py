"""Turns a ViewModel into terminal lines."""

from __future__ import annotations

from tui_kanban.cli.core.ansi_text import fit
from tui_kanban.cli.core.layout import COLUMN_GAP, BoardLayout, calculate_layout
from tui_kanban.cli.widgets.base import Rect, styled
from tui_kanban.cli.widgets.list_column import ListColumnWidget
from tui_kanban.cli.widgets.overlay import OverlayWidget
from tui_kanban.cli.widgets.status_bar import Shortcut, StatusBarWidget
from tui_kanban.engine.viewmodel import Panel, TextSpan, ViewModel

OVERLAY_MAX_WIDTH = 72
HEADER_STYLE = "\x1b[1;44;97m"


class BoardRenderer:
    """
    Draws frames for the interactive board.

    Widgets are kept between frames so list columns remember their
    scroll position.
    """

    def __init__(self) -> None:
        self._columns: list[ListColumnWidget] = []
        self._status_bar = StatusBarWidget()
        self._overlay = OverlayWidget()

    def render(self, view: ViewModel) -> list[str]:
        width, height = view.size
        columns = [child for child in view.body.children if isinstance(child, Panel)]
        focused = next((i for i, c in enumerate(columns) if c.focused), 0)
        layout = calculate_layout(width, height, len(columns), focused)

        left, right = layout.hidden(len(columns))
        title = view.title
        if left:
            title = f"◀ {left}  {title}"
        if right:
            title = f"{title}  {right} ▶"
        lines = [fit(f"{HEADER_STYLE} {title}", width) + "\x1b[0m"]

        body_height = layout.content_height
        if columns:
            lines.extend(self._render_columns(columns, layout, body_height))
        else:
            lines.extend(self._render_message(view.body, width, body_height))

        if layout.activity_height:
            lines.append(fit("\x1b[90m" + "─" * width, width) + "\x1b[0m")
            entries = list(view.activity[:layout.activity_height - 1])
            for span in entries:
                lines.append(fit(" " + styled(span), width))
            lines.extend(" " * width for _ in range(layout.activity_height - 1 - len(entries)))

        self._status_bar.set_status(view.status)
        self._status_bar.set_dirty(view.dirty)
        self._status_bar.set_shortcuts([Shortcut(key, label) for key, label in view.hints])
        lines.extend(self._status_bar.render(Rect(0, height - 1, width, 1)))

        if view.overlay is not None:
            self._draw_overlay(lines, view.overlay, width, height)
        return lines[:height]

    def _render_columns(self, columns: list[Panel], layout: BoardLayout, height: int) -> list[str]:
        while len(self._columns) < len(columns):
            self._columns.append(ListColumnWidget())

        rendered = []
        for index in range(layout.first_column, layout.last_column):
            widget = self._columns[index]
            widget.set_panel(columns[index])
            rendered.append(widget.render(Rect(0, 1, layout.column_width, height)))

        gap = " " * COLUMN_GAP
        rows = []
        for row in range(height):
            line = gap.join(column[row] for column in rendered)
            rows.append(fit(line, layout.term_width))
        return rows

    @staticmethod
    def _render_message(panel: Panel, width: int, height: int) -> list[str]:
        rows = [fit(f"\x1b[1m {panel.title}\x1b[0m", width)]
        for child in panel.children:
            if isinstance(child, TextSpan):
                rows.append(fit(" " + styled(child), width))
        rows = rows[:height]
        rows.extend(" " * width for _ in range(height - len(rows)))
        return rows

    def _draw_overlay(self, lines: list[str], panel: Panel, width: int, height: int) -> None:
        self._overlay.set_panel(panel)
        box_width = min(width, OVERLAY_MAX_WIDTH)
        box = self._overlay.render(Rect(0, 0, box_width, max(3, height - 2)))
        x = max(0, (width - box_width) // 2)
        y = max(1, (height - len(box)) // 2)
        for offset, box_line in enumerate(box):
            row = y + offset
            if row >= len(lines) - 1:
                break
            lines[row] = fit(" " * x + box_line, width)
