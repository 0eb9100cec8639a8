"""One board list drawn as a column of cards."""

from __future__ import annotations

from tui_kanban.cli.core.ansi_text import fit
from tui_kanban.cli.widgets.base import BaseWidget, Rect, styled, styled_spans
from tui_kanban.engine.viewmodel import ListView, Panel, TextSpan


class ListColumnWidget(BaseWidget):
    """
    Title row plus one row per card.

    Long lists scroll so the selected card stays visible; the scroll
    offset is kept between frames to avoid jumping.
    """

    def __init__(self) -> None:
        self._panel = Panel("")
        self._scroll = 0

    def set_panel(self, panel: Panel) -> None:
        self._panel = panel

    def render(self, bounds: Rect) -> list[str]:
        panel = self._panel
        width, height = bounds.width, bounds.height
        if height <= 0:
            return []

        title_style = "\x1b[1;4m" if panel.focused else "\x1b[1m"
        lines = [fit(f"{title_style}{panel.title}\x1b[0m", width)]

        rows: list[str] = []
        selected = None
        for child in panel.children:
            if isinstance(child, ListView):
                for index, item in enumerate(child.items):
                    is_selected = child.selected == index
                    if is_selected:
                        selected = len(rows)
                    rows.append(styled_spans(item.spans, highlight=is_selected))
            elif isinstance(child, TextSpan):
                rows.append(styled(child))

        visible = height - 1
        if selected is not None:
            if selected < self._scroll:
                self._scroll = selected
            elif selected >= self._scroll + visible:
                self._scroll = selected - visible + 1
        self._scroll = max(0, min(self._scroll, max(0, len(rows) - visible)))

        for row in rows[self._scroll:self._scroll + visible]:
            lines.append(fit(row, width))
        while len(lines) < height:
            lines.append(" " * width)
        return lines
