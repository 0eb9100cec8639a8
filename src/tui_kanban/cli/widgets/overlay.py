"""Centered box for prompts, the card editor, search, confirmations and help."""

from __future__ import annotations

from tui_kanban.cli.core.ansi_text import fit, one_line, visible_len
from tui_kanban.cli.widgets.base import BaseWidget, Rect, styled, styled_spans
from tui_kanban.engine.viewmodel import ListView, Node, Panel, TextInput, TextSpan

BORDER_STYLE = "\x1b[36m"
RESET = "\x1b[0m"


def _input_line(node: TextInput, width: int) -> str:
    label = f"{node.label}: "
    value = one_line(node.value)
    cursor = min(node.cursor, len(value))
    room = max(1, width - visible_len(label) - 1)
    before, after = value[:cursor], value[cursor:]
    if len(before) > room:
        before = before[-room:]
    if not node.focused:
        return f"\x1b[90m{label}{RESET}{before}{after}"
    under = after[:1] or " "
    return f"\x1b[1m{label}{RESET}{before}\x1b[7m{under}{RESET}{after[1:]}"


class OverlayWidget(BaseWidget):
    """A bordered panel drawn over the board."""

    def __init__(self) -> None:
        self._panel = Panel("")

    def set_panel(self, panel: Panel) -> None:
        self._panel = panel

    def content_lines(self, width: int) -> list[str]:
        lines: list[str] = []
        for child in self._panel.children:
            lines.extend(self._node_lines(child, width))
        return lines

    def _node_lines(self, node: Node, width: int) -> list[str]:
        if isinstance(node, TextInput):
            return [_input_line(node, width)]
        if isinstance(node, TextSpan):
            return [styled(node)]
        if isinstance(node, ListView):
            return [
                styled_spans(item.spans, highlight=index == node.selected)
                for index, item in enumerate(node.items)
            ]
        if isinstance(node, Panel):
            lines = [f"\x1b[1m{node.title.upper()}{RESET}"]
            for child in node.children:
                lines.extend("  " + line for line in self._node_lines(child, width - 2))
            lines.append("")
            return lines
        return []

    def render(self, bounds: Rect) -> list[str]:
        inner = max(1, bounds.width - 4)
        body = self.content_lines(inner)
        max_body = max(0, bounds.height - 2)
        if len(body) > max_body:
            body = body[:max_body]

        title = f" {one_line(self._panel.title)} "
        top_fill = max(0, inner + 2 - visible_len(title) - 1)
        lines = [f"{BORDER_STYLE}┌─{RESET}\x1b[1m{fit(title, min(visible_len(title), inner))}"
                 f"{RESET}{BORDER_STYLE}{'─' * top_fill}┐{RESET}"]
        for line in body:
            lines.append(f"{BORDER_STYLE}│{RESET} {fit(line, inner)} {BORDER_STYLE}│{RESET}")
        lines.append(f"{BORDER_STYLE}└{'─' * (inner + 2)}┘{RESET}")
        return lines
