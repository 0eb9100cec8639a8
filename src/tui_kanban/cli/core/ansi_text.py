"""Measuring and fitting strings that contain ANSI escape codes.

Widths are terminal cells, so wide characters (CJK, most emoji) count
as two.
"""

from __future__ import annotations

import re

from rich.cells import cell_len, get_character_cell_size

# SGR and cursor sequences
_ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z~]')

ELLIPSIS = "…"
RESET = "\x1b[0m"


def strip_ansi(s: str) -> str:
    return _ANSI_ESCAPE.sub('', s)


def visible_len(s: str) -> int:
    """Cell width of a string, ignoring escape codes."""
    return cell_len(strip_ansi(s))


def truncate(s: str, max_width: int, ellipsis: bool = True) -> str:
    """
    Cut a string to at most max_width cells.

    Escape codes are kept. When text is cut, the last cell becomes an
    ellipsis (if requested) and a reset is appended so colors do not
    bleed into the next column.
    """
    if max_width <= 0:
        return ""
    if visible_len(s) <= max_width:
        return s

    budget = max_width - (1 if ellipsis else 0)
    result: list[str] = []
    width = 0
    pos = 0
    while pos < len(s):
        match = _ANSI_ESCAPE.match(s, pos)
        if match:
            result.append(match.group())
            pos = match.end()
            continue
        size = get_character_cell_size(s[pos])
        if width + size > budget:
            break
        result.append(s[pos])
        width += size
        pos += 1

    if ellipsis:
        result.append(ELLIPSIS)
        width += 1
    # A wide character may leave one cell unfilled
    result.append(' ' * (max_width - width))
    return ''.join(result) + RESET


def fit(s: str, width: int) -> str:
    """Truncate or pad to exactly width cells."""
    s = truncate(s, width)
    return s + ' ' * max(0, width - visible_len(s))


def one_line(text: str) -> str:
    """Flatten newlines and tabs for single-row display."""
    return ' '.join(text.replace('\t', ' ').splitlines())
