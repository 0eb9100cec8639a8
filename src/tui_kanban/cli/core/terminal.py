"""Low-level terminal operations for the interactive board."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions."""
    rows: int
    cols: int


class Terminal:
    """Terminal I/O for the full-screen UI."""

    @staticmethod
    def size() -> TerminalSize:
        try:
            size = os.get_terminal_size()
            return TerminalSize(size.lines, size.columns)
        except OSError:
            return TerminalSize(24, 80)

    @staticmethod
    def write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    @staticmethod
    def draw(lines: list[str]) -> None:
        """Replace the screen with lines in a single write."""
        out = ['\x1b[?2026h', '\x1b[H']
        for row, line in enumerate(lines, start=1):
            out.append(f'\x1b[{row};1H{line}\x1b[0m\x1b[K')
        out.append('\x1b[J\x1b[?2026l')
        Terminal.write(''.join(out))

    @staticmethod
    @contextmanager
    def raw_mode() -> Iterator[None]:
        """Raw input mode (Unix only)."""
        try:
            import termios
            import tty
        except ImportError:
            # Windows or no termios
            yield
            return
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    @staticmethod
    @contextmanager
    def alternate_screen() -> Iterator[None]:
        """Use the alternate screen buffer (preserves scrollback)."""
        Terminal.write('\x1b[?1049h')
        try:
            yield
        finally:
            Terminal.write('\x1b[?1049l')

    @staticmethod
    @contextmanager
    def bracketed_paste() -> Iterator[None]:
        """Have the terminal mark pasted text so it arrives as one event."""
        Terminal.write('\x1b[?2004h')
        try:
            yield
        finally:
            Terminal.write('\x1b[?2004l')

    @staticmethod
    @contextmanager
    def managed_mode() -> Iterator[None]:
        """Full TUI mode: alternate screen, hidden cursor, raw input, paste marks."""
        with Terminal.alternate_screen():
            Terminal.write('\x1b[?25l')
            try:
                with Terminal.raw_mode(), Terminal.bracketed_paste():
                    yield
            finally:
                Terminal.write('\x1b[?25h\x1b[0m')
