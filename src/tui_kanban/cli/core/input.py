"""Keyboard input: raw terminal bytes to engine events."""

from __future__ import annotations

import os
import select
import sys
import time
from typing import Optional

from tui_kanban.engine.events import InputEvent, Key, KeyPress, Paste

ESC = "\x1b"
PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"

# xterm modifier parameter minus one is a bit mask
_SHIFT, _ALT, _CTRL = 1, 2, 4


class KeyDecoder:
    """
    Incremental decoder for terminal input.

    feed() accepts text as it arrives and returns the events that are
    complete. A lone ESC stays pending because it may start a sequence;
    flush() turns whatever is pending into events once the caller has
    waited long enough.
    """

    # Escape sequence mappings (without the \x1b prefix)
    SEQUENCES: dict[str, Key] = {
        # Arrow keys (CSI)
        '[A': Key.UP,
        '[B': Key.DOWN,
        '[C': Key.RIGHT,
        '[D': Key.LEFT,
        # Arrow keys (SS3 - application mode)
        'OA': Key.UP,
        'OB': Key.DOWN,
        'OC': Key.RIGHT,
        'OD': Key.LEFT,
        # Navigation
        '[H': Key.HOME,
        '[F': Key.END,
        'OH': Key.HOME,
        'OF': Key.END,
        '[1~': Key.HOME,
        '[4~': Key.END,
        '[5~': Key.PAGE_UP,
        '[6~': Key.PAGE_DOWN,
        '[2~': Key.INSERT,
        '[3~': Key.DELETE,
        '[Z': Key.BACKTAB,
        # Function keys
        'OP': Key.F1,
        'OQ': Key.F2,
        '[15~': Key.F5,
        '[21~': Key.F10,
    }

    SIMPLE_KEYS: dict[str, Key] = {
        '\r': Key.ENTER,
        '\n': Key.ENTER,
        '\t': Key.TAB,
        '\x7f': Key.BACKSPACE,
        '\x08': Key.BACKSPACE,
    }

    def __init__(self) -> None:
        self._buffer = ""
        self._paste: Optional[list[str]] = None

    @property
    def pending(self) -> bool:
        return bool(self._buffer) or self._paste is not None

    @property
    def in_paste(self) -> bool:
        return self._paste is not None

    def feed(self, text: str) -> list[InputEvent]:
        self._buffer += text
        events: list[InputEvent] = []
        while self._buffer:
            if self._paste is not None:
                if not self._take_paste(events):
                    break
                continue
            if self._buffer.startswith(PASTE_START):
                self._buffer = self._buffer[len(PASTE_START):]
                self._paste = []
                continue
            if self._buffer[0] == ESC:
                event = self._take_escape()
                if event is None:
                    break
                if isinstance(event, KeyPress):
                    events.append(event)
                continue
            event = self._take_simple()
            if event is not None:
                events.append(event)
        return events

    def flush(self) -> list[InputEvent]:
        """Resolve input held back while waiting for more bytes."""
        events: list[InputEvent] = []
        if self._paste is not None:
            self._paste.append(self._buffer)
            events.append(Paste("".join(self._paste)))
            self._paste = None
            self._buffer = ""
            return events
        while self._buffer:
            if self._buffer[0] == ESC:
                if len(self._buffer) == 1:
                    self._buffer = ""
                    events.append(KeyPress(key=Key.ESCAPE))
                    continue
                # Incomplete sequence: drop it
                self._buffer = ""
                break
            events.extend(self.feed(""))
            break
        return events

    # -------------------------------------------------------------------------
    # Decoding steps
    # -------------------------------------------------------------------------

    def _take_paste(self, events: list[InputEvent]) -> bool:
        end = self._buffer.find(PASTE_END)
        if end < 0:
            # Keep a possible partial end marker in the buffer
            keep = 0
            for size in range(1, len(PASTE_END)):
                if self._buffer.endswith(PASTE_END[:size]):
                    keep = size
            cut = len(self._buffer) - keep
            self._paste.append(self._buffer[:cut])
            self._buffer = self._buffer[cut:]
            return False
        self._paste.append(self._buffer[:end])
        self._buffer = self._buffer[end + len(PASTE_END):]
        text = "".join(self._paste).replace("\r\n", "\n").replace("\r", "\n")
        self._paste = None
        events.append(Paste(text))
        return True

    def _take_simple(self) -> Optional[KeyPress]:
        ch = self._buffer[0]
        self._buffer = self._buffer[1:]
        if ch in self.SIMPLE_KEYS:
            return KeyPress(key=self.SIMPLE_KEYS[ch])
        if "\x01" <= ch <= "\x1a":
            return KeyPress.ctrl_key(chr(ord(ch) + 96))
        if ch.isprintable():
            return KeyPress(char=ch)
        # Unknown control character
        return None

    def _take_escape(self) -> Optional[KeyPress | bool]:
        """
        Parse the escape sequence at the start of the buffer.

        Returns None when more input is needed and False when an unknown
        sequence was consumed.
        """
        rest = self._buffer[1:]
        if not rest:
            return None
        if rest[0] == ESC:
            self._buffer = self._buffer[1:]
            return KeyPress(key=Key.ESCAPE)
        if rest[0] not in "[O":
            # Alt + key
            self._buffer = self._buffer[2:]
            if rest[0].isprintable():
                return KeyPress(char=rest[0], alt=True)
            return False
        if rest.startswith("[2") and PASTE_START[1:].startswith(rest) and len(rest) < 5:
            return None

        end_idx = 0
        for i, ch in enumerate(rest[1:], start=1):
            if ch == ESC:
                end_idx = i
                break
            if ch.isalpha() or ch == '~':
                end_idx = i + 1
                break
        if end_idx == 0:
            return None

        seq = rest[:end_idx]
        self._buffer = self._buffer[1 + end_idx:]
        if seq in self.SEQUENCES:
            return KeyPress(key=self.SEQUENCES[seq])
        return self._modified(seq)

    def _modified(self, seq: str) -> KeyPress | bool:
        # CSI 1;<mod><final> or CSI <n>;<mod>~
        if not seq.startswith("[") or ";" not in seq:
            return False
        params, final = seq[1:-1], seq[-1]
        number, _, modifier = params.partition(";")
        try:
            mask = int(modifier) - 1
        except ValueError:
            return False
        base = f"[{final}" if final != "~" else f"[{number}~"
        key = self.SEQUENCES.get(base)
        if key is None:
            return False
        return KeyPress(
            key=key,
            shift=bool(mask & _SHIFT),
            alt=bool(mask & _ALT),
            ctrl=bool(mask & _CTRL),
        )


class InputReader:
    """
    Non-blocking keyboard reader for the interactive loop.

    Uses os.read() to bypass Python's I/O buffering and waits briefly for
    the rest of an escape sequence that arrives split across reads.
    """

    ESCAPE_WAIT = 0.05

    def __init__(self, fd: Optional[int] = None) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._decoder = KeyDecoder()
        self._events: list[InputEvent] = []

    def read(self, timeout: float = 0.1) -> Optional[InputEvent]:
        """Next event, or None if nothing arrived within timeout."""
        if self._events:
            return self._events.pop(0)
        if not self._has_input(timeout):
            return None
        self._events.extend(self._decoder.feed(self._read_available()))

        deadline = time.monotonic() + self.ESCAPE_WAIT
        while self._decoder.pending and time.monotonic() < deadline:
            if self._has_input(max(0.0, deadline - time.monotonic())):
                self._events.extend(self._decoder.feed(self._read_available()))
        if self._decoder.pending and not self._decoder.in_paste:
            self._events.extend(self._decoder.flush())
        return self._events.pop(0) if self._events else None

    def _read_available(self) -> str:
        try:
            data = os.read(self._fd, 4096)
        except (OSError, BlockingIOError):
            return ""
        return data.decode('utf-8', errors='replace')

    def _has_input(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            return bool(ready)
        except (ValueError, OSError):
            return False
