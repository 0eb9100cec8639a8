"""Column layout for the board screen.

Lists are shown side by side. When they do not all fit at the minimum
column width, a window of columns around the focused list is shown and
the rest are reported as hidden to the left or right.
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_COLUMN_WIDTH = 20
MAX_COLUMN_WIDTH = 40
COLUMN_GAP = 1
HEADER_HEIGHT = 1
STATUS_HEIGHT = 1
ACTIVITY_MIN_ROWS = 20  # terminals shorter than this get no activity strip
ACTIVITY_HEIGHT = 4


@dataclass
class BoardLayout:
    """Computed dimensions for the current terminal size."""
    term_width: int
    term_height: int
    first_column: int  # index of the leftmost visible list
    column_count: int  # lists shown
    column_width: int
    activity_height: int

    @property
    def content_height(self) -> int:
        """Rows available for list columns."""
        return max(
            0, self.term_height - HEADER_HEIGHT - STATUS_HEIGHT - self.activity_height,
        )

    @property
    def last_column(self) -> int:
        return self.first_column + self.column_count

    def hidden(self, total: int) -> tuple[int, int]:
        """Lists hidden to the (left, right)."""
        return self.first_column, max(0, total - self.last_column)


def calculate_layout(
    term_width: int,
    term_height: int,
    list_count: int,
    focused: int = 0,
) -> BoardLayout:
    """Fit list_count columns into the terminal, keeping `focused` visible."""
    activity = ACTIVITY_HEIGHT if term_height >= ACTIVITY_MIN_ROWS else 0
    if list_count <= 0:
        return BoardLayout(term_width, term_height, 0, 0, term_width, activity)

    fits = max(1, (term_width + COLUMN_GAP) // (MIN_COLUMN_WIDTH + COLUMN_GAP))
    count = min(list_count, fits)
    width = (term_width - COLUMN_GAP * (count - 1)) // count
    width = max(1, min(width, MAX_COLUMN_WIDTH))

    # Window of `count` columns that contains the focused one
    focused = max(0, min(focused, list_count - 1))
    first = min(max(0, focused - count // 2), list_count - count)
    return BoardLayout(term_width, term_height, first, count, width, activity)
