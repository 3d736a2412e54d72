"""Windowed rendering range for long visible-row lists.

Only rows in [start_index, end_index) are materialised. Padding of
start_index * row_height above and (total - end_index) * row_height below
keeps the scrollbar proportional to the full list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..models.constants import (
    INITIAL_WINDOW_ROWS,
    ROW_HEIGHT,
    VIRTUAL_SCROLL_BUFFER,
    VIRTUAL_SCROLL_THRESHOLD,
)
from ..utils.debug_trace import logger


@dataclass(frozen=True)
class WindowRange:
    start_index: int
    end_index: int

    def __len__(self) -> int:
        return max(0, self.end_index - self.start_index)


def compute_window(
    scroll_offset: float,
    viewport_height: float,
    row_height: int,
    total_visible_rows: int,
    buffer_rows: int,
) -> WindowRange:
    """Compute the index range to materialise for a scroll position.

    Examples:
        - offset 3200, viewport 640, row 32, total 1000, buffer 20 -> [80, 140)
        - offset 0 -> start 0 (never negative)
    """
    total = max(0, total_visible_rows)
    start = max(0, math.floor(scroll_offset / row_height) - buffer_rows)
    start = min(start, total)
    visible_count = math.ceil(viewport_height / row_height)
    end = min(total, start + visible_count + 2 * buffer_rows)
    return WindowRange(start, end)


class VirtualWindow:
    """Tracks the current window and suppresses no-op recomputations.

    Windowing is active only while the visible row count exceeds the
    threshold; below it every visible row is materialised.
    """

    def __init__(
        self,
        row_height: int = ROW_HEIGHT,
        buffer_rows: int = VIRTUAL_SCROLL_BUFFER,
        threshold: int = VIRTUAL_SCROLL_THRESHOLD,
        initial_rows: int = INITIAL_WINDOW_ROWS,
    ) -> None:
        self.row_height = row_height
        self.buffer_rows = buffer_rows
        self.threshold = threshold
        self.initial_rows = initial_rows
        self._range = WindowRange(0, 0)

    @property
    def start_index(self) -> int:
        return self._range.start_index

    @property
    def end_index(self) -> int:
        return self._range.end_index

    @property
    def range(self) -> WindowRange:
        return self._range

    def is_active(self, total_visible_rows: int) -> bool:
        return total_visible_rows > self.threshold

    def reset(self, total_visible_rows: int) -> None:
        """Return to the top: [0, min(initial_rows + buffer, total))."""
        self._range = WindowRange(
            0, min(self.initial_rows + self.buffer_rows, max(0, total_visible_rows))
        )

    def update(self, scroll_offset: float, viewport_height: float, total_visible_rows: int) -> bool:
        """Recompute for a scroll event.

        Returns:
            True if the range changed; False leaves state untouched.
        """
        new_range = compute_window(
            scroll_offset, viewport_height, self.row_height, total_visible_rows, self.buffer_rows
        )
        if new_range == self._range:
            return False
        self._range = new_range
        logger.debug(f"Window: [{new_range.start_index}, {new_range.end_index})")
        return True

    def effective_range(self, total_visible_rows: int) -> WindowRange:
        """Range to render: the window when active, else every row."""
        if not self.is_active(total_visible_rows):
            return WindowRange(0, total_visible_rows)
        end = min(self._range.end_index, total_visible_rows)
        return WindowRange(min(self._range.start_index, end), end)

    def top_padding(self, total_visible_rows: int) -> int:
        if not self.is_active(total_visible_rows):
            return 0
        return self.effective_range(total_visible_rows).start_index * self.row_height

    def bottom_padding(self, total_visible_rows: int) -> int:
        if not self.is_active(total_visible_rows):
            return 0
        rng = self.effective_range(total_visible_rows)
        return (total_visible_rows - rng.end_index) * self.row_height
