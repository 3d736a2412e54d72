"""Engine configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .models.constants import (
    DEFAULT_ID_FIELD,
    DEFAULT_VIEWPORT_HEIGHT,
    INITIAL_WINDOW_ROWS,
    ROW_HEIGHT,
    SEARCH_DEBOUNCE_MS,
    VIRTUAL_SCROLL_BUFFER,
    VIRTUAL_SCROLL_THRESHOLD,
)


@dataclass
class GridSettings:
    """Tunables for a GridStore instance.

    Defaults match the module constants; hosts override per instance.
    """

    # Row identifier key in inbound data
    id_field: str = DEFAULT_ID_FIELD

    # Cells are read-only until inline edit mode is switched on
    inline_edit_mode: bool = False

    # Search
    search_debounce_ms: int = SEARCH_DEBOUNCE_MS

    # Windowing
    virtual_scroll_threshold: int = VIRTUAL_SCROLL_THRESHOLD
    virtual_scroll_buffer: int = VIRTUAL_SCROLL_BUFFER
    row_height: int = ROW_HEIGHT
    initial_window_rows: int = INITIAL_WINDOW_ROWS
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT

    def clone(self) -> GridSettings:
        """Create an independent copy."""
        return replace(self)
