"""tksheet binding for a GridStore.

Renders the store's display rows into a Sheet and routes user edits back
into the store. Column 0 holds the selection checkbox; every grid column
follows in order.
"""

from __future__ import annotations

import tkinter as tk
from typing import TYPE_CHECKING, Any

from tksheet import Sheet

from ..data.grid_store import CELL_CHANGED, SELECTION_CHANGED, VIEW_CHANGED, GridStore
from ..models.constants import DataType
from ..utils.debug_trace import logger, perf_timer

if TYPE_CHECKING:
    from ..models.column import Column
    from ..models.display import DisplayRow

# Column indices
COL_SELECTED = 0
FIRST_FIELD_COL = 1

# Background for cells edited since load/reset
COLOR_EDITED_BG = "#fff4c2"


def create_sheet(parent: tk.Widget, headers: list[str]) -> Sheet:
    """Build a Sheet configured for grid editing (no sorting or column moves)."""
    sheet = Sheet(parent, headers=headers, show_row_index=True, height=480, width=960)
    sheet.enable_bindings()
    sheet.disable_bindings(
        "column_drag_and_drop",
        "row_drag_and_drop",
        "rc_select_column",
        "rc_insert_column",
        "rc_delete_column",
        "rc_insert_row",
        "rc_delete_row",
        "sort_cells",
        "sort_row",
        "sort_column",
        "sort_rows",
        "sort_columns",
        "undo",
    )
    return sheet


class GridSheetBinder:
    """Keeps a Sheet in sync with a GridStore.

    Usage:
        binder = GridSheetBinder(store, create_sheet(frame, GridSheetBinder.headers_for(store)))
        binder.sheet.pack(fill=tk.BOTH, expand=True)
        binder.refresh()
    """

    def __init__(self, store: GridStore, sheet: Sheet) -> None:
        self.store = store
        self.sheet = sheet

        # Sheet row index -> row id, for the rows currently materialised
        self._row_ids: list[str] = []
        self._row_positions: dict[str, int] = {}

        # Set while we write to the sheet so our own writes are not treated as edits
        self._suppress_notifications = False

        store.add_observer(CELL_CHANGED, self._on_cell_changed)
        store.add_observer(SELECTION_CHANGED, self._on_selection_changed)
        store.add_observer(VIEW_CHANGED, self.refresh)
        sheet.bind("<<SheetModified>>", self._on_sheet_modified)

    @staticmethod
    def headers_for(store: GridStore) -> list[str]:
        return ["", *[col.label for col in store.columns]]

    def detach(self) -> None:
        """Stop listening to the store."""
        self.store.remove_observer(CELL_CHANGED, self._on_cell_changed)
        self.store.remove_observer(SELECTION_CHANGED, self._on_selection_changed)
        self.store.remove_observer(VIEW_CHANGED, self.refresh)

    # --- Rendering ---

    @staticmethod
    def _sheet_value(value: Any, data_type: DataType) -> Any:
        if data_type is DataType.BOOLEAN:
            return bool(value)
        return "" if value is None else value

    def _build_row_data(self, row: DisplayRow) -> list[Any]:
        return [row.is_selected, *[self._sheet_value(c.value, c.data_type) for c in row.cells]]

    def refresh(self) -> None:
        """Re-render the materialised rows."""
        rows = self.store.display_rows()
        self._row_ids = [row.row_id for row in rows]
        self._row_positions = {row_id: i for i, row_id in enumerate(self._row_ids)}

        self._suppress_notifications = True
        try:
            with perf_timer("sheet refresh", row_count=len(rows)):
                self._apply_edit_mode()
                # Highlights are tied to sheet positions, not rows
                self.sheet.dehighlight_all()
                self.sheet.headers(self.headers_for(self.store))
                self.sheet.set_sheet_data(
                    [self._build_row_data(row) for row in rows], reset_col_positions=False
                )
                self.sheet.set_index_data([str(row.index + 1) for row in rows])
                self._apply_cell_widgets(rows)
        finally:
            self._suppress_notifications = False

    def _apply_edit_mode(self) -> None:
        if self.store.inline_edit_mode:
            self.sheet.enable_bindings("edit_cell")
        else:
            self.sheet.disable_bindings("edit_cell")

    def _apply_cell_widgets(self, rows: list[DisplayRow]) -> None:
        """Checkboxes for selection and boolean cells, highlight for edited cells."""
        for r, row in enumerate(rows):
            self.sheet.create_checkbox(r=r, c=COL_SELECTED, checked=row.is_selected, text="")
            for offset, cell in enumerate(row.cells):
                c = FIRST_FIELD_COL + offset
                if cell.data_type is DataType.BOOLEAN:
                    self.sheet.create_checkbox(r=r, c=c, checked=bool(cell.value), text="")
                if cell.is_edited:
                    self.sheet.highlight_cells(row=r, column=c, bg=COLOR_EDITED_BG)

    # --- Store Notifications ---

    def _on_cell_changed(self, row_id: str, field_id: str, _old: Any, new: Any) -> None:
        r = self._row_positions.get(row_id)
        if r is None:
            return
        for offset, col in enumerate(self.store.columns):
            if col.field_id == field_id:
                c = FIRST_FIELD_COL + offset
                self._suppress_notifications = True
                try:
                    self.sheet.set_cell_data(r, c, self._sheet_value(new, col.data_type))
                    self.sheet.highlight_cells(row=r, column=c, bg=COLOR_EDITED_BG)
                finally:
                    self._suppress_notifications = False
                return

    def _on_selection_changed(self, selected_ids: list[str]) -> None:
        selected = set(selected_ids)
        self._suppress_notifications = True
        try:
            for r, row_id in enumerate(self._row_ids):
                self.sheet.set_cell_data(r, COL_SELECTED, row_id in selected)
        finally:
            self._suppress_notifications = False

    # --- Sheet Events ---

    def _on_sheet_modified(self, event) -> None:
        """Route table edits to the store."""
        if self._suppress_notifications:
            return

        cells = getattr(event, "cells", None)
        if not cells:
            return

        table_cells = cells.get("table", {})
        columns = self.store.columns

        for (r, c), _old_value in table_cells.items():
            if r >= len(self._row_ids):
                continue
            row_id = self._row_ids[r]
            value = self.sheet.get_cell_data(r, c)

            if c == COL_SELECTED:
                self.store.select_row(row_id, bool(value))
                continue

            offset = c - FIRST_FIELD_COL
            if 0 <= offset < len(columns):
                column = columns[offset]
                if not self.store.edit_cell(row_id, column.field_id, value):
                    self._restore_cell(r, c, row_id, column)
            else:
                logger.debug(f"Ignoring edit in unknown column {c}")

    def _restore_cell(self, r: int, c: int, row_id: str, column: Column) -> None:
        """Put back the stored value after a rejected edit (e.g. a boolean checkbox click)."""
        row = self.store.get_row(row_id)
        if row is None:
            return
        self._suppress_notifications = True
        try:
            self.sheet.set_cell_data(
                r, c, self._sheet_value(row.get(column.field_id), column.data_type)
            )
        finally:
            self._suppress_notifications = False

    def on_scrollbar(self, fraction: float, viewport_height: float | None = None) -> bool:
        """Translate a scrollbar position (0.0-1.0) into a window update.

        Returns:
            True if the store materialised a different range.
        """
        total_height = self.store.visible_row_count * self.store.settings.row_height
        offset = max(0.0, min(1.0, fraction)) * total_height
        return self.store.on_scroll(offset, viewport_height)

    # --- Focus ---

    def sheet_position(self, row_id: str, field_id: str) -> tuple[int, int] | None:
        """Sheet (row, column) for a cell, or None if it is not materialised."""
        r = self._row_positions.get(row_id)
        if r is None:
            return None
        for offset, col in enumerate(self.store.columns):
            if col.field_id == field_id:
                return r, FIRST_FIELD_COL + offset
        return None

    def move_focus(self, row_id: str, field_id: str, down: bool = True) -> bool:
        """Select the cell one visible row below (or above) the given cell.

        Returns:
            False at the edges or when the target is outside the window.
        """
        target = (
            self.store.cell_below(row_id, field_id)
            if down
            else self.store.cell_above(row_id, field_id)
        )
        if target is None:
            return False
        position = self.sheet_position(*target)
        if position is None:
            return False
        self.sheet.see(*position)
        self.sheet.select_cell(*position)
        return True
