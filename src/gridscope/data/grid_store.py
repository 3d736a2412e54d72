"""Grid store: the public engine surface over rows, scope and selection.

The store composes four layers:
- RowStore: original snapshot, working copies and the dirty-cell ledger
- VisibilityEngine: hide/unhide row-scoping intersected with search
- SelectionTracker: checked rows (survives hiding)
- VirtualWindow: slice of visible rows to materialise

Reads flow rows -> visibility -> window -> display rows. Writes go through
edit_cell() or the header BulkEditApplier into RowStore, then out to
cellChanged observers.

All entry points run synchronously on the host's event loop. The only
deferred work is the debounced search commit.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..models.cell_values import coerce_edit_value, format_display_value
from ..models.column import Column, PicklistOption
from ..models.display import DisplayCell, DisplayOption, DisplayRow
from ..models.grid_row import CellKey, GridRow, format_cell_key
from ..services.bulk_edit import BulkEditApplier, CellChange, HeaderEditState
from ..services.navigation import cell_above, cell_below
from ..services.selection_tracker import SelectAllState, SelectionTracker
from ..services.virtual_window import VirtualWindow
from ..services.visibility_engine import VisibilityEngine
from ..settings import GridSettings
from ..utils.debounce import Debouncer, Scheduler
from ..utils.debug_trace import log_perf, logger, perf_timer
from .row_store import MISSING, LoadError, RowStore, build_columns, build_rows

# Observer event names
CELL_CHANGED = "cellChanged"
SELECTION_CHANGED = "selectionChanged"
# Visible rows or window changed; views re-render
VIEW_CHANGED = "viewChanged"
EVENTS = (CELL_CHANGED, SELECTION_CHANGED, VIEW_CHANGED)


class GridStore:
    """State engine behind an editable grid.

    Usage:
        store = GridStore(scheduler=tk_root)
        store.load({"columns": [...], "rows": [...]})
        store.add_observer(CELL_CHANGED, on_cell_changed)

        store.select_row("a1", True)
        store.begin_header_edit("Status__c")
        store.update_header_draft("Closed")
        store.apply_header_edit()       # writes selected visible rows only

        store.search_input("clos")      # committed after the debounce delay
    """

    def __init__(self, settings: GridSettings | None = None, scheduler: Scheduler | None = None):
        """Initialize an empty store.

        Args:
            settings: Engine tunables (defaults used when None)
            scheduler: Object with tkinter-style after()/after_cancel() used to
                debounce search input. Without one, search_input() commits at once.
        """
        self.settings = settings.clone() if settings is not None else GridSettings()

        self._rows = RowStore()
        self._selection = SelectionTracker()
        self._visibility = VisibilityEngine()
        self._window = VirtualWindow(
            row_height=self.settings.row_height,
            buffer_rows=self.settings.virtual_scroll_buffer,
            threshold=self.settings.virtual_scroll_threshold,
            initial_rows=self.settings.initial_window_rows,
        )
        self._header_edit = BulkEditApplier(
            self._rows,
            self._selection,
            self.visible_rows,
            on_cell_changed=self._emit_cell_changed,
        )
        self._debouncer: Debouncer | None = None
        if scheduler is not None:
            self._debouncer = Debouncer(scheduler, self.settings.search_debounce_ms)

        # Observer callbacks by event name
        self._observers: dict[str, list[Callable[..., None]]] = {name: [] for name in EVENTS}

        self._loaded = False
        self._inline_edit_mode = self.settings.inline_edit_mode

    # --- Observers ---

    def add_observer(self, event: str, callback: Callable[..., None]) -> None:
        """Register a callback.

        cellChanged callbacks receive (row_id, field_id, old_value, new_value);
        selectionChanged callbacks receive the selected ids as a list.
        viewChanged callbacks receive no arguments.
        """
        if event not in self._observers:
            raise ValueError(f"unknown event {event!r}")
        if callback not in self._observers[event]:
            self._observers[event].append(callback)

    def remove_observer(self, event: str, callback: Callable[..., None]) -> None:
        callbacks = self._observers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def _notify(self, event: str, *args: Any) -> None:
        for callback in list(self._observers[event]):
            try:
                callback(*args)
            except Exception:
                # One observer's failure must not block the rest
                logger.exception(f"{event} observer {callback!r} failed")

    def _emit_cell_changed(self, change: CellChange) -> None:
        self._notify(
            CELL_CHANGED, change.row_id, change.field_id, change.old_value, change.new_value
        )

    def _emit_selection_changed(self) -> None:
        self._notify(SELECTION_CHANGED, self._selection.snapshot())

    # --- Data Loading ---

    @log_perf
    def load(self, data: Mapping[str, Any]) -> None:
        """Validate and install a new dataset.

        Clears selection, hidden rows, search and the dirty ledger.

        Raises:
            LoadError: If the payload is malformed; existing state is kept.
        """
        try:
            columns, rows = self._parse_payload(data)
        except LoadError as e:
            logger.warning(f"Load rejected: {e}")
            raise

        self._cancel_transients()
        self._rows.load(rows, columns)
        self._selection.deselect_all()
        self._reset_scope()
        self._loaded = True
        logger.info(f"Loaded {len(rows)} rows, {len(columns)} columns")
        self._notify(VIEW_CHANGED)

    def _parse_payload(self, data: Mapping[str, Any]) -> tuple[list[Column], list[GridRow]]:
        if not isinstance(data, Mapping):
            raise LoadError("table data must be a mapping with 'columns' and 'rows'")
        raw_columns = data.get("columns")
        raw_rows = data.get("rows")
        if not isinstance(raw_columns, list):
            raise LoadError("'columns' must be a list")
        if not isinstance(raw_rows, list):
            raise LoadError("'rows' must be a list")
        columns = build_columns(raw_columns, self.settings.id_field)
        rows = build_rows(raw_rows, self.settings.id_field)
        return columns, rows

    def _cancel_transients(self) -> None:
        self._header_edit.cancel()
        if self._debouncer is not None:
            self._debouncer.cancel()

    def _reset_scope(self) -> None:
        self._visibility.reset(self._rows.row_ids, self._rows.columns)
        self._window.reset(len(self._rows))

    @log_perf
    def reset_to_original(self) -> None:
        """Discard all edits and return scope, selection and search to load-time defaults."""
        had_selection = len(self._selection) > 0
        self._cancel_transients()
        self._rows.reset_to_original()
        self._selection.deselect_all()
        self._reset_scope()
        logger.info("Reset to original data")
        if had_selection:
            self._emit_selection_changed()
        self._notify(VIEW_CHANGED)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # --- Snapshots ---

    def get_working_data(self) -> list[dict[str, Any]]:
        """Deep copy of the working rows in the inbound row shape."""
        return [row.to_dict() for row in self._rows.working_rows]

    def get_original_data(self) -> list[dict[str, Any]]:
        """Deep copy of the rows as loaded."""
        return [row.to_dict() for row in self._rows.original_rows]

    def get_modified_rows(self) -> list[dict[str, Any]]:
        """Deep copies of working rows with at least one dirty cell."""
        return [row.to_dict() for row in self._rows.modified_rows()]

    def get_selected_row_ids(self) -> list[str]:
        return self._selection.snapshot()

    def get_edited_cell_keys(self) -> list[str]:
        """Dirty cells as ``"rowId_fieldId"`` strings, in first-edit order."""
        return [format_cell_key(key) for key in self._rows.dirty_keys()]

    def is_cell_edited(self, row_id: str, field_id: str) -> bool:
        return self._rows.is_cell_dirty(row_id, field_id)

    @property
    def columns(self) -> list[Column]:
        return self._rows.columns

    def get_column(self, field_id: str) -> Column | None:
        return self._rows.get_column(field_id)

    def get_row(self, row_id: str) -> dict[str, Any] | None:
        """Copy of one working row, or None if the id is unknown."""
        row = self._rows.get(row_id)
        if row is MISSING:
            return None
        return row.to_dict()

    # --- Visible Rows ---

    def visible_rows(self) -> list[GridRow]:
        """Rows not hidden and matching the search, in original order.

        Single source of truth for select-all, bulk edit scope, windowing
        and rendering.
        """
        return self._visibility.visible_rows(self._rows.working_rows)

    @property
    def total_row_count(self) -> int:
        return len(self._rows)

    @property
    def visible_row_count(self) -> int:
        return len(self.visible_rows())

    @property
    def hidden_row_count(self) -> int:
        return self._visibility.hidden_count

    @property
    def has_hidden_rows(self) -> bool:
        return self._visibility.hidden_count > 0

    @property
    def hidden_rows_message(self) -> str:
        count = self._visibility.hidden_count
        return f"{count} row{'' if count == 1 else 's'} hidden"

    def is_hidden(self, row_id: str) -> bool:
        return self._visibility.is_hidden(row_id)

    # --- Selection ---

    @property
    def has_selected_rows(self) -> bool:
        return len(self._selection) > 0

    def is_selected(self, row_id: str) -> bool:
        return self._selection.is_selected(row_id)

    def select_row(self, row_id: str, checked: bool) -> None:
        """Check or uncheck one row. Unknown ids are ignored."""
        if row_id not in self._rows:
            return
        if checked:
            self._selection.select(row_id)
        else:
            self._selection.deselect(row_id)
        self._emit_selection_changed()

    def toggle_select_all(self, checked: bool) -> None:
        """Select or deselect exactly the current visible rows."""
        visible_ids = [row.id for row in self.visible_rows()]
        if checked:
            self._selection.select_all(visible_ids)
        else:
            self._selection.deselect_all(visible_ids)
        self._emit_selection_changed()

    def select_all_state(self) -> SelectAllState:
        return self._selection.select_all_state(self.visible_rows())

    # --- Row-Scoping ---

    def hide_selected(self) -> int:
        """Hide every selected row, remembering it was selected.

        The selection itself is kept so Unhide All restores it.

        Returns:
            Number of rows newly hidden.
        """
        if len(self._selection) == 0:
            return 0
        hidden = self._visibility.hide(self._selection.snapshot(), lambda _row_id: True)
        if hidden:
            self._window.reset(self.visible_row_count)
            self._notify(VIEW_CHANGED)
        return len(hidden)

    def hide_unselected(self) -> int:
        """Hide every in-scope row that is not selected.

        Returns:
            Number of rows newly hidden.
        """
        to_hide = [
            row_id
            for row_id in self._rows.row_ids
            if self._visibility.is_in_scope(row_id) and not self._selection.is_selected(row_id)
        ]
        hidden = self._visibility.hide(to_hide, self._selection.is_selected)
        if hidden:
            self._window.reset(self.visible_row_count)
            self._notify(VIEW_CHANGED)
        return len(hidden)

    def unhide_all(self) -> None:
        """Restore hidden rows, reselect the ones that were selected and clear search."""
        if self._debouncer is not None:
            self._debouncer.cancel()
        restore = self._visibility.unhide_all()
        # Reselect in row order so selection snapshots stay stable
        newly_selected = [
            row_id
            for row_id in self._rows.row_ids
            if row_id in restore and not self._selection.is_selected(row_id)
        ]
        self._selection.select_all(newly_selected)
        self._window.reset(self.visible_row_count)
        if newly_selected:
            self._emit_selection_changed()
        self._notify(VIEW_CHANGED)

    # --- Search ---

    @property
    def search_term(self) -> str:
        return self._visibility.search_term

    @property
    def has_pending_search(self) -> bool:
        return self._debouncer is not None and self._debouncer.is_pending

    def search_input(self, text: str) -> None:
        """Handle a keystroke in the search box.

        Schedules a single delayed commit; a newer keystroke replaces it.
        """
        if self._debouncer is None:
            self.set_search_term(text)
            return
        self._debouncer.schedule(lambda: self.set_search_term(text))

    def set_search_term(self, text: str) -> None:
        """Commit a search term now and scroll the window back to the top."""
        self._visibility.set_search_term(text)
        with perf_timer("search commit", row_count=len(self._rows)):
            count = self.visible_row_count
        self._window.reset(count)
        logger.debug(f"Search {self._visibility.search_term!r}: {count} rows")
        self._notify(VIEW_CHANGED)

    def clear_search(self) -> None:
        """Drop any pending commit and clear the term immediately."""
        if self._debouncer is not None:
            self._debouncer.cancel()
        self.set_search_term("")

    # --- Cell Edit ---

    @property
    def inline_edit_mode(self) -> bool:
        """True while individual cells accept edits."""
        return self._inline_edit_mode

    def set_inline_edit_mode(self, enabled: bool) -> None:
        """Turn cell editing on or off. Any header edit in progress is cancelled."""
        self._header_edit.cancel()
        if enabled == self._inline_edit_mode:
            return
        self._inline_edit_mode = enabled
        logger.debug(f"Inline edit mode {'on' if enabled else 'off'}")
        self._notify(VIEW_CHANGED)

    def toggle_inline_edit_mode(self) -> bool:
        """Flip inline edit mode and return the new state."""
        self.set_inline_edit_mode(not self._inline_edit_mode)
        return self._inline_edit_mode

    def edit_cell(self, row_id: str, field_id: str, raw_value: Any) -> bool:
        """Write one cell, converting the input to the column's type.

        Returns:
            True if written; False when inline edit mode is off or for an
            unknown row or field.
        """
        if not self._inline_edit_mode:
            return False
        column = self._rows.get_column(field_id)
        if column is None:
            return False
        value = coerce_edit_value(raw_value, column.data_type)
        old_value = self._rows.set_value(row_id, field_id, value)
        if old_value is MISSING:
            return False
        self._emit_cell_changed(CellChange(row_id, field_id, old_value, value))
        return True

    # --- Header Edit ---

    @property
    def header_edit_state(self) -> HeaderEditState:
        return self._header_edit.state

    @property
    def is_header_editing(self) -> bool:
        return self._header_edit.is_editing

    @property
    def header_edit_field(self) -> str | None:
        return self._header_edit.field_id

    @property
    def header_edit_value(self) -> Any:
        return self._header_edit.draft_value

    def begin_header_edit(self, field_id: str) -> bool:
        return self._header_edit.begin(field_id)

    def update_header_draft(self, value: Any) -> None:
        self._header_edit.update_draft(value)

    def apply_header_edit(self) -> list[CellChange]:
        return self._header_edit.confirm()

    def cancel_header_edit(self) -> None:
        self._header_edit.cancel()

    def header_edit_options(self) -> list[PicklistOption]:
        """Picklist options for the column being edited (empty otherwise)."""
        field_id = self._header_edit.field_id
        column = self._rows.get_column(field_id) if field_id else None
        return list(column.options) if column is not None and column.is_picklist else []

    # --- Virtual Window ---

    @property
    def virtual_scroll_enabled(self) -> bool:
        return self._window.is_active(self.visible_row_count)

    @property
    def window(self) -> VirtualWindow:
        return self._window

    def on_scroll(self, scroll_offset: float, viewport_height: float | None = None) -> bool:
        """Recompute the window for a scroll event.

        Returns:
            True if the materialised range changed.
        """
        total = self.visible_row_count
        if not self._window.is_active(total):
            return False
        if viewport_height is None:
            viewport_height = self.settings.viewport_height
        changed = self._window.update(scroll_offset, viewport_height, total)
        if changed:
            self._notify(VIEW_CHANGED)
        return changed

    def top_padding(self) -> int:
        return self._window.top_padding(self.visible_row_count)

    def bottom_padding(self) -> int:
        return self._window.bottom_padding(self.visible_row_count)

    def display_rows(self) -> list[DisplayRow]:
        """Materialised rows (the window slice when windowing is active)."""
        rows = self.visible_rows()
        rng = self._window.effective_range(len(rows))
        columns = self._rows.columns
        return [
            self._build_display_row(index, rows[index], columns)
            for index in range(rng.start_index, rng.end_index)
        ]

    def _build_display_row(self, index: int, row: GridRow, columns: list[Column]) -> DisplayRow:
        cells = []
        for col in columns:
            value = row.fields.get(col.field_id)
            key: CellKey = (row.id, col.field_id)
            cells.append(
                DisplayCell(
                    field_id=col.field_id,
                    value=value,
                    display_value=format_display_value(value, col.data_type),
                    data_type=col.data_type,
                    cell_key=format_cell_key(key),
                    is_edited=self._rows.is_cell_dirty(*key),
                    options=tuple(
                        DisplayOption(opt.label, opt.value, selected=opt.value == value)
                        for opt in col.options
                    ),
                )
            )
        return DisplayRow(
            row_id=row.id,
            index=index,
            is_selected=self._selection.is_selected(row.id),
            cells=tuple(cells),
        )

    # --- Navigation ---

    def cell_below(self, row_id: str, field_id: str) -> CellKey | None:
        return cell_below(self.visible_rows(), row_id, field_id)

    def cell_above(self, row_id: str, field_id: str) -> CellKey | None:
        return cell_above(self.visible_rows(), row_id, field_id)
