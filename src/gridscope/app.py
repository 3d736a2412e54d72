"""Desktop preview of the grid engine, populated with mock data."""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import messagebox, ttk

from .data.grid_store import SELECTION_CHANGED, VIEW_CHANGED, GridStore
from .data.mock_data import generate_mock_table_data
from .data.row_store import LoadError
from .settings import GridSettings
from .utils.debug_trace import logger, setup_debug_logging
from .views.grid_sheet import GridSheetBinder, create_sheet

# Enough rows to exercise windowing
PREVIEW_ROW_COUNT = 1000


class GridPreviewWindow(ttk.Frame):
    """Toolbar, header-edit bar and the sheet, wired to one GridStore."""

    def __init__(self, parent: tk.Tk, store: GridStore) -> None:
        super().__init__(parent)
        self.store = store

        self.search_var = tk.StringVar()
        self.status_var = tk.StringVar()
        self.header_field_var = tk.StringVar()
        self.header_value_var = tk.StringVar()

        self._create_widgets()

        store.add_observer(VIEW_CHANGED, self._update_status)
        store.add_observer(SELECTION_CHANGED, lambda _ids: self._update_status())
        self.binder.refresh()
        self._update_status()

    def _create_widgets(self) -> None:
        toolbar = ttk.Frame(self)
        toolbar.pack(fill=tk.X, padx=5, pady=5)

        ttk.Label(toolbar, text="Search:").pack(side=tk.LEFT)
        search_entry = ttk.Entry(toolbar, textvariable=self.search_var, width=30)
        search_entry.pack(side=tk.LEFT, padx=(2, 2))
        self.search_var.trace_add("write", self._on_search_changed)
        ttk.Button(toolbar, text="Clear", command=self._on_clear_search).pack(side=tk.LEFT)

        ttk.Button(toolbar, text="Hide Selected", command=self.store.hide_selected).pack(
            side=tk.LEFT, padx=(10, 2)
        )
        ttk.Button(toolbar, text="Hide Unselected", command=self.store.hide_unselected).pack(
            side=tk.LEFT, padx=2
        )
        ttk.Button(toolbar, text="Unhide All", command=self._on_unhide_all).pack(
            side=tk.LEFT, padx=2
        )
        ttk.Button(toolbar, text="Reset", command=self._on_reset).pack(side=tk.LEFT, padx=2)
        self.inline_edit_button = ttk.Button(
            toolbar, text=self._inline_edit_label(), command=self._on_toggle_inline_edit
        )
        self.inline_edit_button.pack(side=tk.LEFT, padx=(10, 2))

        # Header edit bar
        header_bar = ttk.Frame(self)
        header_bar.pack(fill=tk.X, padx=5, pady=(0, 5))
        ttk.Label(header_bar, text="Set column:").pack(side=tk.LEFT)
        self.header_field_combo = ttk.Combobox(
            header_bar,
            textvariable=self.header_field_var,
            values=[col.field_id for col in self.store.columns],
            state="readonly",
            width=20,
        )
        self.header_field_combo.pack(side=tk.LEFT, padx=2)
        self.header_field_combo.bind("<<ComboboxSelected>>", self._on_header_field_selected)
        self.header_value_entry = ttk.Combobox(
            header_bar, textvariable=self.header_value_var, width=24
        )
        self.header_value_entry.pack(side=tk.LEFT, padx=2)
        self.header_value_entry.bind("<Return>", lambda _e: self._on_header_apply())
        self.header_value_entry.bind("<Escape>", lambda _e: self._on_header_cancel())
        ttk.Button(header_bar, text="Apply", command=self._on_header_apply).pack(
            side=tk.LEFT, padx=2
        )
        ttk.Button(header_bar, text="Cancel", command=self._on_header_cancel).pack(
            side=tk.LEFT, padx=2
        )

        # Sheet + window scrollbar
        body = ttk.Frame(self)
        body.pack(fill=tk.BOTH, expand=True, padx=5)
        sheet = create_sheet(body, GridSheetBinder.headers_for(self.store))
        sheet.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.binder = GridSheetBinder(self.store, sheet)

        self.window_scroll = ttk.Scale(
            body, orient=tk.VERTICAL, from_=0.0, to=1.0, command=self._on_window_scroll
        )
        self.window_scroll.pack(side=tk.RIGHT, fill=tk.Y)

        footer = ttk.Frame(self)
        footer.pack(fill=tk.X, padx=5, pady=(2, 5))
        ttk.Label(footer, textvariable=self.status_var).pack(side=tk.LEFT)

    def _update_status(self) -> None:
        state = self.store.select_all_state()
        selected = len(self.store.get_selected_row_ids())
        parts = [
            f"Rows: {self.store.visible_row_count}/{self.store.total_row_count}",
            f"Selected: {selected}{' (all)' if state.checked else ''}",
            f"Edited cells: {len(self.store.get_edited_cell_keys())}",
        ]
        if self.store.has_hidden_rows:
            parts.append(self.store.hidden_rows_message)
        if self.store.virtual_scroll_enabled:
            window = self.store.window
            parts.append(f"Window: {window.start_index}-{window.end_index}")
        self.status_var.set(" | ".join(parts))

    # --- Handlers ---

    def _on_search_changed(self, *_args) -> None:
        self.store.search_input(self.search_var.get())

    def _on_clear_search(self) -> None:
        self.search_var.set("")
        self.store.clear_search()

    def _on_unhide_all(self) -> None:
        self.store.unhide_all()
        self.search_var.set("")

    def _on_reset(self) -> None:
        if self.store.get_edited_cell_keys() and not messagebox.askyesno(
            "Reset", "Discard all edits and restore the original data?", parent=self
        ):
            return
        self.store.reset_to_original()
        self.search_var.set("")

    def _inline_edit_label(self) -> str:
        return "Exit Edit Mode" if self.store.inline_edit_mode else "Inline Edit Mode"

    def _on_toggle_inline_edit(self) -> None:
        self.store.toggle_inline_edit_mode()
        self.inline_edit_button.configure(text=self._inline_edit_label())
        self.header_field_var.set("")
        self.header_value_var.set("")

    def _on_window_scroll(self, value: str) -> None:
        self.binder.on_scrollbar(float(value))

    def _on_header_field_selected(self, _event=None) -> None:
        field_id = self.header_field_var.get()
        if not self.store.begin_header_edit(field_id):
            return
        column = self.store.get_column(field_id)
        if column is not None and column.is_boolean:
            self.header_value_entry.configure(values=["true", "false"])
        else:
            self.header_value_entry.configure(
                values=[opt.label for opt in self.store.header_edit_options()]
            )
        self.header_value_var.set("")

    def _on_header_apply(self) -> None:
        if not self.store.is_header_editing:
            return
        self.store.update_header_draft(self.header_value_var.get())
        changes = self.store.apply_header_edit()
        logger.info(f"Header edit updated {len(changes)} rows")
        self.header_field_var.set("")
        self.header_value_var.set("")
        self._update_status()

    def _on_header_cancel(self) -> None:
        self.store.cancel_header_edit()
        self.header_field_var.set("")
        self.header_value_var.set("")


def run(log_level: int = logging.WARNING) -> None:
    setup_debug_logging(log_level)

    root = tk.Tk()
    root.title("Gridscope")

    store = GridStore(GridSettings(), scheduler=root)
    try:
        store.load(generate_mock_table_data(PREVIEW_ROW_COUNT))
    except LoadError as e:
        messagebox.showerror("Load Error", str(e))
        root.destroy()
        return

    window = GridPreviewWindow(root, store)
    window.pack(fill=tk.BOTH, expand=True)
    root.mainloop()


def main() -> None:
    run()


def main_debug() -> None:
    run(logging.DEBUG)


if __name__ == "__main__":
    main()
