"""Row visibility: row-scoping (hide/unhide) composed with text search.

The two predicates are kept separate and intersected on read. Row-scoping
changes only on explicit user action, while the search term changes on
every committed keystroke, so the scoped row list is cached and only the
search predicate is re-evaluated when the term changes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

from ..models.cell_values import format_display_value
from ..utils.debug_trace import logger, perf_timer

if TYPE_CHECKING:
    from ..models.column import Column
    from ..models.grid_row import GridRow


class VisibilityEngine:
    """Derives the visible rows from row-scoping and the search term.

    Invariant: every known row id is in exactly one of the visible set
    and the hidden memory.
    """

    def __init__(self) -> None:
        self._visible: set[str] = set()
        # row_id -> was the row selected when it was hidden
        self._hidden: dict[str, bool] = {}
        self._search_term = ""
        self._columns: list[Column] = []

        # Cached rows in the visible set, keyed on the rows list and scope version
        self._scope_version = 0
        self._scoped_source: Sequence[GridRow] | None = None
        self._scoped_version = -1
        self._scoped_rows: list[GridRow] = []

    # --- State ---

    def reset(self, row_ids: Iterable[str], columns: Sequence[Column]) -> None:
        """Make every row visible, forget hidden state and clear the search."""
        self._visible = set(row_ids)
        self._hidden.clear()
        self._search_term = ""
        self._columns = list(columns)
        self._bump_scope()

    def _bump_scope(self) -> None:
        self._scope_version += 1

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def hidden_count(self) -> int:
        return len(self._hidden)

    def is_hidden(self, row_id: str) -> bool:
        return row_id in self._hidden

    def is_in_scope(self, row_id: str) -> bool:
        """True if the row is not hidden (ignores the search term)."""
        return row_id in self._visible

    def was_selected_when_hidden(self, row_id: str) -> bool | None:
        """Memorised selection flag, or None if the row is not hidden."""
        return self._hidden.get(row_id)

    # --- Row-Scoping ---

    def hide(self, row_ids: Iterable[str], was_selected_fn: Callable[[str], bool]) -> list[str]:
        """Hide rows, memorising whether each was selected.

        Already-hidden and unknown ids are skipped.

        Returns:
            Ids that were newly hidden.
        """
        newly_hidden: list[str] = []
        for row_id in row_ids:
            if row_id not in self._visible:
                continue
            self._hidden[row_id] = bool(was_selected_fn(row_id))
            self._visible.discard(row_id)
            newly_hidden.append(row_id)

        if newly_hidden:
            self._bump_scope()
            logger.debug(f"Hid {len(newly_hidden)} rows ({len(self._hidden)} hidden total)")
        return newly_hidden

    def unhide_all(self) -> set[str]:
        """Restore every hidden row and clear the search term.

        Returns:
            Ids whose memorised selection flag was True; the caller
            re-adds them to the selection.
        """
        restore_selected = {row_id for row_id, was_selected in self._hidden.items() if was_selected}
        restored = len(self._hidden)
        self._visible.update(self._hidden)
        self._hidden.clear()
        self._search_term = ""
        self._bump_scope()
        logger.debug(f"Unhid {restored} rows ({len(restore_selected)} reselected)")
        return restore_selected

    # --- Search ---

    def set_search_term(self, term: str) -> None:
        """Set the search term; matching is case-insensitive containment."""
        self._search_term = (term or "").casefold()

    def matches(self, row: GridRow) -> bool:
        """Check if any column's display value contains the search term."""
        term = self._search_term
        if not term:
            return True
        for col in self._columns:
            display = format_display_value(row.fields.get(col.field_id), col.data_type)
            if term in display.casefold():
                return True
        return False

    # --- Derived Rows ---

    def _scoped(self, all_rows: Sequence[GridRow]) -> list[GridRow]:
        if self._scoped_source is not all_rows or self._scoped_version != self._scope_version:
            self._scoped_rows = [row for row in all_rows if row.id in self._visible]
            self._scoped_source = all_rows
            self._scoped_version = self._scope_version
        return self._scoped_rows

    def visible_rows(self, all_rows: Sequence[GridRow]) -> list[GridRow]:
        """Rows in scope that match the search, in original order.

        Hidden rows are never tested against the search term.
        """
        scoped = self._scoped(all_rows)
        if not self._search_term:
            return list(scoped)
        with perf_timer("search filter", row_count=len(scoped)):
            return [row for row in scoped if self.matches(row)]
