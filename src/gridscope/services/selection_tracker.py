"""Selection tracking for grid rows.

Selection entries are never pruned when rows are hidden, so Hide Selected
followed by Unhide All restores the exact pre-hide checked state. Only an
explicit deselect or a load/reset removes them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.grid_row import GridRow


@dataclass(frozen=True)
class SelectAllState:
    """Header checkbox state derived from the visible rows."""

    checked: bool
    indeterminate: bool


class SelectionTracker:
    """Owns the set of selected row ids.

    Insertion order is kept so exported snapshots are stable.
    """

    def __init__(self) -> None:
        self._selected: dict[str, None] = {}

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._selected

    def is_selected(self, row_id: str) -> bool:
        return row_id in self._selected

    def select(self, row_id: str) -> None:
        self._selected[row_id] = None

    def deselect(self, row_id: str) -> None:
        self._selected.pop(row_id, None)

    def select_all(self, row_ids: Iterable[str]) -> None:
        for row_id in row_ids:
            self._selected[row_id] = None

    def deselect_all(self, row_ids: Iterable[str] | None = None) -> None:
        """Deselect the given ids, or everything when row_ids is None."""
        if row_ids is None:
            self._selected.clear()
            return
        for row_id in row_ids:
            self._selected.pop(row_id, None)

    def snapshot(self) -> list[str]:
        """Selected ids in selection order (copy)."""
        return list(self._selected)

    def select_all_state(self, visible_rows: Sequence[GridRow]) -> SelectAllState:
        """Compute the header checkbox state from the current visible rows.

        Recomputed on every call; a stale value would misreport which rows
        a bulk edit is about to touch.
        """
        selected_count = sum(1 for row in visible_rows if row.id in self._selected)
        total = len(visible_rows)
        return SelectAllState(
            checked=total > 0 and selected_count == total,
            indeterminate=0 < selected_count < total,
        )
