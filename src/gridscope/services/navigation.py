"""Logical keyboard navigation between rows.

The presentation layer turns the returned (row_id, field_id) into actual
focus movement; this module only knows the visible row order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.grid_row import CellKey, GridRow


def _neighbor(
    rows: Sequence[GridRow], row_id: str, field_id: str, step: int
) -> CellKey | None:
    for index, row in enumerate(rows):
        if row.id == row_id:
            target = index + step
            if 0 <= target < len(rows):
                return rows[target].id, field_id
            return None
    return None


def cell_below(rows: Sequence[GridRow], row_id: str, field_id: str) -> CellKey | None:
    """Same column, next visible row; None at the bottom or for unknown rows."""
    return _neighbor(rows, row_id, field_id, 1)


def cell_above(rows: Sequence[GridRow], row_id: str, field_id: str) -> CellKey | None:
    """Same column, previous visible row; None at the top or for unknown rows."""
    return _neighbor(rows, row_id, field_id, -1)
