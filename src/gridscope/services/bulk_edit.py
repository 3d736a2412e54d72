"""Header-level bulk edits.

A header edit names one column, collects a draft value, and on confirm
writes the converted value into every row of the effective edit scope:

- selection ∩ visible rows, when any row is selected
- all visible rows, when nothing is selected

Hidden rows are never in the visible rows, so row-scoping cannot be
bypassed through the selection.

State machine:
    IDLE -> EDITING(field_id, draft) -> APPLYING -> IDLE
                                     -> CANCELLED -> IDLE
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from ..data.row_store import MISSING
from ..models.cell_values import coerce_edit_value, zero_value
from ..utils.debug_trace import logger, perf_timer

if TYPE_CHECKING:
    from ..data.row_store import RowStore
    from ..models.grid_row import GridRow
    from .selection_tracker import SelectionTracker


class HeaderEditState(Enum):
    IDLE = auto()
    EDITING = auto()
    APPLYING = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class CellChange:
    """One cell write, as reported to cellChanged observers."""

    row_id: str
    field_id: str
    old_value: Any
    new_value: Any


def resolve_edit_scope(
    visible_rows: Sequence[GridRow], selection: SelectionTracker
) -> list[GridRow]:
    """Rows a bulk edit applies to, in visible order.

    Args:
        visible_rows: Current output of VisibilityEngine.visible_rows().
        selection: Current selection; may include hidden ids.

    Returns:
        Selected visible rows if anything is selected, else all visible rows.
    """
    if len(selection) > 0:
        return [row for row in visible_rows if selection.is_selected(row.id)]
    return list(visible_rows)


class BulkEditApplier:
    """Runs the header-edit state machine and applies confirmed edits.

    Usage:
        applier.begin("Status__c")
        applier.update_draft("Closed")
        changes = applier.confirm()   # one CellChange per row in scope
    """

    def __init__(
        self,
        rows: RowStore,
        selection: SelectionTracker,
        visible_rows_fn: Callable[[], list[GridRow]],
        on_cell_changed: Callable[[CellChange], None] | None = None,
    ) -> None:
        self._rows = rows
        self._selection = selection
        self._visible_rows_fn = visible_rows_fn
        self._on_cell_changed = on_cell_changed

        self._state = HeaderEditState.IDLE
        self._field_id: str | None = None
        self._draft_value: Any = None

    @property
    def state(self) -> HeaderEditState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return self._state is HeaderEditState.EDITING

    @property
    def field_id(self) -> str | None:
        """Column being edited, or None when idle."""
        return self._field_id

    @property
    def draft_value(self) -> Any:
        return self._draft_value

    def begin(self, field_id: str) -> bool:
        """Enter EDITING for a column, replacing any edit in progress.

        Returns:
            False (and stays IDLE) if the column is unknown.
        """
        column = self._rows.get_column(field_id)
        if column is None:
            logger.debug(f"Header edit: unknown field {field_id!r}")
            self.cancel()
            return False

        self._state = HeaderEditState.EDITING
        self._field_id = field_id
        self._draft_value = zero_value(column.data_type)
        logger.debug(f"Header edit: editing {field_id}")
        return True

    def update_draft(self, value: Any) -> None:
        """Replace the draft value. Ignored unless EDITING."""
        if self._state is HeaderEditState.EDITING:
            self._draft_value = value

    def cancel(self) -> None:
        """Discard the draft without touching any row."""
        if self._state is HeaderEditState.EDITING:
            self._state = HeaderEditState.CANCELLED
            logger.debug(f"Header edit: cancelled {self._field_id}")
        self._to_idle()

    def _to_idle(self) -> None:
        self._state = HeaderEditState.IDLE
        self._field_id = None
        self._draft_value = None

    def confirm(self) -> list[CellChange]:
        """Apply the draft to the effective edit scope.

        Cancels instead when not editing, when the draft is None, or when
        the column has disappeared (e.g. after a reload).

        Returns:
            The cell changes, in scope order (empty when cancelled).
        """
        if self._state is not HeaderEditState.EDITING or self._draft_value is None:
            self.cancel()
            return []

        field_id = self._field_id
        column = self._rows.get_column(field_id) if field_id else None
        if column is None:
            self.cancel()
            return []

        self._state = HeaderEditState.APPLYING
        value = coerce_edit_value(self._draft_value, column.data_type)
        scope = resolve_edit_scope(self._visible_rows_fn(), self._selection)

        changes: list[CellChange] = []
        with perf_timer(f"bulk edit {field_id}", row_count=len(scope)):
            for row in scope:
                old_value = self._rows.set_value(row.id, field_id, value)
                if old_value is MISSING:
                    continue
                changes.append(CellChange(row.id, field_id, old_value, value))

        self._to_idle()
        logger.debug(f"Header edit: applied {field_id}={value!r} to {len(changes)} rows")

        if self._on_cell_changed is not None:
            for change in changes:
                self._on_cell_changed(change)
        return changes
