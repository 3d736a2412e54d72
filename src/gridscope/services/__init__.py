"""Service layer for grid state.

Services own one concern each and are composed by GridStore:
- SelectionTracker: Selected row ids and the select-all checkbox state
- VisibilityEngine: Hide/unhide row-scoping intersected with text search
- BulkEditApplier: Header-edit state machine and scoped bulk writes
- VirtualWindow: Index range to materialise for long row lists
- navigation: Row above/below in the visible order
"""

from .bulk_edit import BulkEditApplier, CellChange, HeaderEditState, resolve_edit_scope
from .navigation import cell_above, cell_below
from .selection_tracker import SelectAllState, SelectionTracker
from .virtual_window import VirtualWindow, WindowRange, compute_window
from .visibility_engine import VisibilityEngine

__all__ = [
    "BulkEditApplier",
    "CellChange",
    "HeaderEditState",
    "SelectAllState",
    "SelectionTracker",
    "VirtualWindow",
    "VisibilityEngine",
    "WindowRange",
    "cell_above",
    "cell_below",
    "compute_window",
    "resolve_edit_scope",
]
