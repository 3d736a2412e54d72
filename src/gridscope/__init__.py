"""State engine for an in-memory, spreadsheet-like editable grid."""

from .data.grid_store import CELL_CHANGED, SELECTION_CHANGED, VIEW_CHANGED, GridStore
from .data.row_store import MISSING, LoadError, RowStore
from .settings import GridSettings

__all__ = [
    "CELL_CHANGED",
    "MISSING",
    "SELECTION_CHANGED",
    "VIEW_CHANGED",
    "GridSettings",
    "GridStore",
    "LoadError",
    "RowStore",
]
