from .column import Column, PicklistOption, parse_picklist_values
from .constants import DataType
from .grid_row import CellKey, GridRow, format_cell_key

__all__ = [
    "CellKey",
    "Column",
    "DataType",
    "GridRow",
    "PicklistOption",
    "format_cell_key",
    "parse_picklist_values",
]
