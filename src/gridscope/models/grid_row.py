"""Row model and cell-key helpers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .constants import CELL_KEY_SEPARATOR, DEFAULT_ID_FIELD

# (row_id, field_id)
CellKey = tuple[str, str]


@dataclass
class GridRow:
    """A single row: its identifier and a mapping of field_id -> value.

    Rows are mutable in the working collection; the original collection
    holds independent copies that are never written to.
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    # Key the id was read from, so snapshots round-trip to the inbound shape
    id_key: str = DEFAULT_ID_FIELD

    def copy(self) -> GridRow:
        """Deep copy (values may be nested containers)."""
        return GridRow(id=self.id, fields=copy.deepcopy(self.fields), id_key=self.id_key)

    def to_dict(self) -> dict[str, Any]:
        """Flatten back to the inbound shape: ``{id_key: id, **fields}``."""
        data: dict[str, Any] = {self.id_key: self.id}
        data.update(copy.deepcopy(self.fields))
        return data


def format_cell_key(key: CellKey) -> str:
    """Render a cell key as ``"rowId_fieldId"`` for external callers."""
    row_id, field_id = key
    return f"{row_id}{CELL_KEY_SEPARATOR}{field_id}"
