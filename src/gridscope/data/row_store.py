"""Row store with original/working layers and a dirty-cell ledger.

The store maintains two row collections with identical ids and ordering:
- original: Snapshot taken at load time (the truth, never written)
- working: Independently mutable copies (the user's edits)

Key behaviors:
- O(1) lookup of working rows through a row index
- Every write records its (row_id, field_id) in the dirty ledger
- Load is all-or-nothing: a rejected payload leaves existing state intact
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models.column import Column
from ..models.constants import DEFAULT_ID_FIELD, LEGACY_ID_FIELD
from ..models.grid_row import CellKey, GridRow


class LoadError(ValueError):
    """Inbound data is malformed or a row lacks its identifier."""


class _Missing:
    """Sentinel type for lookup misses."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def build_columns(
    raw_columns: Iterable[Mapping[str, Any]], id_field: str = DEFAULT_ID_FIELD
) -> list[Column]:
    """Parse inbound column metadata.

    Raises:
        LoadError: On a malformed column, a duplicate fieldId, or a fieldId
            that collides with the row identifier key.
    """
    reserved = {id_field, LEGACY_ID_FIELD}
    columns: list[Column] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_columns):
        if not isinstance(raw, Mapping):
            raise LoadError(f"column {index} is not a mapping")
        try:
            column = Column.from_dict(raw)
        except ValueError as e:
            raise LoadError(str(e)) from e
        if column.field_id in reserved:
            raise LoadError(f"column fieldId {column.field_id!r} is reserved for the row id")
        if column.field_id in seen:
            raise LoadError(f"duplicate column fieldId {column.field_id!r}")
        seen.add(column.field_id)
        columns.append(column)
    return columns


def build_rows(raw_rows: Iterable[Mapping[str, Any]], id_field: str) -> list[GridRow]:
    """Parse inbound rows into GridRow objects.

    The identifier is read from ``id_field``, falling back to the legacy
    capitalised key. The identifier key is not kept in ``fields``.

    Raises:
        LoadError: On a non-mapping row, a missing or non-string identifier,
            or a duplicate id.
    """
    rows: list[GridRow] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_rows):
        if not isinstance(raw, Mapping):
            raise LoadError(f"row {index} is not a mapping")

        key = id_field if id_field in raw else LEGACY_ID_FIELD
        row_id = raw.get(key)
        if row_id is None or row_id == "":
            raise LoadError(f"row {index} is missing identifier field {id_field!r}")
        # Integer ids are normalised to strings; anything else is rejected
        if isinstance(row_id, bool) or not isinstance(row_id, str | int):
            raise LoadError(f"row {index} identifier must be a string, got {row_id!r}")
        row_id = str(row_id)
        if row_id in seen:
            raise LoadError(f"duplicate row id {row_id!r}")
        seen.add(row_id)

        fields = {k: v for k, v in raw.items() if k != key}
        rows.append(GridRow(id=row_id, fields=fields, id_key=key))
    return rows


class RowStore:
    """Owns the original and working row collections and the dirty ledger.

    Usage:
        store = RowStore()
        store.load(rows, columns)
        old = store.set_value("a1", "Amount__c", 10)
        store.modified_rows()   # [working row a1]
        store.reset_to_original()
    """

    def __init__(self) -> None:
        self._original: list[GridRow] = []
        self._working: list[GridRow] = []
        self._columns: list[Column] = []
        self._columns_by_field: dict[str, Column] = {}

        # row_id -> working row, for O(1) lookups
        self._row_index: dict[str, GridRow] = {}

        # Dirty ledger: dict keeps first-edit order for export, set semantics for membership
        self._dirty: dict[CellKey, None] = {}

    # --- Loading ---

    def load(self, rows: list[GridRow], columns: list[Column]) -> None:
        """Install a new dataset.

        The caller passes already-validated rows (see build_rows). Both
        collections receive their own deep copies.
        """
        self._columns = list(columns)
        self._columns_by_field = {col.field_id: col for col in self._columns}
        self._original = [row.copy() for row in rows]
        self._working = [row.copy() for row in rows]
        self._rebuild_index()
        self._dirty.clear()

    def _rebuild_index(self) -> None:
        self._row_index = {row.id: row for row in self._working}

    def reset_to_original(self) -> None:
        """Deep-copy original back into working and clear the ledger."""
        self._working = [row.copy() for row in self._original]
        self._rebuild_index()
        self._dirty.clear()

    # --- Row Access ---

    @property
    def columns(self) -> list[Column]:
        return list(self._columns)

    def get_column(self, field_id: str) -> Column | None:
        return self._columns_by_field.get(field_id)

    @property
    def working_rows(self) -> list[GridRow]:
        """Working rows in original order (live references, engine-internal)."""
        return self._working

    @property
    def original_rows(self) -> list[GridRow]:
        return self._original

    @property
    def row_ids(self) -> list[str]:
        return [row.id for row in self._working]

    def __len__(self) -> int:
        return len(self._working)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._row_index

    def get(self, row_id: str) -> GridRow | Any:
        """Get the working row, or MISSING if the id is unknown."""
        return self._row_index.get(row_id, MISSING)

    # --- Writes ---

    def set_value(self, row_id: str, field_id: str, value: Any) -> Any:
        """Write a value to the working row and record the cell as dirty.

        Returns:
            The previous value (None if the field was unset), or MISSING
            when the row or field is unknown (nothing is written).
        """
        row = self._row_index.get(row_id)
        if row is None or field_id not in self._columns_by_field:
            return MISSING

        old_value = row.fields.get(field_id)
        row.fields[field_id] = value
        self._dirty[(row_id, field_id)] = None
        return old_value

    # --- Dirty State Queries ---

    def is_cell_dirty(self, row_id: str, field_id: str) -> bool:
        return (row_id, field_id) in self._dirty

    def is_dirty(self, row_id: str) -> bool:
        """Check if a row has at least one dirty cell."""
        return any(key[0] == row_id for key in self._dirty)

    def dirty_keys(self) -> list[CellKey]:
        """Dirty cell keys in first-edit order (copy)."""
        return list(self._dirty)

    def has_unsaved_changes(self) -> bool:
        return bool(self._dirty)

    def modified_rows(self) -> list[GridRow]:
        """Working rows with at least one dirty cell, deduplicated, as copies."""
        seen: set[str] = set()
        result: list[GridRow] = []
        for row_id, _field_id in self._dirty:
            if row_id in seen:
                continue
            seen.add(row_id)
            row = self._row_index.get(row_id)
            if row is not None:
                result.append(row.copy())
        return result
