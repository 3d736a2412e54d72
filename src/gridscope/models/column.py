"""Column metadata for the grid.

Columns are immutable after load. Inbound metadata may use either the
documented camelCase keys or the legacy ``object_api``/``field_api``/
``data-type`` spellings.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import DataType

# Matches each single-quoted literal in "'a','b','c'"
PICKLIST_VALUE_PATTERN = re.compile(r"'([^']+)'")

# Inbound key -> accepted aliases, first match wins
_COLUMN_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "objectId": ("objectId", "object_api"),
    "fieldId": ("fieldId", "field_api"),
    "label": ("label",),
    "dataType": ("dataType", "data-type"),
    "values": ("values", "picklistValues"),
}


@dataclass(frozen=True)
class PicklistOption:
    """A single picklist choice. Label and value are identical on parse."""

    label: str
    value: str


@dataclass(frozen=True)
class Column:
    """Per-column metadata.

    Attributes:
        object_id: Owning object name (informational only).
        field_id: Key of the column's value inside each row.
        label: Header text.
        data_type: One of the five DataType members.
        options: Ordered picklist options (empty for non-picklist columns).
    """

    object_id: str
    field_id: str
    label: str
    data_type: DataType
    options: tuple[PicklistOption, ...] = field(default_factory=tuple)

    @property
    def is_boolean(self) -> bool:
        return self.data_type is DataType.BOOLEAN

    @property
    def is_picklist(self) -> bool:
        return self.data_type is DataType.PICKLIST

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Column:
        """Build a Column from an inbound metadata mapping.

        Raises:
            ValueError: If fieldId is missing or dataType is not recognised.
        """
        field_id = _lookup(raw, "fieldId")
        if not field_id:
            raise ValueError("column is missing fieldId")

        raw_type = _lookup(raw, "dataType")
        try:
            data_type = DataType(str(raw_type).lower())
        except ValueError:
            raise ValueError(f"column {field_id!r} has unknown dataType {raw_type!r}") from None

        options: tuple[PicklistOption, ...] = ()
        if data_type is DataType.PICKLIST:
            values = _lookup(raw, "values")
            if values is not None and not isinstance(values, str):
                raise ValueError(
                    f"column {field_id!r} picklist values must be a quoted string, got {values!r}"
                )
            options = tuple(parse_picklist_values(values))

        return cls(
            object_id=str(_lookup(raw, "objectId") or ""),
            field_id=str(field_id),
            label=str(_lookup(raw, "label") or field_id),
            data_type=data_type,
            options=options,
        )


def _lookup(raw: Mapping[str, Any], key: str) -> Any:
    for alias in _COLUMN_KEY_ALIASES[key]:
        if alias in raw:
            return raw[alias]
    return None


def parse_picklist_values(values: str | None) -> list[PicklistOption]:
    """Parse a comma-separated list of single-quoted literals.

    Examples:
        - "'Open','Closed'" -> [Open, Closed]
        - None or "" -> []
        - "Open,Closed" (unquoted) -> []

    Args:
        values: Raw ``values`` string from the column metadata.

    Returns:
        Ordered list of options with label == value.
    """
    if not values:
        return []
    return [PicklistOption(label=m, value=m) for m in PICKLIST_VALUE_PATTERN.findall(values)]
