"""Render-ready views of rows for the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import DataType


@dataclass(frozen=True)
class DisplayOption:
    label: str
    value: str
    selected: bool = False


@dataclass(frozen=True)
class DisplayCell:
    """One cell as the view renders it."""

    field_id: str
    value: Any
    display_value: str
    data_type: DataType
    cell_key: str
    is_edited: bool = False
    options: tuple[DisplayOption, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DisplayRow:
    """One materialised row: its absolute index in the visible rows and its cells."""

    row_id: str
    index: int
    is_selected: bool
    cells: tuple[DisplayCell, ...]
