"""Per-type value handling for grid cells.

Every function here dispatches over all five DataType members; adding a
type means adding a branch to each of them (assert_never flags a miss).
"""

from __future__ import annotations

import math
import re
from typing import Any, assert_never

from .constants import (
    BOOLEAN_FALSE_DISPLAY,
    BOOLEAN_TRUE_DISPLAY,
    TRUTHY_STRINGS,
    DataType,
)

# Leading YYYY-MM-DD of an ISO date or datetime string
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def zero_value(data_type: DataType) -> bool | str:
    """Initial draft value for a header edit."""
    if data_type is DataType.BOOLEAN:
        return False
    if data_type in (DataType.TEXT, DataType.NUMBER, DataType.PICKLIST, DataType.DATE):
        return ""
    assert_never(data_type)


def _format_number(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return str(value)
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, int) or value.is_integer():
        return f"{int(value):,}"
    # Up to three fraction digits, trailing zeros dropped
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _format_date(value: Any) -> str:
    match = ISO_DATE_PATTERN.match(str(value))
    if not match:
        return str(value)
    year, month, day = match.groups()
    return f"{int(month)}/{int(day)}/{year}"


def format_display_value(value: Any, data_type: DataType) -> str:
    """Format a stored value for display and search.

    Args:
        value: The stored cell value (may be None).
        data_type: Owning column's type.

    Returns:
        Display string; empty for None.
    """
    if value is None:
        return ""
    if data_type is DataType.BOOLEAN:
        return BOOLEAN_TRUE_DISPLAY if value else BOOLEAN_FALSE_DISPLAY
    if data_type is DataType.NUMBER:
        return _format_number(value)
    if data_type is DataType.DATE:
        if value == "":
            return ""
        return _format_date(value)
    if data_type in (DataType.TEXT, DataType.PICKLIST):
        return str(value)
    assert_never(data_type)


def parse_number(value: Any) -> int | float:
    """Parse a numeric edit value, falling back to 0 on failure.

    Integral results come back as int so "5" stores as 5, not 5.0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    if number.is_integer():
        return int(number)
    return number


def _parse_boolean(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def coerce_edit_value(value: Any, data_type: DataType) -> Any:
    """Convert a raw edit value to the column's semantic type. Never raises."""
    if data_type is DataType.NUMBER:
        return parse_number(value)
    if data_type is DataType.BOOLEAN:
        return _parse_boolean(value)
    if data_type in (DataType.TEXT, DataType.PICKLIST, DataType.DATE):
        return "" if value is None else str(value)
    assert_never(data_type)
