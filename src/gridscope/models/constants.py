# ==============================================================================
# Column Data Types
# ==============================================================================

from enum import StrEnum


class DataType(StrEnum):
    """Column data types accepted in inbound column metadata."""

    TEXT = "text"
    NUMBER = "number"
    PICKLIST = "picklist"
    DATE = "date"
    BOOLEAN = "boolean"


# Display glyphs for boolean cells
BOOLEAN_TRUE_DISPLAY = "✓"
BOOLEAN_FALSE_DISPLAY = "✗"

# Strings treated as True when coercing a boolean edit value
TRUTHY_STRINGS: frozenset[str] = frozenset({"true", "1", "yes", "on"})

# ==============================================================================
# Engine Defaults
# ==============================================================================

# Identifier key inside inbound row mappings
DEFAULT_ID_FIELD = "id"
# Accepted when a row has no DEFAULT_ID_FIELD key (capitalised record id)
LEGACY_ID_FIELD = "Id"

# Search input debounce in milliseconds
SEARCH_DEBOUNCE_MS = 300

# Windowing only activates above this many visible rows
VIRTUAL_SCROLL_THRESHOLD = 500
# Rows materialised above and below the viewport
VIRTUAL_SCROLL_BUFFER = 20
# Approximate row height in pixels
ROW_HEIGHT = 32
# Rows shown before the first scroll event
INITIAL_WINDOW_ROWS = 50
# Viewport height used when the host does not report one (20 rows)
DEFAULT_VIEWPORT_HEIGHT = 640

# Separator for exported cell keys ("rowId_fieldId")
CELL_KEY_SEPARATOR = "_"
