from .row_store import MISSING, LoadError, RowStore

__all__ = ["MISSING", "LoadError", "RowStore"]
