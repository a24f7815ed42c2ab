from .row_store import RowStore

__all__ = ["RowStore"]
