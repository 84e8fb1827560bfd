"""Widget components for the cells screen"""

from .cell_panel import CellPanel
from .json_tree_view import JsonTreeView

__all__ = [
    "CellPanel",
    "JsonTreeView",
]
