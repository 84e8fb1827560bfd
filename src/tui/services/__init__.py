"""TUI services for clean separation of concerns."""

from .cell_service import CellService

__all__ = [
    "CellService",
]
