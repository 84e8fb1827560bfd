"""Widget components for CellView TUI"""

from .instruction_text import InstructionText

__all__ = [
    "InstructionText",
]
