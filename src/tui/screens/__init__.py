from .cells.cells_screen import CellsScreen
from .settings.settings_screen import SettingsScreen

__all__ = ["CellsScreen", "SettingsScreen"]
