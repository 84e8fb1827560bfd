"""
This module defines all project paths relative to the project root directory.
"""

from pathlib import Path

_CURRENT_FILE = Path(__file__).resolve()
_PATHS_DIR = _CURRENT_FILE.parent  # src/paths/
_SRC_DIR = _PATHS_DIR.parent  # src/
PROJECT_ROOT = _SRC_DIR.parent  # project root

# Source Code Directories
SRC_DIR = _SRC_DIR
CELLVIEW_DIR = SRC_DIR / "cellview"

# paths
PATHS_DIR = SRC_DIR / "paths"

# tui
TUI_DIR = SRC_DIR / "tui"
WIDGETS_DIR = TUI_DIR / "widgets"
SCREENS_DIR = TUI_DIR / "screens"

# logs
LOGS_DIR = Path("logs")

## UTILITY FUNCTIONS ##

# Directory mapping for the generic get_path function
_DIRECTORY_MAP = {
    "src": SRC_DIR,
    "cellview": CELLVIEW_DIR,
    "tui": TUI_DIR,
    "widgets": WIDGETS_DIR,
    "screens": SCREENS_DIR,
    "paths": PATHS_DIR,
    "logs": LOGS_DIR,
}


def get_path(directory: str, *parts: str) -> Path:
    """Get full path to a file in a specified project directory.

    Args:
        directory: The directory name (e.g., 'tui', 'screens', 'logs')
        *parts: Path parts to join (can be multiple subdirectories and filename)

    Returns:
        Path object to the specified file

    Raises:
        ValueError: If the directory name is not recognized
    """
    if directory not in _DIRECTORY_MAP:
        raise ValueError(f"Unknown directory: {directory}. Valid options: {list(_DIRECTORY_MAP.keys())}")

    return _DIRECTORY_MAP[directory].joinpath(*parts)


def get_tui_path(filename: str) -> Path:
    """Get full path to a tui file."""
    return get_path("tui", filename)


def get_log_path(filename: str) -> Path:
    """Get full path to a log file (relative to the working directory)."""
    return get_path("logs", filename)
