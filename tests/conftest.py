"""
Pytest configuration and shared fixtures.
"""
import sys
from pathlib import Path

import pytest

# Add src to Python path for test imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from cellview.settings import ENV_KEYS  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep CELLVIEW_* variables from the developer's shell out of tests."""
    for key in ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
