"""User settings persisted in a dotenv file.

Values come from the process environment first and the ``.env`` file second,
the same precedence ``load_dotenv`` gives. Updates are written back to the
file with ``set_key`` and announced to subscribers, which reprocess every cell
from scratch.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from dotenv import dotenv_values, set_key

from .errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_PATTERNS = [".csv", ".tsv", ".jsonl", ".ndjson"]
DEFAULT_FIELD_NAMES = ["all"]

ENV_KEYS = {
    "enabled": "CELLVIEW_ENABLED",
    "source_patterns": "CELLVIEW_SOURCE_PATTERNS",
    "field_names": "CELLVIEW_FIELD_NAMES",
    "repair_truncated": "CELLVIEW_REPAIR_TRUNCATED",
}
LIST_SETTINGS = ("source_patterns", "field_names")
BOOL_SETTINGS = ("enabled", "repair_truncated")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """What to beautify and whether truncated JSON is repaired."""

    enabled: bool = True
    source_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_PATTERNS))
    field_names: List[str] = field(default_factory=lambda: list(DEFAULT_FIELD_NAMES))
    repair_truncated: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, Optional[str]]) -> "Settings":
        """Build settings from environment-style string values.

        Missing keys keep their defaults. Invalid booleans raise SettingsError.
        """
        values = {}
        for name, env_key in ENV_KEYS.items():
            raw = environ.get(env_key)
            if raw is None:
                continue
            if name in BOOL_SETTINGS:
                values[name] = _parse_bool(env_key, raw)
            else:
                values[name] = parse_list(raw)
        return cls(**values)

    def to_env(self) -> Dict[str, str]:
        return {
            ENV_KEYS["enabled"]: "true" if self.enabled else "false",
            ENV_KEYS["source_patterns"]: ",".join(self.source_patterns),
            ENV_KEYS["field_names"]: ",".join(self.field_names),
            ENV_KEYS["repair_truncated"]: "true" if self.repair_truncated else "false",
        }


def _parse_bool(env_key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise SettingsError(f"{env_key} must be true or false, got {raw!r}")


def parse_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


SettingsListener = Callable[[Settings, FrozenSet[str]], None]


class SettingsStore:
    """Loads, persists and broadcasts settings changes."""

    def __init__(self, env_path: Union[str, Path] = ".env"):
        self.env_path = Path(env_path)
        self._settings = Settings()
        self._listeners: List[SettingsListener] = []

    @property
    def settings(self) -> Settings:
        return self._settings

    def load(self) -> Settings:
        """Read settings from the dotenv file, overridden by the environment."""
        merged: Dict[str, Optional[str]] = {}
        if self.env_path.exists():
            merged.update(dotenv_values(self.env_path))
        merged.update({key: os.environ[key] for key in ENV_KEYS.values() if key in os.environ})
        self._settings = Settings.from_env(merged)
        logger.debug("Loaded settings from %s: %s", self.env_path, self._settings)
        return self._settings

    def save(self, names: Optional[Iterable[str]] = None) -> None:
        """Write the named settings (all of them by default) to the dotenv file."""
        values = self._settings.to_env()
        keys = [ENV_KEYS[name] for name in names] if names is not None else list(values)
        self.env_path.touch(exist_ok=True)
        for key in keys:
            set_key(str(self.env_path), key, values[key])

    def subscribe(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SettingsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def override(self, **changes) -> Settings:
        """Change settings for this process only: nothing is saved or announced."""
        self._settings = self._apply(changes)
        return self._settings

    def update(self, **changes) -> FrozenSet[str]:
        """Apply, persist and announce changes. Returns the names that changed."""
        updated = self._apply(changes)
        changed = frozenset(
            name for name in changes if getattr(self._settings, name) != getattr(updated, name)
        )
        if not changed:
            return changed

        self._settings = updated
        # Only changed keys are written; overrides stay in memory
        self.save(changed)
        logger.info("Settings changed: %s", ", ".join(sorted(changed)))
        for listener in list(self._listeners):
            listener(self._settings, changed)
        return changed

    def add_item(self, name: str, value: str) -> FrozenSet[str]:
        """Append to a list setting. Blank and duplicate values are ignored."""
        _require_list_setting(name)
        value = value.strip()
        current = getattr(self._settings, name)
        if not value or value in current:
            return frozenset()
        return self.update(**{name: current + [value]})

    def remove_item(self, name: str, index: int) -> FrozenSet[str]:
        _require_list_setting(name)
        current = list(getattr(self._settings, name))
        if not 0 <= index < len(current):
            raise SettingsError(f"No entry {index} in {name}")
        del current[index]
        return self.update(**{name: current})

    def _apply(self, changes) -> Settings:
        for name, value in changes.items():
            _validate(name, value)
        return dataclasses.replace(
            self._settings,
            **{name: list(value) if name in LIST_SETTINGS else value for name, value in changes.items()},
        )


def _require_list_setting(name: str) -> None:
    if name not in LIST_SETTINGS:
        raise SettingsError(f"{name} is not a list setting")


def _validate(name: str, value) -> None:
    if name in BOOL_SETTINGS:
        if not isinstance(value, bool):
            raise SettingsError(f"{name} must be a boolean")
    elif name in LIST_SETTINGS:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise SettingsError(f"{name} must be a list of strings")
        if any("," in v for v in value):
            raise SettingsError(f"{name} entries cannot contain commas")
    else:
        raise SettingsError(f"Unknown setting: {name}")
