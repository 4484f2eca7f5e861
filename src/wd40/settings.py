"""JSON-backed user settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from wd40.models.options import ScanOptions
from wd40.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "wd-40"
_SETTINGS_FILE = "settings.json"

_DEFAULTS = ScanOptions()


class Settings:
    """Read-only settings backed by a JSON file the user edits by hand.

    Uses dot-notation keys for nested access:
        settings.get("scan.workers")          # reads data["scan"]["workers"]

    Recognised keys: ``scan.workers``, ``scan.fan_out_depth``,
    ``scan.max_depth``, ``rules.sccache_names`` and ``rules.venv_names``.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_int(self, key: str, default: int | None, minimum: int = 0) -> int | None:
        """Get an integer setting, falling back to ``default`` on bad values."""
        value = self.get(key, default)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            log.warning("Invalid value for %s in %s: %r", key, self._path, value)
            return default
        return value

    def get_names(self, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
        """Get a list-of-strings setting as a tuple."""
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
            log.warning("Invalid value for %s in %s: %r", key, self._path, value)
            return default
        return tuple(value)

    def scan_defaults(self) -> dict[str, Any]:
        """ScanOptions keyword arguments taken from the settings file."""
        return {
            "workers": self.get_int("scan.workers", _DEFAULTS.workers, minimum=1),
            "fan_out_depth": self.get_int("scan.fan_out_depth", _DEFAULTS.fan_out_depth),
            "max_depth": self.get_int("scan.max_depth", _DEFAULTS.max_depth),
            "sccache_names": self.get_names("rules.sccache_names", _DEFAULTS.sccache_names),
            "venv_names": self.get_names("rules.venv_names", _DEFAULTS.venv_names),
        }

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Ignoring settings file %s: top level is not an object", self._path)
            return
        self._data = data
