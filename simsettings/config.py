"""Tool configuration — read-only JSON file layered over built-in defaults."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

_instance: "Config | None" = None

# Default data directory
_DEFAULT_DATA_DIR = Path.home() / "Documents" / "SimulatorSettings"


def get_config() -> Config:
    """Module-level factory — single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config()
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


class Config:
    """
    Where the simulator lives and which tools drive it.

    ``<data_dir>/config.json`` overrides any subset of ``_DEFAULTS``; nested
    sections are merged key by key. The file is never written back.
    """

    _DEFAULTS: dict[str, Any] = {
        "simulator_root": "",
        "sdk_versions": ["6.1", "7.0"],
        "log_level": "INFO",
        "plist": {
            "encoder": "plutil",
            "plutil_path": "/usr/bin/plutil",
            "template_path": "",
        },
        "simulator": {
            "defaults_command": "defaults",
            "domain": "com.apple.iphonesimulator",
        },
    }

    def __init__(self, config_dir: Path | None = None) -> None:
        self._dir = config_dir or _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if not self._path.exists():
            return data
        try:
            with open(self._path, encoding="utf-8") as f:
                user_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load {self._path}, using defaults: {e}")
            return data
        if isinstance(user_data, dict):
            _merge_sections(data, user_data)
        else:
            logger.warning(f"Ignoring {self._path}: expected a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key path."""
        node = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def simulator_root(self) -> Path | None:
        raw = self.get("simulator_root", "")
        return Path(raw) if raw else None

    @property
    def sdk_versions(self) -> list[str]:
        return list(self.get("sdk_versions", []))

    @property
    def log_level(self) -> str:
        return self.get("log_level", "INFO")

    @property
    def encoder(self) -> str:
        return self.get("plist.encoder", "plutil")

    @property
    def plutil_path(self) -> Path:
        return Path(self.get("plist.plutil_path", "/usr/bin/plutil"))

    @property
    def template_path(self) -> Path | None:
        raw = self.get("plist.template_path", "")
        return Path(raw) if raw else None

    @property
    def defaults_command(self) -> str:
        return self.get("simulator.defaults_command", "defaults")

    @property
    def simulator_domain(self) -> str:
        return self.get("simulator.domain", "com.apple.iphonesimulator")


def _merge_sections(base: dict, override: dict) -> None:
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_sections(base[key], value)
        else:
            base[key] = value
