"""Simulator path resolver — content-and-settings folder and the preference files under it."""

from __future__ import annotations

from pathlib import Path

# Relative to the user's home directory
_SIMULATOR_SUPPORT_DIR = Path("Library") / "Application Support" / "iPhone Simulator"

_PREFERENCES_DIR = Path("Library") / "Preferences"
_LOCATIOND_CACHE_DIR = Path("Library") / "Caches" / "locationd"


def default_simulator_root(home: Path | None = None) -> Path:
    """Per-user parent of every SDK's content-and-settings folder."""
    return (home or Path.home()) / _SIMULATOR_SUPPORT_DIR


def resolve_content_directory(requested_version: str, root: Path | None = None) -> Path:
    """Content-and-settings folder for one SDK version, e.g. ``.../iPhone Simulator/7.0``."""
    return (root or default_simulator_root()) / requested_version


def resolve_preferences_directory(content_dir: Path) -> Path:
    return content_dir / _PREFERENCES_DIR


def resolve_global_preference_file(content_dir: Path) -> Path:
    """Locale and language live here."""
    return resolve_preferences_directory(content_dir) / ".GlobalPreferences.plist"


def resolve_keyboard_preference_file(content_dir: Path) -> Path:
    return resolve_preferences_directory(content_dir) / "com.apple.Preferences.plist"


def resolve_browser_preference_file(content_dir: Path) -> Path:
    return resolve_preferences_directory(content_dir) / "com.apple.mobilesafari.plist"


def resolve_location_clients_file(content_dir: Path) -> Path:
    """Per-app location authorizations kept by locationd."""
    return content_dir / _LOCATIOND_CACHE_DIR / "clients.plist"
