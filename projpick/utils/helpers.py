"""
Helper utilities for the projpick launcher.

Provides:
- Settings loading (TOML, merged over defaults)
- Projects directory lookup
- Launcher window management
"""

import copy
import json
import locale
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

WINDOW_NAMESPACE_PREFIX = "projpick-"

DEFAULT_SETTINGS = {
    "projects": {
        "directory": "",
        "exclude": ["node_modules"],
    },
    "launcher": {
        "editor": "e",
        "close_delay_ms": 300,
        "shell_env_timeout": 5.0,
    },
    "frecency": {
        "db_path": "",
    },
}


class SettingsError(Exception):
    """A required setting is missing or invalid."""


def settings_path() -> Path:
    """Location of settings.toml ($XDG_CONFIG_HOME/projpick/settings.toml)."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "projpick" / "settings.toml"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        path: Settings file, defaults to settings_path()

    Returns:
        Dictionary containing settings with defaults applied

    Example settings.toml:
        [projects]
        directory = "~/code"
        exclude = ["node_modules", "target"]

        [launcher]
        editor = "e"
    """
    path = Path(path) if path else settings_path()

    if not path.exists():
        logger.info(f"Settings file not found at {path}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Could not load settings from {path}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    return _deep_merge(copy.deepcopy(DEFAULT_SETTINGS), loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_projects_directory(settings: Dict[str, Any]) -> str:
    """
    Get the configured projects root.

    Raises:
        SettingsError: directory not set or not an absolute path
    """
    directory = settings["projects"].get("directory") or ""
    if not directory:
        raise SettingsError(f"projects.directory is not set in {settings_path()}")

    directory = os.path.expanduser(directory)
    if not os.path.isabs(directory):
        raise SettingsError(f"projects.directory must be an absolute path, got {directory!r}")

    return directory


def get_exclude_folders(settings: Dict[str, Any]) -> frozenset:
    """Folder names never listed as projects (always includes node_modules)."""
    return frozenset(settings["projects"].get("exclude", [])) | {"node_modules"}


def use_user_collation() -> bool:
    """
    Sort names with the user's collation (LC_COLLATE from the environment).

    Python starts with the C locale, where "Zeta" sorts before "alpha".

    Returns:
        True if the user's locale was applied, False if it is unavailable
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("User locale unavailable, sorting project names in C collation order")
        return False
    return True


def get_focused_monitor() -> int:
    """
    Get the ID of the currently focused monitor in Hyprland.

    Returns:
        Monitor ID (int), defaults to 0 if detection fails
    """
    try:
        result = subprocess.run(
            ["hyprctl", "monitors", "-j"],
            capture_output=True,
            text=True,
            timeout=1,
        )
        if result.returncode == 0:
            for monitor in json.loads(result.stdout):
                if monitor.get("focused", False):
                    return monitor["id"]
    except (OSError, subprocess.TimeoutExpired, ValueError):
        logger.debug("hyprctl unavailable, using monitor 0")

    return 0


def close_launcher():
    """Hide all projpick windows."""
    from ignis.app import IgnisApp

    app = IgnisApp.get_default()

    for window in app.get_windows():
        if window.namespace and window.namespace.startswith(WINDOW_NAMESPACE_PREFIX):
            window.set_visible(False)
