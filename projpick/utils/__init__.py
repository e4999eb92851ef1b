# projpick Utilities Package
"""
Shared utility functions and helpers for projpick.
"""

from .helpers import load_settings, get_projects_directory, SettingsError

__all__ = ["load_settings", "get_projects_directory", "SettingsError"]
