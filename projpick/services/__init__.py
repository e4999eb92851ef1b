# projpick Services Package
"""
Backend services: project discovery, frecency ranking, editor launching.
"""

from .frecency import FrecencyService
from .launcher import EditorLauncher, LaunchError
from .projects import Project, list_projects

__all__ = ["FrecencyService", "EditorLauncher", "LaunchError", "Project", "list_projects"]
