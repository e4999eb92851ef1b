"""
Project Lister - Discover project folders under the configured root.

A project is any immediate subdirectory of the root (or of a subpath the
user typed). Hidden folders and a small denylist are skipped.
"""

import os
import stat
from dataclasses import dataclass

from loguru import logger

EXCLUDE_FOLDERS = frozenset({"node_modules"})


@dataclass(frozen=True)
class Project:
    """A project folder. Identity is its absolute path."""
    name: str
    path: str

    @property
    def id(self) -> str:
        return self.path


def project_directory(root: str, subpath: str = "") -> str:
    """Join the projects root with a user-typed subpath (always under the root)."""
    return os.path.join(os.path.expanduser(root), subpath.lstrip("/"))


def list_projects(directory: str, exclude=EXCLUDE_FOLDERS) -> list[Project]:
    """
    List immediate child directories of `directory` as Projects.

    Args:
        directory: Absolute directory to read
        exclude: Folder names that are never projects

    Returns:
        Unordered list of Projects. Empty if the directory can't be read.
    """
    try:
        names = os.listdir(directory)
    except OSError:
        logger.exception(f"Error reading directory: {directory}")
        return []

    projects = []
    for name in names:
        if name.startswith(".") or name in exclude:
            continue

        path = os.path.join(directory, name)
        if not _is_directory(path):
            continue

        projects.append(Project(name=name, path=path))

    logger.debug(f"Found {len(projects)} projects in {directory}")
    return projects


def _is_directory(path: str) -> bool:
    """Stat `path` (following symlinks); unreadable entries count as non-dirs."""
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return False
