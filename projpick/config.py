"""
projpick - Main Ignis Configuration

This file is the entry point for Ignis. It loads settings, creates the
projects panel and its window.

Usage:
  ignis init -c /path/to/projpick/config.py
  ignis open-window projpick-projects
"""

import os

from ignis.app import IgnisApp
from loguru import logger

from projpick.panels.projects import ProjectsPanel
from projpick.services.frecency import get_frecency_service
from projpick.services.launcher import EditorLauncher
from projpick.utils.helpers import (
    get_exclude_folders,
    get_projects_directory,
    load_settings,
    use_user_collation,
)

app = IgnisApp.get_default()

config_dir = os.path.dirname(os.path.realpath(__file__))
styles_path = os.path.join(config_dir, "styles", "main.css")
if os.path.exists(styles_path):
    app.apply_css(styles_path)

settings = load_settings()
use_user_collation()

# Raises SettingsError when projects.directory is missing; nothing to show without it
projects_directory = get_projects_directory(settings)

frecency = get_frecency_service(settings["frecency"]["db_path"] or None)
launcher = EditorLauncher(
    command=settings["launcher"]["editor"],
    env_timeout=settings["launcher"]["shell_env_timeout"],
)

projects_panel = ProjectsPanel(
    projects_directory,
    frecency,
    launcher,
    exclude=get_exclude_folders(settings),
    close_delay_ms=settings["launcher"]["close_delay_ms"],
)
projects_window = projects_panel.create_window()
projects_window.panel = projects_panel

logger.info(f"projpick initialized for {projects_directory}")
