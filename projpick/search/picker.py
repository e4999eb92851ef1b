"""
Project Picker - Query state, listing refresh, and item actions.

Ties the lister, frecency ranker, query filter and editor launcher
together without depending on any UI toolkit. A Presenter (the ignis
panel in production, a stub in tests) receives the results.

Listings are tagged with a generation number. When the user types a new
subpath before the previous listing finished, the older result is dropped
on arrival ("keep latest"); nothing is cancelled mid-read.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from projpick.search.query import descend_query, filter_projects, split_query
from projpick.services.launcher import LaunchError, copy_to_clipboard, show_in_file_browser
from projpick.services.projects import EXCLUDE_FOLDERS, list_projects, project_directory


@dataclass(frozen=True)
class Shortcut:
    """Key binding for an action, in GTK accelerator terms."""
    key: str
    modifiers: tuple[str, ...] = ()


class Action(Enum):
    """Actions available on a project row."""
    OPEN = ("Open in Editor", Shortcut("Return"))
    SEARCH_IN_PROJECT = ("Search in This Project", Shortcut("Tab"))
    SHOW_IN_FILE_BROWSER = ("Show in File Browser", Shortcut("f", ("ctrl",)))
    COPY_PATH = ("Copy Path", Shortcut("period", ("ctrl",)))
    RESET_RANKING = ("Reset Project Ranking", Shortcut("r", ("ctrl",)))

    def __init__(self, title: str, shortcut: Shortcut):
        self.title = title
        self.shortcut = shortcut

    @classmethod
    def for_key(cls, key: str, modifiers=()) -> "Action | None":
        """Find the action bound to `key` with exactly `modifiers` held."""
        held = tuple(sorted(modifiers))
        for action in cls:
            if action.shortcut.key == key and tuple(sorted(action.shortcut.modifiers)) == held:
                return action
        return None


class Presenter(ABC):
    """What the picker needs from a UI."""

    @abstractmethod
    def render(self, projects: list) -> None:
        """Show `projects` in display order."""
        ...

    @abstractmethod
    def set_query(self, query: str) -> None:
        """Replace the text in the search field."""
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Tell the user something went wrong."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Dismiss the picker."""
        ...


class ProjectPicker:
    """Filterable, frecency-ranked list of projects under a root directory."""

    def __init__(self, root: str, frecency, launcher, presenter: Presenter = None,
                 exclude=EXCLUDE_FOLDERS):
        self.root = root
        self.frecency = frecency
        self.launcher = launcher
        self.presenter = presenter
        self.exclude = exclude

        self.query = ""
        self.projects = []
        self._generation = 0
        self._listed_directory = None

    @property
    def subpath(self) -> str:
        return split_query(self.query)[0]

    @property
    def search_term(self) -> str:
        return split_query(self.query)[1]

    @property
    def directory(self) -> str:
        """Directory the current query browses."""
        return project_directory(self.root, self.subpath)

    def on_query_change(self, query: str) -> bool:
        """
        Update the query and re-render.

        Returns:
            True if the browsed directory changed and a new listing is needed
        """
        self.query = query
        needs_listing = self.directory != self._listed_directory
        self._render()
        return needs_listing

    def begin_listing(self) -> tuple[int, str]:
        """Start a listing of the current directory. Older listings become stale."""
        self._generation += 1
        self._listed_directory = self.directory
        return self._generation, self._listed_directory

    def finish_listing(self, generation: int, projects: list) -> bool:
        """
        Accept a listing result unless a newer listing was started since.

        Returns:
            True if the result was applied
        """
        if generation != self._generation:
            logger.debug(f"Dropping stale listing {generation} (latest {self._generation})")
            return False

        self.projects = projects
        self._render()
        return True

    def load(self, directory: str) -> list:
        """Read `directory` (safe to call from a worker thread)."""
        return list_projects(directory, self.exclude)

    def refresh(self) -> None:
        """List the current directory synchronously."""
        generation, directory = self.begin_listing()
        self.finish_listing(generation, self.load(directory))

    def visible_projects(self) -> list:
        """Projects in display order for the current query."""
        ranked = self.frecency.sort(self.projects)
        return filter_projects(ranked, self.search_term)

    def find_project(self, project_id: str):
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def on_action(self, project_id: str, action: Action) -> None:
        """Run `action` on the project with id `project_id`."""
        project = self.find_project(project_id)
        if project is None:
            logger.warning(f"Ignoring {action.name} for unknown project {project_id}")
            return

        if action is Action.OPEN:
            self.open_project(project)
        elif action is Action.SEARCH_IN_PROJECT:
            self.search_in_project(project)
        elif action is Action.SHOW_IN_FILE_BROWSER:
            show_in_file_browser(project.path)
        elif action is Action.COPY_PATH:
            copy_to_clipboard(project.path)
        elif action is Action.RESET_RANKING:
            self.frecency.reset_ranking(project)
            self._render()

    def open_project(self, project) -> bool:
        """
        Record a visit and open `project` in the editor.

        Blocks while the shell environment resolves; the panel calls this
        from a worker thread.

        Returns:
            True if the editor was started
        """
        self.frecency.visit(project)

        try:
            env = self.launcher.resolve_environment()
            self.launcher.launch(project.path, env)
        except LaunchError as e:
            logger.error(f"Failed to open {project.path}: {e}")
            if self.presenter:
                self.presenter.show_error(str(e))
            return False

        if self.presenter:
            self.presenter.close()
        return True

    def search_in_project(self, project) -> None:
        """Browse one level down into `project`."""
        query = descend_query(self.subpath, project.name)
        if self.presenter:
            self.presenter.set_query(query)
        elif self.on_query_change(query):
            self.refresh()

    def _render(self):
        if self.presenter:
            self.presenter.render(self.visible_projects())
