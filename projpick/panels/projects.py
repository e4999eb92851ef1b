"""
Projects Panel - Search entry and frecency-ranked project list.

Features:
- Ordered-subsequence filtering as you type
- "/" in the query browses into subdirectories
- Keyboard navigation (arrows, Enter to open, Tab to descend)
- Ctrl+F show in file browser, Ctrl+. copy path, Ctrl+R reset ranking
- Errors from opening a project are shown under the search entry

Directory reads and editor launches run on worker threads; every UI
update is posted back to the GTK main loop with GLib.idle_add.
"""

import threading

from gi.repository import Gdk, GLib, Gtk
from ignis import widgets
from loguru import logger

from projpick.search.picker import Action, Presenter, ProjectPicker
from projpick.utils.helpers import close_launcher, get_focused_monitor

MAX_RESULTS = 50

_MODIFIER_NAMES = {
    Gdk.ModifierType.CONTROL_MASK: "ctrl",
    Gdk.ModifierType.SHIFT_MASK: "shift",
    Gdk.ModifierType.ALT_MASK: "alt",
}


def _run_in_thread(target, *args):
    threading.Thread(target=target, args=args, daemon=True).start()


class ProjectsPanel(Presenter):
    """Layer-shell window presenting a ProjectPicker."""

    def __init__(self, root: str, frecency, launcher, exclude, close_delay_ms: int = 300):
        self.picker = ProjectPicker(root, frecency, launcher, presenter=self, exclude=exclude)
        self.close_delay_ms = close_delay_ms

        self.visible = []
        self.selected_index = 0

        # Widgets (created in create_window)
        self.search_entry = None
        self.results_box = None
        self.status_label = None
        self.result_buttons = []

    def create_window(self):
        """
        Create the projects window.

        Returns:
            widgets.Window positioned at top center
        """
        self.search_entry = widgets.Entry(
            placeholder_text="Search projects... (use / for subdirectories)",
            css_classes=["search-entry"],
            on_change=lambda x: self._on_search_changed(),
        )

        self.status_label = widgets.Label(
            label="",
            visible=False,
            css_classes=["error-label"],
            wrap=True,
        )

        self.results_box = widgets.Box(
            vertical=True,
            spacing=2,
            css_classes=["search-results"],
        )

        window = widgets.Window(
            namespace="projpick-projects",
            monitor=get_focused_monitor(),
            anchor=["top"],
            exclusivity="normal",
            kb_mode="on_demand",
            layer="top",
            default_width=600,
            default_height=700,
            child=widgets.Box(
                vertical=True,
                css_classes=["panel", "projects-panel"],
                child=[
                    self.search_entry,
                    self.status_label,
                    widgets.Scroll(
                        vexpand=True,
                        hexpand=True,
                        child=self.results_box,
                    ),
                ],
            ),
        )

        key_controller = Gtk.EventControllerKey()
        # Capture phase so Tab reaches us before the entry moves focus
        key_controller.set_propagation_phase(Gtk.PropagationPhase.CAPTURE)
        key_controller.connect("key-pressed", self._on_key_press)
        window.add_controller(key_controller)

        window.connect("notify::visible", self._on_visibility_changed)

        self._request_listing()
        return window

    # Presenter

    def render(self, projects):
        GLib.idle_add(self._render_idle, list(projects))

    def set_query(self, query):
        GLib.idle_add(self._set_query_idle, query)

    def show_error(self, message):
        GLib.idle_add(self._show_error_idle, message)

    def close(self):
        GLib.timeout_add(self.close_delay_ms, self._close_idle)

    # Main-loop callbacks (return False so they run once)

    def _render_idle(self, projects):
        self.visible = projects
        self.selected_index = 0
        self._rebuild_results()
        return False

    def _set_query_idle(self, query):
        self.search_entry.set_text(query)
        self.search_entry.set_position(-1)
        return False

    def _show_error_idle(self, message):
        self.status_label.set_label(message)
        self.status_label.set_visible(True)
        return False

    def _close_idle(self):
        close_launcher()
        return False

    # Listing

    def _on_search_changed(self):
        self.status_label.set_visible(False)
        if self.picker.on_query_change(self.search_entry.text):
            self._request_listing()

    def _request_listing(self):
        generation, directory = self.picker.begin_listing()
        _run_in_thread(self._list_in_background, generation, directory)

    def _list_in_background(self, generation, directory):
        projects = self.picker.load(directory)
        GLib.idle_add(self._apply_listing, generation, projects)

    def _apply_listing(self, generation, projects):
        self.picker.finish_listing(generation, projects)
        return False

    # Results

    def _rebuild_results(self):
        child = self.results_box.get_first_child()
        while child:
            next_child = child.get_next_sibling()
            self.results_box.remove(child)
            child = next_child

        self.result_buttons = []
        for project in self.visible[:MAX_RESULTS]:
            button = self._create_result_button(project)
            self.results_box.append(button)
            self.result_buttons.append(button)

        if not self.result_buttons:
            self.results_box.append(widgets.Label(
                label="No projects",
                css_classes=["empty-state"],
            ))

        self._update_selection_highlight()

    def _create_result_button(self, project):
        return widgets.Button(
            css_classes=["project-item", "result-item"],
            tooltip_text=project.path,
            on_click=lambda x, p=project: self._run_action(p, Action.OPEN),
            child=widgets.Box(
                spacing=8,
                child=[
                    widgets.Icon(image="folder", pixel_size=24, css_classes=["project-icon"]),
                    widgets.Label(
                        label=project.name,
                        css_classes=["project-name"],
                        ellipsize="end",
                        max_width_chars=50,
                    ),
                ],
            ),
        )

    def _run_action(self, project, action):
        logger.debug(f"{action.title}: {project.path}")
        if action is Action.OPEN:
            # Shell environment lookup can take seconds
            _run_in_thread(self.picker.on_action, project.id, action)
        else:
            self.picker.on_action(project.id, action)

    # Keyboard

    def _on_key_press(self, controller, keyval, keycode, state):
        """Arrows move the selection, Escape closes, action shortcuts run on the selection."""
        if keyval == Gdk.KEY_Escape:
            close_launcher()
            return True

        if keyval == Gdk.KEY_Down:
            if self.selected_index < len(self.result_buttons) - 1:
                self.selected_index += 1
                self._update_selection_highlight()
            return True

        if keyval == Gdk.KEY_Up:
            if self.selected_index > 0:
                self.selected_index -= 1
                self._update_selection_highlight()
            return True

        modifiers = [name for mask, name in _MODIFIER_NAMES.items() if state & mask]
        action = Action.for_key(Gdk.keyval_name(keyval), modifiers)
        if action is None or not (0 <= self.selected_index < len(self.result_buttons)):
            return False

        self._run_action(self.visible[self.selected_index], action)
        return True

    def _update_selection_highlight(self):
        for i, button in enumerate(self.result_buttons):
            if i == self.selected_index:
                button.add_css_class("keyboard-selected")
            else:
                button.remove_css_class("keyboard-selected")

    def _on_visibility_changed(self, window, param):
        """Reset on close, re-read the root and grab focus on open."""
        if window.get_visible():
            focused = get_focused_monitor()
            if window.monitor != focused:
                window.monitor = focused
            self._request_listing()
            self.search_entry.grab_focus()
        else:
            self.search_entry.set_text("")
            self.status_label.set_visible(False)
