# projpick Package
"""
Project picker for Ignis/Wayland.

Lists folders under a projects root, ranks them by frecency, filters them
by typed text and opens the chosen one in an editor.
"""

__version__ = "0.1.0-dev"
