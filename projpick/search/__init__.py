"""
Search package - Query parsing, filtering and the picker controller.
"""

from .picker import Action, Presenter, ProjectPicker
from .query import filter_projects, split_query

__all__ = ["Action", "Presenter", "ProjectPicker", "filter_projects", "split_query"]
