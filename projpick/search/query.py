"""
Project Query - Turn typed text into a filtered, ordered project list.

The query is split on "/": everything before the last slash is a subpath
to list (so "work/api/" browses inside work/api), and the text after it is
the search term matched against folder names in that directory.

Matching is an ordered subsequence match: "abc" matches "a1b2c3".
"""

import os
import re


def split_query(query: str) -> tuple[str, str]:
    """
    Split a query into (subpath, search_term).

    Example:
        split_query("work/api/srv") -> ("work/api", "srv")
        split_query("srv") -> ("", "srv")
    """
    subpath, _, term = query.rpartition("/")
    return subpath, term


def descend_query(subpath: str, name: str) -> str:
    """Query that browses inside project `name` of the current subpath."""
    return f"{os.path.join(subpath.lstrip('/'), name)}/"


def build_search_pattern(term: str) -> re.Pattern:
    """
    Build a case-insensitive regex matching names that contain the
    characters of `term` in order, with anything in between.

    An empty term matches every name.
    """
    return re.compile(".*".join(re.escape(ch) for ch in term), re.IGNORECASE | re.DOTALL)


def _match_rank(name: str, term: str) -> tuple[bool, bool]:
    # Exact (case-insensitive) match first, then contiguous substring, then the rest
    name = name.lower()
    return name != term, term not in name


def filter_projects(projects, term: str) -> list:
    """
    Filter frecency-ranked projects by `term` and reorder the matches.

    Args:
        projects: Projects already ordered by frecency
        term: Search term (no path separators)

    Returns:
        Matching projects. A name equal to the term comes first, then names
        containing the term contiguously, then other subsequence matches.
        Within each group the frecency order is kept.
    """
    pattern = build_search_pattern(term)
    matches = [p for p in projects if pattern.search(p.name)]

    term = term.lower()
    return sorted(matches, key=lambda p: _match_rank(p.name, term))
