"""
Frecency Service - Rank projects by how often and how recently they were opened.

Implements a Firefox-style frecency algorithm:
  frecency_score = visit_count * recency_weight

Where recency_weight depends on how recently the project was opened:
  - < 4 days: 100x multiplier
  - < 14 days: 70x multiplier
  - < 31 days: 50x multiplier
  - < 90 days: 30x multiplier
  - 90+ days: 10x multiplier

Projects that were never opened are ordered by a fallback key (the folder
name, locale-aware) and always come after visited ones.
"""

import locale
import sqlite3
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "projpick" / "frecency.db"


def sort_by_name(project) -> str:
    """Fallback order for unvisited projects: locale-aware, by raw name."""
    return locale.strxfrm(project.name)


class FrecencyService:
    """
    Service for tracking project visits and ordering projects by frecency.

    Methods:
        visit(project): Record that a project was opened
        reset_ranking(project): Forget a project's visit history
        sort(projects): Order projects by frecency, unvisited last
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Persistent connection with WAL mode. The panel opens projects from
        # worker threads while the main loop sorts, so all access holds _lock
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_database()
        logger.debug(f"FrecencyService initialized with db at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        cursor = self._conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS project_stats (
                project_key TEXT PRIMARY KEY,
                visit_count INTEGER DEFAULT 0,
                last_visit INTEGER,
                created_at INTEGER
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_frecency
            ON project_stats(last_visit DESC, visit_count DESC)
        """)

        self._conn.commit()

    def visit(self, project) -> None:
        """Record a visit for `project` (keyed by its path)."""
        self.record_visit(project.path)

    def reset_ranking(self, project) -> None:
        """Clear recorded visits so `project` falls back to name order."""
        self.clear_stats(project.path)

    def record_visit(self, key: str) -> None:
        """
        Record a project visit.

        Args:
            key: Absolute project path
        """
        now = int(time.time())

        try:
            with self._lock:
                cursor = self._conn.cursor()
                cursor.execute("""
                    INSERT INTO project_stats (project_key, visit_count, last_visit, created_at)
                    VALUES (?, 1, ?, ?)
                    ON CONFLICT(project_key) DO UPDATE SET
                        visit_count = visit_count + 1,
                        last_visit = excluded.last_visit
                """, (key, now, now))
                self._conn.commit()
            logger.debug(f"Recorded visit for {key}")
        except sqlite3.Error:
            logger.exception(f"Failed to record visit for {key}")

    def sort(self, projects, sort_unvisited: Optional[Callable] = None) -> list:
        """
        Order projects by frecency.

        Args:
            projects: Iterable of Projects
            sort_unvisited: Key function for projects with no visits
                (defaults to locale-aware name order)

        Returns:
            Visited projects by score descending (ties keep input order),
            followed by unvisited projects in fallback order.
        """
        projects = list(projects)
        scores = self.get_scores(p.path for p in projects)

        visited = [p for p in projects if p.path in scores]
        unvisited = [p for p in projects if p.path not in scores]

        visited.sort(key=lambda p: scores[p.path], reverse=True)
        unvisited.sort(key=sort_unvisited or sort_by_name)
        return visited + unvisited

    def get_scores(self, keys) -> dict[str, float]:
        """
        Get frecency scores for the given project keys.

        Keys with no recorded visits are absent from the result. If the
        database can't be read, every key is treated as unvisited.
        """
        keys = list(keys)
        if not keys:
            return {}

        placeholders = ",".join("?" * len(keys))
        try:
            with self._lock:
                cursor = self._conn.cursor()
                cursor.execute(f"""
                    SELECT project_key, visit_count, last_visit
                    FROM project_stats
                    WHERE project_key IN ({placeholders}) AND visit_count > 0
                """, keys)
                rows = cursor.fetchall()
        except sqlite3.Error:
            logger.exception("Failed to read frecency scores")
            return {}

        return {
            key: self._calculate_frecency(visit_count, last_visit)
            for key, visit_count, last_visit in rows
        }

    def get_project_stats(self, key: str) -> tuple[int, int, int] | None:
        """
        Get statistics for a specific project.

        Returns:
            Tuple of (visit_count, last_visit, created_at) or None if not found
        """
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("""
                SELECT visit_count, last_visit, created_at
                FROM project_stats
                WHERE project_key = ?
            """, (key,))
            row = cursor.fetchone()

        return row if row else None

    def _calculate_frecency(self, visit_count: int, last_visit: int) -> float:
        """
        Calculate frecency score using Firefox's algorithm.

        Args:
            visit_count: Number of times the project was opened
            last_visit: Unix timestamp of the last visit

        Returns:
            Frecency score (float)
        """
        age_days = (time.time() - last_visit) / (24 * 3600)

        if age_days < 4:
            recency_weight = 100
        elif age_days < 14:
            recency_weight = 70
        elif age_days < 31:
            recency_weight = 50
        elif age_days < 90:
            recency_weight = 30
        else:
            recency_weight = 10

        return visit_count * recency_weight

    def get_total_visits(self) -> int:
        """Total number of project visits tracked."""
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("SELECT SUM(visit_count) FROM project_stats")
            result = cursor.fetchone()
        return result[0] if result[0] else 0

    def clear_stats(self, key: str | None = None) -> None:
        """
        Clear visit statistics.

        Args:
            key: If provided, clear only this project's stats.
                 If None, clear all stats.
        """
        try:
            with self._lock:
                cursor = self._conn.cursor()

                if key:
                    cursor.execute("DELETE FROM project_stats WHERE project_key = ?", (key,))
                else:
                    cursor.execute("DELETE FROM project_stats")

                self._conn.commit()
            logger.debug(f"Cleared stats for {key or 'all projects'}")
        except sqlite3.Error:
            logger.exception(f"Failed to clear stats for {key or 'all projects'}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()


# Singleton accessor
_frecency_service_instance = None


def get_frecency_service(db_path: Optional[Path] = None) -> FrecencyService:
    """
    Get the singleton FrecencyService instance.

    Args:
        db_path: Database location, only used when the instance is created

    Returns:
        FrecencyService: The global instance
    """
    global _frecency_service_instance
    if _frecency_service_instance is None:
        _frecency_service_instance = FrecencyService(db_path)
    return _frecency_service_instance
