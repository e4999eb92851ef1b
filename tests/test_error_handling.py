"""
Tests for error handling across services.

Verifies graceful degradation when things go wrong:
- Closed/unusable database
- Unreadable project directories
"""

from projpick.services.projects import Project, list_projects


def _project(name):
    return Project(name=name, path=f"/code/{name}")


class TestFrecencyErrorHandling:
    """FrecencyService keeps working (unranked) when the database is unusable."""

    def test_visit_survives_closed_connection(self, frecency):
        frecency.close()
        # Should not raise, logs exception internally
        frecency.visit(_project("api"))

    def test_reset_survives_closed_connection(self, frecency):
        frecency.visit(_project("api"))
        frecency.close()
        frecency.reset_ranking(_project("api"))

    def test_sort_falls_back_to_name_order(self, frecency):
        frecency.visit(_project("web"))
        frecency.close()
        result = frecency.sort([_project("web"), _project("api")])
        assert [p.name for p in result] == ["api", "web"]

    def test_get_project_stats_returns_none_for_missing(self, frecency):
        assert frecency.get_project_stats("/code/nonexistent") is None

    def test_get_total_visits_empty_db(self, frecency):
        assert frecency.get_total_visits() == 0

    def test_reopening_keeps_history(self, tmp_db):
        from projpick.services.frecency import FrecencyService

        first = FrecencyService(tmp_db)
        first.visit(_project("api"))
        first.close()

        second = FrecencyService(tmp_db)
        assert second.get_project_stats("/code/api")[0] == 1
        second.close()


class TestListingErrorHandling:
    def test_entry_vanishing_is_skipped(self, projects_root):
        import os
        from unittest.mock import patch

        real_stat = os.stat

        def flaky_stat(path, *args, **kwargs):
            if str(path).endswith("alpha"):
                raise PermissionError(13, "Permission denied", str(path))
            return real_stat(path, *args, **kwargs)

        with patch("projpick.services.projects.os.stat", side_effect=flaky_stat):
            names = {p.name for p in list_projects(str(projects_root))}

        assert names == {"api", "web-client", "Zeta"}
