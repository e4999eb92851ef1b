"""
Tests for settings loading, deep merge logic and the projects directory.

Uses real TOML files on disk (no mocking).
"""

import locale

import pytest
import toml

from projpick.services.projects import Project
from projpick.utils.helpers import (
    DEFAULT_SETTINGS,
    SettingsError,
    _deep_merge,
    get_exclude_folders,
    get_projects_directory,
    load_settings,
    settings_path,
    use_user_collation,
)


class TestDeepMerge:
    """Test the _deep_merge function directly."""

    def test_override_replaces_flat_key(self):
        result = _deep_merge({"a": 1, "b": 2}, {"b": 99})
        assert result == {"a": 1, "b": 99}

    def test_nested_dicts_are_merged(self):
        base = {"section": {"a": 1, "b": 2}}
        override = {"section": {"b": 99, "c": 3}}
        assert _deep_merge(base, override) == {"section": {"a": 1, "b": 99, "c": 3}}

    def test_base_is_not_mutated(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})
        assert base["a"]["x"] == 1


class TestLoadSettings:
    """Test load_settings with real TOML files."""

    def test_returns_defaults_when_file_missing(self, tmp_path):
        settings = load_settings(tmp_path / "nonexistent.toml")
        assert settings == DEFAULT_SETTINGS
        assert settings["launcher"]["editor"] == "e"

    def test_loaded_values_override_defaults(self, tmp_settings):
        settings = load_settings(tmp_settings)
        assert settings["launcher"]["editor"] == "code"
        assert settings["launcher"]["close_delay_ms"] == 100
        assert settings["launcher"]["shell_env_timeout"] == 5.0
        assert settings["projects"]["directory"] == "/home/user/code"

    def test_invalid_toml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("[projects\ndirectory = ")
        assert load_settings(path) == DEFAULT_SETTINGS

    def test_defaults_are_not_shared(self, tmp_path):
        settings = load_settings(tmp_path / "nonexistent.toml")
        settings["projects"]["exclude"].append("target")
        assert DEFAULT_SETTINGS["projects"]["exclude"] == ["node_modules"]

    def test_settings_path_honours_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert settings_path() == tmp_path / "projpick" / "settings.toml"


class TestProjectsDirectory:
    def test_configured_directory(self, tmp_settings):
        assert get_projects_directory(load_settings(tmp_settings)) == "/home/user/code"

    def test_home_is_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = {"projects": {"directory": "~/code"}}
        assert get_projects_directory(settings) == str(tmp_path / "code")

    def test_missing_directory_raises(self):
        with pytest.raises(SettingsError, match="not set"):
            get_projects_directory({"projects": {"directory": ""}})

    def test_relative_directory_raises(self):
        with pytest.raises(SettingsError, match="absolute"):
            get_projects_directory({"projects": {"directory": "code"}})

    def test_exclude_always_has_node_modules(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text(toml.dumps({"projects": {"exclude": ["target"]}}))
        assert get_exclude_folders(load_settings(path)) == {"target", "node_modules"}


@pytest.fixture
def restore_collation():
    saved = locale.setlocale(locale.LC_COLLATE)
    yield
    locale.setlocale(locale.LC_COLLATE, saved)


class TestCollation:
    """Unvisited projects follow the collation picked at startup."""

    def test_applies_environment_locale(self, restore_collation, monkeypatch):
        monkeypatch.setenv("LC_ALL", "C")
        assert use_user_collation() is True
        assert locale.setlocale(locale.LC_COLLATE) == "C"

    def test_c_collation_puts_capitals_first(self, restore_collation, monkeypatch, frecency):
        monkeypatch.setenv("LC_ALL", "C")
        use_user_collation()
        projects = [Project(n, f"/code/{n}") for n in ["alpha", "Zeta", "api"]]
        assert [p.name for p in frecency.sort(projects)] == ["Zeta", "alpha", "api"]

    def test_unknown_locale_keeps_current(self, restore_collation, monkeypatch):
        before = locale.setlocale(locale.LC_COLLATE)
        monkeypatch.setenv("LC_ALL", "xx_NOWHERE.UTF-8")
        assert use_user_collation() is False
        assert locale.setlocale(locale.LC_COLLATE) == before
