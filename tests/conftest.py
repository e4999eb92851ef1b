"""
Shared test fixtures for the projpick test suite.

Provides a temporary projects tree, frecency database and settings file
that use real file I/O (no mocking of the filesystem).
"""

import pytest
import toml

from projpick.services.frecency import FrecencyService


@pytest.fixture
def projects_root(tmp_path):
    """A projects root with a few projects, hidden/excluded folders and a file."""
    root = tmp_path / "code"
    for name in ["api", "web-client", "Zeta", "alpha", ".git", "node_modules"]:
        (root / name).mkdir(parents=True)
    (root / "README.md").write_text("not a project")
    (root / "api" / "services" / "billing").mkdir(parents=True)
    (root / "api" / "services" / "auth").mkdir(parents=True)
    return root


@pytest.fixture
def tmp_db(tmp_path):
    """Path for a fresh SQLite frecency database."""
    return tmp_path / "frecency.db"


@pytest.fixture
def frecency(tmp_db):
    """A real FrecencyService backed by a temporary database."""
    svc = FrecencyService(tmp_db)
    yield svc
    svc.close()


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "projects": {"directory": "/home/user/code", "exclude": ["target"]},
        "launcher": {"editor": "code", "close_delay_ms": 100},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


class FakeLauncher:
    """Records launches instead of spawning processes."""

    def __init__(self, env=None, error=None):
        self.env = env or {"PATH": "/opt/bin"}
        self.error = error
        self.launched = []

    def resolve_environment(self):
        return self.env

    def launch(self, path, env=None):
        if self.error:
            raise self.error
        self.launched.append((path, env))


@pytest.fixture
def fake_launcher():
    return FakeLauncher()
