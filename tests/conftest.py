"""Pytest configuration for the directory resolver test suite."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Make the project root importable for test modules.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from verge.core import dirs as dirs_module  # noqa: E402
from verge.core import notifications  # noqa: E402


FIXED_NOW = datetime(2024, 3, 5, 7, 9, 30)


@pytest.fixture(autouse=True)
def _isolated_state():
    """Give every test a fresh default context and an empty notification store."""
    previous = dirs_module.default_dirs()
    notifications.get_notifications(clear=True)
    yield
    dirs_module.reset_default(previous)
    notifications.get_notifications(clear=True)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home" / "alice"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def exe(tmp_path):
    """A real executable file inside ``<tmp>/opt/app/bin``."""
    bin_dir = tmp_path / "opt" / "app" / "bin"
    bin_dir.mkdir(parents=True)
    path = bin_dir / "app.exe"
    path.write_bytes(b"")
    return path


@pytest.fixture
def make_dirs(home, exe):
    """Build an ``AppDirs`` wired to the temporary home and executable."""

    def _make(**kwargs):
        kwargs.setdefault("app_dir", "clash-verge")
        kwargs.setdefault("portable", False)
        kwargs.setdefault("home_provider", lambda: home)
        kwargs.setdefault("exe_provider", lambda: exe)
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        return dirs_module.AppDirs(**kwargs)

    return _make
