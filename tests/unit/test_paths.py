"""
Tests for per-user storage locations.
"""
import sys
from pathlib import Path

import pytest

from src.utils import paths


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    return tmp_path


class TestPaths:
    """Tests for platform data directories."""

    def test_linux_layout(self, home, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        assert paths.get_user_data_dir() == home / ".local" / "share" / "require"
        assert paths.get_database_path() == home / ".local" / "share" / "require" / "require.db"

    def test_macos_layout(self, home, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")
        assert paths.get_user_data_dir() == home / "Library" / "Application Support" / "Require"

    def test_directories_created(self, home, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        logs = paths.get_logs_dir()
        assert logs.is_dir()
        assert logs.parent == paths.get_user_data_dir()

    def test_database_name(self, home, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        assert paths.get_database_path("other").name == "other.db"
