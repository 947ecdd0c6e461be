"""
Tests for directory structure management.
"""

import pytest
from unittest.mock import patch

from cmakekit.core.directory import (
    DirectoryError,
    get_downloads_dir,
    get_global_cache_dir,
    get_lock_dir,
    get_tools_dir,
    sanitize_name,
)


class TestGlobalCacheDir:
    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CMAKEKIT_HOME", str(tmp_path / "cache"))

        assert get_global_cache_dir() == tmp_path / "cache"

    def test_unix_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CMAKEKIT_HOME", raising=False)
        with patch("cmakekit.core.directory.IS_WINDOWS", False), patch(
            "cmakekit.core.directory.Path.home", return_value=tmp_path
        ):
            assert get_global_cache_dir() == tmp_path / ".cmakekit"

    def test_windows_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CMAKEKIT_HOME", raising=False)
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        with patch("cmakekit.core.directory.IS_WINDOWS", True):
            assert get_global_cache_dir() == tmp_path / ".cmakekit"

    def test_windows_without_userprofile(self, monkeypatch):
        monkeypatch.delenv("CMAKEKIT_HOME", raising=False)
        monkeypatch.delenv("USERPROFILE", raising=False)
        with patch("cmakekit.core.directory.IS_WINDOWS", True):
            with pytest.raises(DirectoryError, match="USERPROFILE"):
                get_global_cache_dir()


class TestSanitizeName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("3.20.0", "3.20.0"),
            ("3.20.0-rc1", "3.20.0-rc1"),
            ("3.20.0 rc/1", "3.20.0_rc_1"),
            ("a  b", "a_b"),
            ("..", "__"),
            (".", "_"),
            ("", "_"),
        ],
    )
    def test_sanitize(self, name, expected):
        assert sanitize_name(name) == expected

    def test_none(self):
        assert sanitize_name(None) is None


class TestLayout:
    def test_subdirectories(self, tmp_path):
        assert get_tools_dir(tmp_path) == tmp_path / "tools" / "cmake"
        assert get_downloads_dir(tmp_path) == tmp_path / "downloads"
        assert get_lock_dir(tmp_path) == tmp_path / "lock"
