"""
Unit tests for archive layout normalization.

Tests cover:
- Root detection for flat, nested, deeply nested and bundle layouts
- Ambiguous and unrecognized archives
- Pulling the root up and removing extraneous siblings
"""

import pytest
from unittest.mock import patch

from cmakekit.core.exceptions import (
    AmbiguousArchiveFormatError,
    UnrecognizedArchiveFormatError,
)
from cmakekit.core.filesystem import FilesystemError
from cmakekit.installer.layout import find_root, normalize_layout, pull_up
from tests.fixtures.archives import make_cmake_tree


class TestFindRoot:
    """Tests for find_root()."""

    def test_flat(self, tmp_path):
        make_cmake_tree(tmp_path)

        assert find_root(tmp_path) == tmp_path

    def test_nested(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0-linux-x86_64")

        assert find_root(tmp_path) == root

    def test_macos_bundle(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0-macos-universal" / "CMake.app" / "Contents")

        assert find_root(tmp_path) == root

    def test_with_extras(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0")
        (tmp_path / "doc").mkdir()
        (tmp_path / "doc" / "README").write_text("docs")
        (tmp_path / "man" / "share").mkdir(parents=True)

        assert find_root(tmp_path) == root

    def test_windows_executable(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0-win64-x64", executable="cmake.exe")

        assert find_root(tmp_path, ["cmake.exe"]) == root

    def test_not_found(self, tmp_path):
        (tmp_path / "share").mkdir()
        (tmp_path / "README").write_text("nothing here")

        with pytest.raises(UnrecognizedArchiveFormatError) as exc_info:
            find_root(tmp_path)

        assert exc_info.value.tree == tmp_path

    def test_missing_share(self, tmp_path):
        (tmp_path / "c" / "bin").mkdir(parents=True)
        (tmp_path / "c" / "bin" / "cmake").write_text("")

        with pytest.raises(UnrecognizedArchiveFormatError, match="no share directory"):
            find_root(tmp_path)

    def test_bin_cmake_directory_is_ignored(self, tmp_path):
        (tmp_path / "c" / "bin" / "cmake").mkdir(parents=True)
        (tmp_path / "c" / "share").mkdir()

        with pytest.raises(UnrecognizedArchiveFormatError):
            find_root(tmp_path)

    def test_ambiguous(self, tmp_path):
        first = make_cmake_tree(tmp_path / "cmake-a")
        second = make_cmake_tree(tmp_path / "cmake-b")

        with pytest.raises(AmbiguousArchiveFormatError) as exc_info:
            find_root(tmp_path)

        assert exc_info.value.candidates == sorted([str(first), str(second)])

    def test_ambiguous_across_depths(self, tmp_path):
        make_cmake_tree(tmp_path)
        make_cmake_tree(tmp_path / "nested")

        with pytest.raises(AmbiguousArchiveFormatError):
            find_root(tmp_path)


class TestPullUp:
    """Tests for pull_up()."""

    def test_root_is_tree(self, tmp_path):
        make_cmake_tree(tmp_path)
        pull_up(tmp_path, tmp_path)

        assert (tmp_path / "bin" / "cmake").is_file()

    def test_moves_root_contents_up(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0-linux-x86_64")

        pull_up(tmp_path, root)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["bin", "share"]
        assert (tmp_path / "bin" / "cmake").is_file()

    def test_removes_extras(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0" / "CMake.app" / "Contents")
        (tmp_path / "cmake-3.20.0" / "README").write_text("extra")
        (tmp_path / "LICENSE").write_text("extra")

        pull_up(tmp_path, root)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["bin", "share"]

    def test_root_named_like_its_child(self, tmp_path):
        """A nesting directory called 'bin' does not collide during the move."""
        root = make_cmake_tree(tmp_path / "bin")

        pull_up(tmp_path, root)

        assert (tmp_path / "bin" / "cmake").is_file()
        assert (tmp_path / "share").is_dir()

    def test_failed_extra_removal_is_not_fatal(self, tmp_path):
        root = make_cmake_tree(tmp_path / "cmake-3.20.0")
        (tmp_path / "stubborn.txt").write_text("x")

        with patch(
            "cmakekit.installer.layout.delete_recursive",
            side_effect=FilesystemError("permission denied"),
        ):
            pull_up(tmp_path, root)

        assert (tmp_path / "bin" / "cmake").is_file()
        assert (tmp_path / "stubborn.txt").exists()


class TestNormalizeLayout:
    def test_round_trip_nested(self, tmp_path):
        make_cmake_tree(tmp_path / "cmake-3.20.0-linux-x86_64")

        result = normalize_layout(tmp_path)

        assert result == tmp_path
        assert find_root(tmp_path) == tmp_path

    def test_already_normalized(self, tmp_path):
        make_cmake_tree(tmp_path)

        normalize_layout(tmp_path)

        assert (tmp_path / "bin" / "ctest").is_file()
