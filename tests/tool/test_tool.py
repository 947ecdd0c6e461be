"""
Tests for named CMake installations.
"""

import os
from pathlib import Path

import pytest

from cmakekit.core.platform import OsFamily
from cmakekit.installer.installer import ToolPath
from cmakekit.tool.tool import CmakeTool, DEFAULT_TOOL_NAME


class TestCmakeTool:
    def test_default_is_search_path(self):
        tool = CmakeTool()

        assert tool.name == DEFAULT_TOOL_NAME
        assert tool.home == "cmake"
        assert tool.bindir == ""
        assert not tool.installed

    @pytest.mark.parametrize(
        "home,bindir",
        [
            ("/opt/cmake/bin/cmake", "/opt/cmake/bin/"),
            ("C:\\cmake\\bin\\cmake.exe", "C:\\cmake\\bin\\"),
            ("cmake", ""),
        ],
    )
    def test_bindir(self, home, bindir):
        assert CmakeTool("x", home).bindir == bindir

    def test_for_installation(self):
        tool_path = ToolPath(Path("/cache/tools/cmake/3.20.0"), "u", OsFamily.LINUX)

        tool = CmakeTool.for_installation(tool_path)

        assert tool.name == "3.20.0"
        assert tool.home == str(tool_path.cmake)
        assert tool.installed

    def test_suite_commands(self):
        tool = CmakeTool("3.20", "/opt/cmake/bin/cmake")

        assert tool.command() == "/opt/cmake/bin/cmake"
        assert tool.command("ctest") == "/opt/cmake/bin/ctest"
        assert tool.command("cpack") == "/opt/cmake/bin/cpack"

    def test_suite_commands_windows(self):
        tool = CmakeTool("3.20", "C:\\cmake\\bin\\cmake.exe")

        assert tool.command("ctest") == "C:\\cmake\\bin\\ctest.exe"

    def test_search_path_commands(self):
        assert CmakeTool().command("cpack") == "cpack"

    def test_unknown_suite_tool(self):
        with pytest.raises(ValueError, match="Unknown tool 'make'"):
            CmakeTool().command("make")


class TestBuildEnv:
    def test_installed_prepends_bindir(self):
        tool = CmakeTool("3.20", "/opt/cmake/bin/cmake")

        env = tool.build_env({"PATH": "/usr/bin", "HOME": "/home/u"})

        assert env["PATH"] == f"/opt/cmake/bin{os.pathsep}/usr/bin"
        assert env["HOME"] == "/home/u"

    def test_installed_without_path(self):
        env = CmakeTool("3.20", "/opt/cmake/bin/cmake").build_env({})

        assert env["PATH"] == "/opt/cmake/bin"

    def test_search_path_tool_leaves_path(self):
        env = CmakeTool().build_env({"PATH": "/usr/bin"})

        assert env == {"PATH": "/usr/bin"}

    def test_does_not_modify_input(self):
        base = {"PATH": "/usr/bin"}
        CmakeTool("3.20", "/opt/cmake/bin/cmake").build_env(base)

        assert base == {"PATH": "/usr/bin"}

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("CMAKEKIT_TEST_MARKER", "1")

        env = CmakeTool().build_env()

        assert env["CMAKEKIT_TEST_MARKER"] == "1"
