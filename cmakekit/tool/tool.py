"""
Named CMake installations.

A tool is either found in the search path (home is a bare command name) or
installed by the installer (home is the path of the cmake executable).
Only installed tools put their bin directory on PATH.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from cmakekit.installer.installer import ToolPath

logger = logging.getLogger(__name__)

DEFAULT_TOOL_NAME = "InSearchPath"
DEFAULT_HOME = "cmake"

SUITE_TOOLS = ("cmake", "cpack", "ctest")


def _dirname(home: str) -> str:
    """Cross-platform dirname keeping the trailing separator ('' if none)."""
    idx = max(home.rfind("/"), home.rfind("\\"))
    return home[: idx + 1] if idx != -1 else ""


@dataclass(frozen=True)
class CmakeTool:
    """
    A named CMake installation.

    Attributes:
        name: Display name of the installation
        home: Command used to run cmake (e.g. 'cmake' or '/opt/cmake/bin/cmake')
    """

    name: str = DEFAULT_TOOL_NAME
    home: str = DEFAULT_HOME
    bindir: str = field(init=False, default="")

    def __post_init__(self):
        object.__setattr__(self, "bindir", _dirname(self.home))

    @classmethod
    def for_installation(cls, tool_path: ToolPath, name: Optional[str] = None) -> "CmakeTool":
        """Tool for an installation made by the installer."""
        return cls(name or tool_path.home.name, str(tool_path.cmake))

    @property
    def installed(self) -> bool:
        return bool(self.bindir)

    def command(self, suite_tool: str = "cmake") -> str:
        """
        Command for a tool of the CMake suite.

        Example:
            >>> CmakeTool("3.20", "/opt/cmake/bin/cmake").command("ctest")
            '/opt/cmake/bin/ctest'
            >>> CmakeTool().command("cpack")
            'cpack'
        """
        if suite_tool not in SUITE_TOOLS:
            raise ValueError(
                f"Unknown tool '{suite_tool}', expected one of {', '.join(SUITE_TOOLS)}"
            )
        if suite_tool == "cmake":
            return self.home
        suffix = ".exe" if self.home.lower().endswith(".exe") else ""
        return f"{self.bindir}{suite_tool}{suffix}"

    def build_env(self, env: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Environment for running the tool.

        Installed tools get their bin directory prepended to PATH so that
        cpack and ctest are found too.

        Args:
            env: Base environment (default: os.environ)

        Returns:
            A new environment mapping
        """
        result = dict(os.environ if env is None else env)
        if self.installed:
            bindir = self.bindir.rstrip("/\\")
            path = result.get("PATH")
            result["PATH"] = f"{bindir}{os.pathsep}{path}" if path else bindir
            logger.debug(f"Prepended {bindir} to PATH")
        return result
