"""
Running installed CMake tools.
"""

from .exit_codes import ExitCodeSet
from .tool import CmakeTool, DEFAULT_TOOL_NAME, SUITE_TOOLS
from .launcher import build_command_line, run_tool

__all__ = [
    "ExitCodeSet",
    "CmakeTool",
    "DEFAULT_TOOL_NAME",
    "SUITE_TOOLS",
    "build_command_line",
    "run_tool",
]
