"""
Run command implementation.

Installs a CMake version if needed, then runs cmake, cpack or ctest from it
with the installation's bin directory on PATH.
"""

import logging

from cmakekit.cli.utils import create_installer, host_from_args, load_effective_settings
from cmakekit.core.exceptions import ConfigError
from cmakekit.tool.exit_codes import ExitCodeSet
from cmakekit.tool.launcher import build_command_line, run_tool
from cmakekit.tool.tool import CmakeTool

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code of the tool (0 if it was ignored)
    """
    try:
        ignored = ExitCodeSet(args.ignore_exit_codes)
    except ValueError as e:
        raise ConfigError(f"--ignore-exit-codes: {e}") from e

    settings = load_effective_settings(args)
    installer = create_installer(settings, args.version)
    tool_path = installer.ensure_installed(host_from_args(args))

    tool = CmakeTool.for_installation(tool_path, name=args.version)
    try:
        command_line = build_command_line(tool.command(args.tool), args.args_string)
    except ValueError as e:
        raise ConfigError(f"--args: {e}") from e
    return run_tool(
        command_line[0],
        [*command_line[1:], *args.tool_args],
        env=tool.build_env(),
        ignored_exit_codes=ignored,
    )
