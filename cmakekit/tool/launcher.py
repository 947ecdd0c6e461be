"""
Launching tools of the CMake suite.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from cmakekit.tool.exit_codes import ExitCodeSet

logger = logging.getLogger(__name__)


def build_command_line(tool: str, args_string: Optional[str] = None) -> List[str]:
    """
    Command line for a tool and a string of arguments.

    The arguments are tokenized the way a POSIX shell would, honoring quotes.

    Example:
        >>> build_command_line("cmake", '-G "Unix Makefiles" ..')
        ['cmake', '-G', 'Unix Makefiles', '..']
    """
    cmd = [tool]
    if args_string:
        cmd.extend(shlex.split(args_string))
    return cmd


def run_tool(
    command: Union[str, Path],
    args: Sequence[str] = (),
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
    ignored_exit_codes: Optional[ExitCodeSet] = None,
) -> int:
    """
    Run a tool and wait for it.

    Args:
        command: Executable to run
        args: Arguments
        cwd: Working directory
        env: Environment (default: inherited)
        ignored_exit_codes: Exit codes that count as success

    Returns:
        0 if the tool succeeded or exited with an ignored code, else its
        exit code
    """
    cmd = [str(command), *args]
    logger.debug(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=cwd, env=env)

    returncode = result.returncode
    if returncode != 0 and ignored_exit_codes is not None and returncode in ignored_exit_codes:
        logger.info(f"Ignoring exit code {returncode} of {command}")
        return 0
    if returncode != 0:
        logger.error(f"{command} failed with exit code {returncode}")
    return returncode
