"""
Install command implementation.

Makes sure a CMake version is installed and prints the path of its cmake.
"""

import logging

from cmakekit.cli.utils import create_installer, host_from_args, load_effective_settings

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = load_effective_settings(args)
    host = host_from_args(args)
    installer = create_installer(settings, args.version)

    tool_path = installer.ensure_installed(host, force=args.force)
    print(tool_path.cmake)
    return 0
