"""
Resolve command implementation.

Prints the archive URL a CMake version resolves to for a host, without
downloading anything.
"""

import logging

from cmakekit.cli.utils import host_from_args, load_catalog_for, load_effective_settings
from cmakekit.installer.resolver import resolve_variant

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = load_effective_settings(args)
    host = host_from_args(args)
    catalog = load_catalog_for(settings)

    variant = resolve_variant(catalog, args.version, host, settings.tool_name)
    logger.debug(f"Resolved {args.version} for {host}: os={variant.os} arch={variant.arch}")
    print(variant.url)
    return 0
