"""
Versions command implementation.

Lists the CMake version ids of the installable catalog.
"""

import logging

from cmakekit.cli.utils import load_catalog_for, load_effective_settings
from cmakekit.installer.catalog import list_versions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = load_effective_settings(args)
    catalog = load_catalog_for(settings)

    versions = list_versions(catalog)
    if not versions:
        logger.warning(f"No versions in catalog {settings.catalog}")
        return 0

    for version_id in versions:
        print(version_id)
    return 0
