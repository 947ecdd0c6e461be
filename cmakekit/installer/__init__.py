"""
CMake installer.

Resolves a CMake version from the installable catalog to the archive for
this host, installs it into the tools directory and normalizes its layout.
"""

from .catalog import (
    DEFAULT_CATALOG_URL,
    Installable,
    Variant,
    load_catalog,
    parse_catalog,
    list_versions,
)

from .resolver import resolve_variant, variant_applies_to

from .layout import find_root, normalize_layout

from .marker import MARKER_NAME, read_marker

from .installer import (
    ToolPath,
    ArchiveInstaller,
    DownloadArchiveInstaller,
    CmakeInstaller,
)

__all__ = [
    "DEFAULT_CATALOG_URL",
    "Installable",
    "Variant",
    "load_catalog",
    "parse_catalog",
    "list_versions",
    "resolve_variant",
    "variant_applies_to",
    "find_root",
    "normalize_layout",
    "MARKER_NAME",
    "read_marker",
    "ToolPath",
    "ArchiveInstaller",
    "DownloadArchiveInstaller",
    "CmakeInstaller",
]
