"""
Directory structure management for cmakekit.

Directory Structure:
    Global Cache (~/.cmakekit/ or %USERPROFILE%\\.cmakekit\\):
        - tools/cmake/<version>/ : Installed CMake versions
          (each holds an .installedFrom marker)
        - downloads/             : Temporary archive downloads
        - lock/                  : Installation lock files

The cache location can be overridden with the CMAKEKIT_HOME environment
variable.
"""

import os
import re
from pathlib import Path
from typing import Optional

CACHE_DIR_ENV = "CMAKEKIT_HOME"

IS_WINDOWS = os.name == "nt"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global cache directory path.

    Returns:
        Path: The global cache directory path.
            - $CMAKEKIT_HOME if set
            - Windows: %USERPROFILE%\\.cmakekit
            - Linux/macOS: ~/.cmakekit/
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if IS_WINDOWS:
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".cmakekit"
    return Path.home() / ".cmakekit"


def sanitize_name(name: Optional[str]) -> Optional[str]:
    """
    Make a name safe for use as a single path component.

    Runs of characters outside ``[A-Za-z0-9_.-]`` become one underscore.

    Example:
        >>> sanitize_name("3.20.0 rc/1")
        '3.20.0_rc_1'
    """
    if name is None:
        return None
    safe = _UNSAFE_CHARS.sub("_", name)
    # "", "." and ".." would not name a directory of their own
    if not safe.strip("."):
        safe = safe.replace(".", "_") or "_"
    return safe


def get_tools_dir(cache_dir: Path) -> Path:
    """Directory holding installed CMake versions."""
    return Path(cache_dir) / "tools" / "cmake"


def get_downloads_dir(cache_dir: Path) -> Path:
    """Directory holding archives while they are being installed."""
    return Path(cache_dir) / "downloads"


def get_lock_dir(cache_dir: Path) -> Path:
    """Directory holding installation lock files."""
    return Path(cache_dir) / "lock"
