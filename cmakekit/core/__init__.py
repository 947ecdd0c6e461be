"""
Core functionality for cmakekit.

This package contains the foundational modules that the installer builds on.
"""

from .directory import (
    get_global_cache_dir,
    get_tools_dir,
    get_downloads_dir,
    get_lock_dir,
    sanitize_name,
    DirectoryError,
)

from .locking import (
    LockManager,
    NullLock,
    LockTimeout,
    create_lock_strategy,
)

from .platform import (
    OsFamily,
    HostDescriptor,
    classify_os_name,
    detect_host,
    clear_host_cache,
)

from .exceptions import (
    CmakeKitError,
    ConfigError,
    CatalogError,
    TransportError,
    ResolutionError,
    UnknownPlatformError,
    NoMatchingVersionError,
    NoMatchingVariantError,
    ArchiveLayoutError,
    UnrecognizedArchiveFormatError,
    AmbiguousArchiveFormatError,
)

__all__ = [
    "get_global_cache_dir",
    "get_tools_dir",
    "get_downloads_dir",
    "get_lock_dir",
    "sanitize_name",
    "DirectoryError",
    "LockManager",
    "NullLock",
    "LockTimeout",
    "create_lock_strategy",
    "OsFamily",
    "HostDescriptor",
    "classify_os_name",
    "detect_host",
    "clear_host_cache",
    "CmakeKitError",
    "ConfigError",
    "CatalogError",
    "TransportError",
    "ResolutionError",
    "UnknownPlatformError",
    "NoMatchingVersionError",
    "NoMatchingVariantError",
    "ArchiveLayoutError",
    "UnrecognizedArchiveFormatError",
    "AmbiguousArchiveFormatError",
]
