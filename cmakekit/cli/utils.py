"""
Shared utilities for CLI commands.

Turns parsed arguments into settings, the host to install for, the catalog
and a configured installer, so every command behaves the same way.
"""

import logging
from typing import List

from cmakekit.config.settings import Settings, load_settings
from cmakekit.core.download import DownloadProgress
from cmakekit.core.locking import LockManager, create_lock_strategy
from cmakekit.core.platform import HostDescriptor, detect_host
from cmakekit.installer.catalog import Installable, load_catalog
from cmakekit.installer.installer import CmakeInstaller, DownloadArchiveInstaller

logger = logging.getLogger(__name__)


def load_effective_settings(args) -> Settings:
    """
    Settings from the config file with command-line flags applied on top.

    Args:
        args: Parsed arguments (config, cache_dir, catalog and lock are
            optional attributes)
    """
    settings = load_settings(getattr(args, "config", None))
    return settings.with_overrides(
        cache_dir=getattr(args, "cache_dir", None),
        catalog=getattr(args, "catalog", None),
        lock=getattr(args, "lock", None),
    )


def host_from_args(args) -> HostDescriptor:
    """This host, with --os/--arch overriding the detected values."""
    host = detect_host()
    os_name = getattr(args, "os", None) or host.os_name
    arch = getattr(args, "arch", None) or host.arch
    return HostDescriptor(os_name=os_name, arch=arch)


def load_catalog_for(settings: Settings) -> List[Installable]:
    logger.debug(f"Loading catalog from {settings.catalog}")
    return load_catalog(settings.catalog, timeout=settings.download_timeout)


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloaded {progress}")


def create_installer(settings: Settings, version_id: str) -> CmakeInstaller:
    """
    Installer for a version, wired from settings.

    Args:
        settings: Effective settings
        version_id: Requested version id

    Returns:
        Configured CmakeInstaller
    """
    catalog = load_catalog_for(settings)
    archive_installer = DownloadArchiveInstaller(
        settings.downloads_dir,
        timeout=settings.download_timeout,
        progress_callback=_log_progress,
    )
    lock_strategy = create_lock_strategy(
        settings.lock, settings.lock_dir, timeout=settings.lock_timeout
    )
    if isinstance(lock_strategy, LockManager):
        # crashed installers leave their lock files behind
        lock_strategy.cleanup_stale_locks()
    return CmakeInstaller(
        catalog,
        version_id,
        settings.tools_dir,
        archive_installer=archive_installer,
        lock_strategy=lock_strategy,
        tool_name=settings.tool_name,
    )
