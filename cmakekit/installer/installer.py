"""
CMake installation orchestration.

This module composes resolution, download, extraction and layout
normalization into one idempotent operation:

1. Resolve the catalog variant for the host
2. Compute the installation directory for the requested version
3. Return early if the directory's marker names the resolved URL
4. Otherwise download and extract the archive, drop the vendor timestamp
   file, normalize the layout and write the marker last
5. Return the installed tool path

Because the marker is written last, a process interrupted anywhere in step 4
leaves a directory without a valid marker and the next call redoes the
installation instead of trusting partial contents.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from cmakekit.core.directory import get_downloads_dir, sanitize_name
from cmakekit.core.download import DownloadProgress, download_file
from cmakekit.core.exceptions import ArchiveLayoutError, TransportError
from cmakekit.core.filesystem import delete_contents, extract_archive
from cmakekit.core.locking import NullLock
from cmakekit.core.platform import (
    HostDescriptor,
    OsFamily,
    detect_host,
    executable_suffix,
)
from cmakekit.installer.catalog import Installable, Variant
from cmakekit.installer.layout import normalize_layout
from cmakekit.installer.marker import clear_marker, is_up_to_date, read_marker, write_marker
from cmakekit.installer.resolver import resolve_variant

logger = logging.getLogger(__name__)

TIMESTAMP_NAME = ".timestamp"


@dataclass(frozen=True)
class ToolPath:
    """An installed CMake on this host."""

    home: Path
    """Installation directory (holds bin/, share/ and the marker)"""

    installed_from: Optional[str]
    """URL the installation was populated from"""

    os_family: Optional[OsFamily] = None
    """OS family the installation was made for"""

    @property
    def bindir(self) -> Path:
        return self.home / "bin"

    def command(self, name: str = "cmake", family: Optional[OsFamily] = None) -> Path:
        """
        Path of a tool of the CMake suite (cmake, cpack, ctest).

        Example:
            >>> ToolPath(Path("/opt/3.20.0"), None, OsFamily.WINDOWS).command("ctest")
            PosixPath('/opt/3.20.0/bin/ctest.exe')
        """
        return self.bindir / f"{name}{executable_suffix(family or self.os_family)}"

    @property
    def cmake(self) -> Path:
        return self.command("cmake")


class ArchiveInstaller(Protocol):
    """Downloads and extracts an archive into a directory."""

    def install_archive(self, url: str, destination: Path) -> bool:
        """
        Populate destination from the archive at url.

        Returns:
            True if the destination contents changed
        """
        ...


class DownloadArchiveInstaller:
    """
    Default archive installer: HTTP download, then extraction.

    The archive is downloaded to a private temporary directory first, so a
    failed download leaves the destination untouched. The destination is
    emptied before extraction.
    """

    def __init__(
        self,
        downloads_dir: Path,
        timeout: int = 30,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.downloads_dir = Path(downloads_dir)
        self.timeout = timeout
        self.progress_callback = progress_callback

    def install_archive(self, url: str, destination: Path) -> bool:
        self.downloads_dir.mkdir(parents=True, exist_ok=True)
        archive_name = url.split("?", 1)[0].rstrip("/").split("/")[-1] or "archive"
        work_dir = Path(tempfile.mkdtemp(prefix="cmakekit-", dir=self.downloads_dir))

        try:
            archive_path = download_file(
                url,
                work_dir / archive_name,
                progress_callback=self.progress_callback,
                timeout=self.timeout,
            )
            logger.info(f"Unpacking {url} to {destination}")
            delete_contents(destination)
            extract_archive(archive_path, destination)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        return True


class CmakeInstaller:
    """
    Installs a CMake version from the catalog onto this host.

    The installation directory is named after the version id, not after the
    tool name, so renaming a configured tool does not trigger a download.

    Example:
        >>> installer = CmakeInstaller(catalog, "3.20.0", tools_dir)
        >>> tool = installer.ensure_installed()
        >>> print(tool.cmake)
        /home/user/.cmakekit/tools/cmake/3.20.0/bin/cmake
    """

    def __init__(
        self,
        catalog: Sequence[Installable],
        version_id: str,
        tools_dir: Path,
        archive_installer: Optional[ArchiveInstaller] = None,
        lock_strategy=None,
        tool_name: str = "CMake",
        downloads_dir: Optional[Path] = None,
    ):
        """
        Initialize the installer.

        Args:
            catalog: Installables in catalog order
            version_id: Requested version id (e.g. '3.20.0')
            tools_dir: Directory holding installed versions
            archive_installer: Download/extract collaborator. If None, uses
                DownloadArchiveInstaller on downloads_dir
            lock_strategy: Object with an ``installation_lock(path)`` context
                manager. If None, installs are not locked
            tool_name: Tool name used in messages
            downloads_dir: Temporary download directory for the default
                archive installer (default: the cache downloads directory
                two levels above tools_dir)
        """
        self.catalog = list(catalog)
        self.version_id = version_id
        self.tools_dir = Path(tools_dir)
        self.tool_name = tool_name
        self.lock_strategy = lock_strategy or NullLock()
        if archive_installer is None:
            archive_installer = DownloadArchiveInstaller(
                downloads_dir or get_downloads_dir(self.tools_dir.parent.parent)
            )
        self.archive_installer = archive_installer

    @property
    def install_dir(self) -> Path:
        return self.tools_dir / sanitize_name(self.version_id)

    def resolve(self, host: Optional[HostDescriptor] = None) -> Variant:
        """Resolve the catalog variant for a host (default: this host)."""
        host = host or detect_host()
        return resolve_variant(self.catalog, self.version_id, host, self.tool_name)

    def ensure_installed(
        self, host: Optional[HostDescriptor] = None, force: bool = False
    ) -> ToolPath:
        """
        Make sure the requested version is installed for a host.

        Args:
            host: Host to install for (default: this host)
            force: Reinstall even if the marker is current

        Returns:
            ToolPath of the installation

        Raises:
            UnknownPlatformError: If the host OS name does not classify
            NoMatchingVersionError: If the version id is not in the catalog
            NoMatchingVariantError: If no variant suits the host
            TransportError: If the download fails
            UnrecognizedArchiveFormatError: If the archive has no install root
            AmbiguousArchiveFormatError: If the archive has several roots
        """
        host = host or detect_host()
        variant = resolve_variant(self.catalog, self.version_id, host, self.tool_name)
        family = host.os_family
        install_dir = self.install_dir

        if not force and is_up_to_date(install_dir, variant.url):
            logger.info(f"{self.tool_name} {self.version_id} is up to date: {install_dir}")
            return ToolPath(install_dir, variant.url, family)

        with self.lock_strategy.installation_lock(install_dir):
            # Another process may have finished while we waited for the lock
            if not force and is_up_to_date(install_dir, variant.url):
                logger.info(f"Installed by another process: {install_dir}")
            else:
                self._install(variant, install_dir, host)

        return ToolPath(install_dir, read_marker(install_dir), family)

    def _install(self, variant: Variant, install_dir: Path, host: HostDescriptor) -> None:
        logger.info(
            f"Installing {self.tool_name} {self.version_id} from {variant.url} to {install_dir}"
        )
        install_dir.mkdir(parents=True, exist_ok=True)
        clear_marker(install_dir)

        try:
            installed = self.archive_installer.install_archive(variant.url, install_dir)
        except TransportError as e:
            e.add_context(self.tool_name, self.version_id, host)
            raise
        if not installed:
            logger.info(f"Archive unchanged, leaving {install_dir} as is")
            return

        (install_dir / TIMESTAMP_NAME).unlink(missing_ok=True)
        try:
            normalize_layout(install_dir, [f"cmake{executable_suffix(host.os_family)}"])
        except ArchiveLayoutError as e:
            e.add_context(self.tool_name, self.version_id, host, variant.url)
            raise

        # leave a record for the next up-to-date check
        write_marker(install_dir, variant.url)
        logger.info(f"Installed {self.tool_name} {self.version_id} at {install_dir}")


__all__ = [
    "ToolPath",
    "ArchiveInstaller",
    "DownloadArchiveInstaller",
    "CmakeInstaller",
]
