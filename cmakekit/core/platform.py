"""
Platform classification for cmakekit.

This module maps raw operating system identifiers to a closed set of OS
families and describes the host a CMake installation is resolved for.

Host identification uses two raw strings, analogous to the JVM system
properties ``os.name`` and ``os.arch``. Publisher catalogs use their own
spellings for the same families (``win32``, ``Darwin``, ``HP-UX``), so a
single rule table classifies both.

Usage:
    from cmakekit.core.platform import classify_os_name, detect_host

    host = detect_host()
    print(f"OS family: {host.os_family}")
    print(f"Architecture: {host.arch}")
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cmakekit.core.exceptions import UnknownPlatformError


class OsFamily(Enum):
    """Canonical operating system families."""

    LINUX = "Linux"
    WINDOWS = "Windows"
    MACOS = "macOS"
    SUNOS = "SunOS"
    FREEBSD = "FreeBSD"
    IRIX = "Irix"
    AIX = "AIX"
    HPUX = "HPUX"

    def __str__(self) -> str:
        return self.value


# Exact names, checked before the prefix/substring rules below.
_EXACT_NAMES = {
    "Linux": OsFamily.LINUX,
    "win32": OsFamily.WINDOWS,
    "win64": OsFamily.WINDOWS,
    "windows": OsFamily.WINDOWS,
    "Darwin": OsFamily.MACOS,
    "Darwin64": OsFamily.MACOS,
    "macos": OsFamily.MACOS,
    "macOS": OsFamily.MACOS,
    "SunOS": OsFamily.SUNOS,
    "FreeBSD": OsFamily.FREEBSD,
    "Irix": OsFamily.IRIX,
    "IRIX": OsFamily.IRIX,
    "IRIX64": OsFamily.IRIX,
    "AIX": OsFamily.AIX,
    "HPUX": OsFamily.HPUX,
    "HP-UX": OsFamily.HPUX,
}


def classify_os_name(os_name: Optional[str]) -> Optional[OsFamily]:
    """
    Classify a raw operating system name.

    Matching is case-sensitive. Names starting with ``Windows`` (as in
    ``Windows 10``) map to Windows, names containing ``OS X`` (as in
    ``Mac OS X``) map to macOS; everything else must match exactly.

    Args:
        os_name: Raw name, e.g. the value of ``os.name`` or a catalog ``os``

    Returns:
        The OS family, or None if the name is not recognized

    Example:
        >>> classify_os_name("Windows Server 2019")
        <OsFamily.WINDOWS: 'Windows'>
        >>> classify_os_name("Plan 9") is None
        True
    """
    if not os_name:
        return None

    family = _EXACT_NAMES.get(os_name)
    if family is not None:
        return family
    if os_name.startswith("Windows"):
        return OsFamily.WINDOWS
    if "OS X" in os_name:
        return OsFamily.MACOS
    return None


def executable_suffix(family: Optional[OsFamily]) -> str:
    """Get the file name suffix of executables on an OS family."""
    return ".exe" if family is OsFamily.WINDOWS else ""


@dataclass(frozen=True)
class HostDescriptor:
    """
    Describes the host a tool is installed for.

    Attributes:
        os_name: Raw OS name (``os.name`` style, e.g. 'Linux', 'Windows 10')
        arch: Raw architecture (``os.arch`` style, e.g. 'amd64', 'i386')
    """

    os_name: str
    arch: str

    @property
    def os_family(self) -> Optional[OsFamily]:
        """OS family of this host, or None if unrecognized."""
        return classify_os_name(self.os_name)

    def require_os_family(self, tool_name: str = "", version_id: str = "") -> OsFamily:
        """
        Get the OS family, failing hard if it is unknown.

        Raises:
            UnknownPlatformError: If the OS name does not classify
        """
        family = self.os_family
        if family is None:
            raise UnknownPlatformError(self.os_name, tool_name, version_id, host=self)
        return family

    def __str__(self) -> str:
        return f"{self.os_name} ({self.arch})"


# Python machine names to ``os.arch`` style tokens
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "i386": "i386",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "x86": "i386",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


def normalize_arch(machine: str, os_name: str = "") -> str:
    """
    Normalize a Python machine name to an ``os.arch`` style token.

    Args:
        machine: Raw value of platform.machine()
        os_name: Raw OS name; selects the per-OS spelling of some arches

    Returns:
        Normalized architecture, or the lowercased input if unknown

    Example:
        >>> normalize_arch("x86_64", "Linux")
        'amd64'
        >>> normalize_arch("i686", "Windows")
        'x86'
    """
    arch = _ARCH_MAP.get(machine.lower(), machine.lower())
    family = classify_os_name(os_name)

    if family is OsFamily.WINDOWS and arch == "i386":
        return "x86"
    if family is OsFamily.MACOS and arch == "amd64":
        return "x86_64"
    return arch


@functools.lru_cache(maxsize=1)
def detect_host() -> HostDescriptor:
    """
    Detect the host this process runs on.

    This function is cached - it only runs detection once per process.

    Returns:
        HostDescriptor with raw OS name and normalized architecture
    """
    os_name = platform.system()
    return HostDescriptor(os_name=os_name, arch=normalize_arch(platform.machine(), os_name))


def clear_host_cache():
    """Clear the host detection cache."""
    detect_host.cache_clear()


__all__ = [
    "OsFamily",
    "HostDescriptor",
    "classify_os_name",
    "executable_suffix",
    "normalize_arch",
    "detect_host",
    "clear_host_cache",
]
