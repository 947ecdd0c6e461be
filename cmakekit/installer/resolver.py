"""
Variant resolution.

Selects the one published archive of a CMake version that runs on a host.
A variant applies to a host when its raw ``os`` string classifies to the
host's OS family and its raw ``arch`` string passes the architecture
compatibility predicate of that family:

============  ==============================================================
Family        Compatible variant arches
============  ==============================================================
Linux         ``i386`` on i386/amd64 hosts, ``x86_64``/``amd64`` on amd64
              hosts only, ``aarch64`` on aarch64 hosts only
macOS         ``universal`` everywhere, ``x86_64`` on amd64/x86_64 hosts,
              ``i386`` on i386 hosts, ``arm64`` on arm64/aarch64 hosts
Windows       32 bit (``win32``) on x86/amd64 hosts, 64 bit (``win64``) on
              amd64 hosts only, arm64 on arm64/aarch64 hosts only
AIX, HPUX,    any (a single arch is published; not verified on real hosts)
Irix
SunOS,        exact string equality
FreeBSD
============  ==============================================================

32 bit binaries run on 64 bit hosts; the reverse never holds.
"""

import logging
from typing import Callable, Dict, Optional, Sequence

from cmakekit.core.exceptions import NoMatchingVariantError, NoMatchingVersionError
from cmakekit.core.platform import HostDescriptor, OsFamily, classify_os_name
from cmakekit.installer.catalog import (
    Installable,
    Variant,
    find_installables,
    list_versions,
)

logger = logging.getLogger(__name__)

_WIN_32 = "32"
_WIN_64 = "64"
_WIN_ARM = "arm64"

_WINDOWS_ARCH_KINDS = {
    "i386": _WIN_32,
    "i686": _WIN_32,
    "x86": _WIN_32,
    "win32": _WIN_32,
    "x86_64": _WIN_64,
    "amd64": _WIN_64,
    "x64": _WIN_64,
    "win64": _WIN_64,
    "arm64": _WIN_ARM,
    "aarch64": _WIN_ARM,
}

# Variant kinds a Windows host of the given arch can run
_WINDOWS_HOST_ACCEPTS = {
    "x86": {_WIN_32},
    "i386": {_WIN_32},
    "amd64": {_WIN_32, _WIN_64},
    "x86_64": {_WIN_32, _WIN_64},
    "aarch64": {_WIN_ARM},
    "arm64": {_WIN_ARM},
}


def _linux_applies(variant: Variant, host_arch: str) -> bool:
    if variant.arch == "i386":
        return host_arch in ("i386", "amd64")
    if variant.arch in ("x86_64", "amd64"):
        return host_arch == "amd64"
    if variant.arch == "aarch64":
        return host_arch == "aarch64"
    return False


def _macos_applies(variant: Variant, host_arch: str) -> bool:
    # to be verified by the community; cmake.org publishes Darwin and Darwin64
    if variant.arch == "universal":
        return True
    if variant.arch == "x86_64":
        return host_arch in ("amd64", "x86_64")
    if variant.arch == "i386":
        return host_arch == "i386"
    if variant.arch in ("arm64", "aarch64"):
        return host_arch in ("arm64", "aarch64")
    return False


def _windows_variant_kind(variant: Variant) -> Optional[str]:
    """Bitness of a Windows variant, from its arch or else its os token."""
    kind = _WINDOWS_ARCH_KINDS.get(variant.arch.lower())
    if kind is None:
        kind = _WINDOWS_ARCH_KINDS.get(variant.os.lower())
    return kind


def _windows_applies(variant: Variant, host_arch: str) -> bool:
    kind = _windows_variant_kind(variant)
    return kind is not None and kind in _WINDOWS_HOST_ACCEPTS.get(host_arch, set())


def _single_arch_applies(variant: Variant, host_arch: str) -> bool:
    # only one arch is published for these; Irix arches n32/64 not verified
    return True


def _exact_arch_applies(variant: Variant, host_arch: str) -> bool:
    return variant.arch == host_arch


_ARCH_PREDICATES: Dict[OsFamily, Callable[[Variant, str], bool]] = {
    OsFamily.LINUX: _linux_applies,
    OsFamily.MACOS: _macos_applies,
    OsFamily.WINDOWS: _windows_applies,
    OsFamily.AIX: _single_arch_applies,
    OsFamily.HPUX: _single_arch_applies,
    OsFamily.IRIX: _single_arch_applies,
    OsFamily.SUNOS: _exact_arch_applies,
    OsFamily.FREEBSD: _exact_arch_applies,
}


def variant_applies_to(
    variant: Variant, host_family: Optional[OsFamily], host_arch: str
) -> bool:
    """
    Check whether an installation of a variant will work on a host.

    Args:
        variant: Catalog variant with raw os/arch strings
        host_family: OS family of the host (None never matches)
        host_arch: Raw ``os.arch`` style architecture of the host

    Returns:
        True if the variant is compatible with the host

    Example:
        >>> v = Variant("Linux", "i386", "https://x/cmake-i386.tar.gz")
        >>> variant_applies_to(v, OsFamily.LINUX, "amd64")
        True
        >>> variant_applies_to(Variant("Linux", "x86_64", "u"), OsFamily.LINUX, "i386")
        False
    """
    if host_family is None:
        return False
    if classify_os_name(variant.os) is not host_family:
        return False
    return _ARCH_PREDICATES[host_family](variant, host_arch)


def resolve_variant(
    catalog: Sequence[Installable],
    version_id: str,
    host: HostDescriptor,
    tool_name: str = "CMake",
) -> Variant:
    """
    Select the variant of a version to install on a host.

    The first compatible variant in catalog order wins.

    Args:
        catalog: Installables in catalog order
        version_id: Requested version id (e.g. '3.20.0')
        host: Host to install on
        tool_name: Tool name used in error messages

    Returns:
        The selected variant

    Raises:
        UnknownPlatformError: If the host OS name does not classify
        NoMatchingVersionError: If no installable has the requested id
        NoMatchingVariantError: If no variant of the id suits the host
    """
    host_family = host.require_os_family(tool_name, version_id)

    installables = find_installables(catalog, version_id)
    if not installables:
        raise NoMatchingVersionError(
            tool_name, version_id, host=host, available=list_versions(catalog)
        )

    candidates = [v for inst in installables for v in inst.variants]
    for variant in candidates:
        if variant_applies_to(variant, host_family, host.arch):
            logger.debug(
                f"Selected variant os={variant.os} arch={variant.arch} for {host}"
            )
            return variant

    raise NoMatchingVariantError(tool_name, version_id, host, candidates)


__all__ = ["variant_applies_to", "resolve_variant"]
