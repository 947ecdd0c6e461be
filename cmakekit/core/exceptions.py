"""
Centralized exception hierarchy for cmakekit.

Every error raised while resolving, fetching or normalizing a CMake
installation derives from CmakeKitError and carries enough context
(tool name, requested version, host identifiers) to be acted upon
without re-running in verbose mode.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class CmakeKitError(Exception):
    """Base exception for all cmakekit errors."""

    tool_name: Optional[str] = None
    version_id: Optional[str] = None
    host = None

    def add_context(self, tool_name: str, version_id: str, host=None, url: Optional[str] = None):
        """
        Attach the installation that failed and prefix the message with it.

        Args:
            tool_name: Tool name
            version_id: Requested version id
            host: Host the installation was for
            url: Archive URL being installed, if any
        """
        self.tool_name = tool_name
        self.version_id = version_id
        self.host = host
        prefix = f"{tool_name} [{version_id}] for {_describe_host(host)}"
        if url is not None:
            self.url = url
            prefix += f" from {url}"
        self.args = (f"{prefix}: {self}",)


class ConfigError(CmakeKitError):
    """Raised when the configuration file is missing keys or malformed."""

    pass


class CatalogError(CmakeKitError):
    """Raised when the installable catalog cannot be parsed."""

    pass


class TransportError(CmakeKitError):
    """Raised when a download or catalog fetch fails."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


# ============================================================================
# Resolution Exceptions
# ============================================================================


def _describe_host(host) -> str:
    if host is None:
        return "unknown host"
    return f"OS '{host.os_name}' with arch '{host.arch}'"


class ResolutionError(CmakeKitError):
    """Base exception when a version cannot be mapped to a download."""

    def __init__(self, message: str, tool_name: str, version_id: str, host=None):
        self.tool_name = tool_name
        self.version_id = version_id
        self.host = host
        super().__init__(message)


class UnknownPlatformError(ResolutionError):
    """Raised when the host operating system name does not classify."""

    def __init__(self, os_name: Optional[str], tool_name: str = "", version_id: str = "", host=None):
        self.os_name = os_name
        msg = f"Unknown operating system '{os_name}'"
        if tool_name:
            msg = f"{tool_name} [{version_id}]: {msg}"
        super().__init__(msg, tool_name, version_id, host)


class NoMatchingVersionError(ResolutionError):
    """Raised when the requested version id is absent from the catalog."""

    def __init__(
        self,
        tool_name: str,
        version_id: str,
        host=None,
        available: Sequence[str] = (),
    ):
        self.available = list(available)
        msg = f"{tool_name}: no version '{version_id}' in catalog"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg, tool_name, version_id, host)


class NoMatchingVariantError(ResolutionError):
    """Raised when a version exists but no archive suits the host."""

    def __init__(self, tool_name: str, version_id: str, host, variants: Sequence = ()):
        self.variants = list(variants)
        lines = [
            f"{tool_name} [{version_id}]: No tool download known for "
            f"{_describe_host(host)}. Available variants:"
        ]
        for variant in self.variants:
            lines.append(f"  os={variant.os} arch={variant.arch} url={variant.url}")
        if not self.variants:
            lines.append("  (none)")
        super().__init__("\n".join(lines), tool_name, version_id, host)


# ============================================================================
# Archive Layout Exceptions
# ============================================================================


class ArchiveLayoutError(CmakeKitError):
    """Base exception when an extracted archive has no usable root."""

    def __init__(self, message: str, tree):
        self.tree = tree
        self.url: Optional[str] = None
        super().__init__(message)


class UnrecognizedArchiveFormatError(ArchiveLayoutError):
    """Raised when no installation root can be located in the archive."""

    def __init__(self, tree, detail: str = ""):
        msg = f"Unrecognized archive format in {tree}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg, tree)


class AmbiguousArchiveFormatError(ArchiveLayoutError):
    """Raised when more than one installation root candidate exists."""

    def __init__(self, tree, candidates: Sequence):
        self.candidates = sorted(str(c) for c in candidates)
        msg = (
            f"Ambiguous archive format in {tree}, refusing to guess between "
            f"{len(self.candidates)} candidates: {', '.join(self.candidates)}"
        )
        super().__init__(msg, tree)
