"""
Installation marker.

An installation directory records the URL it was populated from in a
single-line ``.installedFrom`` file. The marker is the only durable state:
an installation is up to date exactly when its marker equals the URL the
catalog currently resolves to. The installer writes it last, after the
archive was extracted and normalized, so an interrupted installation never
carries a valid marker.
"""

import logging
from pathlib import Path
from typing import Optional

from cmakekit.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

MARKER_NAME = ".installedFrom"


def marker_path(install_dir: Path) -> Path:
    return Path(install_dir) / MARKER_NAME


def read_marker(install_dir: Path) -> Optional[str]:
    """
    Read the URL an installation was populated from.

    Returns:
        The URL, or None if there is no readable marker
    """
    path = marker_path(install_dir)
    try:
        url = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable marker {path}: {e}")
        return None
    return url or None


def write_marker(install_dir: Path, url: str) -> None:
    """Record the source URL of an installation (atomic)."""
    atomic_write(marker_path(install_dir), url)
    logger.debug(f"Wrote marker {marker_path(install_dir)}")


def clear_marker(install_dir: Path) -> None:
    """Remove the marker, if any."""
    marker_path(install_dir).unlink(missing_ok=True)


def is_up_to_date(install_dir: Path, url: str) -> bool:
    """Check whether an installation was populated from url."""
    return read_marker(install_dir) == url
