"""
Concurrent access control for cmakekit installations.

Installing the same CMake version from several processes on one host races
on the filesystem. Without a lock every racer downloads and extracts on its
own and the marker write is last-writer-wins; since all racers write the
same content the race only wastes bandwidth. Environments that need
exactly-once installation select the ``file`` strategy, which serializes
installers with an advisory lock keyed by the installation path.

Usage:
    from cmakekit.core.locking import create_lock_strategy

    strategy = create_lock_strategy("file", lock_dir)
    with strategy.installation_lock(install_dir):
        # download, extract, normalize, write marker
        pass
"""

import hashlib
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from cmakekit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

LOCK_STRATEGIES = ("none", "file")


class NullLock:
    """Lock strategy that does not lock at all."""

    @contextmanager
    def installation_lock(self, install_dir: Path, timeout: Optional[int] = None):
        """Yield without acquiring anything."""
        yield


class LockManager:
    """
    Manages advisory file locks for cmakekit installations.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic cleanup on process death.

    Attributes:
        lock_dir: Directory where lock files are stored
        timeout: Default maximum wait in seconds
    """

    def __init__(self, lock_dir: Path, timeout: int = 300):
        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout

    def lock_path_for(self, install_dir: Path) -> Path:
        """Lock file path for an installation directory."""
        key = str(Path(install_dir).absolute())
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        return self.lock_dir / f"install-{Path(install_dir).name}-{digest}.lock"

    @contextmanager
    def installation_lock(self, install_dir: Path, timeout: Optional[int] = None):
        """
        Acquire the lock for one installation directory.

        Args:
            install_dir: Installation directory the lock protects
            timeout: Maximum wait time in seconds (default: manager timeout)

        Yields:
            None

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        if timeout is None:
            timeout = self.timeout
        lock_path = self.lock_path_for(install_dir)
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired installation lock: {lock_path}")
                yield
                logger.debug(f"Released installation lock: {lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire installation lock for {install_dir} after {timeout}s. "
                "Another process may be installing this version."
            )
            raise LockTimeout(str(lock_path)) from e

    def cleanup_stale_locks(self, max_age_hours: int = 24) -> int:
        """
        Remove lock files older than max_age_hours.

        Returns:
            Number of stale locks removed
        """
        if not self.lock_dir.exists():
            return 0

        current_time = time.time()
        removed_count = 0

        for lock_file in self.lock_dir.glob("*.lock"):
            try:
                age_hours = (current_time - lock_file.stat().st_mtime) / 3600

                if age_hours > max_age_hours:
                    lock_file.unlink()
                    logger.info(f"Removed stale lock file: {lock_file}")
                    removed_count += 1
            except OSError as e:
                # Lock may be in use or already deleted
                logger.debug(f"Could not remove lock {lock_file}: {e}")

        return removed_count


def create_lock_strategy(name: str, lock_dir: Path, timeout: int = 300):
    """
    Create the lock strategy configured by name.

    Args:
        name: 'none' for the unlocked legacy behavior, 'file' for advisory locks
        lock_dir: Directory for lock files (used by 'file' only)
        timeout: Lock wait timeout in seconds

    Raises:
        ConfigError: If the name is not a known strategy
    """
    if name == "none":
        return NullLock()
    if name == "file":
        return LockManager(lock_dir, timeout=timeout)
    raise ConfigError(
        f"Unknown lock strategy '{name}'. Valid: {', '.join(LOCK_STRATEGIES)}"
    )


__all__ = [
    "LOCK_STRATEGIES",
    "LockManager",
    "LockTimeout",
    "NullLock",
    "create_lock_strategy",
]
