"""
File system utilities for cmakekit.

This module provides the file operations an installation needs:
- Archive extraction (tar.gz, tar.xz, tar.bz2, tar, zip)
- Safe file operations (atomic writes, safe deletion)
- Glob listing and moving directory contents

Extraction validates every member path so that an archive can never write
outside of its destination directory.
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz", ".tar.xz", ".tar.bz2", ".tbz2", ".tar")


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract an archive to a destination directory.

    The format is detected from the file name. File modes stored in zip
    archives are restored so that extracted executables stay executable.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('cmake-3.20.0-linux-x86_64.tar.gz', '/tmp/cmake')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        elif archive_name.endswith(".tar.xz"):
            _extract_tar(archive_path, destination, "r:xz")
        elif archive_name.endswith((".tar.bz2", ".tbz2")):
            _extract_tar(archive_path, destination, "r:bz2")
        elif archive_name.endswith(".tar"):
            _extract_tar(archive_path, destination, "r:")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                f"Supported: {', '.join(ARCHIVE_SUFFIXES)}"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, restoring unix permission bits."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            extracted = Path(zf.extract(member, destination))
            mode = (member.external_attr >> 16) & 0o777
            if mode and not IS_WINDOWS:
                extracted.chmod(mode)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never in a partially-written state. If the write fails,
    the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def _handle_remove_readonly(func, path, exc):
    """Error handler for read-only files on Windows."""
    if not os.access(path, os.W_OK):
        os.chmod(path, stat.S_IWRITE)
        func(path)
    else:
        raise


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove

    Raises:
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS and sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_handle_remove_readonly)
        elif IS_WINDOWS:
            shutil.rmtree(path, onerror=_handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def delete_recursive(path: Union[str, Path]) -> None:
    """
    Delete a file or a directory tree; a missing path is not an error.

    Raises:
        FilesystemError: If deletion fails
    """
    path = Path(path)
    if path.is_symlink() or path.is_file():
        try:
            path.unlink()
        except OSError as e:
            raise FilesystemError(f"Failed to remove file '{path}': {e}") from e
    elif path.exists():
        safe_rmtree(path)


def delete_contents(directory: Union[str, Path]) -> None:
    """Delete everything inside a directory, keeping the directory itself."""
    directory = Path(directory)
    if not directory.is_dir():
        return
    for child in directory.iterdir():
        delete_recursive(child)


def list_files(root: Union[str, Path], includes: Iterable[str]) -> List[Path]:
    """
    List files and directories below root matching any glob pattern.

    Args:
        root: Directory to scan
        includes: Glob patterns relative to root, e.g. ``**/bin/cmake``

    Returns:
        Sorted, de-duplicated list of matching paths

    Example:
        >>> list_files('/opt/cmake', ['**/bin/cmake', '**/bin/cmake.exe'])
        [PosixPath('/opt/cmake/cmake-3.20.0/bin/cmake')]
    """
    root = Path(root)
    matches = set()
    for pattern in includes:
        matches.update(root.glob(pattern))
    return sorted(matches)


def move_all_children(source: Union[str, Path], target: Union[str, Path]) -> None:
    """
    Move every entry of source into target.

    Raises:
        FilesystemError: If an entry of the same name already exists in target
    """
    source = Path(source)
    target = Path(target)
    target.mkdir(parents=True, exist_ok=True)

    for child in sorted(source.iterdir()):
        destination = target / child.name
        if destination.exists() or destination.is_symlink():
            raise FilesystemError(
                f"Cannot move '{child}' to '{destination}': destination exists"
            )
        shutil.move(str(child), str(destination))

