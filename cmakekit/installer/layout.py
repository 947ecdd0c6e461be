"""
Archive layout normalization.

Published CMake archives do not agree on where the installation lives
inside the archive. Some put ``bin/`` and ``share/`` at the top, most nest
them in a ``cmake-<version>-<platform>/`` directory, the macOS bundles nest
them in ``CMake.app/Contents/``, and 3.x archives ship extra siblings (docs,
man pages) next to the real root.

The normalizer scans the extracted tree for ``bin/<executable>`` without
assuming a nesting depth, confirms the candidate by its ``share/``
directory, and pulls the candidate's contents up to the extraction root so
the installed path is stable regardless of vendor nesting.
"""

import logging
import uuid
from pathlib import Path
from typing import Sequence

from cmakekit.core.exceptions import (
    AmbiguousArchiveFormatError,
    UnrecognizedArchiveFormatError,
)
from cmakekit.core.filesystem import (
    FilesystemError,
    delete_recursive,
    list_files,
    move_all_children,
)

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE_NAMES = ("cmake", "cmake.exe")


def find_root(tree: Path, executable_names: Sequence[str] = DEFAULT_EXECUTABLE_NAMES) -> Path:
    """
    Find the functional installation root of an extracted archive.

    The root is the directory holding ``bin/<executable>`` and ``share/``.
    Several candidates are never guessed between.

    Args:
        tree: Directory the archive was extracted to
        executable_names: File names of the tool executable to look for

    Returns:
        The installation root (may be ``tree`` itself)

    Raises:
        UnrecognizedArchiveFormatError: If no candidate exists, or the only
            candidate has no ``share`` directory
        AmbiguousArchiveFormatError: If more than one candidate exists

    Example:
        >>> find_root(Path("/tmp/x"))  # /tmp/x/cmake-3.20.0/{bin/cmake,share}
        PosixPath('/tmp/x/cmake-3.20.0')
    """
    tree = Path(tree)
    executables = [
        p
        for p in list_files(tree, [f"**/bin/{name}" for name in executable_names])
        if p.is_file()
    ]
    share_dirs = {p for p in list_files(tree, ["**/share"]) if p.is_dir()}
    logger.debug(
        f"Layout scan of {tree}: executables={[str(p) for p in executables]}, "
        f"{len(share_dirs)} share directories"
    )

    if not executables:
        raise UnrecognizedArchiveFormatError(
            tree, f"no bin/{' or bin/'.join(executable_names)} found"
        )
    if len(executables) > 1:
        raise AmbiguousArchiveFormatError(tree, [p.parent.parent for p in executables])

    candidate = executables[0].parent.parent
    if candidate / "share" not in share_dirs:
        raise UnrecognizedArchiveFormatError(
            tree, f"candidate root {candidate} has no share directory"
        )
    return candidate


def pull_up(tree: Path, root: Path) -> None:
    """
    Make ``root`` the top of ``tree``.

    Moves all children of root into tree and removes everything else that
    was extracted (the nesting directories and extraneous siblings such as
    docs or man pages). Failing to remove an extra is logged, not raised.

    Args:
        tree: Extraction directory
        root: Installation root found inside tree

    Raises:
        FilesystemError: If an extra that could not be removed blocks a move
    """
    tree = Path(tree)
    root = Path(root)
    if root == tree:
        return

    logger.info(f"Pulling up {root} to {tree}")
    staging = tree / f".pullup-{uuid.uuid4().hex}"
    root.rename(staging)

    for child in tree.iterdir():
        if child == staging:
            continue
        try:
            delete_recursive(child)
            logger.debug(f"Removed extraneous {child}")
        except (FilesystemError, OSError) as e:
            logger.warning(f"Could not remove extraneous {child}: {e}")

    move_all_children(staging, tree)
    staging.rmdir()


def normalize_layout(
    tree: Path, executable_names: Sequence[str] = DEFAULT_EXECUTABLE_NAMES
) -> Path:
    """
    Reduce an extracted archive to the canonical layout.

    Afterwards ``tree/bin/<executable>`` and ``tree/share`` exist.

    Returns:
        The tree

    Raises:
        UnrecognizedArchiveFormatError: See find_root
        AmbiguousArchiveFormatError: See find_root
    """
    root = find_root(tree, executable_names)
    pull_up(tree, root)
    return Path(tree)


__all__ = ["DEFAULT_EXECUTABLE_NAMES", "find_root", "pull_up", "normalize_layout"]
