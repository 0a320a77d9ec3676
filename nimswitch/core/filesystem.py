"""
File system utilities for nimswitch.

This module provides the filesystem primitives the version store is built on:
- Atomic symlink replacement (temp link + rename)
- Safe tree removal restricted to the store
- Best-effort pruning of build leftovers
- Executable lookup inside a distribution's bin directory
"""

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Union

from nimswitch.core.exceptions import NimSwitchError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

# Extensions tried when looking up executables on Windows
EXECUTABLE_SUFFIXES = ["", ".exe", ".cmd", ".bat"] if IS_WINDOWS else [""]


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(NimSwitchError):
    """Base exception for filesystem operations."""

    pass


class LinkCreationError(FilesystemError):
    """Failed to create or replace a symbolic link."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check if path is relative to parent."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def path_exists(path: Path) -> bool:
    """True for existing paths and for dangling symlinks."""
    return path.exists() or path.is_symlink()


def find_executable(name: str, directory: Path) -> Optional[Path]:
    """
    Find an executable file inside a single directory.

    Args:
        name: Executable name (e.g., 'nim', 'nimble')
        directory: Directory to search

    Returns:
        Path to executable if found, None otherwise
    """
    for ext in EXECUTABLE_SUFFIXES:
        exe_path = directory / f"{name}{ext}"
        if exe_path.is_file() and os.access(exe_path, os.X_OK):
            return exe_path
    return None


def _is_plain_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and not any(
        sep in name for sep in ("/", "\\", os.sep)
    )


def find_file(name: str, directory: Path) -> Optional[Path]:
    """
    Like :func:`find_executable` but without the execute-bit check.

    Names with path separators are never looked up, so the result always
    lies directly inside directory.
    """
    if not _is_plain_name(name):
        return None
    for ext in EXECUTABLE_SUFFIXES:
        candidate = directory / f"{name}{ext}"
        if candidate.is_file():
            return candidate
    return None


# ============================================================================
# Links
# ============================================================================


def read_link(link_path: Path) -> Optional[str]:
    """
    Read the raw target of a symlink.

    Returns:
        Link target as stored, or None if link_path is not a symlink
    """
    if not link_path.is_symlink():
        return None
    return os.readlink(link_path)


def atomic_symlink(link_path: Union[str, Path], target: Union[str, Path]) -> None:
    """
    Point link_path at target, replacing any existing link atomically.

    A temporary link is created in the same directory and renamed over
    link_path, so readers see either the old or the new target.

    Raises:
        LinkCreationError: If the link cannot be created or renamed
    """
    link_path = Path(link_path)
    temp_path = link_path.with_name(f".{link_path.name}.{uuid.uuid4().hex}.tmp")

    try:
        os.symlink(str(target), temp_path, target_is_directory=True)
        os.replace(temp_path, link_path)
    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise LinkCreationError(
            f"Failed to point {link_path} at {target}: {e}"
        ) from e

    logger.debug(f"Linked {link_path} -> {target}")


def remove_link(link_path: Path) -> bool:
    """
    Remove a symlink without touching its target.

    Returns:
        True if a link was removed, False if there was none
    """
    if not link_path.is_symlink():
        return False

    if IS_WINDOWS and link_path.is_dir():
        os.rmdir(link_path)
    else:
        link_path.unlink()
    logger.debug(f"Removed link: {link_path}")
    return True


# ============================================================================
# Safe Removal
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree(store / "nim-2.0.8", require_prefix=store)
    """
    path = Path(path)
    if path.is_symlink():
        raise FilesystemError(f"Refusing to remove tree through symlink: {path}")
    path = path.resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if path == require_prefix or not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, 0o777)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def prune_paths(root: Path, patterns: Iterable[str], strict: bool = True) -> List[Path]:
    """
    Delete everything under root matching the glob patterns.

    Args:
        root: Directory the patterns are relative to
        patterns: Glob patterns such as '.git' or 'bin/nim_csources_*'
        strict: If False, failures are logged and skipped

    Returns:
        Paths that were removed

    Raises:
        FilesystemError: If a removal fails and strict is True
    """
    removed = []
    for pattern in patterns:
        for match in sorted(root.glob(pattern)):
            try:
                if match.is_dir() and not match.is_symlink():
                    safe_rmtree(match, require_prefix=root)
                else:
                    match.unlink()
                removed.append(match)
                logger.debug(f"Pruned {match}")
            except (OSError, ValueError, FilesystemError) as e:
                if strict:
                    raise FilesystemError(f"Failed to prune {match}: {e}") from e
                logger.warning(f"Could not remove {match}: {e}")
    return removed


__all__ = [
    "FilesystemError",
    "LinkCreationError",
    "is_relative_to",
    "path_exists",
    "find_executable",
    "find_file",
    "read_link",
    "atomic_symlink",
    "remove_link",
    "safe_rmtree",
    "prune_paths",
]
