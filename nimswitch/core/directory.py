"""
Store directory management for nimswitch.

This module resolves the location of the version store and makes sure it
exists and is writable before any command touches it.

Directory Structure:
    Store root ($NIMSWITCH_DIR or the platform data directory):
        - nim-<identifier>/  : Installed (cloned) Nim distributions
        - nim-<identifier>   : Symlinks to externally-owned distributions
        - current            : Symlink to the active entry
        - prev               : Symlink to the previously active entry
        - nimswitch.yaml     : Optional configuration file
        - .nimswitch.lock    : Cross-process lock file
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from nimswitch.core.exceptions import NimSwitchError

STORE_ENV_VAR = "NIMSWITCH_DIR"
APP_NAME = "nimswitch"


class DirectoryError(NimSwitchError):
    """Base exception for directory-related errors."""

    pass


class DirectoryCreationError(DirectoryError):
    """Raised when directory creation fails."""

    pass


def get_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the platform-conventional per-user data directory.

    Returns:
        Path: The data directory for nimswitch.
            - Windows: %LOCALAPPDATA%\\nimswitch
            - macOS: ~/Library/Application Support/nimswitch
            - Linux: $XDG_DATA_HOME/nimswitch or ~/.local/share/nimswitch
    """
    env = os.environ if environ is None else environ

    if os.name == "nt":
        local_app_data = env.get("LOCALAPPDATA")
        if not local_app_data:
            raise DirectoryError(
                "LOCALAPPDATA environment variable is not set. "
                f"Set {STORE_ENV_VAR} to choose a store directory."
            )
        return Path(local_app_data) / APP_NAME

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg_data_home = env.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_store_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the version store root.

    ``NIMSWITCH_DIR`` wins when set and non-empty; otherwise the platform data
    directory is used.

    Example:
        >>> get_store_dir({"NIMSWITCH_DIR": "/opt/nim"})
        PosixPath('/opt/nim')
    """
    env = os.environ if environ is None else environ
    override = env.get(STORE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_data_dir(env)


def verify_directory_writable(path: Path) -> bool:
    """
    Verify that a directory exists and is writable.

    Args:
        path: Directory path to verify.

    Returns:
        bool: True if directory exists and is writable, False otherwise.
    """
    if not path.is_dir():
        return False

    try:
        test_file = path / ".write_test"
        test_file.touch()
        test_file.unlink()
        return True
    except OSError:
        return False


def ensure_store_structure(root: Path) -> Path:
    """
    Create the store root if it doesn't exist.

    Returns:
        Path: The resolved store root.

    Raises:
        DirectoryCreationError: If the directory cannot be created.
        DirectoryError: If the directory is not writable.
    """
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            f"Failed to create store directory at {root}: {e}"
        ) from e

    if not verify_directory_writable(root):
        raise DirectoryError(
            f"Store directory at {root} is not writable. "
            "Please check directory permissions."
        )

    return root.resolve()
