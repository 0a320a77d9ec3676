"""
Version store: the directory of installed Nim distributions.

Every installed version is one entry in the store root named
``nim-<identifier>``. Cloned installs are real directories owned by the
store; linked installs are symlinks to directories owned by someone else.
The reserved names ``current`` and ``prev`` and every hidden name (staging
directories, lock file, temporary links) are never entries.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from nimswitch.core.exceptions import NotExecutableError, ValidationError
from nimswitch.core.filesystem import (
    find_executable,
    path_exists,
    remove_link,
    safe_rmtree,
)

logger = logging.getLogger(__name__)

ENTRY_PREFIX = "nim-"
CURRENT_POINTER = "current"
PREVIOUS_POINTER = "prev"
RESERVED_NAMES = frozenset({CURRENT_POINTER, PREVIOUS_POINTER})
COMPILER_NAME = "nim"


@dataclass(frozen=True)
class VersionEntry:
    """
    An installed or linked Nim distribution.

    Attributes:
        identifier: Version identifier (e.g. '2.2.0', 'devel', 'a1b2c3d')
        path: Entry path inside the store (``<store>/nim-<identifier>``)
        linked: True if the entry is a symlink to an external directory
    """

    identifier: str
    path: Path
    linked: bool = False

    @property
    def name(self) -> str:
        """Entry name inside the store."""
        return self.path.name

    @property
    def bin_dir(self) -> Path:
        return self.path / "bin"

    @property
    def target(self) -> Path:
        """Directory the entry resolves to."""
        return self.path.resolve()

    @property
    def is_available(self) -> bool:
        """False for linked entries whose target has disappeared."""
        return self.path.is_dir()

    def __str__(self) -> str:
        return self.name


def identifier_from_token(token: str) -> str:
    """
    Derive the store identifier from a user token.

    Commit references are written ``#<ref>`` on the command line; the ``#``
    is not part of the directory name.

    Example:
        >>> identifier_from_token("#a1b2c3d")
        'a1b2c3d'
    """
    return token[1:] if token.startswith("#") else token


def validate_identifier(identifier: str) -> str:
    """
    Check that an identifier can name a store entry.

    Raises:
        ValidationError: If the identifier is empty or not a plain file name
    """
    if not identifier or not identifier.strip():
        raise ValidationError("Version identifier must not be empty")
    if identifier in (".", "..", "-") or identifier.startswith("."):
        raise ValidationError(f"Invalid version identifier: {identifier!r}")
    if "/" in identifier or "\\" in identifier or os.sep in identifier:
        raise ValidationError(
            f"Version identifier must not contain path separators: {identifier!r}"
        )
    if any(ch.isspace() for ch in identifier):
        raise ValidationError(
            f"Version identifier must not contain whitespace: {identifier!r}"
        )
    return identifier


class VersionStore:
    """
    Read and modify the set of installed versions.

    Example:
        >>> store = VersionStore(Path("~/.local/share/nimswitch").expanduser())
        >>> [entry.identifier for entry in store.entries()]
        ['2.0.8', '2.2.0', 'devel']
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    @staticmethod
    def entry_name(identifier: str) -> str:
        return f"{ENTRY_PREFIX}{identifier}"

    def entry_path(self, identifier: str) -> Path:
        return self.root / self.entry_name(identifier)

    def staging_path(self, identifier: str) -> Path:
        """Hidden directory an install is built in before it is registered."""
        return self.root / f".{self.entry_name(identifier)}.partial"

    def pointer_path(self, pointer: str) -> Path:
        if pointer not in RESERVED_NAMES:
            raise ValueError(f"Unknown pointer: {pointer}")
        return self.root / pointer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _entry_from_path(self, path: Path) -> Optional[VersionEntry]:
        name = path.name
        if not name.startswith(ENTRY_PREFIX) or len(name) == len(ENTRY_PREFIX):
            return None
        if path.is_symlink():
            return VersionEntry(name[len(ENTRY_PREFIX) :], path, linked=True)
        if path.is_dir():
            return VersionEntry(name[len(ENTRY_PREFIX) :], path, linked=False)
        return None

    def entries(self) -> List[VersionEntry]:
        """
        List all entries, sorted by name.

        Linked entries whose target is gone are included so they can be
        listed and removed; check ``is_available`` before using one.
        """
        if not self.root.is_dir():
            return []

        found = []
        for path in self.root.iterdir():
            entry = self._entry_from_path(path)
            if entry is not None:
                found.append(entry)
        found.sort(key=lambda e: e.name)
        return found

    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self.entries()]

    def get(self, identifier: str) -> Optional[VersionEntry]:
        """Look up an entry by exact identifier."""
        if not identifier:
            return None
        path = self.entry_path(identifier)
        if path.parent != self.root:
            return None
        return self._entry_from_path(path)

    def get_by_name(self, name: str) -> Optional[VersionEntry]:
        """Look up an entry by its directory name (``nim-<identifier>``)."""
        if not name.startswith(ENTRY_PREFIX) or "/" in name or "\\" in name:
            return None
        return self._entry_from_path(self.root / name)

    def contains(self, identifier: str) -> bool:
        return path_exists(self.entry_path(identifier))

    # ------------------------------------------------------------------
    # Modifications
    # ------------------------------------------------------------------

    def link(self, token: str, directory: Union[str, Path]) -> VersionEntry:
        """
        Register an externally-owned distribution without copying it.

        Args:
            token: Identifier to register the directory under
            directory: Distribution root (must contain an executable bin/nim)

        Returns:
            The new linked entry

        Raises:
            ValidationError: If the token is invalid, already installed, or
                the directory does not exist
            NotExecutableError: If the directory has no bin/nim executable
        """
        identifier = validate_identifier(identifier_from_token(token))
        directory = Path(directory).expanduser()

        if not directory.is_dir():
            raise ValidationError(f"Not a directory: {directory}")

        directory = directory.resolve()
        if find_executable(COMPILER_NAME, directory / "bin") is None:
            raise NotExecutableError(directory / "bin" / COMPILER_NAME)

        if self.contains(identifier):
            raise ValidationError(
                f"Version {identifier} is already installed at {self.entry_path(identifier)}"
            )

        self.root.mkdir(parents=True, exist_ok=True)
        link_path = self.entry_path(identifier)
        os.symlink(directory, link_path, target_is_directory=True)
        logger.info(f"Linked {link_path.name} -> {directory}")
        return VersionEntry(identifier, link_path, linked=True)

    def register(self, staging: Path, identifier: str) -> VersionEntry:
        """
        Move a finished staging directory into place as an owned entry.

        Raises:
            ValidationError: If the identifier is already installed
        """
        if self.contains(identifier):
            raise ValidationError(f"Version {identifier} is already installed")

        destination = self.entry_path(identifier)
        os.replace(staging, destination)
        logger.info(f"Registered {destination.name}")
        return VersionEntry(identifier, destination, linked=False)

    def remove(self, entry: VersionEntry) -> None:
        """
        Delete an entry.

        Linked entries only lose their symlink; owned entries are deleted
        together with their directory tree.
        """
        if entry.linked:
            remove_link(entry.path)
            logger.info(f"Unlinked {entry.name}")
        else:
            safe_rmtree(entry.path, require_prefix=self.root)
            logger.info(f"Deleted {entry.name}")
