"""
Current/previous version tracking.

The active version and the one before it are persisted as two symlinks in
the store root, ``current`` and ``prev``. Both hold the entry name relative
to the store (``nim-2.2.0``) so a store can be moved as a whole. Every write
goes through :func:`atomic_symlink`, so a reader never observes a missing or
half-written pointer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from nimswitch.core.filesystem import atomic_symlink, read_link, remove_link
from nimswitch.toolchain.store import (
    CURRENT_POINTER,
    PREVIOUS_POINTER,
    VersionEntry,
    VersionStore,
)

logger = logging.getLogger(__name__)


@dataclass
class PointerState:
    """Snapshot of both pointers as stored on disk (entry names or None)."""

    current: Optional[str] = None
    previous: Optional[str] = None


class VersionTracker:
    """
    Reads and updates the current/previous pointers of a store.

    Example:
        >>> tracker = VersionTracker(store)
        >>> tracker.activate(store.get("2.2.0"))
        >>> tracker.current().name
        'nim-2.2.0'
    """

    def __init__(self, store: VersionStore):
        self.store = store

    def _read(self, pointer: str) -> Optional[str]:
        target = read_link(self.store.pointer_path(pointer))
        if target is None:
            return None
        # Absolute targets are reduced to their entry name
        return target.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]

    def _write(self, pointer: str, entry_name: str) -> None:
        atomic_symlink(self.store.pointer_path(pointer), entry_name)
        logger.debug(f"Set {pointer} -> {entry_name}")

    def _entry(self, pointer: str) -> Optional[VersionEntry]:
        name = self._read(pointer)
        if name is None:
            return None
        entry = self.store.get_by_name(name)
        if entry is None or not entry.is_available:
            logger.debug(f"Pointer {pointer} refers to missing entry {name}")
            return None
        return entry

    def state(self) -> PointerState:
        """Raw pointer targets, including ones that no longer resolve."""
        return PointerState(
            current=self._read(CURRENT_POINTER),
            previous=self._read(PREVIOUS_POINTER),
        )

    def current(self) -> Optional[VersionEntry]:
        """The active entry, or None if unset or dangling."""
        return self._entry(CURRENT_POINTER)

    def previous(self) -> Optional[VersionEntry]:
        """The previously active entry, or None if unset or dangling."""
        return self._entry(PREVIOUS_POINTER)

    def activate(self, entry: VersionEntry) -> bool:
        """
        Make entry the current version.

        ``prev`` is written before ``current`` and only when the current
        target actually changes; re-activating the active version leaves
        ``prev`` untouched.

        Args:
            entry: An existing store entry

        Returns:
            True if the current target changed

        Raises:
            ValueError: If entry is not an available entry of this store
        """
        if not entry.is_available or entry.path.parent != self.store.root:
            raise ValueError(f"Cannot activate {entry}: not an installed version")

        old = self._read(CURRENT_POINTER)
        changed = old != entry.name

        # A dangling current is not a previous version
        if changed and self._entry(CURRENT_POINTER) is not None:
            self._write(PREVIOUS_POINTER, old)

        self._write(CURRENT_POINTER, entry.name)

        if changed:
            logger.info(f"Switched to {entry.name}")
        else:
            logger.debug(f"{entry.name} is already current")
        return changed

    def clear_references(self, entry: VersionEntry) -> None:
        """Remove any pointer that refers to entry (used before removal)."""
        for pointer in (CURRENT_POINTER, PREVIOUS_POINTER):
            if self._read(pointer) == entry.name:
                remove_link(self.store.pointer_path(pointer))
                logger.info(f"Cleared {pointer} (was {entry.name})")
