"""
Concurrent access control for the version store.

Two nimswitch processes mutating the same store (switching, installing,
removing) would otherwise race on the pointer links and staging directories.
Mutating commands hold a file lock in the store root for their duration.

Usage:
    from nimswitch.core.locking import LockManager

    lock_manager = LockManager(store_root)
    with lock_manager.store_lock(timeout=30):
        tracker.activate(entry)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from nimswitch.core.exceptions import StoreLockTimeout

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".nimswitch.lock"


class LockManager:
    """
    Manages the cross-process lock for a version store.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic release on process death.

    Attributes:
        lock_path: Lock file inside the store root
    """

    def __init__(self, store_root: Path):
        self.lock_path = Path(store_root) / LOCK_FILE_NAME

    @contextmanager
    def store_lock(self, timeout: float = 30):
        """
        Acquire the store lock for safe modifications.

        Args:
            timeout: Maximum wait time in seconds (default: 30)

        Raises:
            StoreLockTimeout: If lock can't be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(str(self.lock_path), timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired store lock: {self.lock_path}")
                yield
                logger.debug(f"Released store lock: {self.lock_path}")
        except LockTimeout as e:
            raise StoreLockTimeout(
                f"Could not acquire store lock after {timeout}s. "
                "Another nimswitch process may be running."
            ) from e
