"""
Unit tests for the store lock.

Tests cover:
- Lock acquisition and release
- Timeout behavior
- Release after exceptions
"""

import pytest

from nimswitch.core.exceptions import StoreError, StoreLockTimeout
from nimswitch.core.locking import LOCK_FILE_NAME, LockManager


class TestLockManager:
    """Tests for LockManager class."""

    def test_lock_path_in_store_root(self, tmp_path):
        manager = LockManager(tmp_path)

        assert manager.lock_path == tmp_path / LOCK_FILE_NAME

    def test_acquire_and_release(self, tmp_path):
        manager = LockManager(tmp_path)

        with manager.store_lock(timeout=5):
            assert manager.lock_path.exists()

        # Reacquiring proves the first lock was released
        with manager.store_lock(timeout=1):
            pass

    def test_creates_missing_store_root(self, tmp_path):
        manager = LockManager(tmp_path / "new-store")

        with manager.store_lock(timeout=1):
            assert (tmp_path / "new-store").is_dir()

    def test_timeout_when_held(self, tmp_path):
        manager = LockManager(tmp_path)
        other = LockManager(tmp_path)

        with manager.store_lock(timeout=5):
            with pytest.raises(StoreLockTimeout) as exc_info:
                with other.store_lock(timeout=0.1):
                    pass

        assert "Could not acquire store lock" in str(exc_info.value)
        assert isinstance(exc_info.value, StoreError)

    def test_released_after_exception(self, tmp_path):
        manager = LockManager(tmp_path)

        with pytest.raises(RuntimeError):
            with manager.store_lock(timeout=1):
                raise RuntimeError("fail inside lock")

        with manager.store_lock(timeout=1):
            pass
