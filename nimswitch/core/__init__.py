"""
Core functionality for nimswitch.

This package contains the foundational modules that the version store,
resolver, tracker and installer depend on.
"""

from .directory import (
    get_store_dir,
    get_data_dir,
    ensure_store_structure,
    verify_directory_writable,
    DirectoryError,
)

from .locking import LockManager

from .config import SwitchConfig, load_config, default_config_path

from .exceptions import (
    NimSwitchError,
    StoreError,
    VersionNotFoundError,
    NoPreviousVersionError,
    StoreLockTimeout,
    ValidationError,
    ConfigError,
    NotExecutableError,
    ExternalFailureError,
    ExternalCommandError,
    StableQueryError,
)

__all__ = [
    "get_store_dir",
    "get_data_dir",
    "ensure_store_structure",
    "verify_directory_writable",
    "DirectoryError",
    "LockManager",
    "SwitchConfig",
    "load_config",
    "default_config_path",
    "NimSwitchError",
    "StoreError",
    "VersionNotFoundError",
    "NoPreviousVersionError",
    "StoreLockTimeout",
    "ValidationError",
    "ConfigError",
    "NotExecutableError",
    "ExternalFailureError",
    "ExternalCommandError",
    "StableQueryError",
]
