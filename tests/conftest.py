"""
Pytest configuration and shared fixtures for nimswitch tests.
"""

import os
import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.stores import (
    store_root,
    populated_store,
    external_nim,
    clean_environ,
)


def pytest_collection_modifyitems(config, items):
    """Skip tests that need POSIX symlinks and shell scripts on Windows."""
    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires POSIX symlinks and sh")
    for item in items:
        if "posix" in item.keywords:
            item.add_marker(skip_posix)
