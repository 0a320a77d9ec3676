"""Test fixtures for nimswitch tests.

This package provides reusable pytest fixtures for testing nimswitch components:

- stores: Version stores and fake Nim distributions

Import fixtures in your tests using:
    from tests.fixtures.stores import populated_store
"""

__all__ = [
    "stores",
]
