"""
Centralized exception hierarchy for nimswitch.

This module defines all custom exceptions used across the codebase so that
the CLI can report every failure through a single ``NimSwitchError`` handler.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class NimSwitchError(Exception):
    """Base exception for all nimswitch errors."""

    pass


# ============================================================================
# Store Exceptions
# ============================================================================


class StoreError(NimSwitchError):
    """Base exception for version store errors."""

    pass


class VersionNotFoundError(StoreError):
    """Raised when no installed version matches a token."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Version not installed: {token}")


class NoPreviousVersionError(StoreError):
    """Raised when '-' is used but no previous version was recorded."""

    def __init__(self):
        super().__init__("No previous version recorded")


class StoreLockTimeout(StoreError):
    """Raised when the store lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(NimSwitchError):
    """Malformed arguments, missing values or invalid tokens."""

    pass


class ConfigError(ValidationError):
    """Invalid configuration file."""

    pass


class NotExecutableError(NimSwitchError):
    """Raised when a version directory lacks the compiler executable."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Not an executable Nim compiler: {path}")


# ============================================================================
# External Failures
# ============================================================================


class ExternalFailureError(NimSwitchError):
    """Base exception for failures of external tools and services."""

    pass


class ExternalCommandError(ExternalFailureError):
    """Raised when git or the build script exits with an error."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        reason: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        msg = f"Command failed: {' '.join(self.command)}"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StableQueryError(ExternalFailureError):
    """Raised when the latest stable release cannot be determined."""

    pass
