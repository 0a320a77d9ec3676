"""
Version management for nimswitch.

This module provides functionality for:
- The version store of installed and linked Nim distributions
- Version token resolution
- Current/previous version tracking
- Installing versions from source
- Querying the latest stable release
- Running commands against a specific version
"""

from nimswitch.toolchain.store import (
    VersionEntry,
    VersionStore,
    identifier_from_token,
    validate_identifier,
)
from nimswitch.toolchain.resolver import (
    TokenKind,
    VersionResolver,
    classify_token,
    sort_entries,
    version_key,
)
from nimswitch.toolchain.tracker import PointerState, VersionTracker
from nimswitch.toolchain.installer import FetchPlan, NimInstaller, plan_fetch
from nimswitch.toolchain.stable import query_latest_stable
from nimswitch.toolchain.runner import (
    report_version,
    run_command,
    run_with_version,
    version_environment,
)

__all__ = [
    "VersionEntry",
    "VersionStore",
    "identifier_from_token",
    "validate_identifier",
    "TokenKind",
    "VersionResolver",
    "classify_token",
    "sort_entries",
    "version_key",
    "PointerState",
    "VersionTracker",
    "FetchPlan",
    "NimInstaller",
    "plan_fetch",
    "query_latest_stable",
    "report_version",
    "run_command",
    "run_with_version",
    "version_environment",
]
