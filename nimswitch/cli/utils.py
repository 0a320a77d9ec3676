"""
Shared utilities for CLI commands.

Provides the per-invocation context (store, tracker, resolver, installer),
the interactive confirmation prompt, and consistent output helpers.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from nimswitch.core.config import SwitchConfig, default_config_path, load_config
from nimswitch.core.directory import ensure_store_structure, get_store_dir
from nimswitch.core.locking import LockManager
from nimswitch.toolchain.installer import NimInstaller
from nimswitch.toolchain.resolver import VersionResolver
from nimswitch.toolchain.store import VersionStore
from nimswitch.toolchain.tracker import VersionTracker

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


# ============================================================================
# Confirmation
# ============================================================================


def prompt_confirm(question: str) -> bool:
    """
    Ask a yes/no question on the terminal.

    Anything but an explicit yes, including empty input, EOF and Ctrl-C,
    counts as no.
    """
    try:
        response = input(f"{question} [y/N] ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return response in ("y", "yes")


def assume_yes(question: str) -> bool:
    """Confirmation used with --yes."""
    print(f"{question} [y/N] y")
    return True


# ============================================================================
# Invocation Context
# ============================================================================


@dataclass
class SwitchContext:
    """Everything a command needs, built once per invocation."""

    store: VersionStore
    tracker: VersionTracker
    resolver: VersionResolver
    installer: NimInstaller
    lock_manager: LockManager
    config: SwitchConfig
    confirm: Confirm = prompt_confirm

    def locked(self):
        """Store lock using the configured timeout."""
        ensure_store_structure(self.store.root)
        return self.lock_manager.store_lock(timeout=self.config.lock_timeout)


def create_context(
    store_root: Optional[Path] = None,
    config_file: Optional[Path] = None,
    confirm: Optional[Confirm] = None,
) -> SwitchContext:
    """
    Build the command context.

    Args:
        store_root: Store directory (default: $NIMSWITCH_DIR or data dir)
        config_file: Configuration file; required to exist when given
        confirm: Confirmation callback (default: terminal prompt)
    """
    root = Path(store_root).expanduser() if store_root else get_store_dir()
    logger.debug(f"Using store {root}")

    if config_file is not None:
        config = load_config(Path(config_file), required=True)
    else:
        config = load_config(default_config_path(root))

    store = VersionStore(root)
    tracker = VersionTracker(store)
    return SwitchContext(
        store=store,
        tracker=tracker,
        resolver=VersionResolver(store, tracker),
        installer=NimInstaller(store, config),
        lock_manager=LockManager(root),
        config=config,
        confirm=confirm or prompt_confirm,
    )


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("✓", "[OK]")
            .replace("✗", "[X]")
            .replace("→", "->")
            .replace("⬇", "[GET]")
        )
        print(safe_message, file=file)
