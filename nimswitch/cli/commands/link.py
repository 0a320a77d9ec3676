"""
Link command implementation.

Registers an existing Nim distribution (for example a local checkout) as a
version without copying it.
"""

import logging

from nimswitch.cli.utils import SwitchContext, safe_print

logger = logging.getLogger(__name__)


def run(args, context: SwitchContext) -> int:
    """
    Run the link command.

    Args:
        args: Parsed arguments with link = [TOKEN, DIR]

    Returns:
        Exit code (0 for success)
    """
    token, directory = args.link

    with context.locked():
        entry = context.store.link(token, directory)

    safe_print(f"✓ Linked {entry.identifier} → {entry.target}")
    return 0
