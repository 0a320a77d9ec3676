"""
Remove command implementation.

Removes installed versions after confirming each one. Linked versions only
lose their link; the external directory is left alone.
"""

import logging

from nimswitch.cli.utils import SwitchContext, print_error, safe_print
from nimswitch.toolchain.store import identifier_from_token

logger = logging.getLogger(__name__)


def run(args, context: SwitchContext) -> int:
    """
    Run the remove command.

    Every token is processed even if an earlier one fails or is declined.

    Returns:
        Exit code (0 if everything requested was removed, 1 otherwise)
    """
    status = 0

    for token in args.remove:
        identifier = identifier_from_token(token)
        entry = context.store.get(identifier)
        if entry is None:
            print_error(f"Version not installed: {token}")
            status = 1
            continue

        if entry.linked:
            question = f"Unlink {entry.identifier} ({entry.target})?"
        else:
            question = f"Delete {entry.identifier} and {entry.path}?"

        if not context.confirm(question):
            print(f"Kept {entry.identifier}")
            status = 1
            continue

        with context.locked():
            context.tracker.clear_references(entry)
            context.store.remove(entry)
        safe_print(f"✓ Removed {entry.identifier}")

    return status
