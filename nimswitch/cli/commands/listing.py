"""
List command implementation.

Shows every installed version, marking the current one with ``*`` and the
previous one with ``-``.
"""

import logging

from nimswitch.cli.utils import SwitchContext, safe_print
from nimswitch.toolchain.resolver import sort_entries

logger = logging.getLogger(__name__)


def run(args, context: SwitchContext) -> int:
    """
    Run the list command.

    Returns:
        Exit code (always 0)
    """
    entries = sort_entries(context.store.entries())
    if not entries:
        print(f"No versions installed in {context.store.root}")
        return 0

    state = context.tracker.state()
    for entry in entries:
        if entry.name == state.current:
            marker = "*"
        elif entry.name == state.previous:
            marker = "-"
        else:
            marker = " "

        line = f"{marker} {entry.identifier}"
        if entry.linked:
            target = "missing" if not entry.is_available else str(entry.target)
            line += f" → {target}"
        safe_print(line)

    return 0
