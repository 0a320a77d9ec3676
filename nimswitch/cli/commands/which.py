"""
Which command implementation.

Prints the absolute path of files in the current version's bin directory,
independent of PATH.
"""

import logging

from nimswitch.cli.utils import SwitchContext, print_error
from nimswitch.core.filesystem import find_file

logger = logging.getLogger(__name__)


def run(args, context: SwitchContext) -> int:
    """
    Run the which command.

    Returns:
        Exit code (0 if every file was found, 1 otherwise)
    """
    current = context.tracker.current()
    if current is None:
        print_error("No current version selected")
        return 1

    status = 0
    for name in args.which:
        path = find_file(name, current.bin_dir)
        if path is None:
            print_error(f"{name} not found in {current.bin_dir}")
            status = 1
            continue
        print(path.absolute())

    return status
