"""
Use command implementation.

Switches the current version (or runs one command with it) for a version
token, ``-`` or ``--stable``. A token that isn't installed can be fetched and
built after confirmation.
"""

import logging

from nimswitch.cli.utils import SwitchContext, print_error, print_warning, safe_print
from nimswitch.core.exceptions import NotExecutableError, VersionNotFoundError
from nimswitch.toolchain.installer import plan_fetch
from nimswitch.toolchain.runner import report_version, run_with_version
from nimswitch.toolchain.stable import query_latest_stable

logger = logging.getLogger(__name__)


def run(args, context: SwitchContext) -> int:
    """
    Run the use command.

    Args:
        args: Parsed arguments with token, stable and exec_command
        context: Invocation context

    Returns:
        Exit code (0 for success, the command's code with -x)
    """
    if args.stable:
        token = query_latest_stable(
            context.config.stable_url, timeout=context.config.stable_timeout
        )
    else:
        token = args.token

    entry = _resolve_or_install(token, context)
    if entry is None:
        return 1

    if args.exec_command:
        return run_with_version(entry, args.exec_command)

    with context.locked():
        context.tracker.activate(entry)

    try:
        banner = report_version(entry)
    except NotExecutableError as e:
        print_warning(f"Switched to {entry.identifier}, but {e}")
        return 0

    safe_print(f"✓ {banner}")
    return 0


def _resolve_or_install(token: str, context: SwitchContext):
    """Resolve token; on a miss offer to install it. None if declined."""
    try:
        return context.resolver.resolve(token)
    except VersionNotFoundError:
        pass

    plan_fetch(token, context.config.release_tag)

    if not context.confirm(f"Nim {token} is not installed. Install it now?"):
        print_error(f"Version not installed: {token}")
        return None

    safe_print(f"⬇ Installing Nim {token} into {context.store.root}")
    with context.locked():
        entry = context.installer.install(token)
    safe_print(f"✓ Installed {entry.name}")
    return entry
