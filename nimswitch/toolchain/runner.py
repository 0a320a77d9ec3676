"""
Subprocess helpers: running external tools, reporting the active compiler
version, and ephemeral activation.

Ephemeral activation runs one command with a version's ``bin`` directory in
front of ``PATH``. The ``current``/``prev`` pointers are not touched.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from nimswitch.core.exceptions import ExternalCommandError, NotExecutableError
from nimswitch.core.filesystem import find_executable
from nimswitch.toolchain.store import COMPILER_NAME, VersionEntry

logger = logging.getLogger(__name__)

# Shell conventions for commands that cannot be started
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


def run_command(command: Sequence[str], cwd: Optional[Path] = None) -> None:
    """
    Run an external tool, streaming its output to the terminal.

    Raises:
        ExternalCommandError: If the tool can't be started or exits non-zero
    """
    logger.debug(f"Running: {' '.join(command)} (cwd={cwd})")
    try:
        result = subprocess.run(list(command), cwd=cwd)
    except OSError as e:
        raise ExternalCommandError(command, reason=str(e)) from e

    if result.returncode != 0:
        raise ExternalCommandError(command, result.returncode)


def version_environment(
    entry: VersionEntry, environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Copy of the environment with entry's bin directory first on PATH."""
    env = dict(os.environ if environ is None else environ)
    existing = env.get("PATH", "")
    bin_dir = str(entry.bin_dir)
    env["PATH"] = f"{bin_dir}{os.pathsep}{existing}" if existing else bin_dir
    return env


def run_with_version(
    entry: VersionEntry,
    command: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run command with entry's executables on the search path.

    Returns:
        The command's exit code (127 if it could not be started)
    """
    if not command:
        raise ValueError("No command given")

    env = version_environment(entry, environ)
    logger.debug(f"Running with {entry.name}: {' '.join(command)}")

    try:
        result = subprocess.run(list(command), env=env)
    except FileNotFoundError:
        logger.error(f"Command not found: {command[0]}")
        return COMMAND_NOT_FOUND
    except PermissionError:
        logger.error(f"Permission denied: {command[0]}")
        return COMMAND_NOT_EXECUTABLE

    return result.returncode


def report_version(entry: VersionEntry) -> str:
    """
    Ask the entry's compiler for its version banner.

    Returns:
        First line of ``nim --version``

    Raises:
        NotExecutableError: If the entry has no usable compiler
    """
    compiler = find_executable(COMPILER_NAME, entry.bin_dir)
    if compiler is None:
        raise NotExecutableError(entry.bin_dir / COMPILER_NAME)

    try:
        result = subprocess.run(
            [str(compiler), "--version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise NotExecutableError(compiler) from e

    lines = result.stdout.strip().splitlines()
    if result.returncode != 0 or not lines:
        raise NotExecutableError(compiler)
    return lines[0]
