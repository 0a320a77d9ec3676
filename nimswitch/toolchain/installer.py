"""
Installing Nim versions from source.

Install pipeline for a token that the resolver could not find:

1. Plan the fetch from the token (release tag, commit, or branch/tag ref)
2. Clone into a hidden staging directory in the store
3. Run the distribution's build script inside it
4. Check that ``bin/nim`` was produced
5. Prune VCS metadata and build leftovers, then drop the large
   intermediate compiler binaries (best-effort)
6. Rename the staging directory to ``nim-<identifier>``

Any failure removes the staging directory; nothing is registered.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from nimswitch.core.config import SwitchConfig
from nimswitch.core.exceptions import NotExecutableError, ValidationError
from nimswitch.core.filesystem import find_executable, prune_paths, safe_rmtree
from nimswitch.toolchain.resolver import TokenKind, classify_token
from nimswitch.toolchain.runner import run_command
from nimswitch.toolchain.store import (
    COMPILER_NAME,
    VersionEntry,
    VersionStore,
    identifier_from_token,
    validate_identifier,
)

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str], Optional[Path]], None]


@dataclass(frozen=True)
class FetchPlan:
    """
    How to obtain the sources for a token.

    Attributes:
        token: Token as typed by the user
        identifier: Store identifier the install is registered under
        kind: Token classification
        ref: Git ref to clone or check out
    """

    token: str
    identifier: str
    kind: TokenKind
    ref: str

    @property
    def shallow(self) -> bool:
        """Commits need full history to be checked out."""
        return self.kind is not TokenKind.COMMIT

    def commands(self, git: str, repository: str, destination: Path) -> List[List[str]]:
        """Git invocations that leave the requested sources in destination."""
        if self.shallow:
            return [
                [
                    git,
                    "clone",
                    "--depth",
                    "1",
                    "--branch",
                    self.ref,
                    repository,
                    str(destination),
                ]
            ]
        return [
            [git, "clone", repository, str(destination)],
            [git, "-C", str(destination), "checkout", "--quiet", self.ref],
        ]


def plan_fetch(token: str, release_tag: str = "v{version}") -> FetchPlan:
    """
    Decide how to fetch a token.

    Example:
        >>> plan_fetch("2.2.0").ref
        'v2.2.0'
        >>> plan_fetch("#a1b2c3").kind
        <TokenKind.COMMIT: 'commit'>

    Raises:
        ValidationError: If the token can't name an install
    """
    kind = classify_token(token)
    if kind is TokenKind.PREVIOUS:
        raise ValidationError("'-' refers to the previous version and can't be installed")

    identifier = validate_identifier(identifier_from_token(token))

    if kind is TokenKind.FULL_VERSION:
        ref = release_tag.format(version=token)
    else:
        ref = identifier

    return FetchPlan(token=token, identifier=identifier, kind=kind, ref=ref)


class NimInstaller:
    """
    Fetches, builds and registers Nim versions.

    Example:
        >>> installer = NimInstaller(store, SwitchConfig())
        >>> entry = installer.install("2.2.0")
        >>> entry.name
        'nim-2.2.0'
    """

    def __init__(
        self,
        store: VersionStore,
        config: Optional[SwitchConfig] = None,
        runner: CommandRunner = run_command,
    ):
        """
        Args:
            store: Store to install into
            config: Repository, build command and prune settings
            runner: Callable running one external command (cwd optional)
        """
        self.store = store
        self.config = config or SwitchConfig()
        self.runner = runner

    def install(self, token: str) -> VersionEntry:
        """
        Fetch and build token into the store.

        Raises:
            ValidationError: If the token is invalid or already installed
            ExternalCommandError: If git or the build script fails
            NotExecutableError: If the build produced no compiler
        """
        plan = plan_fetch(token, self.config.release_tag)

        if self.store.contains(plan.identifier):
            raise ValidationError(f"Version {plan.identifier} is already installed")

        self.store.root.mkdir(parents=True, exist_ok=True)
        staging = self.store.staging_path(plan.identifier)
        if staging.exists():
            logger.info(f"Removing leftover staging directory {staging}")
            safe_rmtree(staging, require_prefix=self.store.root)

        try:
            self._fetch(plan, staging)
            self._build(staging)
            self._prune(staging)
            entry = self.store.register(staging, plan.identifier)
        except BaseException:
            if staging.exists():
                safe_rmtree(staging, require_prefix=self.store.root)
            raise

        logger.info(f"Installed {entry.name}")
        return entry

    def _fetch(self, plan: FetchPlan, staging: Path) -> None:
        logger.info(f"Fetching Nim {plan.ref} from {self.config.repository}")
        for command in plan.commands(self.config.git, self.config.repository, staging):
            self.runner(command, None)

    def _build(self, staging: Path) -> None:
        logger.info(f"Building in {staging}")
        self.runner(list(self.config.build_command), staging)

        if find_executable(COMPILER_NAME, staging / "bin") is None:
            raise NotExecutableError(staging / "bin" / COMPILER_NAME)

    def _prune(self, staging: Path) -> None:
        removed = prune_paths(staging, self.config.prune)
        logger.debug(f"Pruned {len(removed)} build artifacts")

        # Large intermediate compilers; keeping them is harmless
        prune_paths(staging, self.config.large_binaries, strict=False)
