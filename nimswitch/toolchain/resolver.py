"""
Version resolution against the installed versions in a store.

A user token is matched against store identifiers in this order:

1. ``-``: the previously active version
2. ``MAJOR.MINOR.PATCH``: that exact identifier only
3. ``MAJOR`` or ``MAJOR.MINOR``: the highest installed version in the series
4. anything else (branch, tag, ``#<ref>``): the highest identifier starting
   with the token

"Highest" always means version-sort order, where digit runs compare as
numbers: ``2.10.0`` sorts above ``2.2.0``.
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Tuple

from nimswitch.core.exceptions import NoPreviousVersionError, VersionNotFoundError
from nimswitch.toolchain.store import VersionEntry, VersionStore, identifier_from_token

logger = logging.getLogger(__name__)

PREVIOUS_TOKEN = "-"

_FULL_VERSION = re.compile(r"^\d+\.\d+\.\d+$")
_PARTIAL_VERSION = re.compile(r"^\d+(\.\d+)?$")
_COMMIT_REF = re.compile(r"^#[0-9a-fA-F]+$")
_VERSION_CHUNK = re.compile(r"\d+|\D+")


class TokenKind(Enum):
    """How a user token is interpreted."""

    PREVIOUS = "previous"
    FULL_VERSION = "full"
    PARTIAL_VERSION = "partial"
    COMMIT = "commit"
    REF = "ref"


def classify_token(token: str) -> TokenKind:
    """
    Classify a version token.

    Example:
        >>> classify_token("2.0")
        <TokenKind.PARTIAL_VERSION: 'partial'>
        >>> classify_token("#a1b2c3")
        <TokenKind.COMMIT: 'commit'>
    """
    if token == PREVIOUS_TOKEN:
        return TokenKind.PREVIOUS
    if _FULL_VERSION.match(token):
        return TokenKind.FULL_VERSION
    if _PARTIAL_VERSION.match(token):
        return TokenKind.PARTIAL_VERSION
    if _COMMIT_REF.match(token):
        return TokenKind.COMMIT
    return TokenKind.REF


def version_key(identifier: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Sort key giving numeric-aware ("version sort") ordering.

    Digit runs compare numerically and sort before text runs at the same
    position, so ``2.0.10`` > ``2.0.9`` and ``2.0`` < ``2.0.1``.
    """
    key = []
    for chunk in _VERSION_CHUNK.findall(identifier):
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk))
    return tuple(key)


def sort_entries(entries: List[VersionEntry]) -> List[VersionEntry]:
    """Return entries in ascending version-sort order."""
    return sorted(entries, key=lambda e: version_key(e.identifier))


class VersionResolver:
    """
    Find the installed entry that best matches a token.

    Resolution is a pure read of the store directory and the ``prev``
    pointer; nothing is modified.

    Example:
        >>> resolver = VersionResolver(store, tracker)
        >>> resolver.resolve("2.0").name
        'nim-2.0.8'
    """

    def __init__(self, store: VersionStore, tracker=None):
        """
        Args:
            store: Version store to search
            tracker: VersionTracker used for '-' (optional)
        """
        self.store = store
        self.tracker = tracker

    def find(self, token: str) -> Optional[VersionEntry]:
        """
        Resolve a token, returning None instead of raising on a miss.

        Raises:
            NoPreviousVersionError: If token is '-' and no previous version exists
        """
        kind = classify_token(token)

        if kind is TokenKind.PREVIOUS:
            previous = self.tracker.previous() if self.tracker is not None else None
            if previous is None:
                raise NoPreviousVersionError()
            return previous

        entries = [e for e in self.store.entries() if e.is_available]

        if kind is TokenKind.FULL_VERSION:
            matching = [e for e in entries if e.identifier == token]
        elif kind is TokenKind.PARTIAL_VERSION:
            matching = [
                e
                for e in entries
                if e.identifier == token or e.identifier.startswith(f"{token}.")
            ]
        else:
            prefix = identifier_from_token(token)
            if not prefix:
                return None
            matching = [e for e in entries if e.identifier.startswith(prefix)]

        if not matching:
            logger.debug(f"No installed version matches {token!r}")
            return None

        best = max(matching, key=lambda e: version_key(e.identifier))
        logger.debug(
            f"Resolved {token!r} to {best.name} "
            f"(candidates: {', '.join(e.name for e in matching)})"
        )
        return best

    def resolve(self, token: str) -> VersionEntry:
        """
        Resolve a token to an installed entry.

        Raises:
            VersionNotFoundError: If nothing matches
            NoPreviousVersionError: If token is '-' and no previous version exists
        """
        entry = self.find(token)
        if entry is None:
            raise VersionNotFoundError(token)
        return entry
