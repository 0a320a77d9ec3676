"""
Latest stable release lookup.

nim-lang.org publishes the newest stable version as a plain-text channel
file. One GET, no retries: a failure is reported to the user as-is.
"""

import logging
from typing import Optional

import requests

from nimswitch.core.config import DEFAULT_STABLE_URL
from nimswitch.core.exceptions import StableQueryError

logger = logging.getLogger(__name__)


def query_latest_stable(
    url: str = DEFAULT_STABLE_URL,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Fetch the newest stable Nim version.

    Args:
        url: Channel URL returning the version as plain text
        timeout: Request timeout in seconds (None waits forever)
        session: Optional requests session to reuse

    Returns:
        Version token such as '2.2.4'

    Raises:
        StableQueryError: On network/HTTP errors or an empty response

    Example:
        >>> query_latest_stable()
        '2.2.4'
    """
    http = session or requests
    logger.debug(f"Querying latest stable release from {url}")

    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise StableQueryError(f"Failed to query latest stable release: {e}") from e

    version = response.text.strip()
    if not version or any(ch.isspace() for ch in version):
        raise StableQueryError(
            f"Unexpected response from {url}: {response.text[:80]!r}"
        )

    logger.info(f"Latest stable release: {version}")
    return version
