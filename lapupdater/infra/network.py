"""
Network reachability check for lapupdater.

A short HEAD request against a "generate 204" endpoint decides whether
a check or publish may start. This is the only time-limited step in the
workflow; git invocations themselves are never timed out.
"""

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_CHECK_URL = "https://www.google.com/generate_204"
DEFAULT_TIMEOUT_SECONDS = 3


def check_connectivity(url: str = DEFAULT_CHECK_URL, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bool:
    """
    Return True if `url` answers a HEAD request with a success status.

    Any request error (DNS, timeout, refused connection) or a non-2xx
    status counts as unreachable.
    """
    try:
        response = requests.head(url, timeout=timeout, allow_redirects=True)
        if not response.ok:
            logger.debug(f"Connectivity check got status {response.status_code} from {url}")
            return False
        return True
    except requests.RequestException as e:
        logger.debug(f"Connectivity check failed for {url}: {e}")
        return False
