"""Shared HTTP session for the Identity Toolkit REST API."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_TIMEOUT = 10

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session that retries transient 5xx replies.

    Up to 3 retries with exponential backoff (0.5s, 1s, 2s). Credential
    checks are not retried on 4xx: a rejected password is final.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        retry = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        _session.mount("https://", adapter)
    return _session
