"""
Shared HTTP session for the tracker API.

One pooled session serves the poll thread and the start/stop threads.
The adapter never retries: a failed call waits for the next 5-second poll.
The controller swaps in a fresh session after repeated failed fetches.
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import APP_VERSION

USER_AGENT = f"timetrack-dashboard/{APP_VERSION}"

# Poll + one command + its follow-up fetch can overlap
_POOL_SIZE = 3

_no_retries = Retry(total=0, raise_on_status=False)


def ca_bundle():
    """REQUESTS_CA_BUNDLE / SSL_CERT_FILE when they point at a file, else certifi's bundle."""
    for var in ("REQUESTS_CA_BUNDLE", "SSL_CERT_FILE"):
        path = os.environ.get(var)
        if path and os.path.isfile(path):
            return path
    return certifi.where()


def create_session():
    """Session for the tracker API: JSON accept header, our user agent, no adapter retries."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=_POOL_SIZE,
        max_retries=_no_retries,
    )
    for prefix in ("http://", "https://"):
        session.mount(prefix, adapter)
    session.headers.update({
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    })
    session.verify = ca_bundle()
    return session


def reset_session(session):
    """Drop pooled connections to the tracker API and hand back a new session."""
    try:
        session.close()
    except Exception:
        pass
    return create_session()


# Module-level so tests can patch timetrack_core.http_client.http
http = create_session()
