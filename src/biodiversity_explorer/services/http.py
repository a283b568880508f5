"""
Shared HTTP client for the GBIF and iNaturalist APIs.

Provides pre-configured ``requests.Session`` objects with a default timeout
and an identifying User-Agent. All datasource modules should use the
module-level ``session`` instead of bare ``requests.get``.

The module-level session does not retry: datasource calls fail soft and
report the first error. Tooling that wants retries (bulk verification,
scheduled snapshots) can build its own session with ``DEFAULT_RETRY``.

Usage::

    from biodiversity_explorer.services.http import session

    resp = session.get("https://api.gbif.org/v1/species/5219404")
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from biodiversity_explorer import __version__
from biodiversity_explorer.config import get_settings

#: Retry strategy for caller-level tooling - handles the transient errors we see in practice.
DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # 0s, 2s, 4s, 8s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

#: No retries; the first failure surfaces to the caller.
NO_RETRY = Retry(total=0, raise_on_status=False)

DEFAULT_TIMEOUT = 30  # seconds, see Settings.http_timeout

USER_AGENT = f"kenya-biodiversity-explorer/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with a retry adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Inject a default timeout so callers don't need to remember ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session - import and use directly.
session: requests.Session = create_session(timeout=get_settings().http_timeout)
