"""
HTTP utilities for remote decision sources.

One GET per call: no retries, no caching. Any transport error or
non-2xx status propagates to the caller.
"""
import logging
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class HttpClient:
    """Thin requests session wrapper used to fetch remote decisions files."""

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """
        Fetch a URL and return its body as text.

        Raises:
            requests.RequestException: On connection errors, timeouts or HTTP error statuses
        """
        logger.debug("GET %s", url)
        response = self.session.get(url, headers=headers or {}, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.text
