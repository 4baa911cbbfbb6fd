"""Results endpoint client.

Handles the HTTP request against ``/list.json`` and turns the JSON payload
into ResultItem records. Failed requests are not retried.
"""

from __future__ import annotations
import requests
from typing import Any, List, Optional
import logging

from .models import ResultItem

logger = logging.getLogger(__name__)


class EndpointError(Exception):
    """The results endpoint could not be reached or returned an unusable response.

    The message is meant to be shown to the user as-is.
    """


class ResultsAPIClient:
    """Client for the results endpoint.

    Safe to call from worker threads as long as each call gets its own
    response (requests.Session is shared, which requests supports for GETs).
    """

    def __init__(self, base_url: str, timeout: float = 30, session: Optional[requests.Session] = None):
        """Initialize client.

        Args:
            base_url: Endpoint origin, e.g. ``http://127.0.0.1:3000``
            timeout: Request timeout in seconds
            session: Optional requests session (tests pass a fake)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, query: str) -> str:
        """Full request URL for an encoded query string."""
        return f"{self.base_url}/list.json?{query}"

    def fetch_results(self, query: str) -> List[ResultItem]:
        """Fetch results for an encoded filter query.

        Args:
            query: Encoded query string (without ``?``)

        Returns:
            Result items in endpoint order

        Raises:
            EndpointError: On transport errors, non-2xx status or malformed JSON
        """
        url = self.url_for(query)
        logger.debug(f"GET {url}")
        try:
            r = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.RequestException as e:
            raise EndpointError(f"Could not reach results endpoint: {e}") from e

        if r.status_code >= 400:
            detail = (r.text or "").strip()[:200]
            raise EndpointError(f"Results endpoint returned status {r.status_code}" + (f": {detail}" if detail else ""))

        try:
            payload: Any = r.json()
        except ValueError as e:
            raise EndpointError(f"Results endpoint returned invalid JSON: {e}") from e

        return parse_results(payload)


def parse_results(payload: Any) -> List[ResultItem]:
    """Convert a decoded JSON payload into ResultItem records.

    Raises:
        EndpointError: If the payload is not a list of result objects
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise EndpointError(f"Unexpected results payload: expected a list, got {type(payload).__name__}")
    items: List[ResultItem] = []
    for index, entry in enumerate(payload):
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise EndpointError(f"Unexpected result #{index}: expected an object")
        try:
            items.append(ResultItem.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise EndpointError(f"Malformed result #{index}: {e}") from e
    return items


__all__ = ["ResultsAPIClient", "EndpointError", "parse_results"]
