"""
HTTP client for the Panasonic breaker box.
Issues exactly one GET per call, no retries.
"""
from typing import Optional

import requests

from src.common.exceptions import FetchError
from src.common.logging_config import get_logger

logger = get_logger(__name__)


class BreakerBoxClient:
    """
    Fetches the CSV energy snapshot from the breaker box.

    Usage:
        client = BreakerBoxClient("http://192.168.1.20/data.csv")
        body = client.fetch()
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize breaker box client.

        Args:
            url: Snapshot URL on the device
            timeout: Request timeout in seconds (None = transport default)
            session: Optional pre-built requests session
        """
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self) -> str:
        """
        Fetch the current snapshot.

        Returns:
            Response body as text

        Raises:
            FetchError: On any transport error or non-200 status
        """
        try:
            response = self._session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Error fetching data from breaker box: {e}") from e

        if response.status_code != 200:
            raise FetchError(
                f"Received non-200 status code: {response.status_code} {response.reason}"
            )

        logger.debug(f"Fetched {len(response.content)} bytes from {self.url}")
        return response.text

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
