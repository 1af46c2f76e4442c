"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Retry logic
- Error handling
"""

import time
import requests
from typing import Any, Dict
from loguru import logger

from ...config import APIConfig
from ...errors import OverpassError


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    def __init__(self, api_config: APIConfig):
        self.config = api_config
        self.overpass_url = api_config.overpass_url
        self.timeout = api_config.overpass_timeout
        self._last_request_time = 0.0
        self._min_request_interval = api_config.min_request_interval

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute Overpass API query with retry logic

        Args:
            query: Overpass query string (XML script or QL)

        Returns:
            JSON response from Overpass API

        Raises:
            OverpassError: If the query fails after all retries or the
                response is not JSON
        """
        self._rate_limit()

        headers = {
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/x-www-form-urlencoded"
        }
        max_retries = self.config.max_retries
        retry_delay = self.config.retry_delay

        for attempt in range(max_retries):
            try:
                response = requests.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
            except requests.exceptions.Timeout as e:
                wait_time = retry_delay * (attempt + 1)
                logger.warning(f"Overpass timeout (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                if attempt < max_retries - 1:
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass timeout after {max_retries} attempts")
                raise OverpassError(f"{OverpassError.REQUEST_ERROR} Timed out after {max_retries} attempts.") from e
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status in (429, 504) and attempt < max_retries - 1:
                    wait_time = retry_delay * (attempt + 1)
                    logger.warning(f"Overpass {status} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass failed: HTTP {status}")
                raise OverpassError(f"{OverpassError.REQUEST_ERROR} HTTP {status}.") from e
            except requests.exceptions.RequestException as e:
                logger.warning(f"Overpass request failed (attempt {attempt + 1}): {e}")
                if attempt < max_retries - 1:
                    time.sleep(retry_delay * (attempt + 1))
                    continue
                logger.error(f"Overpass request failed after {max_retries} attempts: {e}")
                raise OverpassError(f"{OverpassError.REQUEST_ERROR} {e}") from e

            # Overpass answers errors with an XML/HTML body rather than JSON
            try:
                data = response.json()
            except ValueError as e:
                logger.error("Overpass returned a non-JSON response")
                raise OverpassError(OverpassError.REQUEST_ERROR) from e
            if not isinstance(data, dict) or "elements" not in data:
                raise OverpassError(OverpassError.REQUEST_ERROR)
            return data

        raise OverpassError(OverpassError.REQUEST_ERROR)
