"""Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS real-time summary
feeds. All I/O is contained here; parsing is in the core module.
"""

import logging
from typing import Any

import requests

from quakemap.core.config import DEFAULT_FEED_BASE_URL
from quakemap.core.errors import FetchError
from quakemap.core.event import TimeWindow


logger = logging.getLogger(__name__)


class FeedClient:
    """Client for fetching a time-windowed seismic feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_FEED_BASE_URL,
        timeout: float | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            base_url: Feed base URL (without the all_<window>.geojson part)
            timeout: Request timeout in seconds, None to wait indefinitely
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def feed_url(self, window: TimeWindow) -> str:
        """URL of the feed resource for a window."""
        return f"{self.base_url}/all_{window.value}.geojson"

    def fetch(self, window: TimeWindow) -> Any:
        """Fetch the raw feature records for a window.

        This method performs HTTP I/O. The body is expected to be a GeoJSON
        FeatureCollection; its "features" member is returned untouched
        (validation is the normalizer's job). A top-level array is returned
        as is.

        Args:
            window: Time window to fetch

        Returns:
            Raw feature records (normally a list of dicts)

        Raises:
            FetchError: On transport failure, non-2xx status or invalid JSON
        """
        url = self.feed_url(window)

        logger.info("Fetching %s feed from %s", window.value, url)

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning("Feed request failed for %s: %s", window.value, e)
            raise FetchError(window, e) from e
        except ValueError as e:
            # Older requests releases raise a plain ValueError for bad JSON
            logger.warning("Feed returned invalid JSON for %s: %s", window.value, e)
            raise FetchError(window, e) from e

        if isinstance(data, dict):
            metadata = data.get("metadata")
            count = metadata.get("count") if isinstance(metadata, dict) else None
            features = data.get("features")
        else:
            count = None
            features = data

        logger.info(
            "Fetched %s feed (%s records)",
            window.value,
            count if count is not None else "unknown",
        )

        return features
