"""
Page fetching over HTTP.

BasePageFetcher is the seam the parsers depend on: anything that turns an
absolute URL into HTML bytes. HttpPageFetcher is the real implementation,
a single GET per page through a requests.Session with a fixed user agent.
Tests substitute in-memory fetchers.
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests

from .config import Settings
from .exceptions import UpstreamFetchError
from .logger import get_module_logger

logger = get_module_logger("fetcher")


class BasePageFetcher(ABC):
    """Abstract base class for page fetchers."""

    @abstractmethod
    def fetch(self, url: str) -> bytes:
        """
        Fetch a page and return its body.

        Args:
            url: Absolute URL of the page

        Returns:
            The complete response body

        Raises:
            UpstreamFetchError: on network or HTTP failure
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass

    def __enter__(self) -> "BasePageFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class HttpPageFetcher(BasePageFetcher):
    """Fetches pages with requests."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None
    ):
        self.settings = settings or Settings()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = self.settings.user_agent

    def fetch(self, url: str) -> bytes:
        """GET url and return the body, read in full before the connection is released."""
        logger.debug(f"GET {url}")
        try:
            with self.session.get(url, timeout=self.settings.timeout) as response:
                if not 200 <= response.status_code < 300:
                    logger.error(f"HTTP {response.status_code} fetching {url}")
                    raise UpstreamFetchError(
                        f"HTTP {response.status_code} fetching '{url}'",
                        url=url,
                        status_code=response.status_code
                    )
                return response.content
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            raise UpstreamFetchError(
                f"error fetching '{url}': {e}",
                url=url,
                details={"error": type(e).__name__}
            ) from e

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
