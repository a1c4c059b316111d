"""
ImageFetcher - Downloads source images over HTTP.
"""

import logging
from typing import Optional

import requests


class ImageFetchError(Exception):
    """Raised when a source image cannot be downloaded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ImageFetcher:
    """
    Fetches image bytes with a single GET per URL.

    Redirects are followed. There is no retry; a failed download is
    reported to the caller, which records it and moves on.
    """

    def __init__(
        self,
        user_agent: str = 'img-bot',
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image fetcher.

        Args:
            user_agent: User-Agent header value
            timeout: Request timeout in seconds
            session: Optional requests session (one is created if omitted)
            logger: Optional logger instance
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def fetch(self, url: str) -> bytes:
        """
        Download an image.

        Args:
            url: Absolute image URL

        Returns:
            Response body bytes

        Raises:
            ImageFetchError: On a non-success HTTP status
            requests.RequestException: On connection-level failures
        """
        self.logger.debug(f"Downloading: {url}")
        response = self.session.get(
            url,
            headers={'User-Agent': self.user_agent},
            allow_redirects=True,
            timeout=self.timeout,
        )
        if not response.ok:
            raise ImageFetchError(
                f"Image fetch failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.content
