"""HTTP transport for capabilities documents."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from ..errors import NetworkError
from ..types import FetchResponse

logger = logging.getLogger(__name__)


class RequestsTransport:
    """Fetch documents with a ``requests.Session``. No retries are attempted."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = headers or {}

    def fetch(self, url: str) -> FetchResponse:
        """
        Fetch a document.

        Args:
            url: Document URL

        Returns:
            FetchResponse with ``success=False`` for HTTP error statuses and
            network failures
        """
        logger.debug("Fetching %s", url)
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.debug("Request for %s failed: %s", url, exc)
            return FetchResponse(url=url, success=False, error_message=f"Network error: {exc}")

        content_type = response.headers.get("content-type", "")
        if response.status_code >= 400:
            error_msg = f"HTTP {response.status_code}: {response.text[:200]}"
            logger.debug("Request for %s failed: %s", url, error_msg)
            return FetchResponse(
                url=url,
                success=False,
                status_code=response.status_code,
                content_type=content_type,
                error_message=error_msg,
            )

        return FetchResponse(
            url=url,
            success=True,
            data=response.content,
            status_code=response.status_code,
            content_type=content_type,
        )

    def fetch_or_raise(self, url: str) -> bytes:
        """Fetch a document, raising ``NetworkError`` instead of returning a failed response."""
        response = self.fetch(url)
        if not response.success:
            raise NetworkError(response.error_message or f"Failed to fetch {url}", url=url)
        return response.data
