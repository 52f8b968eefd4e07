"""
HTTP Transport

Provides the "do an HTTP GET, return status/headers/body" primitive used by
OpenCageClient. Non-2xx statuses are returned, not raised: the API status
in JSON body decides about success.
"""

import json
import logging
from typing import Mapping, Optional, Protocol

import httpx

from .constants import DEFAULT_TIMEOUT
from .exceptions import ProtocolError, TransportError
from .models import TransportResponse

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Synchronous GET primitive."""

    def get(self, url: str, headers: Mapping[str, str]) -> TransportResponse: ...


class HttpxTransport:
    """Transport implementation based on httpx, dood!

    Creates new HTTP client for each request, so no connection state
    is shared between calls.

    Example:
        >>> transport = HttpxTransport(requestTimeout=5)
        >>> response = transport.get("https://api.opencagedata.com/geocode/v1/json?q=Berlin&key=...", {})
        >>> response.statusCode, response.body["status"]
    """

    def __init__(
        self,
        requestTimeout: float = DEFAULT_TIMEOUT,
        httpTransport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize transport

        Args:
            requestTimeout: HTTP request timeout in seconds (default: 10)
            httpTransport: Optional low-level httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.requestTimeout = requestTimeout
        self.httpTransport = httpTransport

    def get(self, url: str, headers: Mapping[str, str]) -> TransportResponse:
        """Make GET request and parse JSON body.

        Returns:
            TransportResponse, body is None if response has no content

        Raises:
            TransportError: on timeout or network error
            ProtocolError: if body is not valid JSON
        """
        try:
            with httpx.Client(timeout=self.requestTimeout, transport=self.httpTransport) as session:
                response = session.get(url, headers=dict(headers))
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}") from e

        logger.debug(f"HTTP {response.status_code}, {len(response.content)} bytes")

        body = None
        if response.content.strip():
            try:
                body = response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ProtocolError(
                    f"malformed JSON in response body (HTTP {response.status_code}): {e}",
                    code=response.status_code,
                ) from e

        return TransportResponse(
            statusCode=response.status_code,
            headers=dict(response.headers),
            body=body,
        )
