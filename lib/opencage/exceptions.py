"""
OpenCage Client Exceptions

This module contains custom exception classes for handling OpenCage Geocoding API errors.
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class OpenCageError(Exception):
    """Base exception class for all OpenCage client errors, dood!

    All other exceptions in this module inherit from this base class.

    Attributes:
        message: Human-readable error message
        code: API status code (if available)
        response: Raw parsed response body (if available)
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        response: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response
        logger.debug(f"{type(self).__name__}: {message} (code: {code})")

    def __str__(self) -> str:
        return self.message


class MissingCredentialError(OpenCageError):
    """Raised when no API key can be resolved from the override or the environment."""


class InvalidArgumentError(OpenCageError, ValueError):
    """Raised when the caller supplies structurally invalid request parameters.

    This occurs for:
    - An empty or too short query
    - Bounds that are not exactly four numbers
    - Only one half of the proximity pair
    - A country code set that is empty after filtering
    - Coordinates or limits outside of their ranges
    """


class ProtocolError(OpenCageError):
    """Raised when the response body is missing or does not look like an API response."""


class QuotaOrAccessError(OpenCageError):
    """Raised for status 402 (quota exceeded) and 403 (key disabled or blocked).

    This is fatal for the caller: any further requests with the same key
    are expected to fail the same way, so callers should stop issuing them.
    """


class ApiError(OpenCageError):
    """Raised when the API reports any other non-200 status."""


class TransportError(OpenCageError):
    """Raised when the HTTP call itself fails (timeout, connection error)."""
