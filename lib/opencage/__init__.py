"""
OpenCage Geocoding API Client Library

This module provides a synchronous Python client for OpenCage-compatible
geocoding API (api.opencagedata.com) with culture-invariant request encoding
and normalized, type-stable result envelopes.

Example usage:
    from lib.opencage import OpenCageClient, GeocodeOption

    client = OpenCageClient(apiKey="your_api_key")  # or set OPENCAGE_API_KEY

    # Forward geocoding
    result = client.forward("Weimar", countryCodes=["DE"], proximityLatitude=50.98, proximityLongitude=11.33)

    # Reverse geocoding
    result = client.reverse(50.9795, 11.3235, language="de", options={GeocodeOption.NO_ANNOTATIONS})

    for place in result["results"]:
        print(place["formatted"])
"""

from lib.opencage.client import OpenCageClient
from lib.opencage.constants import API_BASE_URL, API_KEY_ENV_VAR, GeocodeOption
from lib.opencage.credentials import DictEnvironment, EnvironmentLookup, EnvironmentScope, SystemEnvironment, resolveApiKey
from lib.opencage.encoder import encodeParameters, escapeDataString, formatInvariant
from lib.opencage.exceptions import (
    ApiError,
    InvalidArgumentError,
    MissingCredentialError,
    OpenCageError,
    ProtocolError,
    QuotaOrAccessError,
    TransportError,
)
from lib.opencage.models import (
    ApiStatus,
    ForwardRequest,
    PreparedRequest,
    RateLimitInfo,
    ResultEnvelope,
    ReverseRequest,
    TransportResponse,
)
from lib.opencage.normalizer import normalizeResponse
from lib.opencage.request_builder import buildRequest
from lib.opencage.transport import HttpxTransport, Transport

__all__ = [
    "OpenCageClient",
    "API_BASE_URL",
    "API_KEY_ENV_VAR",
    "GeocodeOption",
    "EnvironmentLookup",
    "EnvironmentScope",
    "SystemEnvironment",
    "DictEnvironment",
    "resolveApiKey",
    "encodeParameters",
    "escapeDataString",
    "formatInvariant",
    "OpenCageError",
    "MissingCredentialError",
    "InvalidArgumentError",
    "ProtocolError",
    "QuotaOrAccessError",
    "ApiError",
    "TransportError",
    "ApiStatus",
    "ForwardRequest",
    "ReverseRequest",
    "PreparedRequest",
    "TransportResponse",
    "RateLimitInfo",
    "ResultEnvelope",
    "normalizeResponse",
    "buildRequest",
    "HttpxTransport",
    "Transport",
]
