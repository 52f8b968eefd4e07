"""
OpenCage Geocoding Client

This module provides the main OpenCageClient class: entry points for forward
and reverse geocoding which wire together request building, credential
resolution, transport and response normalization.
"""

import dataclasses
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import lib.utils as utils

from .constants import API_BASE_URL, API_KEY_PARAM, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, GeocodeOption
from .credentials import EnvironmentLookup, resolveApiKey
from .exceptions import OpenCageError, QuotaOrAccessError
from .models import ForwardRequest, GeocodeRequest, PreparedRequest, ResultEnvelope, ReverseRequest
from .normalizer import normalizeResponse
from .request_builder import buildRequest
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class OpenCageClient:
    """Synchronous client for OpenCage Geocoding API, dood!

    Every call is independent: API key is resolved again, new HTTP session
    is created and nothing is cached or retried.

    Example:
        >>> from lib.opencage import OpenCageClient, GeocodeOption
        >>>
        >>> client = OpenCageClient(apiKey="your_api_key")
        >>>
        >>> # Forward geocoding
        >>> result = client.forward("Berlin", countryCodes=["DE"], limit=1)
        >>> if result["hasResults"]:
        ...     print(result["results"][0]["geometry"])
        >>>
        >>> # Reverse geocoding
        >>> result = client.reverse(52.5432379, 13.4142133, options={GeocodeOption.NO_ANNOTATIONS})
    """

    def __init__(
        self,
        apiKey: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        environment: Optional[EnvironmentLookup] = None,
        baseUrl: str = API_BASE_URL,
        userAgent: str = DEFAULT_USER_AGENT,
        requestTimeout: float = DEFAULT_TIMEOUT,
        defaultLanguage: Optional[str] = None,
    ):
        """Initialize OpenCage client

        Args:
            apiKey: API key; if empty, it's resolved from environment on each call
            transport: GET primitive (default: HttpxTransport)
            environment: Environment scope lookup for API key (default: SystemEnvironment)
            baseUrl: API endpoint URL
            userAgent: Client identification sent in User-Agent header
            requestTimeout: HTTP request timeout in seconds for default transport
            defaultLanguage: Language used when request doesn't specify one
        """
        self.apiKey = apiKey
        self.transport: Transport = transport if transport is not None else HttpxTransport(requestTimeout)
        self.environment = environment
        self.baseUrl = baseUrl
        self.userAgent = userAgent
        self.defaultLanguage = defaultLanguage

    def forward(
        self,
        query: str,
        *,
        countryCodes: Optional[Union[str, Sequence[str]]] = None,
        language: Optional[str] = None,
        limit: Optional[int] = None,
        bounds: Optional[Sequence[float]] = None,
        proximityLatitude: Optional[float] = None,
        proximityLongitude: Optional[float] = None,
        options: Optional[Iterable[Union[GeocodeOption, str]]] = None,
        extraParams: Optional[Mapping[str, Any]] = None,
    ) -> ResultEnvelope:
        """Forward geocoding: convert address or place name to coordinates, dood!

        Args:
            query: Free-form search query (e.g., "Brandenburger Tor, Berlin")
            countryCodes: ISO 3166-1 alpha-2 codes to restrict results (e.g., ["de", "at"])
            language: Language for results (e.g., "de", "en")
            limit: Maximum number of results (1-100, API default when omitted)
            bounds: Bounding box hint (minLon, minLat, maxLon, maxLat)
            proximityLatitude: Latitude of point to bias results to
            proximityLongitude: Longitude of point to bias results to
            options: Presence-only switches (e.g., {GeocodeOption.NO_ANNOTATIONS})
            extraParams: Additional raw API parameters, `q` and `key` are ignored

        Returns:
            Normalized result envelope

        Raises:
            InvalidArgumentError: on invalid parameters (before any network call)
            MissingCredentialError: if no API key can be resolved
            QuotaOrAccessError: on status 402/403, further calls are pointless
            ApiError: on any other non-200 status
            ProtocolError: if response is empty or malformed
            TransportError: on network errors and timeouts
        """
        request = ForwardRequest(
            query=query,
            countryCodes=countryCodes,
            language=language,
            limit=limit,
            bounds=bounds,
            proximityLatitude=proximityLatitude,
            proximityLongitude=proximityLongitude,
            options=options,
            extraParams=extraParams,
        )
        return self.geocode(request)

    def reverse(
        self,
        latitude: float,
        longitude: float,
        *,
        language: Optional[str] = None,
        options: Optional[Iterable[Union[GeocodeOption, str]]] = None,
        extraParams: Optional[Mapping[str, Any]] = None,
    ) -> ResultEnvelope:
        """Reverse geocoding: convert coordinates to address, dood!

        Args:
            latitude: Latitude (-90 to 90)
            longitude: Longitude (-180 to 180)
            language: Language for results
            options: Presence-only switches
            extraParams: Additional raw API parameters, `q` and `key` are ignored

        Returns:
            Normalized result envelope

        Raises:
            Same as forward()
        """
        request = ReverseRequest(
            latitude=latitude,
            longitude=longitude,
            language=language,
            options=options,
            extraParams=extraParams,
        )
        return self.geocode(request)

    def prepare(self, request: GeocodeRequest) -> PreparedRequest:
        """Build final request (URL + headers) without sending it."""
        if self.defaultLanguage and request.language is None:
            request = dataclasses.replace(request, language=self.defaultLanguage)

        apiKey = resolveApiKey(self.apiKey, self.environment)
        return buildRequest(request, apiKey, baseUrl=self.baseUrl, userAgent=self.userAgent)

    def geocode(self, request: GeocodeRequest) -> ResultEnvelope:
        """Execute prebuilt forward or reverse request.

        Single point for all HTTP requests: builds the request, calls transport
        and normalizes the response. All errors are logged and re-raised.
        """
        prepared = self.prepare(request)
        requestUri = utils.maskQueryParam(prepared.url, API_KEY_PARAM)
        logger.debug(f"Making request to {requestUri}")

        try:
            response = self.transport.get(prepared.url, prepared.headers)
            result = normalizeResponse(response, query=prepared.query, requestUri=requestUri)
        except QuotaOrAccessError as e:
            logger.warning(f"Quota or access problem, stop sending requests: {e}")
            raise
        except OpenCageError as e:
            logger.error(f"Geocoding request failed: {e}")
            raise

        logger.debug(f"API request successful: {result['status']['code']}, results: {len(result['results'])}")
        return result
