"""
Request Builder

Assembles the full parameter set for forward and reverse geocoding from
validated request objects and produces the final request (URL + headers).
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .constants import (
    ACCEPT_JSON,
    API_BASE_URL,
    API_KEY_PARAM,
    DEFAULT_USER_AGENT,
    OPTION_PARAMS,
    QUERY_PARAM,
    RESERVED_PARAMS,
    GeocodeOption,
)
from .encoder import encodeParameters, formatSequence
from .exceptions import InvalidArgumentError
from .models import ForwardRequest, GeocodeRequest, PreparedRequest, ReverseRequest

logger = logging.getLogger(__name__)


def _applyOptions(params: Dict[str, Any], options: frozenset) -> None:
    # Iterate over enum to keep parameter order stable
    for option in GeocodeOption:
        if option in options:
            params[OPTION_PARAMS[option]] = 1


def applyExtraParameters(params: Dict[str, Any], extraParams: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge caller supplied parameters into params, dood!

    Any parameter may be added or overridden except reserved `q` and `key`,
    which are silently ignored (names are compared case-insensitively).
    Values are serialized by the encoder later, so booleans, numbers and
    sequences follow the same rules as builder-set parameters.

    Args:
        params: Parameter set to update in place
        extraParams: Caller supplied parameters or None

    Returns:
        The same params dict
    """
    if not extraParams:
        return params

    for name, value in extraParams.items():
        name = str(name).strip()
        if not name:
            continue
        if name.lower() in RESERVED_PARAMS:
            logger.debug(f"Ignoring reserved parameter '{name}' in extra parameters")
            continue
        params[name] = value
    return params


def buildForwardParameters(request: ForwardRequest) -> Dict[str, Any]:
    """Build ordered parameter set for forward geocoding (without API key).

    Example:
        >>> buildForwardParameters(ForwardRequest("Berlin", countryCodes=["DE"], limit=1))
        {'q': 'Berlin', 'countrycode': 'de', 'limit': 1}
    """
    params: Dict[str, Any] = {QUERY_PARAM: request.query}

    if request.countryCodes:
        params["countrycode"] = ",".join(request.countryCodes)
    if request.language:
        params["language"] = request.language
    # No default limit: let the API decide
    if request.limit is not None:
        params["limit"] = request.limit
    if request.bounds is not None:
        params["bounds"] = formatSequence(request.bounds)
    if request.proximity is not None:
        params["proximity"] = formatSequence(request.proximity)

    _applyOptions(params, request.options)
    applyExtraParameters(params, request.extraParams)
    return params


def buildReverseParameters(request: ReverseRequest) -> Dict[str, Any]:
    """Build ordered parameter set for reverse geocoding (without API key).

    Coordinates are joined into `q` as "lat,lon", no limit, bounds,
    countrycode or proximity parameters are ever sent.
    """
    params: Dict[str, Any] = {QUERY_PARAM: formatSequence((request.latitude, request.longitude))}

    if request.language:
        params["language"] = request.language

    _applyOptions(params, request.options)
    applyExtraParameters(params, request.extraParams)
    return params


def buildParameters(request: GeocodeRequest, apiKey: str) -> Dict[str, Any]:
    """Build complete parameter set, API key is always injected last."""
    if isinstance(request, ForwardRequest):
        params = buildForwardParameters(request)
    elif isinstance(request, ReverseRequest):
        params = buildReverseParameters(request)
    else:
        raise InvalidArgumentError(f"Unsupported request type: {type(request).__name__}")

    # Remove and re-add so the key is always the last parameter
    params.pop(API_KEY_PARAM, None)
    params[API_KEY_PARAM] = apiKey
    return params


def buildHeaders(userAgent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    return {
        "User-Agent": userAgent,
        "Accept": ACCEPT_JSON,
    }


def buildRequest(
    request: GeocodeRequest,
    apiKey: str,
    *,
    baseUrl: str = API_BASE_URL,
    userAgent: str = DEFAULT_USER_AGENT,
) -> PreparedRequest:
    """Produce final request: URL with encoded query string and headers, dood!

    Args:
        request: Validated forward or reverse request
        apiKey: Resolved API key
        baseUrl: API endpoint URL
        userAgent: Client identification string

    Returns:
        PreparedRequest ready to be sent by transport
    """
    params = buildParameters(request, apiKey)
    url = f"{baseUrl}?{encodeParameters(params)}"
    return PreparedRequest(
        url=url,
        headers=buildHeaders(userAgent),
        parameters=params,
        query=params[QUERY_PARAM],
    )
