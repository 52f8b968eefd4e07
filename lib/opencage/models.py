"""
OpenCage Geocoding Data Models

This module defines immutable request objects (validated on construction)
and TypedDict models for the API wire format and for the normalized
result envelope returned to callers.
"""

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from typing_extensions import NotRequired, TypedDict

from .constants import MAX_LIMIT, MIN_LIMIT, MIN_QUERY_LENGTH, OPTION_PARAMS, GeocodeOption
from .exceptions import InvalidArgumentError

COUNTRY_CODE_RE = re.compile(r"^[a-z]{2}$")
_PARAM_TO_OPTION = {paramName: option for option, paramName in OPTION_PARAMS.items()}


def _isNumber(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _checkCoordinate(name: str, value: Any, limit: int) -> float:
    if not _isNumber(value) or not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")
    if not -limit <= value <= limit:
        raise InvalidArgumentError(f"{name} must be in range [-{limit}, {limit}], got {value}")
    return value


def _normalizeLanguage(language: Optional[str]) -> Optional[str]:
    if language is None:
        return None
    language = language.strip()
    return language or None


def normalizeOptions(options: Optional[Iterable[Union[GeocodeOption, str]]]) -> FrozenSet[GeocodeOption]:
    """Convert option flags to frozenset of GeocodeOption, dood!

    Accepts enum members, enum values (e.g. "no-annotations") and
    API parameter names (e.g. "no_annotations").
    """
    if options is None:
        return frozenset()
    if isinstance(options, (str, GeocodeOption)):
        options = [options]

    ret = set()
    for option in options:
        if isinstance(option, GeocodeOption):
            ret.add(option)
            continue
        name = str(option).strip().lower()
        if name in _PARAM_TO_OPTION:
            ret.add(_PARAM_TO_OPTION[name])
            continue
        try:
            ret.add(GeocodeOption(name))
        except ValueError:
            raise InvalidArgumentError(f"Unknown geocode option: {option!r}") from None
    return frozenset(ret)


def normalizeCountryCodes(countryCodes: Optional[Union[str, Iterable[str]]]) -> Optional[Tuple[str, ...]]:
    """Lower-case country codes, skip empty entries and duplicates.

    Returns:
        Tuple of codes in input order or None if no codes were requested

    Raises:
        InvalidArgumentError: if nothing is left after filtering or a code is not ISO 3166-1 alpha-2
    """
    if countryCodes is None:
        return None
    if isinstance(countryCodes, str):
        countryCodes = countryCodes.split(",")

    ret: List[str] = []
    for code in countryCodes:
        if code is None:
            continue
        code = str(code).strip().lower()
        if not code:
            continue
        if not COUNTRY_CODE_RE.match(code):
            raise InvalidArgumentError(f"Invalid ISO 3166-1 alpha-2 country code: {code!r}")
        if code not in ret:
            ret.append(code)

    if not ret:
        raise InvalidArgumentError("countryCodes must contain at least one non-empty country code")
    return tuple(ret)


def _freezeExtra(extraParams: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if extraParams is None:
        return None
    return MappingProxyType(dict(extraParams))


@dataclass(frozen=True)
class ForwardRequest:
    """Forward geocoding request: free-form query to coordinates, dood!

    Attributes:
        query: Free-form search query, trimmed, at least 2 characters
        countryCodes: ISO 3166-1 alpha-2 codes restricting the search
        language: IETF language tag for results (e.g. "de", "pt-BR", "native")
        limit: Maximum number of results, 1-100, API default when omitted
        bounds: Bounding box hint: (minLon, minLat, maxLon, maxLat)
        proximityLatitude: Latitude of point to bias results to
        proximityLongitude: Longitude of point to bias results to
        options: Presence-only API switches
        extraParams: Additional raw API parameters (cannot override `q` and `key`)
    """

    query: str
    countryCodes: Optional[Sequence[str]] = None
    language: Optional[str] = None
    limit: Optional[int] = None
    bounds: Optional[Sequence[Any]] = None
    proximityLatitude: Optional[float] = None
    proximityLongitude: Optional[float] = None
    options: FrozenSet[GeocodeOption] = frozenset()
    extraParams: Optional[Mapping[str, Any]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.query, str):
            raise InvalidArgumentError(f"query must be a string, got {type(self.query).__name__}")
        query = self.query.strip()
        if not query:
            raise InvalidArgumentError("query must not be empty")
        if len(query) < MIN_QUERY_LENGTH:
            raise InvalidArgumentError(f"query must be at least {MIN_QUERY_LENGTH} characters long, got {query!r}")
        object.__setattr__(self, "query", query)

        object.__setattr__(self, "countryCodes", normalizeCountryCodes(self.countryCodes))
        object.__setattr__(self, "language", _normalizeLanguage(self.language))

        if self.limit is not None:
            if not isinstance(self.limit, int) or isinstance(self.limit, bool):
                raise InvalidArgumentError(f"limit must be an integer, got {self.limit!r}")
            if not MIN_LIMIT <= self.limit <= MAX_LIMIT:
                raise InvalidArgumentError(f"limit must be in range [{MIN_LIMIT}, {MAX_LIMIT}], got {self.limit}")

        if self.bounds is not None:
            bounds = tuple(self.bounds)
            if len(bounds) != 4:
                raise InvalidArgumentError(
                    f"bounds must contain exactly 4 values (minLon, minLat, maxLon, maxLat), got {len(bounds)}"
                )
            for value in bounds:
                if not _isNumber(value) or not math.isfinite(value):
                    raise InvalidArgumentError(f"bounds must contain only finite numbers, got {value!r}")
            object.__setattr__(self, "bounds", bounds)

        hasLat = self.proximityLatitude is not None
        hasLon = self.proximityLongitude is not None
        if hasLat != hasLon:
            raise InvalidArgumentError("proximityLatitude and proximityLongitude must be supplied together")
        if hasLat:
            _checkCoordinate("proximityLatitude", self.proximityLatitude, 90)
            _checkCoordinate("proximityLongitude", self.proximityLongitude, 180)

        object.__setattr__(self, "options", normalizeOptions(self.options))
        object.__setattr__(self, "extraParams", _freezeExtra(self.extraParams))

    @property
    def proximity(self) -> Optional[Tuple[float, float]]:
        if self.proximityLatitude is None or self.proximityLongitude is None:
            return None
        return (self.proximityLatitude, self.proximityLongitude)


@dataclass(frozen=True)
class ReverseRequest:
    """Reverse geocoding request: coordinates to address, dood!

    Attributes:
        latitude: Latitude (-90 to 90)
        longitude: Longitude (-180 to 180)
        language: IETF language tag for results
        options: Presence-only API switches
        extraParams: Additional raw API parameters (cannot override `q` and `key`)
    """

    latitude: float
    longitude: float
    language: Optional[str] = None
    options: FrozenSet[GeocodeOption] = frozenset()
    extraParams: Optional[Mapping[str, Any]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        _checkCoordinate("latitude", self.latitude, 90)
        _checkCoordinate("longitude", self.longitude, 180)
        object.__setattr__(self, "language", _normalizeLanguage(self.language))
        object.__setattr__(self, "options", normalizeOptions(self.options))
        object.__setattr__(self, "extraParams", _freezeExtra(self.extraParams))


GeocodeRequest = Union[ForwardRequest, ReverseRequest]


@dataclass(frozen=True)
class PreparedRequest:
    """Fully built request, ready to be passed to transport."""

    url: str
    headers: Mapping[str, str]
    parameters: Mapping[str, Any]
    query: str


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of HTTP call: transport status, headers and parsed JSON body (or None)."""

    statusCode: int
    headers: Dict[str, str]
    body: Any


class ApiStatus(TypedDict):
    """`status` object of API response, dood!"""

    code: int  # Status code, 200 on success
    message: NotRequired[str]  # Human readable status message


class RateInfo(TypedDict, total=False, closed=False):
    """`rate` object of API response (only present for free trial accounts)."""

    limit: int  # Requests per day
    remaining: int  # Requests left today
    reset: int  # Unix timestamp of quota reset


class RawResponse(TypedDict, total=False, closed=False):
    """Wire shape of geocoding API response. No field is guaranteed to be present."""

    status: ApiStatus
    total_results: int
    results: Union[Dict[str, Any], List[Dict[str, Any]], None]
    rate: RateInfo


class RateLimitInfo(TypedDict, total=False):
    """Rate limit metadata from `X-RateLimit-*` response headers."""

    limit: int
    remaining: int
    reset: int


class ResultEnvelope(TypedDict):
    """Normalized geocoding result, stable regardless of upstream payload shape, dood!

    `hasResults` is always `len(results) > 0` and `results` is always a list.
    """

    query: str  # Query as sent in `q` parameter
    requestUri: str  # Full request URI with API key masked
    httpStatusCode: Optional[int]  # Transport level HTTP status
    status: ApiStatus  # API level status (authoritative)
    totalResults: Optional[int]  # `total_results` as returned by API
    hasResults: bool
    results: List[Dict[str, Any]]
    rate: Optional[RateInfo]  # Only set if API returned it
    rateLimit: Optional[RateLimitInfo]  # Parsed rate limit headers, if any
    responseHeaders: Optional[Dict[str, str]]
    raw: Any  # Untouched parsed JSON body
