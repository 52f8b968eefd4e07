"""
OpenCage Geocoding API Constants

This module contains all constants and enums for the OpenCage Geocoding API client.
"""

from enum import StrEnum
from typing import Dict, Final, FrozenSet

VERSION: Final[str] = "0.1.0"

# API Configuration
API_NAME: Final[str] = "OpenCage"
API_BASE_URL: Final[str] = "https://api.opencagedata.com/geocode/v1/json"
DEFAULT_TIMEOUT: Final[int] = 10
DEFAULT_USER_AGENT: Final[str] = f"opencage-geocode-client/{VERSION}"
ACCEPT_JSON: Final[str] = "application/json"

# Authentication
API_KEY_ENV_VAR: Final[str] = "OPENCAGE_API_KEY"
API_KEY_OVERRIDE_PARAM: Final[str] = "apiKey"
API_KEY_PARAM: Final[str] = "key"
QUERY_PARAM: Final[str] = "q"
RESERVED_PARAMS: Final[FrozenSet[str]] = frozenset({QUERY_PARAM, API_KEY_PARAM})

# API Limits
MIN_QUERY_LENGTH: Final[int] = 2
MIN_LIMIT: Final[int] = 1
MAX_LIMIT: Final[int] = 100

# Status codes
STATUS_OK: Final[int] = 200
STATUS_QUOTA_EXCEEDED: Final[int] = 402
STATUS_FORBIDDEN: Final[int] = 403
FATAL_STATUS_CODES: Final[FrozenSet[int]] = frozenset({STATUS_QUOTA_EXCEEDED, STATUS_FORBIDDEN})

# Rate limit headers (reported only, never enforced)
HEADER_RATE_LIMIT: Final[str] = "x-ratelimit-limit"
HEADER_RATE_REMAINING: Final[str] = "x-ratelimit-remaining"
HEADER_RATE_RESET: Final[str] = "x-ratelimit-reset"


class GeocodeOption(StrEnum):
    """Presence-only API switches, dood!

    Each member maps to exactly one query parameter which is sent as ``<name>=1``
    when the option is set and omitted otherwise.
    """

    ABBREVIATE = "abbreviate"
    ADDRESS_ONLY = "address-only"
    ADD_REQUEST = "add-request"
    NO_ANNOTATIONS = "no-annotations"
    NO_DEDUPE = "no-dedupe"
    NO_RECORD = "no-record"
    PRETTY = "pretty"
    ROAD_INFO = "road-info"


OPTION_PARAMS: Final[Dict[GeocodeOption, str]] = {
    GeocodeOption.ABBREVIATE: "abbrv",
    GeocodeOption.ADDRESS_ONLY: "address_only",
    GeocodeOption.ADD_REQUEST: "add_request",
    GeocodeOption.NO_ANNOTATIONS: "no_annotations",
    GeocodeOption.NO_DEDUPE: "no_dedupe",
    GeocodeOption.NO_RECORD: "no_record",
    GeocodeOption.PRETTY: "pretty",
    GeocodeOption.ROAD_INFO: "roadinfo",
}
