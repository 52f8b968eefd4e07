"""
Response Normalizer and Error Classifier

Inspects raw JSON body defensively (no field is assumed to be present),
classifies API status code and produces uniform ResultEnvelope.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .constants import (
    API_NAME,
    FATAL_STATUS_CODES,
    HEADER_RATE_LIMIT,
    HEADER_RATE_REMAINING,
    HEADER_RATE_RESET,
    STATUS_OK,
)
from .exceptions import ApiError, OpenCageError, ProtocolError, QuotaOrAccessError
from .models import ApiStatus, RateLimitInfo, ResultEnvelope, TransportResponse

logger = logging.getLogger(__name__)


class ResultsShape(Enum):
    """Shape of `results` field in raw payload."""

    EMPTY = "empty"  # absent or null
    SINGLE = "single"  # lone object
    MANY = "many"  # array


def classifyResults(rawResults: Any) -> Tuple[ResultsShape, List[Dict[str, Any]]]:
    """Classify `results` field and coerce it into a list, dood!

    Nothing downstream of this function branches on runtime type of results.

    Returns:
        Tuple of detected shape and list of result objects
    """
    if rawResults is None:
        return ResultsShape.EMPTY, []
    if isinstance(rawResults, Mapping):
        return ResultsShape.SINGLE, [dict(rawResults)]
    if isinstance(rawResults, (list, tuple)):
        return ResultsShape.MANY, list(rawResults)
    raise ProtocolError(f"unexpected response format: results is {type(rawResults).__name__}")


def formatErrorMessage(code: int, message: Optional[str] = None) -> str:
    """Build human readable error message with numeric status code."""
    if message:
        return f"{API_NAME} error {code}: {message}"
    return f"{API_NAME} error {code}"


def classifyStatus(code: int, message: Optional[str] = None, response: Any = None) -> Optional[OpenCageError]:
    """Map API status code to failure kind.

    Returns:
        None for 200, QuotaOrAccessError for 402/403, ApiError for everything else
    """
    if code == STATUS_OK:
        return None
    errorMessage = formatErrorMessage(code, message)
    if code in FATAL_STATUS_CODES:
        return QuotaOrAccessError(errorMessage, code=code, response=response)
    return ApiError(errorMessage, code=code, response=response)


def _parseStatus(body: Any) -> ApiStatus:
    if not isinstance(body, Mapping):
        raise ProtocolError("unexpected response format", response=body)
    status = body.get("status")
    if not isinstance(status, Mapping) or "code" not in status:
        raise ProtocolError("unexpected response format", response=body)

    code = status["code"]
    if isinstance(code, bool):
        raise ProtocolError("unexpected response format", response=body)
    try:
        code = int(code)
    except (TypeError, ValueError):
        raise ProtocolError("unexpected response format", response=body) from None

    ret: ApiStatus = {"code": code}
    message = status.get("message")
    if message is not None:
        ret["message"] = str(message)
    return ret


def _parseInt(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parseRateLimitHeaders(headers: Optional[Mapping[str, str]]) -> Optional[RateLimitInfo]:
    """Extract `X-RateLimit-*` headers, the client only reports them, dood!

    Returns:
        RateLimitInfo with parsed values or None if no rate limit headers were sent
    """
    if not headers:
        return None
    lowered = {str(k).lower(): v for k, v in headers.items()}

    ret: RateLimitInfo = {}
    for header, name in (
        (HEADER_RATE_LIMIT, "limit"),
        (HEADER_RATE_REMAINING, "remaining"),
        (HEADER_RATE_RESET, "reset"),
    ):
        value = _parseInt(lowered.get(header))
        if value is not None:
            ret[name] = value
    return ret or None


def normalizeResponse(response: TransportResponse, *, query: str, requestUri: str) -> ResultEnvelope:
    """Turn raw (status, headers, body) into ResultEnvelope or raise, dood!

    Steps:
        1. No body -> ProtocolError("empty response body")
        2. Body without status -> ProtocolError("unexpected response format")
        3. status.code 402/403 -> QuotaOrAccessError, other non-200 -> ApiError
        4. status.code 200 -> envelope; transport HTTP status is only recorded

    Args:
        response: Transport response with parsed JSON body
        query: Value of `q` parameter
        requestUri: Request URI (API key must be masked already)

    Returns:
        Normalized result envelope

    Raises:
        ProtocolError: if body is missing or malformed
        QuotaOrAccessError: if status code is 402 or 403
        ApiError: for any other non-200 status code
    """
    body = response.body
    if body is None or (isinstance(body, (str, bytes)) and not body.strip()):
        raise ProtocolError("empty response body", code=response.statusCode)

    status = _parseStatus(body)
    error = classifyStatus(status["code"], status.get("message"), response=body)
    if error is not None:
        raise error

    shape, results = classifyResults(body.get("results"))
    logger.debug(f"Got {len(results)} result(s), shape: {shape.name}")

    totalResults = body.get("total_results")
    envelope: ResultEnvelope = {
        "query": query,
        "requestUri": requestUri,
        "httpStatusCode": response.statusCode,
        "status": status,
        "totalResults": totalResults,
        "hasResults": len(results) > 0,
        "results": results,
        "rate": body["rate"] if "rate" in body else None,
        "rateLimit": parseRateLimitHeaders(response.headers),
        "responseHeaders": dict(response.headers) if response.headers is not None else None,
        "raw": body,
    }
    return envelope
