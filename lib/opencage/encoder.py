"""
Query Parameter Encoder

Turns an ordered mapping of named values into a deterministic, percent-escaped
query string. Numbers are always formatted culture-invariantly: Python's own
float formatting never consults the process locale, so `1.5` is always `1.5`.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Mapping
from urllib.parse import quote

from .exceptions import InvalidArgumentError

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def escapeDataString(text: str) -> str:
    """Percent-escape text per RFC 3986 data string rules, dood!

    Everything except unreserved characters (``A-Z a-z 0-9 - . _ ~``) is
    escaped, non-ASCII characters are encoded as UTF-8 first.
    """
    return quote(text, safe="", encoding="utf-8")


def _formatDecimal(value: Decimal) -> str:
    if not value.is_finite():
        raise InvalidArgumentError(f"Cannot encode non-finite number: {value}")
    if value == value.to_integral_value():
        return str(int(value))
    # Positional notation, never exponent form
    return format(value.normalize(), "f")


def _formatFloat(value: float) -> str:
    if not math.isfinite(value):
        raise InvalidArgumentError(f"Cannot encode non-finite number: {value}")
    if value.is_integer():
        return str(int(value))
    # repr() gives the shortest string which round-trips to the same float
    return _formatDecimal(Decimal(repr(value)))


def formatInvariant(value: Any) -> str:
    """Convert scalar value to its culture-invariant string form.

    Args:
        value: bool, int, float, Decimal, Enum member or any other scalar

    Returns:
        String form: booleans as "1"/"0", numbers with "." decimal separator
        and without exponent or trailing zeros, other values via str()

    Raises:
        InvalidArgumentError: for NaN and infinite numbers
    """
    # bool is a subclass of int, so it goes first
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return formatInvariant(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _formatFloat(value)
    if isinstance(value, Decimal):
        return _formatDecimal(value)
    return str(value)


def formatSequence(values: Iterable[Any]) -> str:
    """Comma-join invariant forms of non-None elements."""
    return ",".join(formatInvariant(item) for item in values if item is not None)


def formatValue(value: Any) -> str:
    """Serialize single parameter value (scalar or sequence) without escaping."""
    if isinstance(value, SEQUENCE_TYPES):
        if isinstance(value, (set, frozenset)):
            # Sets have no stable order, sort them to keep output deterministic
            value = sorted(value, key=formatInvariant)
        return formatSequence(value)
    return formatInvariant(value)


def encodeParameters(params: Mapping[str, Any]) -> str:
    """Encode parameter mapping into `key1=value1&key2=value2` query string, dood!

    Entries with None values are skipped entirely. Both keys and values
    are escaped with escapeDataString(). Iteration order of the mapping
    is preserved.

    Args:
        params: Ordered mapping of parameter names to values

    Returns:
        Encoded query string without leading `?` and without trailing separator

    Example:
        >>> encodeParameters({"q": "Berlin", "limit": 1, "pretty": True, "bounds": [-11.0, 49.5]})
        'q=Berlin&limit=1&pretty=1&bounds=-11%2C49.5'
    """
    parts: List[str] = []
    for key, value in params.items():
        if value is None:
            continue
        parts.append(f"{escapeDataString(str(key))}={escapeDataString(formatValue(value))}")
    return "&".join(parts)
