"""
Unit tests for query parameter encoder

Covers culture-invariant number formatting, boolean and sequence
serialization and RFC 3986 escaping.
"""

import locale
from decimal import Decimal
from urllib.parse import unquote

import pytest

from lib.opencage.constants import GeocodeOption
from lib.opencage.encoder import encodeParameters, escapeDataString, formatInvariant, formatValue
from lib.opencage.exceptions import InvalidArgumentError


def test_booleans_encode_as_digits():
    """Test booleans are always 1/0, never true/false, dood!"""
    assert encodeParameters({"pretty": True, "no_record": False}) == "pretty=1&no_record=0"
    assert formatInvariant(True) == "1"
    assert formatInvariant(False) == "0"


def test_none_values_are_skipped():
    """Test None values are not encoded at all"""
    assert encodeParameters({"q": "Berlin", "language": None, "limit": 5}) == "q=Berlin&limit=5"


def test_empty_parameters():
    assert encodeParameters({}) == ""
    assert encodeParameters({"language": None}) == ""


def test_iteration_order_is_kept():
    assert encodeParameters({"b": 1, "a": 2, "c": 3}) == "b=1&a=2&c=3"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (-7, "-7"),
        (1.5, "1.5"),
        (-11.0, "-11"),
        (50.98, "50.98"),
        (11.33, "11.33"),
        (0.1, "0.1"),
        (1e-05, "0.00001"),
        (1e16, "10000000000000000"),
        (-0.0, "0"),
        (Decimal("1.50"), "1.5"),
        (Decimal("55.0"), "55"),
        (Decimal("-0.000123"), "-0.000123"),
    ],
)
def test_numbers_are_culture_invariant(value, expected):
    """Test number formatting: dot separator, no exponent, no trailing zeros"""
    assert formatInvariant(value) == expected


def test_numbers_ignore_process_locale():
    """Test decimal separator doesn't follow LC_NUMERIC, dood!"""
    oldLocale = locale.setlocale(locale.LC_NUMERIC)
    try:
        for name in ("de_DE.UTF-8", "de_DE.utf8", "fr_FR.UTF-8", "ru_RU.UTF-8"):
            try:
                locale.setlocale(locale.LC_NUMERIC, name)
                break
            except locale.Error:
                continue
        else:
            pytest.skip("No locale with comma decimal separator available")

        assert formatInvariant(1.5) == "1.5"
        assert encodeParameters({"proximity": [50.98, 11.33]}) == "proximity=50.98%2C11.33"
    finally:
        locale.setlocale(locale.LC_NUMERIC, oldLocale)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), Decimal("NaN")])
def test_non_finite_numbers_rejected(value):
    with pytest.raises(InvalidArgumentError):
        formatInvariant(value)


def test_sequences_are_comma_joined_and_escaped_once():
    """Test sequences become one escaped comma-separated value"""
    assert encodeParameters({"bounds": (-11.0, 49.0, 15.0, 55.0)}) == "bounds=-11%2C49%2C15%2C55"
    assert encodeParameters({"countrycode": ["de", "fr"]}) == "countrycode=de%2Cfr"
    assert formatValue([1, None, True, 2.5]) == "1,1,2.5"


def test_sets_are_encoded_deterministically():
    assert formatValue({"fr", "de", "at"}) == "at,de,fr"
    assert formatValue(frozenset({3, 1, 2})) == "1,2,3"


def test_strings_are_not_treated_as_sequences():
    assert formatValue("abc") == "abc"


def test_enum_values():
    assert formatInvariant(GeocodeOption.PRETTY) == "pretty"


def test_escape_data_string_rfc3986():
    """Test only unreserved characters are left as is, dood!"""
    assert escapeDataString("AZaz09-._~") == "AZaz09-._~"
    assert escapeDataString("a b&c=d/e?f+g") == "a%20b%26c%3Dd%2Fe%3Ff%2Bg"
    assert escapeDataString("Münster") == "M%C3%BCnster"
    assert escapeDataString("東京") == "%E6%9D%B1%E4%BA%AC"


def test_keys_are_escaped_too():
    assert encodeParameters({"a b": "c"}) == "a%20b=c"


def test_separators_inside_values_are_escaped():
    """Test no raw & or = ever appears inside a value"""
    encoded = encodeParameters({"q": "Tom & Jerry = friends", "x": "1&2"})
    pairs = encoded.split("&")
    assert len(pairs) == 2
    for pair in pairs:
        assert pair.count("=") == 1


@pytest.mark.parametrize(
    "text",
    ["Brandenburger Tor, Berlin", "50.98,11.33", "100% & more", "Straße #1", "a+b=c?d/e", "", "~"],
)
def test_escaping_round_trips(text):
    assert unquote(escapeDataString(text)) == text


def test_escaping_is_injective():
    values = ["a b", "a+b", "a%20b", "a%2520b", "a,b", "a%2Cb"]
    escaped = [escapeDataString(value) for value in values]
    assert len(set(escaped)) == len(values)
