"""
Tests for locale-formatted number and timestamp parsing.
"""

from datetime import datetime, timezone

import pytest

from curse_parser.exceptions import MalformedNumberError
from curse_parser.numbers import (
    format_with_separators,
    parse_signed,
    parse_unix_timestamp,
    parse_unsigned,
)


def test_unsigned_dash_is_zero():
    """The site renders a zero count as a dash."""
    assert parse_unsigned("-") == 0
    assert parse_unsigned("  -  ") == 0


def test_unsigned_strips_thousands_separators():
    assert parse_unsigned("1,234") == 1234
    assert parse_unsigned("1,234,567") == 1234567
    assert parse_unsigned(" 12 ") == 12
    assert parse_unsigned("1\u00a0234") == 1234


@pytest.mark.parametrize("text", ["12a", "", "   ", "-5", "1.5", "1_000", "+3", "٣"])
def test_unsigned_rejects_non_digits(text):
    with pytest.raises(MalformedNumberError):
        parse_unsigned(text)


def test_unsigned_rejects_overflow():
    assert parse_unsigned(str(2 ** 64 - 1)) == 2 ** 64 - 1
    with pytest.raises(MalformedNumberError):
        parse_unsigned(str(2 ** 64))


def test_signed_accepts_sign():
    assert parse_signed("-42") == -42
    assert parse_signed("+7") == 7
    assert parse_signed("-1,000") == -1000
    assert parse_signed("-") == 0


def test_signed_rejects_garbage_and_overflow():
    with pytest.raises(MalformedNumberError):
        parse_signed("--1")
    with pytest.raises(MalformedNumberError):
        parse_signed(str(2 ** 63))


def test_separator_formatting_parses_back():
    for n in (0, 7, 999, 1000, 65536, 1234567, 2 ** 40 + 3):
        assert parse_unsigned(format_with_separators(n)) == n


def test_unix_timestamp_is_utc():
    ts = parse_unix_timestamp("1490000000")
    assert ts == datetime.fromtimestamp(1490000000, tz=timezone.utc)
    assert ts.tzinfo == timezone.utc


def test_unix_timestamp_zero_is_epoch_not_an_error():
    assert parse_unix_timestamp("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_unix_timestamp_propagates_errors():
    with pytest.raises(MalformedNumberError):
        parse_unix_timestamp("yesterday")
    with pytest.raises(MalformedNumberError):
        parse_unix_timestamp("99999999999999999")
