"""Tests for Ubisoft timestamp parsing."""

from datetime import datetime, timezone

import pytest

from divbot.constants import UbiConstants
from divbot.utils.time_parser import format_timestamp, parse_ubi_timestamp


def test_seven_fractional_digits_are_truncated():
    parsed = parse_ubi_timestamp("2024-05-01T10:15:30.1234567Z")

    assert parsed == datetime(2024, 5, 1, 10, 15, 30, 123456, tzinfo=timezone.utc)


def test_offset_is_converted_to_utc():
    parsed = parse_ubi_timestamp("2024-05-01T12:00:00+02:00")

    assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert parsed.tzinfo == timezone.utc


def test_missing_fraction_and_offset_default_to_utc():
    assert parse_ubi_timestamp("2024-05-01T10:00:00") == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def test_expired_sentinel_is_in_the_past():
    parsed = parse_ubi_timestamp(UbiConstants.EXPIRED_TICKET_EXPIRATION)

    assert parsed == datetime(2015, 11, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["", "yesterday", "2024-05-01", "2024-13-01T00:00:00Z", None, 1714557600])
def test_invalid_values_raise(value):
    with pytest.raises(ValueError):
        parse_ubi_timestamp(value)


def test_format_timestamp():
    moment = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    assert format_timestamp(moment) == "2024-05-01T10:00:00+00:00"
