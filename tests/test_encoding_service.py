from datetime import datetime, timezone

import pytest

from arisa.errors import InvalidFormat
from arisa.services import encoding_service


def test_base64_encode_and_decode():
    assert encoding_service.base64_encode("hello world") == "aGVsbG8gd29ybGQ="
    assert encoding_service.base64_decode("aGVsbG8gd29ybGQ=") == "hello world"


@pytest.mark.parametrize("data, message", [("not base64!", "Invalid base64"), ("/w==", "not valid UTF-8")])
def test_base64_decode_errors(data, message):
    with pytest.raises(InvalidFormat, match=message):
        encoding_service.base64_decode(data)


def test_url_encoding():
    assert encoding_service.url_encode("a b&c=d/é") == "a%20b%26c%3Dd%2F%C3%A9"
    assert encoding_service.url_decode("a%20b%26c") == "a b&c"
    with pytest.raises(InvalidFormat):
        encoding_service.url_decode("%ff")


def test_rot():
    assert encoding_service.rot("Hello, World!", 13) == "Uryyb, Jbeyq!"
    assert encoding_service.rot("xyz", 3) == "abc"
    assert encoding_service.rot("same", 0) == "same"
    with pytest.raises(InvalidFormat):
        encoding_service.rot("x", 26)


def test_swap_endian():
    assert encoding_service.swap_endian("DEADBEEF") == "EFBEADDE"
    assert encoding_service.swap_endian("0x12 34") == "3412"
    with pytest.raises(InvalidFormat, match="even length"):
        encoding_service.swap_endian("ABC")
    with pytest.raises(InvalidFormat, match="Invalid hex"):
        encoding_service.swap_endian("ZZ")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-01-02 03:04:05", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        ("2024-01-02 03:04", datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)),
        ("2024-01-02", datetime(2024, 1, 2, tzinfo=timezone.utc)),
        ("25/12/2023", datetime(2023, 12, 25, tzinfo=timezone.utc)),
        ("12/25/2023 10:00", datetime(2023, 12, 25, 10, 0, tzinfo=timezone.utc)),
    ],
)
def test_parse_date(text, expected):
    assert encoding_service.parse_date(text) == expected


def test_parse_date_rejects_garbage():
    with pytest.raises(InvalidFormat, match="Expected format: YYYY-MM-DD HH:MM:SS"):
        encoding_service.parse_date("yesterday")


@pytest.mark.parametrize(
    "delta, expected",
    [
        (0, "now"),
        (1, "1 second ago"),
        (-59, "59 seconds from now"),
        (120, "2 minutes ago"),
        (3600, "1 hour ago"),
        (86400 * 3, "3 days ago"),
        (2592000 * 2, "2 months ago"),
        (-31536000 * 5, "5 years from now"),
    ],
)
def test_format_relative(delta, expected):
    now = 1_700_000_000
    assert encoding_service.format_relative(now - delta, now=now) == expected


def test_describe_unix_timestamp():
    title, body = encoding_service.describe_timestamp(timestamp=0, now=60)
    assert title == "Timestamp Conversion"
    assert "**UTC:** 1970-01-01 00:00:00 UTC" in body
    assert "**Relative:** 1 minute ago" in body
    assert "**ISO 8601:** 1970-01-01T00:00:00+00:00" in body
    assert "**RFC 2822:** Thu, 01 Jan 1970 00:00:00 +0000" in body


def test_describe_date_string():
    title, body = encoding_service.describe_timestamp(date="1970-01-02", now=86400)
    assert title == "Date Conversion"
    assert "**Unix Timestamp:** `86400`" in body
    assert "**Relative:** now" in body


def test_describe_now():
    title, body = encoding_service.describe_timestamp(now=1_700_000_000)
    assert title == "Current Timestamp"
    assert "`1700000000`" in body


def test_describe_out_of_range_timestamp():
    with pytest.raises(InvalidFormat, match="out of range"):
        encoding_service.describe_timestamp(timestamp=10**20)
