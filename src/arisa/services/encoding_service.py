"""Text encodings and timestamp conversion used by the encoding commands."""

from __future__ import annotations

import base64
import binascii
import string
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional, Tuple
from urllib.parse import quote, unquote

from arisa.errors import InvalidFormat

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)

# (upper bound exclusive, seconds per unit, unit name)
_RELATIVE_BANDS = (
    (60, 1, "second"),
    (3600, 60, "minute"),
    (86400, 3600, "hour"),
    (2592000, 86400, "day"),
    (31536000, 2592000, "month"),
)


# -------------------- Base64 / URL / ROT / endian --------------------

def base64_encode(data: str) -> str:
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def base64_decode(data: str) -> str:
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidFormat(f"Invalid base64: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidFormat("Decoded data is not valid UTF-8") from exc


def url_encode(data: str) -> str:
    return quote(data, safe="-_.~")


def url_decode(data: str) -> str:
    try:
        return unquote(data, errors="strict")
    except UnicodeDecodeError as exc:
        raise InvalidFormat(f"Invalid URL encoding: {exc.reason}") from exc


def rot(text: str, n: int) -> str:
    """Rotate ASCII letters by ``n`` places, leaving everything else alone."""
    if not 0 <= n <= 25:
        raise InvalidFormat("Rotation must be between 0 and 25")
    lower, upper = string.ascii_lowercase, string.ascii_uppercase
    table = str.maketrans(lower + upper, lower[n:] + lower[:n] + upper[n:] + upper[:n])
    return text.translate(table)


def swap_endian(hex_data: str) -> str:
    clean = hex_data.replace(" ", "").replace("0x", "")
    if len(clean) % 2:
        raise InvalidFormat("Hex string must have even length")
    try:
        raw = bytes.fromhex(clean)
    except ValueError as exc:
        raise InvalidFormat(f"Invalid hex: {exc}") from exc
    return raw[::-1].hex().upper()


# -------------------- Timestamps --------------------

def parse_date(text: str) -> datetime:
    """Parse ``text`` with the first matching entry of :data:`DATE_FORMATS`, as UTC."""
    value = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise InvalidFormat(
        f"Could not parse date: {value}\n\nExpected format: YYYY-MM-DD HH:MM:SS"
    )


def format_relative(timestamp: int, now: Optional[int] = None) -> str:
    if now is None:
        now = int(datetime.now(timezone.utc).timestamp())
    diff = now - timestamp
    if diff == 0:
        return "now"
    suffix = "ago" if diff > 0 else "from now"
    distance = abs(diff)
    for bound, unit_seconds, unit in _RELATIVE_BANDS:
        if distance < bound:
            break
    else:
        unit_seconds, unit = 31536000, "year"
    amount = distance // unit_seconds
    return f"{amount} {unit}{'' if amount == 1 else 's'} {suffix}"


def _utc(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def _local(moment: datetime) -> str:
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def describe_timestamp(
    timestamp: Optional[int] = None, date: Optional[str] = None, now: Optional[int] = None
) -> Tuple[str, str]:
    """Return ``(title, body)`` for /timestamp.

    A unix ``timestamp`` wins over ``date``; with neither the current time is shown.
    """
    if timestamp is not None:
        try:
            moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidFormat("The provided timestamp is out of range or invalid.") from exc
        body = (
            f"**Unix Timestamp:** `{timestamp}`\n"
            f"**UTC:** {_utc(moment)}\n"
            f"**Local:** {_local(moment)}\n"
            f"**Relative:** {format_relative(timestamp, now)}\n"
            f"**ISO 8601:** {moment.isoformat()}\n"
            f"**RFC 2822:** {format_datetime(moment)}"
        )
        return "Timestamp Conversion", body

    if date:
        moment = parse_date(date)
        unix = int(moment.timestamp())
        body = (
            f"**Date:** {_utc(moment)}\n"
            f"**Unix Timestamp:** `{unix}`\n"
            f"**Relative:** {format_relative(unix, now)}\n"
            f"**ISO 8601:** {moment.isoformat()}\n"
            f"**RFC 2822:** {format_datetime(moment)}"
        )
        return "Date Conversion", body

    moment = datetime.fromtimestamp(now, tz=timezone.utc) if now is not None else datetime.now(timezone.utc)
    body = (
        f"**Unix Timestamp:** `{int(moment.timestamp())}`\n"
        f"**UTC:** {_utc(moment)}\n"
        f"**Local:** {_local(moment)}\n"
        f"**ISO 8601:** {moment.isoformat()}\n"
        f"**RFC 2822:** {format_datetime(moment)}"
    )
    return "Current Timestamp", body
