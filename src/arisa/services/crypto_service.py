"""Digests, checksums and UUID generation."""

from __future__ import annotations

import hashlib
import os
import time
import uuid
import zlib
from datetime import datetime, timezone
from enum import Enum
from typing import List

from arisa.errors import InvalidFormat

UUID_NODE = 0x010203040506
MAX_UUID_COUNT = 10


class HashAlgorithm(Enum):
    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def label(self) -> str:
        return self.name


class ChecksumAlgorithm(Enum):
    CRC32 = "CRC32"
    ADLER32 = "Adler32"


class UuidVersion(Enum):
    V1 = 1
    V4 = 4
    V7 = 7

    @property
    def title(self) -> str:
        return f"Version {self.value}"

    @property
    def summary(self) -> str:
        return {
            UuidVersion.V1: "**Version 1** - Timestamp + MAC address based",
            UuidVersion.V4: "**Version 4** - Random/pseudo-random",
            UuidVersion.V7: "**Version 7** - Unix timestamp + random",
        }[self]


def hash_text(algorithm: HashAlgorithm, data: str) -> str:
    return hashlib.new(algorithm.value, data.encode("utf-8")).hexdigest()


def checksum_text(algorithm: ChecksumAlgorithm, data: str) -> str:
    raw = data.encode("utf-8")
    value = zlib.crc32(raw) if algorithm is ChecksumAlgorithm.CRC32 else zlib.adler32(raw)
    return f"{value & 0xFFFFFFFF:08x}"


# -------------------- UUID --------------------

def uuid7(now_ms: int | None = None) -> uuid.UUID:
    """Build a version 7 UUID: 48-bit Unix milliseconds followed by random bits."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    value = (now_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= int.from_bytes(os.urandom(10), "big")
    value &= ~(0xF << 76)
    value |= 0x7 << 76
    value &= ~(0x3 << 62)
    value |= 0x2 << 62
    return uuid.UUID(int=value)


def generate_uuid(version: UuidVersion) -> uuid.UUID:
    if version is UuidVersion.V1:
        return uuid.uuid1(node=UUID_NODE)
    if version is UuidVersion.V7:
        return uuid7()
    return uuid.uuid4()


def analyze_uuid(value: uuid.UUID, version: UuidVersion) -> str:
    if version is UuidVersion.V1:
        node = ":".join(f"{b:02x}" for b in value.bytes[10:])
        return (
            f"• **Timestamp:** {value.time} (100ns intervals since 1582)\n"
            f"• **Clock Sequence:** {value.clock_seq}\n"
            f"• **Node (MAC):** {node}"
        )
    if version is UuidVersion.V7:
        timestamp_ms = int.from_bytes(value.bytes[:6], "big")
        moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
        return (
            f"• **Timestamp:** {moment.strftime('%Y-%m-%d %H:%M:%S')}.{timestamp_ms % 1000:03d} UTC\n"
            f"• **Milliseconds:** {timestamp_ms}\n"
            "• **Random Data:** 74 bits"
        )
    return (
        "• **Random Bytes:** 122 bits of randomness\n"
        "• **Collision Probability:** ~2^-122 (astronomically low)"
    )


def describe_uuids(version: UuidVersion, count: int = 1, analyze: bool = False) -> str:
    """Generate ``count`` UUIDs and render the /uuid embed body.

    Raises
    ------
    InvalidFormat
        When ``count`` is outside 1-10.
    """
    if not 1 <= count <= MAX_UUID_COUNT:
        raise InvalidFormat(f"Count must be between 1 and {MAX_UUID_COUNT}")

    values = [generate_uuid(version) for _ in range(count)]

    if count == 1:
        listing = f"`{values[0]}`"
    else:
        listing = "\n".join(f"{i}. `{value}`" for i, value in enumerate(values, start=1))

    parts: List[str] = [f"{version.summary}\n\n**Generated UUID{'s' if count > 1 else ''}:**\n{listing}"]

    if analyze:
        parts.append("\n\n**Analysis:**")
        for i, value in enumerate(values, start=1):
            if count > 1:
                parts.append(f"\n\n**UUID {i}:**")
            parts.append(f"\n{analyze_uuid(value, version)}")

    if count == 1:
        value = values[0]
        parts.append(
            "\n\n**Formats:**\n"
            f"• **Standard:** `{value}`\n"
            f"• **Hyphenated:** `{value}`\n"
            f"• **URN:** `{value.urn}`\n"
            f"• **Braced:** `{{{value}}}`\n"
            f"• **Hex:** `{value.hex}`"
        )

    return "".join(parts)
