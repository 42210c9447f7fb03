# file: hmqc/module1_metadata/header.py

"""
Metadata header assembly and parsing.

Header structure (32 bytes, all fields big-endian uint32):
    [magic][version][content_type][original_size]
    [compressed_size][timestamp][id][reserved]
"""

import logging
import random
import struct
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .content_types import ContentType
from .errors import (
    SizeOverflowError,
    BadMagicError,
    UnknownContentTypeError,
    TruncatedHeaderError,
)

logger = logging.getLogger(__name__)


MAGIC = 0x484D5143  # "HMQC"
VERSION_MAJOR = 3
VERSION_MINOR = 0
VERSION_PATCH = 0
VERSION = (VERSION_MAJOR << 16) | (VERSION_MINOR << 8) | VERSION_PATCH
HEADER_SIZE = 32
UINT32_MAX = 0xFFFFFFFF

_HEADER_STRUCT = struct.Struct(">8I")


@dataclass(frozen=True)
class MetadataHeader:
    """Parsed 32-byte metadata header."""
    magic: int
    version: int
    content_type: ContentType
    original_size: int
    compressed_size: int
    timestamp: int
    id: int
    reserved: int = 0

    @property
    def version_tuple(self):
        return (
            (self.version >> 16) & 0xFF,
            (self.version >> 8) & 0xFF,
            self.version & 0xFF,
        )

    @property
    def version_string(self) -> str:
        return "{}.{}.{}".format(*self.version_tuple)

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    def pack(self) -> bytes:
        return _HEADER_STRUCT.pack(
            self.magic,
            self.version,
            int(self.content_type),
            self.original_size,
            self.compressed_size,
            self.timestamp,
            self.id,
            self.reserved,
        )


def _check_uint32(field_name: str, value: int) -> None:
    if value < 0 or value > UINT32_MAX:
        raise SizeOverflowError(
            f"{field_name}={value} does not fit in an unsigned 32-bit field",
            field_name=field_name,
            value=value,
        )


def encode_header(
    content_type: ContentType,
    original_size: int,
    compressed_size: int,
    *,
    timestamp: Optional[int] = None,
    instance_id: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> bytes:
    """
    Build the 32-byte metadata header.

    Args:
        content_type: Declared payload type
        original_size: Payload length before compression
        compressed_size: Length after compression, before FEC
        timestamp: Unix seconds (default: now)
        instance_id: 32-bit instance identifier (default: drawn from rng)
        rng: Non-cryptographic random source for the id

    Returns:
        Header bytes (exactly 32)

    Raises:
        SizeOverflowError: If a size exceeds the 32-bit range
        UnknownContentTypeError: If content_type is not a ContentType code
    """
    _check_uint32("original_size", original_size)
    _check_uint32("compressed_size", compressed_size)
    try:
        content_type = ContentType(content_type)
    except ValueError:
        raise UnknownContentTypeError(
            f"Unknown content type: {content_type!r}", code=content_type
        ) from None

    if timestamp is None:
        timestamp = int(time.time())
    if instance_id is None:
        instance_id = (rng or random).getrandbits(32)

    header = MetadataHeader(
        magic=MAGIC,
        version=VERSION,
        content_type=content_type,
        original_size=original_size,
        compressed_size=compressed_size,
        timestamp=timestamp & UINT32_MAX,
        id=instance_id & UINT32_MAX,
    )
    return header.pack()


def decode_header(data: bytes, strict: bool = True) -> MetadataHeader:
    """
    Parse the metadata header from the start of a decoded stream.

    Args:
        data: At least 32 bytes; extra bytes are ignored
        strict: If False, an unknown content type falls back to BINARY

    Returns:
        MetadataHeader

    Raises:
        TruncatedHeaderError: If fewer than 32 bytes are given
        BadMagicError: If the signature word mismatches
        UnknownContentTypeError: If strict and the type code is unknown
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedHeaderError(
            f"Header too short: {len(data)} bytes (need {HEADER_SIZE})"
        )

    (magic, version, type_code, original_size, compressed_size,
     timestamp, instance_id, reserved) = _HEADER_STRUCT.unpack(bytes(data[:HEADER_SIZE]))

    if magic != MAGIC:
        raise BadMagicError(f"Bad magic: 0x{magic:08X} (expected 0x{MAGIC:08X})")

    try:
        content_type = ContentType(type_code)
    except ValueError:
        if strict:
            raise UnknownContentTypeError(
                f"Unknown content type code: {type_code}", code=type_code
            ) from None
        logger.warning("Unknown content type code %d, treating payload as binary", type_code)
        content_type = ContentType.BINARY

    return MetadataHeader(
        magic=magic,
        version=version,
        content_type=content_type,
        original_size=original_size,
        compressed_size=compressed_size,
        timestamp=timestamp,
        id=instance_id,
        reserved=reserved,
    )
