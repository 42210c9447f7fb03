# file: hmqc/module1_metadata/__init__.py

"""
Module 1: Metadata Codec

Produces and parses the fixed 32-byte header that makes every HMQC matrix
self-describing: content type, sizes, timestamp and instance id.

Public API:
    - encode_header(content_type, original_size, compressed_size) -> bytes
    - decode_header(data, strict=True) -> MetadataHeader
"""

from .content_types import ContentType
from .header import (
    MetadataHeader,
    encode_header,
    decode_header,
    MAGIC,
    VERSION,
    HEADER_SIZE,
)
from .errors import (
    MetadataError,
    SizeOverflowError,
    BadMagicError,
    UnknownContentTypeError,
    TruncatedHeaderError,
)

__all__ = [
    "ContentType",
    "MetadataHeader",
    "encode_header",
    "decode_header",
    "MAGIC",
    "VERSION",
    "HEADER_SIZE",
    "MetadataError",
    "SizeOverflowError",
    "BadMagicError",
    "UnknownContentTypeError",
    "TruncatedHeaderError",
]
