# file: hmqc/module2_compression/__init__.py

"""
Module 2: Compression Engine

Reversible byte-stream transform selected by declared content type.
Sits between the caller's payload and the metadata/FEC stages.

Public API:
    - compress(data, content_type, config=None) -> bytes
    - decompress(data, content_type, config=None) -> bytes
    - CompressionEngine(config)
"""

from .engine import CompressionEngine, compress, decompress, compression_ratio, as_content_type
from .errors import (
    CompressionError,
    CorruptStreamError,
    UnsupportedContentTypeError,
)

__all__ = [
    "CompressionEngine",
    "compress",
    "decompress",
    "compression_ratio",
    "as_content_type",
    "CompressionError",
    "CorruptStreamError",
    "UnsupportedContentTypeError",
]
