# file: hmqc/module2_compression/engine.py

"""
Adaptive compression engine.

Mode is a pure function of the declared content type:
    TEXT           word dictionary
    IMAGE, BINARY  byte delta → frequent patterns
    AUDIO          16-bit sample delta → binary path
Every mode finishes with the run-length pass; decompression undoes the
run-length pass first.
"""

from typing import Any, Dict, Optional

from ..module1_metadata import ContentType
from .delta import delta_encode8, delta_decode8, delta_encode16, delta_decode16
from .errors import UnsupportedContentTypeError
from .patterns import (
    find_frequent_patterns,
    encode_patterns,
    decode_patterns,
    SUPPORT_THRESHOLD,
    MAX_PATTERNS,
)
from .rle import rle_encode, rle_decode
from .text_dictionary import text_encode, text_decode


def as_content_type(content_type: Any) -> ContentType:
    """
    Coerce an enum member or raw code to ContentType.

    Raises:
        UnsupportedContentTypeError: If the value is not a known type
    """
    if isinstance(content_type, ContentType):
        return content_type
    try:
        return ContentType(content_type)
    except ValueError:
        raise UnsupportedContentTypeError(
            f"Unsupported content type: {content_type!r}"
        ) from None


class CompressionEngine:
    """
    Reversible multi-mode compressor.

    Guarantees decompress(compress(x, t), t) == x for every x and t.
    Compression never fails; decompression raises CorruptStreamError on
    malformed framing.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        comp_config = (config or {}).get("compression", {})
        self.support_threshold = comp_config.get("pattern_support_threshold", SUPPORT_THRESHOLD)
        self.max_patterns = comp_config.get("max_patterns", MAX_PATTERNS)

    def compress(self, data: bytes, content_type: ContentType) -> bytes:
        content_type = as_content_type(content_type)
        data = bytes(data)

        if content_type == ContentType.TEXT:
            staged = text_encode(data)
        elif content_type in (ContentType.IMAGE, ContentType.BINARY):
            staged = self._compress_binary(data)
        elif content_type == ContentType.AUDIO:
            staged = self._compress_binary(delta_encode16(data))
        else:
            raise UnsupportedContentTypeError(f"No compression mode for {content_type!r}")

        return rle_encode(staged)

    def decompress(self, data: bytes, content_type: ContentType) -> bytes:
        content_type = as_content_type(content_type)
        staged = rle_decode(data)

        if content_type == ContentType.TEXT:
            return text_decode(staged)
        elif content_type in (ContentType.IMAGE, ContentType.BINARY):
            return self._decompress_binary(staged)
        elif content_type == ContentType.AUDIO:
            return delta_decode16(self._decompress_binary(staged))
        else:
            raise UnsupportedContentTypeError(f"No compression mode for {content_type!r}")

    def _compress_binary(self, data: bytes) -> bytes:
        delta = delta_encode8(data)
        patterns = find_frequent_patterns(
            delta,
            support_threshold=self.support_threshold,
            max_patterns=self.max_patterns,
        )
        return encode_patterns(delta, patterns)

    def _decompress_binary(self, data: bytes) -> bytes:
        return delta_decode8(decode_patterns(data))


def compress(data: bytes, content_type: ContentType, config: Optional[Dict[str, Any]] = None) -> bytes:
    """Compress data with the mode selected by content_type."""
    return CompressionEngine(config).compress(data, content_type)


def decompress(data: bytes, content_type: ContentType, config: Optional[Dict[str, Any]] = None) -> bytes:
    """
    Invert compress().

    Raises:
        CorruptStreamError: If a dictionary or escape record is truncated
    """
    return CompressionEngine(config).decompress(data, content_type)


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """original/compressed, rounded to 3 places (0-length output counts as 1)."""
    return round(original_size / max(compressed_size, 1), 3)
