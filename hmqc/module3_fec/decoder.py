# file: hmqc/module3_fec/decoder.py

"""
FEC decoding entry point.

Provides fec_decode() with explicit per-block correction reporting.
"""

from typing import Any, Dict, Optional

from .errors import FECDecodingError
from .rs_codec import FECDecodeResult, codec_from_config


def fec_decode(
    data: bytes,
    config: Optional[Dict[str, Any]] = None,
    strict: bool = False,
) -> FECDecodeResult:
    """
    Decode a codeword stream and correct symbol errors.

    Args:
        data: Concatenated codewords read back from the matrix
        config: Configuration dictionary with optional 'fec' section
        strict: Raise instead of returning a result flagged uncorrectable

    Returns:
        FECDecodeResult(data, corrected_errors, uncorrectable, blocks)

    Raises:
        FECDecodingError: If the stream length is invalid
        UncorrectableBlockError: If strict and any block exceeds capacity
        FECConfigurationError: If configuration is invalid

    Error Handling:
        - If errors <= nsym/2 in a block: corrected silently, counted
        - If errors > nsym/2: block flagged, result.uncorrectable = True
        - Never reports corrected data for a flagged block
    """
    if not isinstance(data, (bytes, bytearray)):
        raise FECDecodingError(f"Input must be bytes, got {type(data)}")

    result = codec_from_config(config).decode(data)
    if strict:
        result.raise_if_uncorrectable()
    return result
