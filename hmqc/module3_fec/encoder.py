# file: hmqc/module3_fec/encoder.py

"""
FEC encoding entry point.

Provides fec_encode() which treats its input as opaque bytes.
"""

from typing import Any, Dict, Optional

from .errors import FECEncodingError
from .rs_codec import codec_from_config


def fec_encode(data: bytes, config: Optional[Dict[str, Any]] = None) -> bytes:
    """
    Add Reed-Solomon redundancy to a byte stream.

    Args:
        data: Header + compressed payload from Modules 1 and 2
        config: Configuration dictionary with optional 'fec' section

    Returns:
        Codeword stream ready for Module 4 layout

    Raises:
        FECEncodingError: If input is not bytes
        FECConfigurationError: If configuration is invalid

    Example:
        >>> stream = fec_encode(b"hello", {'fec': {'type': 'reed_solomon'}})
        >>> len(stream)
        255
    """
    if not isinstance(data, (bytes, bytearray)):
        raise FECEncodingError(f"Input must be bytes, got {type(data)}")

    return codec_from_config(config).encode(data)
