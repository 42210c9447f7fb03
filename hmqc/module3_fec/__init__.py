# file: hmqc/module3_fec/__init__.py

"""
Module 3: Forward Error Correction (FEC)

RS(255,223) block coding over GF(256). Adds 32 parity symbols per 223
message symbols and corrects up to 16 symbol errors per codeword.
Operates on opaque bytes between the metadata/compression stages and
matrix layout (Module 4).

Public API:
    - fec_encode(data: bytes, config=None) -> bytes
    - fec_decode(data: bytes, config=None, strict=False) -> FECDecodeResult
    - compute_ber(original, received) -> float
    - compute_ser(original, received) -> float
"""

from .encoder import fec_encode
from .decoder import fec_decode
from .rs_codec import (
    ReedSolomonCodec,
    ReedsoloCodec,
    FECDecodeResult,
    BlockReport,
    codec_from_config,
)
from .metrics import compute_ber, compute_ser, compute_redundancy_overhead
from .errors import (
    FECError,
    FECEncodingError,
    FECDecodingError,
    UncorrectableBlockError,
    FECConfigurationError,
)

__all__ = [
    "fec_encode",
    "fec_decode",
    "ReedSolomonCodec",
    "ReedsoloCodec",
    "FECDecodeResult",
    "BlockReport",
    "codec_from_config",
    "compute_ber",
    "compute_ser",
    "compute_redundancy_overhead",
    "FECError",
    "FECEncodingError",
    "FECDecodingError",
    "UncorrectableBlockError",
    "FECConfigurationError",
]
