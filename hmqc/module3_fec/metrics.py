# file: hmqc/module3_fec/metrics.py

"""
FEC performance metrics.

Bit Error Rate (BER), Symbol Error Rate (SER) and redundancy overhead,
used by the experiments and corruption tests.
"""

from typing import Any, Dict, Optional

import numpy as np


def _as_arrays(original: bytes, received: bytes):
    if len(original) != len(received):
        raise ValueError(
            f"Length mismatch: original={len(original)}, received={len(received)}"
        )
    return (
        np.frombuffer(bytes(original), dtype=np.uint8),
        np.frombuffer(bytes(received), dtype=np.uint8),
    )


def compute_ber(original: bytes, received: bytes) -> float:
    """
    Compute Bit Error Rate between two byte sequences.

    Example:
        >>> compute_ber(b'\\x00\\x00', b'\\x01\\x00')
        0.0625
    """
    a, b = _as_arrays(original, received)
    if a.size == 0:
        return 0.0
    bit_errors = int(np.unpackbits(a ^ b).sum())
    return bit_errors / (a.size * 8)


def compute_ser(original: bytes, received: bytes) -> float:
    """
    Compute Symbol Error Rate with one byte per symbol.

    A symbol is erroneous if any of its bits differ.
    """
    a, b = _as_arrays(original, received)
    if a.size == 0:
        return 0.0
    return int(np.count_nonzero(a != b)) / a.size


def count_symbol_errors_per_block(original: bytes, received: bytes, n: int = 255) -> list:
    """Number of differing symbols in each n-byte codeword."""
    a, b = _as_arrays(original, received)
    if a.size % n != 0:
        raise ValueError(f"Length {a.size} is not a multiple of codeword length {n}")
    return np.count_nonzero((a != b).reshape(-1, n), axis=1).tolist()


def compute_redundancy_overhead(config: Optional[Dict[str, Any]] = None) -> float:
    """
    Redundancy overhead nsym / k for the configured code.

    Example:
        >>> round(compute_redundancy_overhead(), 4)
        0.1435
    """
    rs_config = (config or {}).get("fec", {}).get("reed_solomon", {})
    k = rs_config.get("k", 223)
    nsym = rs_config.get("nsym", 32)
    return nsym / k
