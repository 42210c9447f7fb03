# file: hmqc/module2_compression/delta.py

"""
Delta transforms over 8-bit bytes and 16-bit little-endian samples.

Arithmetic wraps (mod 256 / mod 65536), so both transforms are exact
inverses for every input.
"""

import numpy as np


def delta_encode8(data: bytes) -> bytes:
    arr = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.diff(arr, prepend=np.uint8(0)).astype(np.uint8).tobytes()


def delta_decode8(data: bytes) -> bytes:
    arr = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.cumsum(arr, dtype=np.uint8).tobytes()


def delta_encode16(data: bytes) -> bytes:
    """
    Delta-encode consecutive 16-bit LE samples.

    The first sample is kept as-is. A trailing odd byte is passed through.
    """
    data = bytes(data)
    even = len(data) - (len(data) % 2)
    samples = np.frombuffer(data[:even], dtype="<u2")
    deltas = np.diff(samples, prepend=np.uint16(0)).astype("<u2")
    return deltas.tobytes() + data[even:]


def delta_decode16(data: bytes) -> bytes:
    data = bytes(data)
    even = len(data) - (len(data) % 2)
    deltas = np.frombuffer(data[:even], dtype="<u2")
    samples = np.cumsum(deltas, dtype=np.uint16).astype("<u2")
    return samples.tobytes() + data[even:]
