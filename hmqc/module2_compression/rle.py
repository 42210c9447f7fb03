# file: hmqc/module2_compression/rle.py

"""
Run-length pass shared by every compression mode.

Runs longer than MIN_RUN become (SENTINEL, count, value) records. A literal
SENTINEL byte is always written as the record (SENTINEL, 1, SENTINEL).
"""

import numpy as np

from .errors import CorruptStreamError


SENTINEL = 0xFE
MIN_RUN = 3
MAX_RUN = 255


def _runs(data: bytes):
    arr = np.frombuffer(data, dtype=np.uint8)
    boundaries = np.flatnonzero(arr[1:] != arr[:-1]) + 1
    starts = np.concatenate(([0], boundaries))
    lengths = np.diff(np.concatenate((starts, [arr.size])))
    return zip(starts.tolist(), lengths.tolist())


def rle_encode(data: bytes) -> bytes:
    """
    Replace runs of identical bytes by escape records.

    Args:
        data: Input bytes

    Returns:
        RLE stream (never fails; literal passthrough is always valid)
    """
    data = bytes(data)
    if not data:
        return b""

    out = bytearray()
    for start, length in _runs(data):
        value = data[start]
        while length > 0:
            count = min(length, MAX_RUN)
            if count > MIN_RUN:
                out += bytes((SENTINEL, count, value))
            elif value == SENTINEL:
                out += bytes((SENTINEL, 1, SENTINEL)) * count
            else:
                out += bytes((value,)) * count
            length -= count

    return bytes(out)


def rle_decode(data: bytes) -> bytes:
    """
    Expand escape records.

    Raises:
        CorruptStreamError: If a record is truncated or has a zero count
    """
    data = bytes(data)
    out = bytearray()
    pos = 0
    n = len(data)

    while pos < n:
        idx = data.find(SENTINEL, pos)
        if idx == -1:
            out += data[pos:]
            break

        out += data[pos:idx]
        if idx + 2 >= n:
            raise CorruptStreamError(
                f"Run-length record truncated at offset {idx} (stream length {n})",
                offset=idx,
            )

        count = data[idx + 1]
        if count == 0:
            raise CorruptStreamError(f"Zero-length run at offset {idx}", offset=idx)

        out += bytes((data[idx + 2],)) * count
        pos = idx + 3

    return bytes(out)
