# file: hmqc/module2_compression/patterns.py

"""
Frequent-pattern substitution used by the binary, image and audio modes.

Stream layout:
    [len:1][pattern:len] ... [TERMINATOR]   in-band dictionary
    [coded bytes]

Coded bytes:
    PATTERN_ESCAPE b      literal byte b (used for 0xA0-0xAF literals)
    0xA1 + i              pattern i of the dictionary
    anything else         literal
"""

import logging
from collections import Counter
from typing import List, Sequence

from .errors import CorruptStreamError

logger = logging.getLogger(__name__)


PATTERN_ESCAPE = 0xA0
FIRST_PATTERN_CODE = 0xA1
LAST_PATTERN_CODE = 0xAF
MAX_PATTERNS = LAST_PATTERN_CODE - FIRST_PATTERN_CODE + 1  # 15
DICT_TERMINATOR = 0xFF
MIN_PATTERN_LEN = 3
MAX_PATTERN_LEN = 5
SUPPORT_THRESHOLD = 3


def find_frequent_patterns(
    data: bytes,
    support_threshold: int = SUPPORT_THRESHOLD,
    max_patterns: int = MAX_PATTERNS,
) -> List[bytes]:
    """
    Select the most frequent byte patterns of length 3-5.

    Occurrences are counted with overlap. A pattern qualifies when it
    occurs more than support_threshold times and its estimated saving
    exceeds the cost of its dictionary entry.

    Returns:
        Patterns ordered by descending frequency (ties: longer first,
        then lexicographic), at most max_patterns of them
    """
    data = bytes(data)
    max_patterns = max(0, min(max_patterns, MAX_PATTERNS))
    if max_patterns == 0:
        return []

    counts = Counter()
    for length in range(MAX_PATTERN_LEN, MIN_PATTERN_LEN - 1, -1):
        counts.update(data[i:i + length] for i in range(len(data) - length + 1))

    candidates = [
        (pattern, count)
        for pattern, count in counts.items()
        if count > support_threshold
        and count * (len(pattern) - 1) > len(pattern) + 1
    ]
    candidates.sort(key=lambda item: (-item[1], -len(item[0]), item[0]))

    return [pattern for pattern, _ in candidates[:max_patterns]]


def encode_patterns(data: bytes, patterns: Sequence[bytes]) -> bytes:
    """
    Write the dictionary, then substitute patterns greedily, longest first.
    """
    data = bytes(data)
    if len(patterns) > MAX_PATTERNS:
        raise ValueError(f"At most {MAX_PATTERNS} patterns, got {len(patterns)}")

    out = bytearray()
    for pattern in patterns:
        if not MIN_PATTERN_LEN <= len(pattern) <= MAX_PATTERN_LEN:
            raise ValueError(f"Pattern length {len(pattern)} outside 3-5")
        out.append(len(pattern))
        out += pattern
    out.append(DICT_TERMINATOR)

    codes = {bytes(p): FIRST_PATTERN_CODE + i for i, p in enumerate(patterns)}
    lengths = sorted({len(p) for p in patterns}, reverse=True)

    i = 0
    n = len(data)
    while i < n:
        for length in lengths:
            if i + length <= n:
                code = codes.get(data[i:i + length])
                if code is not None:
                    out.append(code)
                    i += length
                    break
        else:
            byte = data[i]
            if PATTERN_ESCAPE <= byte <= LAST_PATTERN_CODE:
                out.append(PATTERN_ESCAPE)
            out.append(byte)
            i += 1

    return bytes(out)


def decode_patterns(data: bytes) -> bytes:
    """
    Read the in-band dictionary and expand pattern codes.

    Raises:
        CorruptStreamError: On a truncated dictionary, a missing terminator,
            a truncated escape or an undefined pattern code
    """
    data = bytes(data)
    n = len(data)
    patterns = []
    pos = 0

    while True:
        if pos >= n:
            raise CorruptStreamError(
                f"Pattern dictionary terminator missing (stream length {n})",
                offset=pos,
            )
        length = data[pos]
        if length == DICT_TERMINATOR:
            pos += 1
            break
        if not MIN_PATTERN_LEN <= length <= MAX_PATTERN_LEN:
            raise CorruptStreamError(
                f"Invalid pattern length {length} at offset {pos}", offset=pos
            )
        if len(patterns) == MAX_PATTERNS:
            raise CorruptStreamError(
                f"Pattern dictionary exceeds {MAX_PATTERNS} entries", offset=pos
            )
        if pos + 1 + length > n:
            raise CorruptStreamError(
                f"Pattern dictionary entry truncated at offset {pos}", offset=pos
            )
        patterns.append(data[pos + 1:pos + 1 + length])
        pos += 1 + length

    logger.debug("Pattern dictionary: %s", [p.hex() for p in patterns])

    out = bytearray()
    while pos < n:
        byte = data[pos]
        if byte == PATTERN_ESCAPE:
            if pos + 1 >= n:
                raise CorruptStreamError(
                    f"Pattern escape truncated at offset {pos}", offset=pos
                )
            out.append(data[pos + 1])
            pos += 2
        elif FIRST_PATTERN_CODE <= byte <= LAST_PATTERN_CODE:
            index = byte - FIRST_PATTERN_CODE
            if index >= len(patterns):
                raise CorruptStreamError(
                    f"Undefined pattern code 0x{byte:02X} at offset {pos}", offset=pos
                )
            out += patterns[index]
            pos += 1
        else:
            out.append(byte)
            pos += 1

    return bytes(out)
