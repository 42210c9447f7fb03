# file: hmqc/module2_compression/text_dictionary.py

"""
Word-dictionary substitution for text payloads.

Common 2- and 3-byte words are replaced by one code from the reserved
range 0x81-0x9F. Literal bytes that fall inside the reserved range
(e.g. UTF-8 continuation bytes) are prefixed with ESCAPE, so any byte
sequence round-trips.
"""

from .errors import CorruptStreamError


ESCAPE = 0x80
RESERVED_LOW = 0x80
RESERVED_HIGH = 0x9F

WORDS = (
    b"the", b"and", b"for", b"are", b"but", b"not", b"you", b"all",
    b"can", b"her", b"was", b"one", b"our", b"out", b"get", b"has",
    b"him", b"his", b"how", b"its", b"new", b"now", b"see", b"who",
    b"she",
    b"in", b"of", b"to", b"is", b"it", b"on",
)

WORD_CODES = {word: ESCAPE + 1 + i for i, word in enumerate(WORDS)}
CODE_WORDS = {code: word for word, code in WORD_CODES.items()}

def text_encode(data: bytes) -> bytes:
    """Substitute dictionary words, longest match first."""
    data = bytes(data)
    out = bytearray()
    i = 0
    n = len(data)

    while i < n:
        code = WORD_CODES.get(data[i:i + 3]) if i + 3 <= n else None
        if code is not None:
            out.append(code)
            i += 3
            continue

        code = WORD_CODES.get(data[i:i + 2]) if i + 2 <= n else None
        if code is not None:
            out.append(code)
            i += 2
            continue

        byte = data[i]
        if RESERVED_LOW <= byte <= RESERVED_HIGH:
            out.append(ESCAPE)
        out.append(byte)
        i += 1

    return bytes(out)


def text_decode(data: bytes) -> bytes:
    """
    Expand dictionary codes.

    Raises:
        CorruptStreamError: If the stream ends right after an ESCAPE byte
    """
    data = bytes(data)
    out = bytearray()
    i = 0
    n = len(data)

    while i < n:
        byte = data[i]
        if byte == ESCAPE:
            if i + 1 >= n:
                raise CorruptStreamError(
                    f"Text escape truncated at offset {i}", offset=i
                )
            out.append(data[i + 1])
            i += 2
        elif byte in CODE_WORDS:
            out += CODE_WORDS[byte]
            i += 1
        else:
            out.append(byte)
            i += 1

    return bytes(out)
