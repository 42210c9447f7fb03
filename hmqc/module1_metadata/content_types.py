# file: hmqc/module1_metadata/content_types.py

"""
Declared payload content types.

The code is written into the metadata header and alone selects the
decompression mode at decode time.
"""

from enum import IntEnum


class ContentType(IntEnum):
    TEXT = 1
    IMAGE = 2
    AUDIO = 3
    BINARY = 4

    @classmethod
    def from_name(cls, name: str) -> "ContentType":
        """Look up a content type by case-insensitive name ('text', 'image', ...)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(t.name.lower() for t in cls)
            raise ValueError(f"Unknown content type {name!r} (expected one of: {valid})") from None
