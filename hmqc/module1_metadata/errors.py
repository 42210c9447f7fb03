# file: hmqc/module1_metadata/errors.py

"""
Metadata header error types for Module 1.
"""

from ..errors import HMQCError


class MetadataError(HMQCError):
    """Base exception for Module 1 header operations."""
    pass


class SizeOverflowError(MetadataError):
    """Raised when a size field does not fit in 32 bits."""

    def __init__(self, message: str, field_name: str = None, value: int = None):
        super().__init__(message)
        self.field_name = field_name
        self.value = value


class BadMagicError(MetadataError):
    """Raised when the signature word is not HMQC."""
    pass


class UnknownContentTypeError(MetadataError):
    """Raised when the content type code is outside the enumerated set."""

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.code = code


class TruncatedHeaderError(MetadataError):
    """Raised when fewer than 32 header bytes are available."""
    pass
