# file: hmqc/module2_compression/errors.py

"""
Compression-specific exception hierarchy.
"""

from ..errors import HMQCError


class CompressionError(HMQCError):
    """Base exception for all compression errors."""
    pass


class CorruptStreamError(CompressionError):
    """Raised when a dictionary or escape record is malformed or truncated."""

    def __init__(self, message: str, offset: int = None):
        super().__init__(message)
        self.offset = offset


class UnsupportedContentTypeError(CompressionError):
    """Raised when a value outside ContentType is passed as the mode."""
    pass
