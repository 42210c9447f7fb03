# file: hmqc/module4_layout/errors.py

"""
Layout error types for Module 4.
"""

from ..errors import HMQCError


class LayoutError(HMQCError):
    """Base exception for matrix layout operations."""
    pass


class MatrixTooSmallError(LayoutError):
    """Raised when the codeword stream does not fit the requested side."""

    def __init__(self, message: str, required_side: int = None, requested_side: int = None):
        super().__init__(message)
        self.required_side = required_side
        self.requested_side = requested_side


class InsufficientMarkersError(LayoutError):
    """Raised when the locator supplied fewer than four corners."""

    def __init__(self, message: str, found: int = None):
        super().__init__(message)
        self.found = found
