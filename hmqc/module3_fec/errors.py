# file: hmqc/module3_fec/errors.py

"""
FEC-specific exception hierarchy.

All exceptions inherit from FECError for unified handling.
"""

from typing import List, Optional

from ..errors import HMQCError


class FECError(HMQCError):
    """Base exception for all FEC-related errors."""
    pass


class FECEncodingError(FECError):
    """Raised when encoding fails."""
    pass


class FECDecodingError(FECError):
    """Raised when the codeword stream is malformed."""
    pass


class UncorrectableBlockError(FECDecodingError):
    """Raised when one or more codewords exceed the correction capability."""

    def __init__(
        self,
        message: str,
        block_index: int = None,
        num_errors: int = None,
        max_correctable: int = None,
        block_indices: Optional[List[int]] = None,
        corrected_errors: int = 0,
    ):
        super().__init__(message)
        self.block_index = block_index
        self.num_errors = num_errors
        self.max_correctable = max_correctable
        self.block_indices = block_indices if block_indices is not None else (
            [block_index] if block_index is not None else []
        )
        self.corrected_errors = corrected_errors


class FECConfigurationError(FECError):
    """Raised when FEC configuration is invalid."""
    pass
