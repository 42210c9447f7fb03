# file: hmqc/module5_pipeline/errors.py

"""
Pipeline-level error types for Module 5.

Stage errors (metadata, compression, FEC, layout) propagate unchanged;
these cover inconsistencies only visible once the stages are combined.
"""

from ..errors import HMQCError


class PipelineError(HMQCError):
    """Base exception for orchestration errors."""
    pass


class StreamLengthError(PipelineError):
    """Raised when the header declares more codewords than the matrix holds."""

    def __init__(self, message: str, required_blocks: int = None, available_blocks: int = None):
        super().__init__(message)
        self.required_blocks = required_blocks
        self.available_blocks = available_blocks


class PayloadSizeMismatchError(PipelineError):
    """Raised when the decompressed payload length disagrees with the header."""
    pass
