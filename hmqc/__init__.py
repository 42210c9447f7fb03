"""
HMQC: HyperMatrix Quantum Code

Encodes an arbitrary byte payload into a self-describing square matrix of
colour modules and recovers it from a rescanned copy.

Pipeline:
    payload
    → Module 2: adaptive compression (by content type)
    → Module 1: 32-byte metadata header prepended
    → Module 3: RS(255,223) forward error correction
    → Module 4: module layout + corner finder markers
    → Matrix

Decode runs the mirror order. Module 5 sequences the stages.
"""

from .module1_metadata import ContentType, MetadataHeader
from .module4_layout import Matrix, Point
from .module5_pipeline import HMQCPipeline, DecodeResult, encode, decode
from .errors import HMQCError, ConfigurationError
from .config import load_config

__version__ = "3.0.0"

__all__ = [
    "ContentType",
    "MetadataHeader",
    "Matrix",
    "Point",
    "HMQCPipeline",
    "DecodeResult",
    "encode",
    "decode",
    "HMQCError",
    "ConfigurationError",
    "load_config",
]
