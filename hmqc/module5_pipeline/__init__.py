# file: hmqc/module5_pipeline/__init__.py

"""
Module 5: Pipeline Orchestrator

External-facing composition of Modules 1-4:
    encode(payload, content_type, matrix_side) -> Matrix
    decode(matrix, corners) -> DecodeResult

Also provides the reference Rasterizer/Locator (raster.draw, raster.read,
raster.locate) for undistorted digital round trips.
"""

from .orchestrator import HMQCPipeline, DecodeResult, encode, decode
from . import raster
from .errors import PipelineError, StreamLengthError, PayloadSizeMismatchError

__all__ = [
    "HMQCPipeline",
    "DecodeResult",
    "encode",
    "decode",
    "raster",
    "PipelineError",
    "StreamLengthError",
    "PayloadSizeMismatchError",
]

__version__ = "3.0.0"
