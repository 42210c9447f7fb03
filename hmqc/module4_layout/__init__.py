# file: hmqc/module4_layout/__init__.py

"""
Module 4: Matrix Layout Engine

Maps the FEC codeword stream onto a square grid of modules, reserves and
stamps the four corner finder markers, and performs the inverse mapping
from locator-supplied marker geometry.

This module does NOT:
- Rasterize to pixels (see Module 5 raster helpers)
- Detect markers in photographs (external Locator)
"""

from .layout import (
    layout,
    unlayout,
    estimate_geometry,
    sample_modules,
    bytes_to_modules,
    modules_to_bytes,
    filler_modules,
)
from .markers import FINDER_PATTERN, data_mask, nominal_corners, count_finder_mismatches
from .matrix import (
    Matrix,
    Point,
    MIN_SIDE,
    MAX_SIDE,
    MARKER_SIZE,
    FINDER_SIZE,
    SUPPORTED_BITS_PER_MODULE,
    required_side,
    capacity_bytes,
    data_module_count,
)
from .errors import LayoutError, MatrixTooSmallError, InsufficientMarkersError

__all__ = [
    "layout",
    "unlayout",
    "estimate_geometry",
    "sample_modules",
    "bytes_to_modules",
    "modules_to_bytes",
    "filler_modules",
    "FINDER_PATTERN",
    "data_mask",
    "nominal_corners",
    "count_finder_mismatches",
    "Matrix",
    "Point",
    "MIN_SIDE",
    "MAX_SIDE",
    "MARKER_SIZE",
    "FINDER_SIZE",
    "SUPPORTED_BITS_PER_MODULE",
    "required_side",
    "capacity_bytes",
    "data_module_count",
    "LayoutError",
    "MatrixTooSmallError",
    "InsufficientMarkersError",
]
