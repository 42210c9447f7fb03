# file: hmqc/module4_layout/matrix.py

"""
Matrix model and sizing rules.

A Matrix is a square grid of uint32 module values. In the colour profile
(32 bits per module) each value is RGBA packed as 0xRRGGBBAA; in the
reduced profiles (1 to 4 bits per module) it is an intensity level.
"""

import math
from collections import namedtuple
from dataclasses import dataclass

import numpy as np

from .errors import LayoutError, MatrixTooSmallError


MIN_SIDE = 256
MAX_SIDE = 4096
MARKER_SIZE = 20          # marker region edge, modules
FINDER_SIZE = 7           # finder glyph edge, modules
NUM_MARKERS = 4
MARKER_MODULES = NUM_MARKERS * MARKER_SIZE * MARKER_SIZE
SUPPORTED_BITS_PER_MODULE = (1, 2, 3, 4, 32)

Point = namedtuple("Point", ["x", "y"])


def check_bits_per_module(bits_per_module: int) -> int:
    if bits_per_module not in SUPPORTED_BITS_PER_MODULE:
        raise LayoutError(
            f"bits_per_module={bits_per_module} not supported "
            f"(expected one of {SUPPORTED_BITS_PER_MODULE})"
        )
    return bits_per_module


def data_module_count(side: int) -> int:
    """Modules available for data once the four marker regions are reserved."""
    return side * side - MARKER_MODULES


def capacity_bytes(side: int, bits_per_module: int = 32) -> int:
    return data_module_count(side) * bits_per_module // 8


def required_side(stream_length: int, bits_per_module: int = 32) -> int:
    """
    Smallest side S with (S*S - marker modules) * bpm / 8 >= stream_length,
    clamped below at MIN_SIDE.

    Raises:
        MatrixTooSmallError: If even MAX_SIDE cannot hold the stream
    """
    check_bits_per_module(bits_per_module)
    modules_needed = -(-stream_length * 8 // bits_per_module)
    side = math.isqrt(modules_needed + MARKER_MODULES)
    while data_module_count(side) < modules_needed:
        side += 1
    side = max(side, MIN_SIDE)

    if side > MAX_SIDE:
        raise MatrixTooSmallError(
            f"Stream of {stream_length} bytes needs a {side}x{side} matrix, "
            f"maximum is {MAX_SIDE}x{MAX_SIDE}",
            required_side=side,
            requested_side=MAX_SIDE,
        )
    return side


@dataclass(eq=False)
class Matrix:
    """Square module grid produced by layout() and consumed by unlayout()."""
    modules: np.ndarray
    bits_per_module: int = 32

    def __post_init__(self):
        self.modules = np.asarray(self.modules, dtype=np.uint32)
        if self.modules.ndim != 2 or self.modules.shape[0] != self.modules.shape[1]:
            raise LayoutError(f"Matrix must be square, got shape {self.modules.shape}")
        check_bits_per_module(self.bits_per_module)

    @property
    def side(self) -> int:
        return self.modules.shape[0]

    @property
    def max_level(self) -> int:
        """Largest module value representable in this profile."""
        return 0xFFFFFFFF if self.bits_per_module == 32 else (1 << self.bits_per_module) - 1

    def copy(self) -> "Matrix":
        return Matrix(self.modules.copy(), self.bits_per_module)

    def equals(self, other: "Matrix") -> bool:
        return (
            self.bits_per_module == other.bits_per_module
            and np.array_equal(self.modules, other.modules)
        )
