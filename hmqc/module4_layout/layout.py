# file: hmqc/module4_layout/layout.py

"""
Matrix Layout Engine.

layout():   codeword stream → row-major data modules (markers skipped)
            → deterministic filler → corner markers → Matrix
unlayout(): Matrix + four finder centres → sampled module grid
            → row-major data modules → bytes
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .errors import LayoutError, MatrixTooSmallError, InsufficientMarkersError
from .markers import (
    FINDER_CENTER_OFFSET,
    data_mask,
    stamp_markers,
    count_finder_mismatches,
)
from .matrix import (
    Matrix,
    Point,
    MIN_SIDE,
    MAX_SIDE,
    FINDER_SIZE,
    check_bits_per_module,
    data_module_count,
    capacity_bytes,
    required_side,
)

logger = logging.getLogger(__name__)


def bytes_to_modules(data: bytes, bits_per_module: int) -> np.ndarray:
    """
    Pack bytes into module values.

    32 bpm: 4 bytes per module, big-endian RGBA (last module zero-padded).
    1-4 bpm: the bit stream is split MSB-first into bpm-bit groups, the
    last group zero-padded.
    """
    data = bytes(data)
    if bits_per_module == 32:
        padded = data + b"\x00" * (-len(data) % 4)
        return np.frombuffer(padded, dtype=">u4").astype(np.uint32)

    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8))
    bits = np.concatenate([bits, np.zeros(-bits.size % bits_per_module, dtype=np.uint8)])
    groups = bits.reshape(-1, bits_per_module).astype(np.uint32)
    weights = (1 << np.arange(bits_per_module - 1, -1, -1)).astype(np.uint32)
    return groups @ weights


def modules_to_bytes(values: np.ndarray, bits_per_module: int) -> bytes:
    """Inverse of bytes_to_modules; trailing partial bytes are dropped."""
    values = np.asarray(values, dtype=np.uint32)
    if bits_per_module == 32:
        return values.astype(">u4").tobytes()

    shifts = np.arange(bits_per_module - 1, -1, -1, dtype=np.uint32)
    bits = ((values[:, None] >> shifts[None, :]) & 1).astype(np.uint8).ravel()
    usable = bits.size - bits.size % 8
    return np.packbits(bits[:usable]).tobytes()


def filler_modules(start: int, count: int, bits_per_module: int) -> np.ndarray:
    """
    Decorative values for unused data modules start .. start+count-1.

    Depends only on the module index, so layout stays deterministic.
    """
    index = np.arange(start, start + count, dtype=np.uint64)
    if bits_per_module == 32:
        r = (index * 7) % 256
        g = (index * 13) % 256
        b = (index * 19) % 256
        return ((r << 24) | (g << 16) | (b << 8) | 0xFF).astype(np.uint32)
    return ((index * 7) % (1 << bits_per_module)).astype(np.uint32)


def layout(
    stream: bytes,
    side: Optional[int] = None,
    bits_per_module: int = 32,
) -> Matrix:
    """
    Lay a codeword stream onto a square matrix.

    Args:
        stream: FEC codeword stream
        side: Requested side length; None selects the smallest valid one
        bits_per_module: 32 (RGBA) or 4/2/1 (reduced profile)

    Returns:
        Matrix

    Raises:
        MatrixTooSmallError: If the stream does not fit the requested side
            (or any side up to the maximum)
        LayoutError: If side exceeds the maximum or bpm is unsupported
    """
    check_bits_per_module(bits_per_module)
    needed = required_side(len(stream), bits_per_module)

    if side is None:
        side = needed
    elif side > MAX_SIDE:
        raise LayoutError(f"Requested side {side} exceeds maximum {MAX_SIDE}")
    elif side < needed:
        raise MatrixTooSmallError(
            f"Stream of {len(stream)} bytes needs a {needed}x{needed} matrix, "
            f"requested {side}x{side}",
            required_side=needed,
            requested_side=side,
        )

    values = bytes_to_modules(stream, bits_per_module)
    slots = data_module_count(side)
    data_values = np.concatenate([
        values,
        filler_modules(values.size, slots - values.size, bits_per_module),
    ])

    grid = np.zeros((side, side), dtype=np.uint32)
    grid[data_mask(side)] = data_values
    stamp_markers(grid, bits_per_module)

    logger.debug(
        "Laid %d bytes into %dx%d matrix (%d/%d data modules used)",
        len(stream), side, side, values.size, slots,
    )
    return Matrix(grid, bits_per_module)


def _corner_points(corners: Sequence) -> Tuple[Point, Point, Point, Point]:
    corners = list(corners) if corners is not None else []
    if len(corners) < 4:
        raise InsufficientMarkersError(
            f"Need 4 marker corners, locator found {len(corners)}",
            found=len(corners),
        )
    return tuple(Point(float(c[0]), float(c[1])) for c in corners[:4])


def estimate_geometry(
    extent: int,
    corners: Sequence,
    side: Optional[int] = None,
) -> Tuple[int, float]:
    """
    Derive (logical side, module size) from the finder centres.

    Centre spacing equals module_size * (side - 7); the grid extent equals
    module_size * side. With side given, only the spacing is used.

    Raises:
        InsufficientMarkersError: Fewer than four corners
        LayoutError: Geometry that cannot describe a valid matrix
    """
    tl, tr, bl, br = _corner_points(corners)
    spacing = (
        (tr.x - tl.x) + (br.x - bl.x) + (bl.y - tl.y) + (br.y - tr.y)
    ) / 4.0
    if spacing <= 0:
        raise LayoutError(f"Marker corners are not in TL, TR, BL, BR order (spacing {spacing:.2f})")

    if side is None:
        module_size = (extent - spacing) / FINDER_SIZE
        if module_size <= 0:
            raise LayoutError(
                f"Marker spacing {spacing:.2f} exceeds grid extent {extent}"
            )
        side = int(round(extent / module_size))

    if not MIN_SIDE <= side <= MAX_SIDE:
        raise LayoutError(f"Derived matrix side {side} outside [{MIN_SIDE}, {MAX_SIDE}]")

    module_size = spacing / (side - FINDER_SIZE)
    return side, module_size


def sample_modules(grid: np.ndarray, corners: Sequence, side: int) -> np.ndarray:
    """
    Sample one value per logical module.

    Module centres are mapped through the bilinear patch spanned by the
    four finder centres, which absorbs scale, offset and mild skew.
    """
    tl, tr, bl, br = _corner_points(corners)
    height, width = grid.shape[:2]

    centers = np.arange(side, dtype=np.float64) + 0.5
    span = side - 2 * FINDER_CENTER_OFFSET
    u = (centers - FINDER_CENTER_OFFSET) / span
    s, t = np.meshgrid(u, u)  # s along columns, t along rows

    x = ((1 - s) * (1 - t) * tl.x + s * (1 - t) * tr.x
         + (1 - s) * t * bl.x + s * t * br.x)
    y = ((1 - s) * (1 - t) * tl.y + s * (1 - t) * tr.y
         + (1 - s) * t * bl.y + s * t * br.y)

    cols = np.clip(np.floor(x).astype(np.int64), 0, width - 1)
    rows = np.clip(np.floor(y).astype(np.int64), 0, height - 1)
    return grid[rows, cols]


def unlayout(
    matrix: Matrix,
    corners: Sequence,
    side: Optional[int] = None,
) -> bytes:
    """
    Read the data modules of a matrix back into bytes.

    Args:
        matrix: Module grid as read back (module or pixel resolution)
        corners: Finder centres (x, y) from the Locator: TL, TR, BL, BR
        side: Logical side if known; otherwise derived from the corners

    Returns:
        Every data module's bytes in row-major order (stream + filler)

    Raises:
        InsufficientMarkersError: If fewer than four corners are supplied
        LayoutError: If the corner geometry is inconsistent
    """
    side, module_size = estimate_geometry(matrix.side, corners, side)
    sampled = sample_modules(matrix.modules, corners, side)

    mismatches = count_finder_mismatches(sampled, matrix.bits_per_module)
    if mismatches:
        logger.warning("%d finder glyph modules differ from the expected pattern", mismatches)

    logger.debug("Reading %dx%d matrix at %.2f units per module", side, side, module_size)
    values = sampled[data_mask(side)]
    return modules_to_bytes(values, matrix.bits_per_module)[:capacity_bytes(side, matrix.bits_per_module)]
