# file: hmqc/module4_layout/markers.py

"""
Corner marker regions and the finder glyph.

Each corner reserves a MARKER_SIZE x MARKER_SIZE region. The 7x7 glyph sits
in the outermost corner of its region; the rest of the region is dark.
"""

from typing import List, Tuple

import numpy as np

from .matrix import MARKER_SIZE, FINDER_SIZE


FINDER_PATTERN = np.array([
    [1, 1, 1, 1, 1, 1, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 0, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 1, 1],
], dtype=bool)

# Centre of the glyph, measured from the outer edge, in module units
FINDER_CENTER_OFFSET = FINDER_SIZE / 2.0

DARK_RGBA = 0x000000FF
LIGHT_RGBA = 0xFFFFFFFF


def marker_colors(bits_per_module: int) -> Tuple[int, int]:
    """(dark, light) module values for the profile."""
    if bits_per_module == 32:
        return DARK_RGBA, LIGHT_RGBA
    return 0, (1 << bits_per_module) - 1


def marker_origins(side: int) -> List[Tuple[int, int]]:
    """Top-left (row, col) of the marker regions: TL, TR, BL, BR."""
    far = side - MARKER_SIZE
    return [(0, 0), (0, far), (far, 0), (far, far)]


def finder_origins(side: int) -> List[Tuple[int, int]]:
    """Top-left (row, col) of the finder glyphs: TL, TR, BL, BR."""
    far = side - FINDER_SIZE
    return [(0, 0), (0, far), (far, 0), (far, far)]


def data_mask(side: int) -> np.ndarray:
    """Boolean (side, side) mask, True where data modules live."""
    mask = np.ones((side, side), dtype=bool)
    for row, col in marker_origins(side):
        mask[row:row + MARKER_SIZE, col:col + MARKER_SIZE] = False
    return mask


def stamp_markers(grid: np.ndarray, bits_per_module: int) -> None:
    """Write marker regions and finder glyphs into grid in place."""
    side = grid.shape[0]
    dark, light = marker_colors(bits_per_module)
    glyph = np.where(FINDER_PATTERN, light, dark).astype(grid.dtype)

    for row, col in marker_origins(side):
        grid[row:row + MARKER_SIZE, col:col + MARKER_SIZE] = dark
    for row, col in finder_origins(side):
        grid[row:row + FINDER_SIZE, col:col + FINDER_SIZE] = glyph


def count_finder_mismatches(grid: np.ndarray, bits_per_module: int) -> int:
    """Glyph modules (over all four corners) that differ from the expected pattern."""
    side = grid.shape[0]
    dark, light = marker_colors(bits_per_module)
    expected = np.where(FINDER_PATTERN, light, dark)
    mismatches = 0
    for row, col in finder_origins(side):
        observed = grid[row:row + FINDER_SIZE, col:col + FINDER_SIZE]
        mismatches += int(np.count_nonzero(observed != expected))
    return mismatches


def nominal_corners(side: int, module_px: float = 1.0) -> List[Tuple[float, float]]:
    """
    Finder centres (x, y) of an undistorted rendering: TL, TR, BL, BR.

    module_px=1 gives module coordinates; the raster module size gives
    pixel coordinates of a drawn matrix.
    """
    near = FINDER_CENTER_OFFSET * module_px
    far = (side - FINDER_CENTER_OFFSET) * module_px
    return [(near, near), (far, near), (near, far), (far, far)]
