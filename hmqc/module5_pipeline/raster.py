# file: hmqc/module5_pipeline/raster.py

"""
Reference Rasterizer and Locator.

Real deployments supply their own image I/O and marker detection. These
helpers cover the undistorted digital case on numpy surfaces of shape
(H, W, 4), dtype uint8 (RGBA), so the pipeline can be exercised end to
end without files.
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..module4_layout import Matrix, LayoutError, nominal_corners

DEFAULT_MODULE_PX = 4


def module_px_from_config(config: Optional[Dict[str, Any]] = None) -> int:
    """
    Pixels per module edge from config['raster']['module_px'] (default: 4).

    Raises:
        LayoutError: If the value is not a positive integer
    """
    module_px = (config or {}).get("raster", {}).get("module_px", DEFAULT_MODULE_PX)
    if not isinstance(module_px, int) or module_px < 1:
        raise LayoutError(f"raster.module_px must be a positive integer, got {module_px!r}")
    return module_px


def draw(matrix: Matrix, module_px: int = DEFAULT_MODULE_PX) -> np.ndarray:
    """
    Render each module as a solid module_px x module_px square.

    Returns:
        surface: (side*module_px, side*module_px, 4) uint8 RGBA
    """
    if module_px < 1:
        raise ValueError(f"module_px must be >= 1, got {module_px}")

    if matrix.bits_per_module == 32:
        rgba = matrix.modules.astype(">u4").view(np.uint8).reshape(matrix.side, matrix.side, 4)
    else:
        gray = (matrix.modules.astype(np.uint32) * 255 // matrix.max_level).astype(np.uint8)
        alpha = np.full_like(gray, 255)
        rgba = np.stack([gray, gray, gray, alpha], axis=-1)

    return np.repeat(np.repeat(rgba, module_px, axis=0), module_px, axis=1)


def read(surface: np.ndarray, bits_per_module: int = 32) -> Matrix:
    """
    Convert a square RGBA surface into a pixel-resolution Matrix.

    Module geometry is recovered later by unlayout() from the corners.
    The 32-bit profile needs all four channels; reduced profiles also
    accept RGB and quantise the mean of R, G, B to the nearest level.
    """
    surface = np.asarray(surface)
    if surface.ndim != 3 or surface.shape[2] < 3:
        raise LayoutError(f"Expected an (H, W, 3|4) surface, got shape {surface.shape}")
    if surface.shape[0] != surface.shape[1]:
        raise LayoutError(f"Surface must be square, got {surface.shape[1]}x{surface.shape[0]}")

    if bits_per_module == 32:
        if surface.shape[2] < 4:
            raise LayoutError(
                f"32-bit profile needs an RGBA surface (alpha carries data), "
                f"got {surface.shape[2]} channels"
            )
        rgba = np.ascontiguousarray(surface[..., :4], dtype=np.uint8)
        values = rgba.view(">u4")[..., 0].astype(np.uint32)
    else:
        max_level = (1 << bits_per_module) - 1
        gray = surface[..., :3].astype(np.float64).mean(axis=2)
        values = np.rint(gray * max_level / 255.0).astype(np.uint32)

    return Matrix(values, bits_per_module)


def locate(surface: np.ndarray, side: int, module_px: int = DEFAULT_MODULE_PX) -> List[Tuple[float, float]]:
    """
    Finder centres of an undistorted surface drawn with draw().

    Stands in for a photographic Locator when the geometry is known.
    """
    expected = side * module_px
    if surface.shape[0] != expected or surface.shape[1] != expected:
        raise LayoutError(
            f"Surface {surface.shape[1]}x{surface.shape[0]} does not match "
            f"side {side} at {module_px}px per module"
        )
    return nominal_corners(side, module_px)
