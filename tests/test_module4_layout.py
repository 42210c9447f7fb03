# file: tests/test_module4_layout.py

"""
Unit tests for Module 4: Matrix Layout Engine.

Test coverage:
    - Side selection and capacity bounds
    - Marker regions and finder glyphs
    - Deterministic filler
    - layout/unlayout round trip in module and pixel coordinates
    - Reduced bits-per-module profiles
"""

import numpy as np
import pytest

from hmqc.module4_layout import (
    layout,
    unlayout,
    estimate_geometry,
    bytes_to_modules,
    modules_to_bytes,
    filler_modules,
    FINDER_PATTERN,
    data_mask,
    nominal_corners,
    Matrix,
    Point,
    MIN_SIDE,
    MAX_SIDE,
    MARKER_SIZE,
    required_side,
    capacity_bytes,
    data_module_count,
    LayoutError,
    MatrixTooSmallError,
    InsufficientMarkersError,
)
from hmqc.module5_pipeline import raster


def _stream(size, seed=0):
    return np.random.default_rng(seed).integers(0, 256, size=size, dtype=np.uint8).tobytes()


class TestSizing:

    def test_minimum_side(self):
        assert required_side(0) == MIN_SIDE
        assert required_side(255) == MIN_SIDE

    def test_capacity_at_minimum(self):
        assert data_module_count(256) == 256 * 256 - 1600
        assert capacity_bytes(256) == (256 * 256 - 1600) * 4

    def test_smallest_fitting_side(self):
        stream_length = capacity_bytes(300) + 1
        side = required_side(stream_length)
        assert side == 301
        assert capacity_bytes(side) >= stream_length
        assert capacity_bytes(side - 1) < stream_length

    def test_monotonic(self):
        sides = [required_side(n) for n in range(0, 2_000_000, 50_000)]
        assert sides == sorted(sides)
        assert all(MIN_SIDE <= s <= MAX_SIDE for s in sides)

    def test_maximum_exceeded(self):
        with pytest.raises(MatrixTooSmallError) as exc_info:
            required_side(capacity_bytes(MAX_SIDE) + 1)
        assert exc_info.value.required_side > MAX_SIDE

    def test_maximum_exactly_fits(self):
        assert required_side(capacity_bytes(MAX_SIDE)) == MAX_SIDE

    def test_reduced_profile_needs_more_modules(self):
        assert required_side(100_000, 1) > required_side(100_000, 32)

    def test_unsupported_bits_per_module(self):
        with pytest.raises(LayoutError):
            required_side(10, 5)


class TestLayout:

    def test_default_side(self):
        matrix = layout(_stream(255))
        assert matrix.side == 256
        assert matrix.modules.dtype == np.uint32

    def test_requested_side(self):
        assert layout(_stream(255), side=400).side == 400

    def test_requested_side_too_small(self):
        stream = _stream(capacity_bytes(256) + 1)
        with pytest.raises(MatrixTooSmallError) as exc_info:
            layout(stream, side=256)
        assert exc_info.value.required_side == 257
        assert exc_info.value.requested_side == 256

    def test_requested_side_too_large(self):
        with pytest.raises(LayoutError):
            layout(b"x", side=MAX_SIDE + 1)

    def test_data_order_row_major(self):
        stream = bytes(range(16))
        matrix = layout(stream)
        # first data module sits right after the top-left marker region
        assert matrix.modules[0, MARKER_SIZE] == 0x00010203
        assert matrix.modules[0, MARKER_SIZE + 3] == 0x0C0D0E0F

    def test_finder_glyphs(self):
        matrix = layout(b"abc")
        side = matrix.side
        expected = np.where(FINDER_PATTERN, 0xFFFFFFFF, 0x000000FF)
        assert np.array_equal(matrix.modules[:7, :7], expected)
        assert np.array_equal(matrix.modules[:7, side - 7:], expected)
        assert np.array_equal(matrix.modules[side - 7:, :7], expected)
        assert np.array_equal(matrix.modules[side - 7:, side - 7:], expected)

    def test_marker_region_dark_outside_glyph(self):
        matrix = layout(b"abc")
        assert matrix.modules[10, 10] == 0x000000FF
        assert matrix.modules[19, 19] == 0x000000FF

    def test_deterministic(self):
        stream = _stream(5000, seed=3)
        assert layout(stream).equals(layout(stream))

    def test_filler_follows_stream(self):
        matrix = layout(b"\x00" * 8)
        # module index 2 is the first filler module
        expected = filler_modules(2, 1, 32)[0]
        assert matrix.modules[0, MARKER_SIZE + 2] == expected
        assert expected == ((14 << 24) | (26 << 16) | (38 << 8) | 0xFF)

    def test_filler_values(self):
        values = filler_modules(0, 3, 32)
        assert values.tolist() == [0x000000FF, 0x070D13FF, 0x0E1A26FF]


class TestModulePacking:

    @pytest.mark.parametrize("bpm", [1, 2, 3, 4, 32])
    def test_pack_unpack(self, bpm):
        data = _stream(64, seed=bpm)
        values = bytes_to_modules(data, bpm)
        if bpm < 32:
            assert int(values.max()) < (1 << bpm)
        assert modules_to_bytes(values, bpm)[:64] == data

    def test_one_bit_msb_first(self):
        assert bytes_to_modules(b"\x80", 1).tolist() == [1, 0, 0, 0, 0, 0, 0, 0]

    def test_three_bit_groups_padded(self):
        # 16 bits -> six 3-bit groups, the last one padded with two zero bits
        values = bytes_to_modules(b"\xff\x00", 3)
        assert values.tolist() == [7, 7, 6, 0, 0, 0]
        assert modules_to_bytes(values, 3) == b"\xff\x00"

    def test_three_bit_capacity(self):
        assert capacity_bytes(256, 3) == (256 * 256 - 1600) * 3 // 8
        assert required_side(capacity_bytes(256, 3), 3) == 256
        assert required_side(capacity_bytes(256, 3) + 1, 3) == 257


class TestUnlayout:

    def test_module_coordinates(self):
        stream = _stream(3000, seed=4)
        matrix = layout(stream)
        recovered = unlayout(matrix, nominal_corners(matrix.side))

        assert len(recovered) == capacity_bytes(matrix.side)
        assert recovered[:3000] == stream

    def test_returns_filler_after_stream(self):
        matrix = layout(b"\x01\x02\x03\x04")
        recovered = unlayout(matrix, nominal_corners(matrix.side))
        assert recovered[4:8] == bytes((7, 13, 19, 255))

    def test_pixel_coordinates(self):
        stream = _stream(1000, seed=5)
        matrix = layout(stream, side=260)
        surface = raster.draw(matrix, module_px=3)
        pixels = raster.read(surface)
        corners = raster.locate(surface, 260, module_px=3)

        assert pixels.side == 780
        assert unlayout(pixels, corners)[:1000] == stream

    def test_side_hint(self):
        stream = _stream(100, seed=6)
        matrix = layout(stream)
        assert unlayout(matrix, nominal_corners(256), side=256)[:100] == stream

    def test_corners_as_points(self):
        stream = _stream(100, seed=7)
        matrix = layout(stream)
        corners = [Point(x, y) for x, y in nominal_corners(256)]
        assert unlayout(matrix, corners)[:100] == stream

    @pytest.mark.parametrize("found", [0, 1, 3])
    def test_insufficient_markers(self, found):
        matrix = layout(b"abc")
        corners = nominal_corners(matrix.side)[:found]
        with pytest.raises(InsufficientMarkersError) as exc_info:
            unlayout(matrix, corners)
        assert exc_info.value.found == found

    def test_swapped_corners_rejected(self):
        matrix = layout(b"abc")
        tl, tr, bl, br = nominal_corners(matrix.side)
        with pytest.raises(LayoutError):
            unlayout(matrix, [br, bl, tr, tl])

    def test_geometry_estimate(self):
        side, module_size = estimate_geometry(1024, nominal_corners(256, module_px=4))
        assert side == 256
        assert module_size == pytest.approx(4.0)

    def test_damaged_finder_logged(self, caplog):
        stream = _stream(100, seed=8)
        matrix = layout(stream)
        matrix.modules[3, 3] ^= 0xFFFFFF00

        assert unlayout(matrix, nominal_corners(256))[:100] == stream
        assert "finder glyph" in caplog.text


class TestReducedProfiles:

    @pytest.mark.parametrize("bpm", [1, 2, 3, 4])
    def test_roundtrip(self, bpm):
        stream = _stream(2000, seed=bpm)
        matrix = layout(stream, bits_per_module=bpm)

        assert matrix.modules.max() <= (1 << bpm) - 1
        assert unlayout(matrix, nominal_corners(matrix.side))[:2000] == stream

    @pytest.mark.parametrize("bpm", [1, 2, 3, 4])
    def test_raster_roundtrip(self, bpm):
        stream = _stream(500, seed=10 + bpm)
        matrix = layout(stream, bits_per_module=bpm)
        surface = raster.draw(matrix, module_px=2)
        pixels = raster.read(surface, bits_per_module=bpm)
        corners = raster.locate(surface, matrix.side, module_px=2)

        assert unlayout(pixels, corners)[:500] == stream

    def test_marker_levels(self):
        matrix = layout(b"abc", bits_per_module=2)
        expected = np.where(FINDER_PATTERN, 3, 0)
        assert np.array_equal(matrix.modules[:7, :7], expected)


class TestMatrix:

    def test_must_be_square(self):
        with pytest.raises(LayoutError, match="square"):
            Matrix(np.zeros((4, 5), dtype=np.uint32))

    def test_copy_independent(self):
        matrix = layout(b"abc")
        clone = matrix.copy()
        clone.modules[100, 100] ^= 1
        assert not matrix.equals(clone)

    def test_data_mask_counts(self):
        assert int(data_mask(256).sum()) == data_module_count(256)
