"""
Test: Corruption inside the matrix

Symbol errors are injected directly into data modules, the way print and
scan damage would, and must be corrected up to 16 per codeword or reported.
"""

import numpy as np
import pytest

from hmqc import HMQCPipeline, ContentType
from hmqc.module3_fec import UncorrectableBlockError
from hmqc.module4_layout import data_mask, nominal_corners


def corrupt_stream_bytes(matrix, offsets):
    """
    Flip one stream byte per offset in a 32-bit-per-module matrix.

    Stream byte i lives in data module i // 4, channel i % 4 (R, G, B, A).
    """
    corrupted = matrix.copy()
    positions = np.flatnonzero(data_mask(matrix.side))
    flat = corrupted.modules.reshape(-1)
    for offset in offsets:
        shift = (3 - offset % 4) * 8
        flat[positions[offset // 4]] ^= np.uint32(0x5A << shift)
    return corrupted


def _payload(size, seed):
    return np.random.default_rng(seed).integers(0, 256, size=size, dtype=np.uint8).tobytes()


class TestCorruption:

    def test_ten_errors_corrected(self):
        pipeline = HMQCPipeline()
        matrix = pipeline.encode(b"a cat", ContentType.TEXT)
        damaged = corrupt_stream_bytes(matrix, range(40, 140, 10))

        result = pipeline.decode(damaged, nominal_corners(matrix.side))

        assert result.payload == b"a cat"
        assert result.corrected_errors == 10

    def test_sixteen_errors_corrected(self):
        pipeline = HMQCPipeline()
        matrix = pipeline.encode(b"exactly at capacity", ContentType.TEXT)
        damaged = corrupt_stream_bytes(matrix, range(0, 255, 16))

        result = pipeline.decode(damaged, nominal_corners(matrix.side))

        assert result.payload == b"exactly at capacity"
        assert result.corrected_errors == 16

    def test_twenty_errors_uncorrectable(self):
        pipeline = HMQCPipeline()
        matrix = pipeline.encode(b"a cat", ContentType.TEXT)
        damaged = corrupt_stream_bytes(matrix, range(40, 240, 10))

        with pytest.raises(UncorrectableBlockError) as exc_info:
            pipeline.decode(damaged, nominal_corners(matrix.side))
        assert exc_info.value.block_indices == [0]

    def test_errors_spread_over_blocks(self):
        pipeline = HMQCPipeline()
        payload = _payload(2000, seed=1)
        matrix = pipeline.encode(payload, ContentType.BINARY)
        offsets = [b * 255 + o for b in range(1, 8) for o in range(5, 125, 10)]
        damaged = corrupt_stream_bytes(matrix, offsets)

        result = pipeline.decode(damaged, nominal_corners(matrix.side))

        assert result.payload == payload
        assert result.corrected_errors == len(offsets)
        assert all(b.errors_corrected == 12 for b in result.blocks[1:8])

    def test_failure_in_later_block_reported(self):
        pipeline = HMQCPipeline()
        payload = _payload(2000, seed=2)
        matrix = pipeline.encode(payload, ContentType.BINARY)
        damaged = corrupt_stream_bytes(matrix, [3 * 255 + o for o in range(0, 250, 10)])

        with pytest.raises(UncorrectableBlockError) as exc_info:
            pipeline.decode(damaged, nominal_corners(matrix.side))
        assert exc_info.value.block_indices == [3]

    def test_filler_damage_ignored(self):
        pipeline = HMQCPipeline()
        matrix = pipeline.encode(b"a cat", ContentType.TEXT)
        damaged = corrupt_stream_bytes(matrix, range(1000, 5000, 3))

        result = pipeline.decode(damaged, nominal_corners(matrix.side))
        assert result.payload == b"a cat"
        assert result.corrected_errors == 0

    def test_raster_noise_corrected(self):
        from hmqc.module5_pipeline import raster

        pipeline = HMQCPipeline()
        payload = b"smudged print " * 40
        matrix = pipeline.encode(payload, ContentType.TEXT)
        surface = raster.draw(matrix, module_px=4)

        # blank four data modules of the first codeword
        surface[0:4, 4 * 30:4 * 34] = 0

        scanned = raster.read(surface)
        corners = raster.locate(surface, matrix.side, module_px=4)
        result = pipeline.decode(scanned, corners)

        assert result.payload == payload
        assert result.corrected_errors > 0
