# file: hmqc/module5_pipeline/orchestrator.py

"""
Pipeline Orchestrator

Sequences the core stages.

Encode:
    payload
    → Compression (Module 2, mode by content type)
    → Metadata header prepended (Module 1)
    → FEC encode (Module 3)
    → Layout + markers (Module 4)
    → Matrix

Decode:
    Matrix + marker corners
    → Unlayout (Module 4)
    → FEC decode of the header codeword (Module 3)
    → Header parse (Module 1): sizes, content type
    → FEC decode of the remaining codewords
    → Decompression by declared type (Module 2)
    → payload

Progress is reported through an optional callback instead of shared state.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import load_config
from ..module1_metadata import (
    ContentType,
    MetadataHeader,
    encode_header,
    decode_header,
    HEADER_SIZE,
)
from ..module2_compression import CompressionEngine, compression_ratio, as_content_type
from ..module3_fec import BlockReport, FECDecodeResult, codec_from_config
from ..module4_layout import Matrix, layout, unlayout, capacity_bytes
from . import raster
from .errors import StreamLengthError, PayloadSizeMismatchError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]


@dataclass
class DecodeResult:
    """Validated decode output."""
    payload: bytes
    content_type: ContentType
    corrected_errors: int
    header: MetadataHeader
    blocks: List[BlockReport] = field(default_factory=list)


def _report(progress: Optional[ProgressCallback], stage: str, fraction: float) -> None:
    if progress is not None:
        progress(stage, fraction)


class HMQCPipeline:
    """
    Encoder/decoder for HMQC matrices.

    Stateless between calls: every encode/decode works on buffers it owns,
    so one pipeline can serve concurrent callers.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize pipeline.

        Args:
            config: Configuration dictionary (from default_config.yaml).
                    If None, the shipped defaults are loaded.
        """
        self.config = config if config is not None else load_config()

        self.compressor = CompressionEngine(self.config)
        self.codec = codec_from_config(self.config)

        self.bits_per_module = self.config.get("layout", {}).get("bits_per_module", 32)
        self.strict_content_type = self.config.get("metadata", {}).get("strict_content_type", True)
        self.module_px = raster.module_px_from_config(self.config)
        self.verbose = self.config.get("system", {}).get("verbose", False)

    def _log(self, msg: str, *args) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    # ── encode ──

    def encode(
        self,
        payload: bytes,
        content_type: ContentType,
        matrix_side: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
        *,
        timestamp: Optional[int] = None,
        instance_id: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> Matrix:
        """
        Encode a payload into a matrix.

        Args:
            payload: Bytes to encode
            content_type: Declared type; selects the compression mode
            matrix_side: Requested side (256-4096); None picks the smallest fit
            progress: Optional callback(stage, fraction)
            timestamp, instance_id, rng: Header fields for reproducible output

        Returns:
            Matrix

        Raises:
            SizeOverflowError: Payload larger than 4 GiB
            UnsupportedContentTypeError: content_type is not a ContentType
            MatrixTooSmallError: Stream does not fit matrix_side
        """
        matrix, _ = self.encode_with_metadata(
            payload, content_type, matrix_side, progress,
            timestamp=timestamp, instance_id=instance_id, rng=rng,
        )
        return matrix

    def encode_with_metadata(
        self,
        payload: bytes,
        content_type: ContentType,
        matrix_side: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
        *,
        timestamp: Optional[int] = None,
        instance_id: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> Tuple[Matrix, Dict[str, Any]]:
        """
        Encode and collect per-stage statistics.

        Returns:
            matrix: Encoded Matrix
            metadata: Dictionary containing:
                - content_type, original_size, compressed_size
                - stream_size: codeword stream length
                - num_blocks: FEC codewords
                - matrix_side, capacity_bytes, utilisation
                - compression_ratio, timestamp, id
                - encode_time: seconds
        """
        start = time.time()
        content_type = as_content_type(content_type)
        payload = bytes(payload)
        _report(progress, "start", 0.0)

        compressed = self.compressor.compress(payload, content_type)
        self._log("Compressed %d -> %d bytes (%s)", len(payload), len(compressed), content_type.name)
        _report(progress, "compress", 0.4)

        header_bytes = encode_header(
            content_type, len(payload), len(compressed),
            timestamp=timestamp, instance_id=instance_id, rng=rng,
        )
        header = decode_header(header_bytes)

        stream = self.codec.encode(header_bytes + compressed)
        self._log("FEC stream: %d codewords, %d bytes", len(stream) // self.codec.n, len(stream))
        _report(progress, "fec", 0.7)

        matrix = layout(stream, side=matrix_side, bits_per_module=self.bits_per_module)
        self._log("Matrix %dx%d (%d bits/module)", matrix.side, matrix.side, self.bits_per_module)
        _report(progress, "layout", 1.0)

        capacity = capacity_bytes(matrix.side, self.bits_per_module)
        metadata = {
            "content_type": content_type.name.lower(),
            "original_size": len(payload),
            "compressed_size": len(compressed),
            "stream_size": len(stream),
            "num_blocks": len(stream) // self.codec.n,
            "matrix_side": matrix.side,
            "capacity_bytes": capacity,
            "utilisation": round(len(stream) / capacity, 4),
            "compression_ratio": compression_ratio(len(payload), len(compressed)),
            "timestamp": header.timestamp,
            "id": header.id,
            "encode_time": time.time() - start,
        }
        return matrix, metadata

    # ── decode ──

    def decode(
        self,
        matrix: Matrix,
        corners: Sequence,
        progress: Optional[ProgressCallback] = None,
        side: Optional[int] = None,
    ) -> DecodeResult:
        """
        Recover the payload from a matrix.

        Args:
            matrix: Matrix as read back by the Rasterizer
            corners: Four finder centres from the Locator (TL, TR, BL, BR)
            progress: Optional callback(stage, fraction)
            side: Logical matrix side, if known to the caller

        Returns:
            DecodeResult(payload, content_type, corrected_errors, header, blocks)

        Raises:
            InsufficientMarkersError: Fewer than four corners
            UncorrectableBlockError: Any codeword beyond correction capacity
            BadMagicError / UnknownContentTypeError: Invalid header
            StreamLengthError: Header declares more data than the matrix holds
            CorruptStreamError: Compression framing damaged
            PayloadSizeMismatchError: Decompressed size disagrees with header
        """
        _report(progress, "start", 0.0)
        raw = unlayout(matrix, corners, side=side)
        _report(progress, "unlayout", 0.3)

        n = self.codec.n
        available = len(raw) // n
        if available == 0:
            raise StreamLengthError(
                f"Matrix holds {len(raw)} bytes, less than one {n}-byte codeword",
                required_blocks=1,
                available_blocks=0,
            )

        first = self.codec.decode(raw[:n])
        first.raise_if_uncorrectable()
        header = decode_header(first.data, strict=self.strict_content_type)
        _report(progress, "header", 0.5)

        total = HEADER_SIZE + header.compressed_size
        num_blocks = self.codec.num_blocks(total)
        if num_blocks > available:
            raise StreamLengthError(
                f"Header declares {total} bytes ({num_blocks} codewords), "
                f"matrix holds only {available} codewords",
                required_blocks=num_blocks,
                available_blocks=available,
            )

        fec_result = self._decode_remaining(first, raw[n:num_blocks * n])
        fec_result.raise_if_uncorrectable()
        self._log(
            "FEC: %d codewords, %d symbol errors corrected",
            num_blocks, fec_result.corrected_errors,
        )
        _report(progress, "fec", 0.8)

        compressed = fec_result.data[HEADER_SIZE:total]
        payload = self.compressor.decompress(compressed, header.content_type)
        if len(payload) != header.original_size:
            raise PayloadSizeMismatchError(
                f"Decompressed {len(payload)} bytes, header declares {header.original_size}"
            )
        _report(progress, "decompress", 1.0)

        return DecodeResult(
            payload=payload,
            content_type=header.content_type,
            corrected_errors=fec_result.corrected_errors,
            header=header,
            blocks=fec_result.blocks,
        )

    # ── raster ──

    def render(self, matrix: Matrix) -> np.ndarray:
        """Draw matrix at the configured raster.module_px."""
        return raster.draw(matrix, self.module_px)

    def decode_surface(
        self,
        surface: np.ndarray,
        side: int,
        progress: Optional[ProgressCallback] = None,
    ) -> DecodeResult:
        """
        Decode an undistorted surface produced by render().

        The surface is read in the configured layout profile and located
        at the configured raster.module_px.
        """
        scanned = raster.read(surface, self.bits_per_module)
        corners = raster.locate(surface, side, self.module_px)
        return self.decode(scanned, corners, progress)

    def _decode_remaining(self, first: FECDecodeResult, rest: bytes) -> FECDecodeResult:
        if not rest:
            return first

        tail = self.codec.decode(rest)
        shifted = [
            BlockReport(index=b.index + 1, errors_corrected=b.errors_corrected, uncorrectable=b.uncorrectable)
            for b in tail.blocks
        ]
        return FECDecodeResult(
            data=first.data + tail.data,
            corrected_errors=first.corrected_errors + tail.corrected_errors,
            uncorrectable=first.uncorrectable or tail.uncorrectable,
            blocks=first.blocks + shifted,
            max_correctable=self.codec.max_correctable_errors,
        )


def encode(
    payload: bytes,
    content_type: ContentType,
    matrix_side: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None,
    progress: Optional[ProgressCallback] = None,
) -> Matrix:
    """Encode with a pipeline built from config (shipped defaults if None)."""
    return HMQCPipeline(config).encode(payload, content_type, matrix_side, progress)


def decode(
    matrix: Matrix,
    corners: Sequence,
    config: Optional[Dict[str, Any]] = None,
    progress: Optional[ProgressCallback] = None,
) -> DecodeResult:
    """Decode with a pipeline built from config (shipped defaults if None)."""
    return HMQCPipeline(config).decode(matrix, corners, progress)
