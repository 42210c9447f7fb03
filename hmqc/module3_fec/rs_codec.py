# file: hmqc/module3_fec/rs_codec.py

"""
Reed-Solomon codec.

Splits a byte stream into k-symbol message blocks (the last one
zero-padded), appends nsym parity symbols to each, and reverses the
process with per-block error correction and reporting.

No length framing is added here: the true payload length travels in the
metadata header, which is the first thing inside the protected stream.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from reedsolo import RSCodec, ReedSolomonError

from .errors import (
    FECEncodingError,
    FECDecodingError,
    UncorrectableBlockError,
    FECConfigurationError,
)
from .gf256 import generator_poly
from .rs_algorithms import compute_parity, compute_syndromes, correct_codeword

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockReport:
    """Outcome of decoding one codeword."""
    index: int
    errors_corrected: int
    uncorrectable: bool = False


@dataclass
class FECDecodeResult:
    """
    Aggregate decode outcome.

    data holds k bytes per codeword, including the zero padding of the
    final block. Uncorrectable blocks contribute their received message
    symbols unchanged.
    """
    data: bytes
    corrected_errors: int
    uncorrectable: bool
    blocks: List[BlockReport] = field(default_factory=list)
    max_correctable: int = 16

    @property
    def uncorrectable_blocks(self) -> List[int]:
        return [b.index for b in self.blocks if b.uncorrectable]

    def raise_if_uncorrectable(self) -> None:
        """
        Raises:
            UncorrectableBlockError: Naming every failing block
        """
        if not self.uncorrectable:
            return
        failing = [b for b in self.blocks if b.uncorrectable]
        first = failing[0]
        raise UncorrectableBlockError(
            f"{len(failing)} of {len(self.blocks)} codewords exceed the correction "
            f"capability of {self.max_correctable} symbol errors "
            f"(first failing block {first.index}, ~{first.errors_corrected} errors); "
            f"{self.corrected_errors} errors corrected elsewhere",
            block_index=first.index,
            num_errors=first.errors_corrected,
            max_correctable=self.max_correctable,
            block_indices=[b.index for b in failing],
            corrected_errors=self.corrected_errors,
        )


class ReedSolomonCodec:
    """
    Reed-Solomon codec over GF(256) with explicit per-block decoding.

    Parameters:
        n (int): Total codeword length (symbols)
        k (int): Message length (data symbols)
        nsym (int): Number of parity symbols (n - k)

    Invariants:
        - n = k + nsym
        - n <= 255 (GF(256) constraint)
        - Corrects up to nsym // 2 symbol errors per codeword
    """

    def __init__(self, n: int = 255, k: int = 223, nsym: int = 32):
        if n > 255:
            raise FECConfigurationError(f"Reed-Solomon n={n} exceeds GF(256) limit of 255")
        if nsym != n - k:
            raise FECConfigurationError(f"Inconsistent RS parameters: n={n}, k={k}, nsym={nsym}")
        if nsym < 2:
            raise FECConfigurationError(f"nsym={nsym} must be >= 2")
        if k < 1:
            raise FECConfigurationError(f"k={k} must be >= 1")

        self.n = n
        self.k = k
        self.nsym = nsym
        self.max_correctable_errors = nsym // 2
        self.generator = generator_poly(nsym)

    # ── sizing ──

    def num_blocks(self, data_length: int) -> int:
        return -(-data_length // self.k)

    def encoded_length(self, data_length: int) -> int:
        return self.num_blocks(data_length) * self.n

    def get_redundancy_overhead(self) -> float:
        """Overhead ratio nsym / k."""
        return self.nsym / self.k

    def get_code_rate(self) -> float:
        """Code rate k / n."""
        return self.k / self.n

    # ── encode ──

    def encode(self, data: bytes) -> bytes:
        """
        Encode data with Reed-Solomon error correction.

        Args:
            data: Arbitrary-length byte stream

        Returns:
            Concatenated codewords (message || parity), n bytes each

        Raises:
            FECEncodingError: If input is not bytes-like
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise FECEncodingError(f"Expected bytes, got {type(data)}")

        data = bytes(data)
        num_blocks = self.num_blocks(len(data))
        if num_blocks == 0:
            return b""

        padded = data + b"\x00" * (num_blocks * self.k - len(data))
        messages = np.frombuffer(padded, dtype=np.uint8).reshape(num_blocks, self.k)
        parity = self._parity(messages)

        return np.hstack([messages, parity]).tobytes()

    def encode_block(self, message: bytes) -> bytes:
        """Encode a single message of at most k bytes (zero-padded to k)."""
        if len(message) > self.k:
            raise FECEncodingError(f"Message of {len(message)} bytes exceeds k={self.k}")
        return self.encode(bytes(message) + b"\x00" * (self.k - len(message)))

    def _parity(self, messages: np.ndarray) -> np.ndarray:
        return compute_parity(messages, self.generator)

    # ── decode ──

    def decode(self, data: bytes) -> FECDecodeResult:
        """
        Decode a codeword stream with error correction.

        Args:
            data: Concatenated n-byte codewords

        Returns:
            FECDecodeResult with message bytes, corrected error count and
            per-block reports. Never raises for too many errors; check
            result.uncorrectable or call result.raise_if_uncorrectable().

        Raises:
            FECDecodingError: If data is empty or not a multiple of n
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise FECDecodingError(f"Expected bytes, got {type(data)}")

        data = bytes(data)
        if len(data) == 0:
            raise FECDecodingError("Cannot decode empty data")
        if len(data) % self.n != 0:
            raise FECDecodingError(
                f"Data length {len(data)} is not a multiple of codeword length {self.n}"
            )

        num_blocks = len(data) // self.n
        codewords = np.frombuffer(data, dtype=np.uint8).reshape(num_blocks, self.n)
        syndromes = compute_syndromes(codewords, self.nsym)
        dirty = set(np.flatnonzero(syndromes.any(axis=1)).tolist())

        messages = []
        reports = []
        total_corrected = 0

        for index in range(num_blocks):
            codeword = data[index * self.n:(index + 1) * self.n]

            if index not in dirty:
                messages.append(codeword[:self.k])
                reports.append(BlockReport(index=index, errors_corrected=0))
                continue

            corrected, num_errors = self._correct(codeword, syndromes[index].tolist())
            if corrected is None:
                logger.debug("Block %d uncorrectable (locator degree %d)", index, num_errors)
                messages.append(codeword[:self.k])
                reports.append(BlockReport(index=index, errors_corrected=num_errors, uncorrectable=True))
                continue

            logger.debug("Block %d: corrected %d symbol errors", index, num_errors)
            total_corrected += num_errors
            messages.append(corrected[:self.k])
            reports.append(BlockReport(index=index, errors_corrected=num_errors))

        return FECDecodeResult(
            data=b"".join(messages),
            corrected_errors=total_corrected,
            uncorrectable=any(r.uncorrectable for r in reports),
            blocks=reports,
            max_correctable=self.max_correctable_errors,
        )

    def decode_block(self, codeword: bytes) -> Tuple[bytes, int, bool]:
        """
        Decode one n-byte codeword.

        Returns:
            (message, errors_corrected, uncorrectable)
        """
        result = self.decode(codeword)
        report = result.blocks[0]
        return result.data, report.errors_corrected, report.uncorrectable

    def _correct(self, codeword: bytes, syndromes: List[int]) -> Tuple[Optional[bytes], int]:
        return correct_codeword(codeword, syndromes)


class ReedsoloCodec(ReedSolomonCodec):
    """
    Same wire format, with block parity and correction delegated to the
    reedsolo library. Syndrome screening and reporting stay shared.
    """

    def __init__(self, n: int = 255, k: int = 223, nsym: int = 32):
        super().__init__(n=n, k=k, nsym=nsym)
        self.codec = RSCodec(nsym, nsize=n)

    def _parity(self, messages: np.ndarray) -> np.ndarray:
        rows = []
        for message in messages:
            encoded = self.codec.encode(message.tobytes())
            rows.append(np.frombuffer(bytes(encoded[self.k:]), dtype=np.uint8))
        return np.vstack(rows)

    def _correct(self, codeword: bytes, syndromes: List[int]) -> Tuple[Optional[bytes], int]:
        try:
            decoded = self.codec.decode(codeword)
        except ReedSolomonError as e:
            logger.debug("reedsolo rejected codeword: %s", e)
            return None, self.max_correctable_errors + 1

        full = bytes(decoded[1]) if isinstance(decoded, (tuple, list)) else bytes(decoded)
        if len(full) != self.n:
            # older reedsolo releases return only the message part
            full = bytes(full) + bytes(self.encode(full)[self.k:self.n])
        num_errors = sum(1 for a, b in zip(codeword, full) if a != b)
        return full, num_errors


CODEC_TYPES = {
    "reed_solomon": ReedSolomonCodec,
    "reedsolo": ReedsoloCodec,
}


def codec_from_config(config: Optional[Dict[str, Any]] = None) -> ReedSolomonCodec:
    """
    Build a codec from the 'fec' configuration section.

    Configuration Schema:
        config['fec']['type']: 'reed_solomon' (default) or 'reedsolo'
        config['fec']['reed_solomon']['n']: Total codeword length (default: 255)
        config['fec']['reed_solomon']['k']: Message length (default: 223)
        config['fec']['reed_solomon']['nsym']: Parity symbols (default: 32)

    Raises:
        FECConfigurationError: If the type is unknown or parameters are inconsistent
    """
    fec_config = (config or {}).get("fec", {})
    fec_type = fec_config.get("type", "reed_solomon")

    try:
        codec_cls = CODEC_TYPES[fec_type]
    except KeyError:
        raise FECConfigurationError(f"Unknown FEC type: {fec_type}") from None

    rs_config = fec_config.get("reed_solomon", {})
    return codec_cls(
        n=rs_config.get("n", 255),
        k=rs_config.get("k", 223),
        nsym=rs_config.get("nsym", 32),
    )
