# file: hmqc/module3_fec/testing_utils.py

"""
Testing utilities for the FEC module.

Error injection for validation and robustness experiments.
Used only in test/evaluation contexts.
"""

import random
from typing import Optional, Sequence


def inject_symbol_errors(
    data: bytes,
    positions: Sequence[int],
    seed: Optional[int] = None,
) -> bytes:
    """
    Replace the symbols at the given positions with different values.

    Every listed position is guaranteed to change, so the number of symbol
    errors equals the number of distinct positions.

    Args:
        data: Original data
        positions: Byte offsets to corrupt
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    corrupted = bytearray(data)
    for pos in set(positions):
        corrupted[pos] ^= rng.randint(1, 255)
    return bytes(corrupted)


def inject_block_errors(
    data: bytes,
    block_index: int,
    num_errors: int,
    n: int = 255,
    seed: Optional[int] = None,
) -> bytes:
    """
    Corrupt exactly num_errors distinct symbols inside one codeword.
    """
    if not 0 <= num_errors <= n:
        raise ValueError(f"num_errors must be in [0, {n}], got {num_errors}")
    start = block_index * n
    if start + n > len(data):
        raise ValueError(f"Block {block_index} is outside data of length {len(data)}")

    rng = random.Random(seed)
    offsets = rng.sample(range(n), num_errors)
    return inject_symbol_errors(data, [start + o for o in offsets], seed=seed)


def inject_bit_errors(
    data: bytes,
    error_rate: float,
    seed: Optional[int] = None,
) -> bytes:
    """
    Flip a fraction of all bits at random positions.

    Example:
        >>> corrupted = inject_bit_errors(b'\\x00' * 100, error_rate=0.01, seed=42)
    """
    if not 0.0 <= error_rate <= 1.0:
        raise ValueError(f"error_rate must be in [0, 1], got {error_rate}")

    rng = random.Random(seed)
    corrupted = bytearray(data)
    total_bits = len(data) * 8
    num_errors = int(total_bits * error_rate)

    for pos in rng.sample(range(total_bits), num_errors):
        corrupted[pos // 8] ^= (1 << (pos % 8))

    return bytes(corrupted)


def inject_burst_errors(
    data: bytes,
    num_bursts: int,
    burst_length: int,
    seed: Optional[int] = None,
) -> bytes:
    """
    Overwrite runs of consecutive symbols, the way a scratch or smudge does.

    Args:
        num_bursts: Number of bursts
        burst_length: Length of each burst in bytes
    """
    if num_bursts * burst_length > len(data):
        raise ValueError("Total burst bytes exceed data length")

    rng = random.Random(seed)
    corrupted = bytearray(data)
    for _ in range(num_bursts):
        start = rng.randint(0, len(data) - burst_length)
        for pos in range(start, start + burst_length):
            corrupted[pos] ^= rng.randint(1, 255)

    return bytes(corrupted)
