# file: hmqc/module3_fec/rs_algorithms.py

"""
Reed-Solomon block algorithms.

Codewords are symbol sequences c[0..n-1] representing
c(x) = c[0] x^(n-1) + ... + c[n-1], with message symbols first and parity
last. Syndromes use the roots a^0 .. a^(nsym-1).

Decoding one block:
    syndromes → Berlekamp-Massey (error locator) → Chien search (positions)
    → Forney (magnitudes) → re-check syndromes
"""

from typing import List, Optional, Tuple

import numpy as np

from .gf256 import (
    EXP_NP,
    LOG_NP,
    FIELD_ORDER,
    gf_mul,
    gf_div,
    gf_pow_alpha,
    gf_mul_array,
)

# Blocks per numpy batch in compute_syndromes; bounds the (B, nsym, n) temporary.
SYNDROME_BATCH = 128


def compute_parity(messages: np.ndarray, generator: List[int]) -> np.ndarray:
    """
    Systematic parity for a batch of messages.

    Args:
        messages: (B, k) uint8 array, one message block per row
        generator: Monic generator polynomial, highest degree first

    Returns:
        (B, nsym) uint8 parity array, rows in input order
    """
    nsym = len(generator) - 1
    num_blocks, k = messages.shape
    gen_tail = np.array(generator[1:], dtype=np.int64)[None, :]
    remainder = np.zeros((num_blocks, nsym), dtype=np.int64)
    msgs = messages.astype(np.int64)

    for j in range(k):
        feedback = msgs[:, j] ^ remainder[:, 0]
        remainder[:, :-1] = remainder[:, 1:]
        remainder[:, -1] = 0
        remainder ^= gf_mul_array(feedback[:, None], gen_tail)

    return remainder.astype(np.uint8)


def compute_syndromes(codewords: np.ndarray, nsym: int) -> np.ndarray:
    """
    Syndromes S_i = c(a^i), i = 0..nsym-1, for a batch of codewords.

    Args:
        codewords: (B, n) uint8 array

    Returns:
        (B, nsym) int64 array; an all-zero row means no detectable error
    """
    num_blocks, n = codewords.shape
    degrees = np.arange(n - 1, -1, -1, dtype=np.int64)
    exponents = (np.arange(nsym, dtype=np.int64)[:, None] * degrees[None, :]) % FIELD_ORDER

    syndromes = np.zeros((num_blocks, nsym), dtype=np.int64)
    for start in range(0, num_blocks, SYNDROME_BATCH):
        chunk = codewords[start:start + SYNDROME_BATCH].astype(np.int64)
        logs = LOG_NP[chunk][:, None, :] + exponents[None, :, :]
        terms = np.where(chunk[:, None, :] == 0, 0, EXP_NP[logs % FIELD_ORDER])
        syndromes[start:start + SYNDROME_BATCH] = np.bitwise_xor.reduce(terms, axis=2)

    return syndromes


# Polynomials below are lowest degree first.

def _poly_eval_low(poly: List[int], x: int) -> int:
    y = 0
    for coef in reversed(poly):
        y = gf_mul(y, x) ^ coef
    return y


def berlekamp_massey(syndromes: List[int]) -> Tuple[List[int], int]:
    """
    Shortest LFSR generating the syndrome sequence.

    Returns:
        (locator, L): error locator Lambda(x) = prod(1 - X_k x), lowest
        degree first, and its register length L (number of errors)
    """
    locator = [1]
    previous = [1]
    length = 0
    shift = 1
    last_discrepancy = 1

    for r, syndrome in enumerate(syndromes):
        discrepancy = syndrome
        for i in range(1, min(length, len(locator) - 1) + 1):
            discrepancy ^= gf_mul(locator[i], syndromes[r - i])

        if discrepancy == 0:
            shift += 1
            continue

        scale = gf_div(discrepancy, last_discrepancy)
        correction = [0] * shift + [gf_mul(scale, c) for c in previous]
        updated = locator + [0] * max(0, len(correction) - len(locator))
        for i, c in enumerate(correction):
            updated[i] ^= c

        if 2 * length <= r:
            previous = locator
            length = r + 1 - length
            last_discrepancy = discrepancy
            shift = 1
        else:
            shift += 1
        locator = updated

    while len(locator) > 1 and locator[-1] == 0:
        locator.pop()
    return locator, length


def chien_search(locator: List[int], n: int) -> List[int]:
    """
    Error degrees p (0..n-1) with Lambda(a^-p) == 0.

    Degree p corresponds to codeword index n - 1 - p.
    """
    degrees = np.arange(n, dtype=np.int64)
    x_logs = (-degrees) % FIELD_ORDER
    value = np.zeros(n, dtype=np.int64)
    for i, coef in enumerate(locator):
        if coef == 0:
            continue
        term_logs = (LOG_NP[coef] + i * x_logs) % FIELD_ORDER
        value ^= EXP_NP[term_logs]
    return degrees[value == 0].tolist()


def forney(syndromes: List[int], locator: List[int], error_degrees: List[int]) -> Optional[List[int]]:
    """
    Error magnitudes for the located positions.

    With first consecutive root a^0:
        e_k = X_k * Omega(X_k^-1) / Lambda'(X_k^-1),  X_k = a^p_k

    Returns:
        Magnitudes in the order of error_degrees, or None if the
        derivative vanishes at a root (inconsistent locator)
    """
    nsym = len(syndromes)
    omega = [0] * nsym
    for i, s in enumerate(syndromes):
        if s == 0:
            continue
        for j, c in enumerate(locator):
            if i + j >= nsym:
                break
            omega[i + j] ^= gf_mul(s, c)

    # formal derivative: odd-power terms survive in characteristic 2
    derivative = [locator[i] if i % 2 == 1 else 0 for i in range(1, len(locator))]

    magnitudes = []
    for p in error_degrees:
        x = gf_pow_alpha(p)
        x_inv = gf_pow_alpha(-p)
        denominator = _poly_eval_low(derivative, x_inv)
        if denominator == 0:
            return None
        numerator = _poly_eval_low(omega, x_inv)
        magnitudes.append(gf_mul(x, gf_div(numerator, denominator)))
    return magnitudes


def correct_codeword(codeword: bytes, syndromes: List[int]) -> Tuple[Optional[bytes], int]:
    """
    Correct one codeword with known non-zero syndromes.

    Returns:
        (corrected, num_errors). corrected is None when the codeword needs
        more than nsym // 2 corrections or the located errors are
        inconsistent; num_errors is then the locator degree estimate.
    """
    n = len(codeword)
    nsym = len(syndromes)
    max_correctable = nsym // 2

    locator, num_errors = berlekamp_massey(syndromes)
    if num_errors > max_correctable or len(locator) - 1 != num_errors:
        return None, num_errors

    degrees = chien_search(locator, n)
    if len(degrees) != num_errors:
        return None, num_errors

    magnitudes = forney(syndromes, locator, degrees)
    if magnitudes is None:
        return None, num_errors

    corrected = bytearray(codeword)
    for p, e in zip(degrees, magnitudes):
        corrected[n - 1 - p] ^= e

    check = compute_syndromes(np.frombuffer(bytes(corrected), dtype=np.uint8)[None, :], nsym)
    if check.any():
        return None, num_errors

    return bytes(corrected), num_errors
