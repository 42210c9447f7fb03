# file: hmqc/module3_fec/gf256.py

"""
GF(2^8) arithmetic.

Field generated by alpha = 2 over the primitive polynomial
x^8 + x^4 + x^3 + x^2 + 1 (0x11D). Scalar helpers use Python lists;
the *_array helpers broadcast over numpy arrays for batch work.
"""

from typing import List

import numpy as np


PRIM_POLY = 0x11D
FIELD_SIZE = 256
FIELD_ORDER = 255  # multiplicative group order


def _build_tables():
    exp = [0] * (2 * FIELD_ORDER + 2)
    log = [0] * FIELD_SIZE
    x = 1
    for i in range(FIELD_ORDER):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= PRIM_POLY
    # duplicated so exp[log a + log b] never needs a modulo
    for i in range(FIELD_ORDER, len(exp)):
        exp[i] = exp[i - FIELD_ORDER]
    return exp, log


EXP, LOG = _build_tables()
EXP_NP = np.array(EXP, dtype=np.int64)
LOG_NP = np.array(LOG, dtype=np.int64)


def gf_mul(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return EXP[LOG[a] + LOG[b]]


def gf_div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("GF(256) division by zero")
    if a == 0:
        return 0
    return EXP[(LOG[a] - LOG[b]) % FIELD_ORDER]


def gf_pow_alpha(power: int) -> int:
    """alpha^power for any integer power."""
    return EXP[power % FIELD_ORDER]


def gf_mul_array(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Element-wise product of two broadcastable arrays of field elements."""
    a = np.asarray(a, dtype=np.int64)
    b = np.asarray(b, dtype=np.int64)
    product = EXP_NP[LOG_NP[a] + LOG_NP[b]]
    return np.where((a == 0) | (b == 0), 0, product)


# Polynomials below are coefficient lists, highest degree first.

def poly_mul(p: List[int], q: List[int]) -> List[int]:
    result = [0] * (len(p) + len(q) - 1)
    for i, pi in enumerate(p):
        if pi == 0:
            continue
        for j, qj in enumerate(q):
            result[i + j] ^= gf_mul(pi, qj)
    return result


def generator_poly(nsym: int, fcr: int = 0) -> List[int]:
    """g(x) = (x - a^fcr)(x - a^(fcr+1))...(x - a^(fcr+nsym-1))."""
    g = [1]
    for i in range(nsym):
        g = poly_mul(g, [1, gf_pow_alpha(fcr + i)])
    return g
