# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Error-free transformations and compensated summation in IEEE double
precision.

With round-to-nearest the rounding error of a + b is itself a float, so
a + b = s + t exactly, where s = fl(a + b).
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

_SPLITTER = 134217729.0  # 2**27 + 1


def fast_two_sum(a: float, b: float) -> Tuple[float, float]:
    """
    (s, t) with s = fl(a + b) and a + b = s + t.

    Only exact when the exponent of a is at least that of b
    (e.g. |a| >= |b|); otherwise use :func:`two_sum`.
    """
    s = a + b
    t = b - (s - a)
    return s, t


def two_sum(a: float, b: float) -> Tuple[float, float]:
    """(s, t) with s = fl(a + b) and a + b = s + t, for any a and b."""
    s = a + b
    v = s - a
    t = (a - (s - v)) + (b - v)
    return s, t


def _split(a: float) -> Tuple[float, float]:
    # Veltkamp: a = high + low, both halves fit in 26 bits
    c = _SPLITTER * a
    high = c - (c - a)
    return high, a - high


def two_product(a: float, b: float) -> Tuple[float, float]:
    """
    (p, e) with p = fl(a · b) and a · b = p + e (Dekker).

    Needs no fused multiply-add. Exact unless a · b overflows or
    underflows.
    """
    a = float(a)
    b = float(b)
    p = a * b
    ah, al = _split(a)
    bh, bl = _split(b)
    e = al * bl - (((p - ah * bh) - al * bh) - ah * bl)
    return p, e


def _entries_2x2(M) -> Tuple[float, float, float, float]:
    M = np.asarray(M)
    if M.shape != (2, 2):
        raise ValueError(f"Expected a 2x2 matrix, got shape {M.shape}.")
    return float(M[0, 0]), float(M[0, 1]), float(M[1, 0]), float(M[1, 1])


def determinant_2x2(M) -> float:
    """ad - bc evaluated directly. Inaccurate when the products cancel."""
    a, b, c, d = _entries_2x2(M)
    return (a * d) - (b * c)


def determinant_kahan(M) -> float:
    """
    Kahan's 2x2 determinant with high relative accuracy.

    With w = fl(bc), e = w - bc is exact and f = ad - w is formed with
    a single extra rounding, so the cancellation in ad - bc happens
    between exact quantities. The products are split with
    :func:`two_product` instead of fused multiply-adds.
    """
    a, b, c, d = _entries_2x2(M)
    w, err = two_product(b, c)
    e = -err
    p, pe = two_product(a, d)
    s, t = two_sum(p, -w)
    f = s + (t + pe)
    return e + f


def sum_naive(x: Iterable[float]) -> float:
    accu = 0.0
    for xi in x:
        accu += xi
    return accu


def sum_kahan(x: Iterable[float]) -> float:
    """Kahan's compensated summation."""
    accu = 0.0
    error = 0.0
    for xi in x:
        temp = accu
        y = xi + error
        accu = temp + y
        error = (temp - accu) + y
    return accu


def sum_neumaier(x: Iterable[float]) -> float:
    """
    Kahan-Babuška-Neumaier summation: like :func:`sum_kahan` but also
    correct when a term is larger than the running sum.
    """
    accu = 0.0
    error = 0.0
    for xi in x:
        accu, t = two_sum(accu, float(xi))
        error += t
    return accu + error


@dataclass(frozen=True)
class DoubleWord:
    """Unevaluated sum high + low, |low| <= ulp(high) / 2."""

    high: float
    low: float = 0.0

    def __add__(self, other):
        if isinstance(other, (int, float)):
            other = DoubleWord(float(other))
        if not isinstance(other, DoubleWord):
            return NotImplemented
        sh, sl = two_sum(self.high, other.high)
        th, tl = two_sum(self.low, other.low)
        c = sl + th
        vh, vl = fast_two_sum(sh, c)
        w = tl + vl
        zh, zl = fast_two_sum(vh, w)
        return DoubleWord(zh, zl)

    __radd__ = __add__

    def __float__(self) -> float:
        return self.high


def sum_double_word(x: Iterable[float]) -> float:
    """Sum in double-word arithmetic and round the result once."""
    accu = DoubleWord(0.0)
    for xi in x:
        accu = accu + DoubleWord(float(xi))
    return accu.high


def generate_unit_sum(n: int, seed=None) -> np.ndarray:
    """
    Shuffled vector [x, -x, 1] with x_i = z_i · exp(10 w_i), z, w standard
    normal. It sums to exactly 1 but its entries span many orders of
    magnitude, so naive summation typically loses all correct digits.
    """
    if n < 0:
        raise ValueError("n must be non-negative.")
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n) * np.exp(10 * rng.standard_normal(n))
    x = np.concatenate([x, -x, [1.0]])
    return rng.permutation(x)
