# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Spectra of self-adjoint operators
=================================

Two demonstrations built on the one-dimensional Schrödinger operator
H = -½Δ + V:

1. Discrete spectrum.  On (0, π) with Dirichlet conditions H has compact
   resolvent. Galerkin approximations in growing sine bases converge to its
   eigenvalues from above (Courant-Fischer), see
   :func:`galerkin_eigenvalues`.

2. Essential spectrum.  On the whole line -½Δ has no eigenvalues, yet every
   λ = k²/2 >= 0 is in its spectrum: the wave packets of
   :func:`weyl_sequence` are normalised, have residuals ‖(H - λ)φ_n‖ → 0
   and converge weakly to zero.
"""

import logging
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp
from scipy.integrate import quad

logger = logging.getLogger(__name__)


def sine_basis(x, n: int):
    """√(2/π) sin(nx): the n-th Dirichlet eigenfunction of -Δ on (0, π)."""
    return np.sqrt(2 / np.pi) * np.sin(n * x)


def gaussian_well(
    x, depth: float = -1000.0, width: float = np.pi / 16, centre: float = np.pi / 2
):
    """V(x) = depth · exp(-((x - centre) / width)²)."""
    return depth * np.exp(-(((x - centre) / width) ** 2))


def schrodinger_matrix(
    n: int, potential: Callable = gaussian_well, atol: float = 1e-6
) -> np.ndarray:
    """
    Galerkin matrix of H = -½Δ + V on (0, π) in the first n sine functions.

    The sine functions diagonalise the kinetic part exactly, ⟨s_i, -½Δ s_j⟩
    = δ_ij j²/2, so only the potential needs quadrature.

    Parameters
    ----------
    n : int
        Basis size, n >= 1.
    potential : callable
        V(x), real valued on (0, π).
    atol : float
        Absolute tolerance passed to ``scipy.integrate.quad``.

    Returns
    -------
    H : (n, n) ndarray, real symmetric
    """
    if n < 1:
        raise ValueError("Basis size must be at least 1.")
    j = np.arange(1, n + 1)
    H = np.diag(j**2 / 2.0)
    for a in range(1, n + 1):
        for b in range(a, n + 1):
            value, _err = quad(
                lambda x: sine_basis(x, a) * potential(x) * sine_basis(x, b),
                0.0,
                np.pi,
                epsabs=atol,
                limit=200,
            )
            H[a - 1, b - 1] += value
            if a != b:
                H[b - 1, a - 1] += value
    logger.debug("schrodinger_matrix(): assembled %d x %d", n, n)
    return H


def galerkin_eigenvalues(
    sizes: Sequence[int], potential: Callable = gaussian_well, atol: float = 1e-6
) -> np.ndarray:
    """
    Galerkin eigenvalues for each basis size in ``sizes``.

    The sine bases are nested, so the matrix is assembled once for the
    largest size and its leading blocks are diagonalised.

    Returns
    -------
    table : (max(sizes), len(sizes)) ndarray
        Column i holds the sizes[i] eigenvalues in ascending order, padded
        with NaN.
    """
    sizes = [int(s) for s in sizes]
    if not sizes or min(sizes) < 1:
        raise ValueError("sizes must be a non-empty sequence of positive integers.")
    nmax = max(sizes)
    H = schrodinger_matrix(nmax, potential, atol)

    table = np.full((nmax, len(sizes)), np.nan)
    for i, n in enumerate(sizes):
        table[:n, i] = np.linalg.eigvalsh(H[:n, :n])
    return table


def plane_wave_cos_hamiltonian(Ecut: float) -> sp.csr_matrix:
    """
    Plane-wave discretisation of H = -½Δ + cos(x) on [0, 2π], periodic.

    The basis is e^{iGx}, |G| <= Gmax = ⌊√(2 Ecut)⌋. The kinetic part is
    diagonal, G²/2, and cos(x) = (e^{ix} + e^{-ix}) / 2 couples neighbouring
    G with ½ on the off-diagonals.
    """
    if Ecut < 0:
        raise ValueError("Ecut must be non-negative.")
    Gmax = int(np.floor(np.sqrt(2 * Ecut)))
    G = np.arange(-Gmax, Gmax + 1)
    off = np.full(G.size - 1, 0.5)
    return sp.diags([off, G**2 / 2.0, off], [-1, 0, 1], format="csr")


def _grid(scales, length: Optional[float], points: int) -> Tuple[np.ndarray, float]:
    if length is None:
        length = 40.0 * max(scales)
    x = np.linspace(-length / 2, length / 2, points, endpoint=False)
    return x, x[1] - x[0]


def weyl_sequence(
    k: float,
    scales: Sequence[float] = (1, 2, 4, 8, 16, 32),
    length: Optional[float] = None,
    points: int = 2**15,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gaussian wave packets φ_n(x) = n^{-1/2} χ(x/n) e^{ikx}, χ(x) = e^{-x²/2},
    sampled on a periodic grid of ``points`` nodes over ``length``.

    Each packet is normalised in the discrete L² norm. As n grows they
    spread out, so they have no convergent subsequence while
    ‖(-½Δ - k²/2) φ_n‖ → 0.

    Returns
    -------
    x : (points,) ndarray
    phi : (len(scales), points) complex ndarray
    """
    scales = np.asarray(scales, dtype=float)
    if scales.ndim != 1 or scales.size == 0 or np.any(scales <= 0):
        raise ValueError("scales must be a non-empty sequence of positive numbers.")
    x, dx = _grid(scales, length, points)
    phi = np.exp(-((x[None, :] / scales[:, None]) ** 2) / 2) * np.exp(1j * k * x)
    phi /= np.sqrt(np.sum(np.abs(phi) ** 2, axis=1, keepdims=True) * dx)
    return x, phi


def weyl_residuals(
    k: float,
    scales: Sequence[float] = (1, 2, 4, 8, 16, 32),
    length: Optional[float] = None,
    points: int = 2**15,
    test_function: Optional[Callable] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Residual norms ‖(H - k²/2) φ_n‖ for H = -½Δ applied through the FFT,
    and overlaps |⟨g, φ_n⟩| with a fixed function g (default e^{-x²/2}).

    The residuals decay like 1/n and the overlaps like n^{-1/2}.
    """
    x, phi = weyl_sequence(k, scales, length, points)
    dx = x[1] - x[0]
    xi = 2 * np.pi * np.fft.fftfreq(x.size, d=dx)
    Hphi = np.fft.ifft(0.5 * xi**2 * np.fft.fft(phi, axis=1), axis=1)

    residuals = np.sqrt(np.sum(np.abs(Hphi - 0.5 * k**2 * phi) ** 2, axis=1) * dx)
    g = np.exp(-(x**2) / 2) if test_function is None else test_function(x)
    overlaps = np.abs(np.sum(np.conj(g) * phi, axis=1) * dx)
    for n, res, ov in zip(scales, residuals, overlaps):
        logger.debug("weyl_residuals(): n=%g residual %8.4g overlap %8.4g", n, res, ov)
    return residuals, overlaps
