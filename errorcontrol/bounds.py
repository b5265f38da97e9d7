# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
A-posteriori error bounds for approximate eigenpairs of Hermitian matrices.

Given approximations (λ̃_i, x̃_i) with ‖x̃_i‖ = 1 and residuals
r_i = A x̃_i - λ̃_i x̃_i:

- Bauer-Fike: some eigenvalue lies within ‖r_i‖ of λ̃_i.
- Kato-Temple: if the closest eigenvalue λ is separated from the rest of
  the spectrum by δ, then |λ̃_i - λ| <= ‖r_i‖² / δ.
- Gershgorin: every eigenvalue lies in a disc around a diagonal entry.
"""

from typing import Tuple

import numpy as np


def residual_norms(A, eigenvalues, eigenvectors) -> np.ndarray:
    """Columnwise ‖A x̃_i - λ̃_i x̃_i‖ for eigenvectors stored as columns."""
    X = np.asarray(eigenvectors)
    if X.ndim == 1:
        X = X[:, None]
    lam = np.atleast_1d(np.asarray(eigenvalues))
    if lam.shape != (X.shape[1],):
        raise ValueError("Need one eigenvalue per eigenvector column.")
    return np.linalg.norm(A @ X - X * lam, axis=0)


def gershgorin_discs(A) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gershgorin discs of a square matrix.

    Returns
    -------
    centres : (n,) ndarray, the diagonal of A
    radii : (n,) ndarray, off-diagonal absolute row sums
    """
    A = np.asarray(A)
    m, n = A.shape
    if m != n:
        raise ValueError("Gershgorin discs are only defined for square matrices.")
    centres = np.diag(A).copy()
    radii = np.sum(np.abs(A), axis=1) - np.abs(centres)
    return centres, radii


def bauer_fike_bounds(A, eigenvalues, eigenvectors) -> np.ndarray:
    """
    Bauer-Fike radii for a Hermitian A: the residual norms of the
    normalised approximate eigenvectors.
    """
    X = np.asarray(eigenvectors)
    if X.ndim == 1:
        X = X[:, None]
    X = X / np.linalg.norm(X, axis=0)
    return residual_norms(A, eigenvalues, X)


def kato_temple_bounds(eigenvalues, residuals) -> np.ndarray:
    """
    Kato-Temple bounds ‖r_i‖² / δ_i for a set of approximate eigenvalues
    sorted in ascending order.

    The gap δ_i is estimated from the neighbouring approximations: the
    distance to λ̃_{i±1} shrunk by that neighbour's residual norm (its
    Bauer-Fike radius), clipped at zero. A zero gap gives an infinite
    bound, i.e. no information.
    """
    lam = np.asarray(eigenvalues, dtype=float)
    res = np.asarray(residuals, dtype=float)
    if lam.shape != res.shape or lam.ndim != 1:
        raise ValueError("eigenvalues and residuals must be 1-D of equal length.")
    if np.any(np.diff(lam) < 0):
        raise ValueError("eigenvalues must be sorted in ascending order.")

    n = lam.size
    delta = np.empty(n)
    for i in range(n):
        delta_left = delta_right = np.inf
        if i > 0:
            delta_left = abs(lam[i] - lam[i - 1]) - res[i - 1]
        if i < n - 1:
            delta_right = abs(lam[i] - lam[i + 1]) - res[i + 1]
        delta[i] = max(0.0, min(delta_left, delta_right))
    # a lone value has no neighbour to estimate the gap from
    delta[np.isinf(delta)] = 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        bounds = res**2 / delta
    # zero residual over zero gap: still no information
    bounds[delta == 0] = np.inf
    return bounds


def temple_interval(
    eigenvalue: float, residual_norm: float, alpha: float, beta: float
) -> Tuple[float, float]:
    """
    Temple's inequality. If α < λ̃ < β and (α, β) contains exactly one
    eigenvalue λ of A, then

        λ̃ - ‖r‖² / (β - λ̃) <= λ <= λ̃ + ‖r‖² / (λ̃ - α)
    """
    if not alpha < eigenvalue < beta:
        raise ValueError("Temple's inequality needs alpha < eigenvalue < beta.")
    r2 = residual_norm**2
    return eigenvalue - r2 / (beta - eigenvalue), eigenvalue + r2 / (eigenvalue - alpha)
