# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Subspace methods: iterate a block of vectors, re-orthogonalised by QR in
every step, optionally combined with a Rayleigh-Ritz projection.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from .exceptions import warn_not_converged
from .qr import ortho_qr
from .results import SubspaceResult
from .utils import as_operator, check_maxiter, start_block

logger = logging.getLogger(__name__)


def rayleigh_ritz(
    A, V: np.ndarray, AV: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Rayleigh-Ritz procedure on the subspace spanned by the orthonormal
    columns of V.

    Solves the projected problem (Vᴴ A V) y = λ y densely; the Ritz pairs
    (λ_i, V y_i) satisfy the Galerkin condition A x - λ x ⟂ span(V).

    Returns
    -------
    ritz_values : (m,) ndarray, ascending
    ritz_vectors : (n, m) ndarray, V @ Y
    A_ritz_vectors : (n, m) ndarray, A @ V @ Y

    AV may be passed in when A @ V is already available.
    """
    V = np.asarray(V)
    if AV is None:
        AV = as_operator(A) @ V
    H = V.conj().T @ AV
    H = 0.5 * (H + H.conj().T)  # Hermitian part, removes rounding noise
    ritz_values, Y = np.linalg.eigh(H)
    return ritz_values, V @ Y, AV @ Y


def subspace_iteration(
    A,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    ortho: Callable[[np.ndarray], np.ndarray] = ortho_qr,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> SubspaceResult:
    """
    Power iteration on k vectors at once, orthogonalised in every step.

    Each column is treated separately: λ_j = x_jᴴ A x_j and r_j =
    A x_j - λ_j x_j. Iteration stops when all residual norms are below tol.
    Column j converges at rate |λ_{j+1} / λ_j| (eigenvalues by decreasing
    magnitude).
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    X = start_block(n, k, X0, seed, dtype=np.result_type(A.dtype, float))
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.full(X.shape[1], np.nan)
    Q = X
    for i in range(1, maxiter + 1):
        Q = ortho(X)

        AX = A @ Q
        # Rayleigh quotients of all columns, diag(Qᴴ A Q)
        lam = np.real(np.sum(Q.conj() * AX, axis=0))
        eigenvalues.append(lam)

        residuals = AX - Q * lam
        norm_r = np.linalg.norm(residuals, axis=0)
        residual_norms.append(norm_r)

        log("%3i %8.4g %8.4g", i, lam[-1], norm_r[-1])
        if np.max(norm_r) < tol:
            break

        X = AX

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged and verbose:
        warn_not_converged(
            "Subspace iteration", maxiter, np.max(residual_norms[-1]), tol
        )

    return SubspaceResult(
        lam, Q, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def projected_subspace_iteration(
    A,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    ortho: Callable[[np.ndarray], np.ndarray] = ortho_qr,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> SubspaceResult:
    """
    Subspace iteration with a Rayleigh-Ritz step on the iterated subspace.

    Instead of one Rayleigh quotient per column the full projected
    eigenproblem Vᴴ A V is solved, so the iterated vectors may mix. Ritz
    values are returned in ascending order.
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    V = start_block(n, k, X0, seed, dtype=np.result_type(A.dtype, float))
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.full(V.shape[1], np.nan)
    X = V
    for i in range(1, maxiter + 1):
        V = ortho(V)

        AV = A @ V
        # This is the Rayleigh-Ritz step
        lam, X, AX = rayleigh_ritz(A, V, AV)
        eigenvalues.append(lam)

        residuals = AX - X * lam
        norm_r = np.linalg.norm(residuals, axis=0)
        residual_norms.append(norm_r)

        log("%3i %8.4g %8.4g", i, lam[-1], norm_r[-1])
        if np.max(norm_r) < tol:
            break

        V = AV

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged and verbose:
        warn_not_converged(
            "Projected subspace iteration", maxiter, np.max(residual_norms[-1]), tol
        )

    return SubspaceResult(
        lam, X, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def subspace_rates(eigenvalues, k: int = 2) -> np.ndarray:
    """
    Expected convergence rates |λ_{j+1} / λ_j|, j = 1..k, of subspace
    iteration, with eigenvalues ordered by decreasing magnitude.
    """
    mags = np.sort(np.abs(np.asarray(eigenvalues)))[::-1]
    if mags.size < k + 1:
        raise ValueError(f"Need at least {k + 1} eigenvalues.")
    return mags[1 : k + 1] / mags[:k]
