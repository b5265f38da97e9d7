# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Tuple

import numpy as np

from .utils import scale_tol

logger = logging.getLogger(__name__)


def _working_dtype(A: np.ndarray):
    return np.result_type(A.dtype, float)


def qr(A: np.ndarray, reorth: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Modified Gram-Schmidt orthogonalization (QR decomposition)
    Parameters:
    A : ndarray
        Full column rank input matrix.
    reorth : bool
        Run a second Gram-Schmidt pass to recover orthogonality
    Returns:
    Q : ndarray
        Orthonormal column matrix
    R : ndarray
        Upper-triangular matrix
    """
    A = np.asarray(A)
    A = A.astype(_working_dtype(A), copy=True)
    m, n = A.shape
    tol = scale_tol(A)
    Q = np.zeros_like(A)
    R = np.zeros((n, n), dtype=A.dtype)

    def _mgs(V):
        for j in range(n):
            v = V[:, j].copy()
            for k in range(j):
                R[k, j] = np.vdot(Q[:, k], v)
                v -= R[k, j] * Q[:, k]
            R[j, j] = np.linalg.norm(v)
            if abs(R[j, j]) < tol:
                raise ValueError("Input vectors are linearly dependent")
            Q[:, j] = v / R[j, j]
        return Q.copy()

    Q = _mgs(A)
    if reorth:
        # second pass: Q = Q2 R2, so A = Q2 (R2 R1)
        R1 = R.copy()
        Q = _mgs(Q)
        R[:] = R @ R1

    return Q, R


def householder_qr(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the QR decomposition of an m-by-n matrix A using
    Householder transformations. (m ≥ n)

    A = QR
    H = I - 2 * w * w^H,  ‖w‖ = 1

    Columns that are already (numerically) zero below the diagonal are
    skipped, so rank-deficient input still yields orthonormal Q.

    Parameters
    ----------
    A : (m, n) ndarray, m >= n, real or complex

    Returns
    -------
    Q : (m, n) ndarray | orthonormal columns
    R : (n, n) ndarray | upper-triangular
    """
    A = np.asarray(A)
    A = A.astype(_working_dtype(A), copy=True)
    m, n = A.shape
    if m < n:
        raise ValueError("householder_qr requires m >= n.")
    tol = scale_tol(A)
    Q = np.eye(m, dtype=A.dtype)
    R = A.copy()

    for j in range(n):
        # ---- build the reflector for column j --------------------------------
        x = R[j:, j]
        norm_x = np.linalg.norm(x)
        if norm_x < tol:  # already zero
            logger.debug("householder_qr(): column %d is numerically zero", j)
            continue
        # w = x + phase(x0) ‖x‖ e₁
        phase = x[0] / abs(x[0]) if x[0] != 0 else 1.0
        w = x.copy()
        w[0] += phase * norm_x
        w /= np.linalg.norm(w)  # ‖w‖ = 1
        w = w.reshape(-1, 1)  # column

        # ---- apply H = I – 2 w wᴴ  to R (from the left) ----------------------
        R[j:, :] -= 2 * w @ (w.conj().T @ R[j:, :])
        # ---- accumulate Q = Q H (H = Hᴴ)  ------------------------------------
        Q[:, j:] -= 2 * (Q[:, j:] @ w) @ w.conj().T

    # economic Q (m × n)
    Q = Q[:, :n]

    # force exact upper-triangular shape / zero tiny noise
    R = R[:n, :n]
    R[np.tril_indices(n, -1)] = 0.0
    return Q, R


def ortho_qr(X: np.ndarray) -> np.ndarray:
    """
    Orthonormalise the columns of X, keeping only the Q factor of a thin
    QR factorisation. Q has as many columns as X, even when X is rank
    deficient.
    """
    X = np.asarray(X)
    if X.ndim == 1:
        X = X[:, None]
    Q, _R = householder_qr(X)
    return Q


def ortho_mgs(X: np.ndarray) -> np.ndarray:
    """Orthonormalise the columns of X with re-orthogonalised Gram-Schmidt."""
    X = np.asarray(X)
    if X.ndim == 1:
        X = X[:, None]
    Q, _R = qr(X, reorth=True)
    return Q


def random_hermitian(n, eigenvalues=None, seed=None) -> np.ndarray:
    """
    QR trick (random orthogonal × prescribed spectrum)

    Builds A = Q diag(eigenvalues) Qᵀ with Q the orthogonal factor of a
    standard normal matrix. If eigenvalues is None they are drawn uniformly
    from [-10, 10].

    Returns
    -------
    Symmetric matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    if eigenvalues is None:
        eigenvalues = rng.uniform(-10.0, 10.0, size=n)
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    if eigenvalues.shape != (n,):
        raise ValueError(f"eigenvalues must be shape ({n},).")
    Q, _R = householder_qr(rng.standard_normal((n, n)))
    A = (Q * eigenvalues) @ Q.T  # broadcast eigenvalues into columns
    # symmetrise away rounding noise
    return np.asarray(0.5 * (A + A.T))
