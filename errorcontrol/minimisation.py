# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Minimisation methods for the smallest eigenpairs of a Hermitian operator.

All of them minimise the Rayleigh quotient R_A(x) = xᴴAx / xᴴx, whose
gradient 2 (Ax - R_A(x) x) / ‖x‖² points along the residual.
"""

import logging
import warnings
from typing import Callable, Optional

import numpy as np
from scipy.sparse.linalg import lobpcg as _scipy_lobpcg

from .exceptions import warn_not_converged
from .power import rayleigh_quotient
from .qr import ortho_qr
from .results import EigenpairResult, SubspaceResult
from .subspace import rayleigh_ritz
from .utils import (
    as_operator,
    as_preconditioner,
    check_maxiter,
    start_block,
    start_vector,
)

logger = logging.getLogger(__name__)


def preconditioned_gradient_descent(
    A,
    x0: Optional[np.ndarray] = None,
    alpha: float = 1.0,
    Pinv=None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> EigenpairResult:
    """
    Preconditioned gradient descent on the Rayleigh quotient:

        x ← x - α P^{-1} (A x - R_A(x) x)

    Parameters
    ----------
    alpha : float
        Fixed step size.
    Pinv : None, (n,) ndarray, (n,n) array or LinearOperator
        Inverse preconditioner. None is the identity, a 1-D array is read
        as the diagonal of P^{-1}.

    With Pinv = A^{-1} and α = 1 this reduces to a scaled inverse power
    method.
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    P = as_preconditioner(Pinv, n)
    x = start_vector(n, x0, seed, dtype=np.result_type(A.dtype, float))
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.nan
    r = None
    for i in range(1, maxiter + 1):
        if i > 1:
            # precondition the residual and move along the direction
            x = x - alpha * (P @ r)
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = rayleigh_quotient(x, Ax)
        r = Ax - lam * x  # residual
        norm_r = np.linalg.norm(r)

        log("%3i %8.4g %8.4g", i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break

    converged = bool(residual_norms[-1] < tol)
    if not converged and verbose:
        warn_not_converged("PGD", maxiter, residual_norms[-1], tol)

    return EigenpairResult(
        lam, x, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def lopcg(
    A,
    x0: Optional[np.ndarray] = None,
    ortho: Callable[[np.ndarray], np.ndarray] = ortho_qr,
    Pinv=None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> EigenpairResult:
    """
    Locally optimal preconditioned conjugate gradient (LOPCG).

    Each step is a Rayleigh-Ritz projection onto span{x, p, P^{-1} r},
    with p = x_prev - x the last update, keeping the smallest Ritz pair.
    This is the line search of PGD extended by the previous direction;
    using p instead of x_prev keeps the basis well conditioned as the
    iterates converge.
    """
    A = as_operator(A)
    n = A.shape[0]
    if n < 3:
        raise ValueError("LOPCG needs a problem of dimension at least 3.")
    check_maxiter(maxiter)
    P = as_preconditioner(Pinv, n)
    x = start_vector(n, x0, seed, dtype=np.result_type(A.dtype, float))
    x = x / np.linalg.norm(x)
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.nan
    p = None
    r = None
    for i in range(1, maxiter + 1):
        if i > 1:
            Z = np.column_stack([x, p, r])
        else:
            Z = x[:, None]
        Z = ortho(Z)

        # Rayleigh-Ritz step, keep only the smallest pair. The Ritz vector
        # is the optimal combination of x, p and the preconditioned residual.
        ritz_values, ritz_vectors, A_ritz_vectors = rayleigh_ritz(A, Z)
        lam = float(ritz_values[0])
        new_x = ritz_vectors[:, 0]

        r = A_ritz_vectors[:, 0] - lam * new_x
        norm_r = np.linalg.norm(r)
        log("%3i %8.4g %8.4g", i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            x = new_x
            break

        # precondition residual, update x and p
        r = P @ r
        p = x - new_x
        x = new_x

    converged = bool(residual_norms[-1] < tol)
    if not converged and verbose:
        warn_not_converged("LOPCG", maxiter, residual_norms[-1], tol)

    return EigenpairResult(
        lam, x, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def lobpcg(
    A,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    ortho: Callable[[np.ndarray], np.ndarray] = ortho_qr,
    Pinv=None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> SubspaceResult:
    """
    Locally optimal block preconditioned conjugate gradient (LOBPCG).

    Block version of :func:`lopcg`: Rayleigh-Ritz on span{X, P, P^{-1} R}
    keeping the k smallest Ritz pairs. This plain version is meant for
    teaching; it does not guard against loss of orthogonality the way
    library implementations do (see :func:`lobpcg_scipy`).
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    X = start_block(n, k, X0, seed, dtype=np.result_type(A.dtype, float))
    m = X.shape[1]  # block size
    if 3 * m > n:
        raise ValueError(f"LOBPCG needs 3 * block size <= {n}, got block size {m}.")
    P = as_preconditioner(Pinv, n)
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.full(m, np.nan)
    Pdir = None
    R = None
    for i in range(1, maxiter + 1):
        if i > 1:
            Z = np.hstack([X, Pdir, R])
        else:
            Z = X
        Z = ortho(Z)

        # Rayleigh-Ritz step to get the smallest eigenvalues
        ritz_values, ritz_vectors, A_ritz_vectors = rayleigh_ritz(A, Z)
        lam = ritz_values[:m]
        new_X = ritz_vectors[:, :m]

        R = A_ritz_vectors[:, :m] - new_X * lam
        norm_r = np.linalg.norm(R, axis=0)
        log("%3i %8.4g %8.4g", i, lam[-1], norm_r[-1])
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if np.max(norm_r) < tol:
            X = new_X
            break

        # precondition residual, update X and P
        R = P @ R
        Pdir = X - new_X
        X = new_X

    converged = bool(np.max(residual_norms[-1]) < tol)
    if not converged and verbose:
        warn_not_converged("LOBPCG", maxiter, np.max(residual_norms[-1]), tol)

    return SubspaceResult(
        lam, X, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def lobpcg_scipy(
    A,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    Pinv=None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> SubspaceResult:
    """
    Smallest k eigenpairs with SciPy's LOBPCG, repackaged as a
    SubspaceResult so it can be compared with :func:`lobpcg`.

    The histories end with the eigenvalues and residual norms of the
    returned pairs. SciPy's own non-convergence warning is replaced by
    ConvergenceWarning.
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    X = start_block(n, k, X0, seed)
    M = None if Pinv is None else as_preconditioner(Pinv, n)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        output = _scipy_lobpcg(
            A,
            X,
            M=M,
            tol=tol,
            maxiter=maxiter,
            largest=False,
            verbosityLevel=0,
            retLambdaHistory=True,
            retResidualNormsHistory=True,
        )

    # SciPy solves small problems (n < 5k) densely and returns no histories
    if len(output) == 2:
        lam, vecs = output
        lam_hist, res_hist = [], []
    else:
        lam, vecs, lam_hist, res_hist = output

    order = np.argsort(lam)
    lam = np.asarray(lam)[order]
    vecs = np.asarray(vecs)[:, order]
    # final residuals of the returned pairs
    final = np.linalg.norm(A @ vecs - vecs * lam, axis=0)

    eigenvalue_history = []
    residual_history = []
    for lh, rh in zip(lam_hist, res_hist):
        row_order = np.argsort(lh)
        eigenvalue_history.append(np.asarray(lh)[row_order])
        residual_history.append(np.asarray(rh)[row_order])
    eigenvalue_history.append(lam)
    residual_history.append(final)
    eigenvalue_history = np.array(eigenvalue_history)
    residual_history = np.array(residual_history)

    log = logger.info if verbose else logger.debug
    for i, (lh, rh) in enumerate(zip(eigenvalue_history, residual_history), 1):
        log("%3i %8.4g %8.4g", i, lh[-1], rh[-1])

    converged = bool(np.max(final) < tol)
    if not converged and verbose:
        warn_not_converged("SciPy LOBPCG", maxiter, np.max(final), tol)

    return SubspaceResult(lam, vecs, converged, eigenvalue_history, residual_history)
