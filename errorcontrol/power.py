# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Single-vector iterations: power method, spectral transformations
(shift-and-invert) and Rayleigh quotient iteration.
"""

import logging
import warnings
from typing import Optional

import numpy as np
import scipy.sparse as sp
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve
from scipy.sparse.linalg import LinearOperator, spsolve, splu

from .exceptions import warn_not_converged
from .results import EigenpairResult
from .utils import as_operator, check_maxiter, start_vector

logger = logging.getLogger(__name__)


def rayleigh_quotient(x: np.ndarray, Ax: np.ndarray) -> float:
    """R_A(x) = xᴴ A x / xᴴ x, given x and the product A x."""
    return float(np.real(np.vdot(x, Ax) / np.vdot(x, x)))


def power_method(
    A,
    x0: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> EigenpairResult:
    """
    Estimate the largest-magnitude eigenvalue and its eigenvector
    using the Power Iteration method.

    Each step normalises x, forms the Rayleigh quotient λ = xᴴAx and the
    residual r = Ax - λx, and stops when ‖r‖ < tol. Otherwise x ← Ax.

    Parameters
    ----------
    A : (n,n) ndarray, sparse matrix or LinearOperator
    x0 : (n,) ndarray or None
        Optional initial guess. If None, random normal is used.
    tol : float
        Convergence tolerance on the residual norm.
    maxiter : int
        Maximum number of iterations.
    verbose : bool
        Log every iteration at INFO (else DEBUG) and warn on
        non-convergence.
    seed : int or None
        Seed for the random initial guess.

    Returns
    -------
    EigenpairResult
    """
    A = as_operator(A)
    n = A.shape[0]
    check_maxiter(maxiter)
    x = start_vector(n, x0, seed, dtype=np.result_type(A.dtype, float))
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.nan
    Ax = None
    for i in range(1, maxiter + 1):
        if i > 1:
            x = Ax
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = rayleigh_quotient(x, Ax)
        norm_r = np.linalg.norm(Ax - lam * x)

        log("%3i %8.4g %8.4g", i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break

    converged = bool(residual_norms[-1] < tol)
    if not converged and verbose:
        warn_not_converged("Power method", maxiter, residual_norms[-1], tol)

    return EigenpairResult(
        lam, x, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def shift_invert_operator(A, sigma: float) -> LinearOperator:
    """
    Factorise A - σI once and return (A - σI)^{-1} as a LinearOperator,
    whose application is a pair of triangular solves.

    If (λ, x) is an eigenpair of A then (1 / (λ - σ), x) is an eigenpair of
    the returned operator.

    Raises
    ------
    numpy.linalg.LinAlgError : if A - σI is singular.
    ValueError : if A is a LinearOperator rather than an explicit matrix.
    """
    if isinstance(A, LinearOperator):
        raise ValueError("Shift-and-invert needs an explicit matrix to factorise.")
    if sp.issparse(A):
        n, m = A.shape
        if n != m:
            raise ValueError("Shift-and-invert requires a square matrix.")
        shifted = (A - sigma * sp.identity(n, dtype=A.dtype)).tocsc()
        try:
            lu = splu(shifted)
        except RuntimeError as e:  # splu signals exact singularity this way
            raise np.linalg.LinAlgError(str(e)) from e
        solve = lu.solve
        dtype = np.result_type(A.dtype, float)
    else:
        A = np.asarray(A)
        n, m = A.shape
        if n != m:
            raise ValueError("Shift-and-invert requires a square matrix.")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", LinAlgWarning)
            lu, piv = lu_factor(A - sigma * np.eye(n, dtype=A.dtype))
        if np.any(np.diag(lu) == 0):
            raise np.linalg.LinAlgError("A - sigma*I is singular.")

        def solve(b):
            return lu_solve((lu, piv), b)

        dtype = lu.dtype

    return LinearOperator((n, n), matvec=solve, matmat=solve, dtype=dtype)


def shift_invert_power_method(A, sigma: float, **kwargs) -> EigenpairResult:
    """
    Power method on (A - σI)^{-1}, converging to the eigenpair of A whose
    eigenvalue is closest to σ.

    The histories refer to the transformed operator; the returned
    eigenvalue is the Rayleigh quotient of A itself at the final vector.
    """
    result = power_method(shift_invert_operator(A, sigma), **kwargs)
    x = result.eigenvector
    lam = rayleigh_quotient(x, as_operator(A) @ x)
    return result._replace(eigenvalue=lam)


def inverse_power_method(A, **kwargs) -> EigenpairResult:
    """Power method on A^{-1}: the smallest-magnitude eigenpair of A."""
    return shift_invert_power_method(A, 0.0, **kwargs)


def rayleigh_quotient_iteration(
    A,
    x0: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    verbose: bool = True,
    seed=None,
) -> EigenpairResult:
    """
    Rayleigh quotient iteration (RQI).

    Same loop as the power method, but the update is the shift-and-invert
    step x ← (A - λI)^{-1} x with the current Rayleigh quotient λ as the
    shift. The shifted matrix changes every step and is refactorised every
    iteration; local convergence is cubic.

    A must be an explicit dense array or SciPy sparse matrix.

    Raises
    ------
    numpy.linalg.LinAlgError : if a shift hits an eigenvalue exactly.
    """
    if isinstance(A, LinearOperator):
        raise ValueError("RQI needs an explicit matrix to factorise.")
    sparse = sp.issparse(A)
    if not sparse:
        A = np.asarray(A)
    n, m = A.shape
    if n != m:
        raise ValueError("Rayleigh quotient iteration requires a square matrix.")
    check_maxiter(maxiter)
    x = start_vector(n, x0, seed, dtype=np.result_type(A.dtype, float))
    identity = sp.identity(n, format="csc") if sparse else np.eye(n)
    log = logger.info if verbose else logger.debug

    eigenvalues = []
    residual_norms = []
    lam = np.nan
    for i in range(1, maxiter + 1):
        if i > 1:
            # Note: in the power method this was x = Ax
            if sparse:
                x = spsolve((A - lam * identity).tocsc(), x)
            else:
                x = np.linalg.solve(A - lam * identity, x)
        x = x / np.linalg.norm(x)
        Ax = A @ x
        lam = rayleigh_quotient(x, Ax)
        norm_r = np.linalg.norm(Ax - lam * x)

        log("%3i %8.4g %8.4g", i, lam, norm_r)
        eigenvalues.append(lam)
        residual_norms.append(norm_r)
        if norm_r < tol:
            break

    converged = bool(residual_norms[-1] < tol)
    if not converged and verbose:
        warn_not_converged("RQI", maxiter, residual_norms[-1], tol)

    return EigenpairResult(
        lam, x, converged, np.array(eigenvalues), np.array(residual_norms)
    )


def power_method_rate(eigenvalues) -> float:
    """
    Expected linear convergence rate |λ_{J-1} / λ_J| of the power method,
    where λ_J and λ_{J-1} are the two largest-magnitude eigenvalues.
    """
    mags = np.sort(np.abs(np.asarray(eigenvalues)))
    if mags.size < 2:
        raise ValueError("Need at least two eigenvalues.")
    return float(mags[-2] / mags[-1])
