# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Side-by-side comparison of the eigensolvers on diagonal test problems
with tunable gaps at the bottom of the spectrum.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
import scipy.sparse as sp

from .minimisation import lobpcg, lobpcg_scipy, lopcg, preconditioned_gradient_descent
from .power import (
    inverse_power_method,
    rayleigh_quotient_iteration,
    shift_invert_operator,
)
from .results import SubspaceResult
from .subspace import projected_subspace_iteration, subspace_iteration
from .utils import start_block, start_vector

logger = logging.getLogger(__name__)

DEFAULT_NOISE = 10**-2.5


def gapped_diagonal_problem(
    n: int = 100, gaps: Sequence[float] = (10.0,), seed=None
) -> sp.csr_matrix:
    """
    Sparse diagonal matrix whose smallest eigenvalues are

        1, 1 + g₁, 1 + g₁ + g₂, ...

    followed by n - len(gaps) - 1 eigenvalues around (last + 10).
    """
    gaps = np.asarray(gaps, dtype=float)
    if gaps.ndim != 1 or np.any(gaps <= 0):
        raise ValueError("gaps must be a 1-D sequence of positive numbers.")
    m = gaps.size + 1
    if n <= m:
        raise ValueError(f"n must exceed the number of gapped eigenvalues ({m}).")
    rng = np.random.default_rng(seed)
    low = 1.0 + np.concatenate([[0.0], np.cumsum(gaps)])
    high = low[-1] + 10.0 + rng.standard_normal(n - m)
    return sp.diags(np.concatenate([low, high]), format="csr")


def noisy_inverse_diagonal(
    M, noise_level: float = DEFAULT_NOISE, seed=None
) -> np.ndarray:
    """1 / diag(M) perturbed by noise_level · N(0, 1), as a diagonal preconditioner."""
    d = np.asarray(M.diagonal(), dtype=float)
    if np.any(d == 0):
        raise ValueError("M has a zero on its diagonal.")
    rng = np.random.default_rng(seed)
    return 1.0 / d + noise_level * rng.standard_normal(d.size)


def run_single_vector_methods(
    M,
    x0: Optional[np.ndarray] = None,
    Pinv_noisy: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    seed=None,
) -> Dict[tuple, object]:
    """
    Run every single-vector method from the same start vector.

    Returns a dict keyed by (method, preconditioner) with EigenpairResult
    values. PGD and LOPCG run once with the exact inverse diagonal and once
    with Pinv_noisy.
    """
    n = M.shape[0]
    x0 = start_vector(n, x0, seed)
    perfect = 1.0 / np.asarray(M.diagonal(), dtype=float)
    if Pinv_noisy is None:
        Pinv_noisy = noisy_inverse_diagonal(M, seed=seed)
    options = dict(x0=x0, tol=tol, maxiter=maxiter, verbose=False)

    results = {}
    results["inverse power", "none"] = inverse_power_method(M, **options)
    results["RQI", "none"] = rayleigh_quotient_iteration(M, **options)
    for name, method in (("PGD", preconditioned_gradient_descent), ("LOPCG", lopcg)):
        results[name, "perfect"] = method(M, Pinv=perfect, **options)
        results[name, "noisy"] = method(M, Pinv=Pinv_noisy, **options)

    for (name, precon), result in results.items():
        logger.debug(
            "%s (%s): %d iterations, residual %.3g",
            name,
            precon,
            result.iterations,
            result.residual_norm,
        )
    return results


def results_table(results: Dict[tuple, object]) -> pd.DataFrame:
    """
    One row per run: method, preconditioner, iterations, converged, the
    eigenvalue (or lambda_1 .. lambda_k for block results) and the final
    residual norm.
    """
    rows = []
    for (name, precon), r in results.items():
        row = {
            "method": name,
            "preconditioner": precon,
            "iterations": r.iterations,
            "converged": r.converged,
        }
        if isinstance(r, SubspaceResult):
            for j, lam in enumerate(r.eigenvalues, 1):
                row[f"lambda_{j}"] = lam
        else:
            row["eigenvalue"] = r.eigenvalue
        row["residual"] = r.residual_norm
        rows.append(row)
    return pd.DataFrame(rows)


def compare_single_vector_methods(
    M,
    x0: Optional[np.ndarray] = None,
    Pinv_noisy: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    seed=None,
) -> pd.DataFrame:
    """Tabulate :func:`run_single_vector_methods`, one row per run."""
    results = run_single_vector_methods(M, x0, Pinv_noisy, tol, maxiter, seed)
    return results_table(results)


def run_block_methods(
    M,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    Pinv_noisy: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    seed=None,
) -> Dict[tuple, object]:
    """
    Run every block method from the same start block.

    Subspace iteration targets the largest eigenvalues, so both subspace
    variants run on M⁻¹ and their eigenvalues are mapped back through
    λ ↦ 1/λ (sorted ascending). The residual histories stay those of M⁻¹.
    """
    n = M.shape[0]
    X0 = start_block(n, k, X0, seed)
    perfect = 1.0 / np.asarray(M.diagonal(), dtype=float)
    if Pinv_noisy is None:
        Pinv_noisy = noisy_inverse_diagonal(M, seed=seed)
    options = dict(X0=X0, tol=tol, maxiter=maxiter, verbose=False)

    results = {}
    Minv = shift_invert_operator(M, 0.0)
    for name, method in (
        ("subspace", subspace_iteration),
        ("projected subspace", projected_subspace_iteration),
    ):
        r = method(Minv, **options)
        order = np.argsort(1.0 / r.eigenvalues)
        results[name, "none"] = r._replace(
            eigenvalues=1.0 / r.eigenvalues[order],
            eigenvectors=r.eigenvectors[:, order],
        )
    for name, method in (("LOBPCG", lobpcg), ("SciPy LOBPCG", lobpcg_scipy)):
        results[name, "perfect"] = method(M, Pinv=perfect, **options)
        results[name, "noisy"] = method(M, Pinv=Pinv_noisy, **options)

    for (name, precon), result in results.items():
        logger.debug(
            "%s (%s): %d iterations, residual %.3g",
            name,
            precon,
            result.iterations,
            result.residual_norm,
        )
    return results


def compare_block_methods(
    M,
    X0: Optional[np.ndarray] = None,
    k: int = 2,
    Pinv_noisy: Optional[np.ndarray] = None,
    tol: float = 1e-6,
    maxiter: int = 100,
    seed=None,
) -> pd.DataFrame:
    """Tabulate :func:`run_block_methods`, one row per run and λ_j columns."""
    results = run_block_methods(M, X0, k, Pinv_noisy, tol, maxiter, seed)
    return results_table(results)
