# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional

import numpy as np
from scipy.sparse import diags, identity
from scipy.sparse.linalg import LinearOperator, aslinearoperator

EPS: float = 1e-12


def scale_tol(A) -> float:
    """Return an absolute tolerance scaled to the matrix magnitude."""
    return EPS * max(1.0, np.linalg.norm(np.asarray(A), ord=np.inf))


def as_operator(A) -> LinearOperator:
    """
    Wrap a dense array, a SciPy sparse matrix or a LinearOperator so that
    ``A @ x`` and ``A @ X`` work uniformly.

    Raises
    ------
    ValueError : if A is not square.
    """
    op = aslinearoperator(A)
    m, n = op.shape
    if m != n:
        raise ValueError(f"Operator must be square, got shape {op.shape}.")
    return op


def as_preconditioner(Pinv, n: int) -> LinearOperator:
    """
    Wrap a preconditioner as a LinearOperator.

    None means the identity, a 1-D array is read as the diagonal of P^{-1}
    and anything else is wrapped by ``aslinearoperator``.
    """
    if Pinv is None:
        return aslinearoperator(identity(n))
    if isinstance(Pinv, np.ndarray) and Pinv.ndim == 1:
        if Pinv.shape != (n,):
            raise ValueError(f"Diagonal preconditioner must have shape ({n},).")
        return aslinearoperator(diags(Pinv))
    P = aslinearoperator(Pinv)
    if P.shape != (n, n):
        raise ValueError(f"Preconditioner must have shape ({n}, {n}).")
    return P


def start_vector(
    n: int, x0: Optional[np.ndarray] = None, seed=None, dtype=float
) -> np.ndarray:
    """Copy and validate x0, or draw a standard normal vector of length n."""
    if x0 is None:
        rng = np.random.default_rng(seed)
        return rng.standard_normal(n).astype(dtype)

    x = np.array(x0, dtype=np.result_type(x0, dtype), copy=True)
    if x.shape != (n,):
        raise ValueError(f"x0 must be shape ({n},).")
    if np.linalg.norm(x) == 0:
        raise ValueError("x0 must be non-zero.")
    return x


def start_block(
    n: int, k: int = 2, X0: Optional[np.ndarray] = None, seed=None, dtype=float
) -> np.ndarray:
    """Copy and validate X0, or draw a standard normal (n, k) block."""
    if X0 is None:
        if not 1 <= k <= n:
            raise ValueError(f"Block size must satisfy 1 <= k <= {n}, got {k}.")
        rng = np.random.default_rng(seed)
        return rng.standard_normal((n, k)).astype(dtype)

    X = np.array(X0, dtype=np.result_type(X0, dtype), copy=True)
    if X.ndim != 2 or X.shape[0] != n:
        raise ValueError(f"X0 must be shape ({n}, k).")
    if not 1 <= X.shape[1] <= n:
        raise ValueError(f"Block size must satisfy 1 <= k <= {n}.")
    return X


def check_maxiter(maxiter: int) -> None:
    if maxiter < 1:
        raise ValueError("maxiter must be at least 1.")

