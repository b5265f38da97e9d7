# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import NamedTuple

import numpy as np


class EigenpairResult(NamedTuple):
    """
    Outcome of a single-vector iteration.

    eigenvalue_history and residual_history hold one entry per completed
    iteration and are meant for convergence plots.
    """

    eigenvalue: float
    eigenvector: np.ndarray
    converged: bool
    eigenvalue_history: np.ndarray
    residual_history: np.ndarray

    @property
    def iterations(self) -> int:
        return len(self.residual_history)

    @property
    def residual_norm(self) -> float:
        return float(self.residual_history[-1])


class SubspaceResult(NamedTuple):
    """
    Outcome of a block / subspace iteration on k vectors.

    eigenvalues : (k,) ndarray
    eigenvectors : (n, k) ndarray
    eigenvalue_history, residual_history : (iterations, k) ndarray
    """

    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    converged: bool
    eigenvalue_history: np.ndarray
    residual_history: np.ndarray

    @property
    def iterations(self) -> int:
        return len(self.residual_history)

    @property
    def residual_norm(self) -> float:
        return float(np.max(self.residual_history[-1]))
