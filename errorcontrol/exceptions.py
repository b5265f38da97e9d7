# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Warnings raised by the iterative solvers.

Invalid input is reported with plain ``ValueError`` and failures of the
dense linear-algebra kernels (``numpy.linalg.LinAlgError``) propagate
unchanged.
"""

import warnings


class ConvergenceWarning(RuntimeWarning):
    """An iteration hit ``maxiter`` before the residual dropped below ``tol``."""


def warn_not_converged(method: str, maxiter: int, residual: float, tol: float):
    warnings.warn(
        f"{method} not converged after {maxiter} iterations "
        f"(residual {residual:.3g} >= tol {tol:.3g}).",
        ConvergenceWarning,
        stacklevel=3,
    )
