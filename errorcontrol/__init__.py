# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
errorcontrol
============

Eigensolvers and a-posteriori error control for Hermitian eigenproblems,
written to be read: every method returns its full convergence history.

Public API
~~~~~~~~~~
- Single-vector iterations
    - `power_method`, `inverse_power_method`, `shift_invert_power_method`,
      `rayleigh_quotient_iteration`
- Subspace methods
    - `subspace_iteration`, `projected_subspace_iteration`, `rayleigh_ritz`
- Rayleigh-quotient minimisation
    - `preconditioned_gradient_descent`, `lopcg`, `lobpcg`, `lobpcg_scipy`
- Orthogonalisation
    - `qr`, `householder_qr`, `ortho_qr`, `ortho_mgs`
- Error bounds
    - `residual_norms`, `gershgorin_discs`, `bauer_fike_bounds`,
      `kato_temple_bounds`, `temple_interval`
- Spectra of self-adjoint operators
    - `schrodinger_matrix`, `galerkin_eigenvalues`,
      `plane_wave_cos_hamiltonian`, `weyl_sequence`, `weyl_residuals`
- Floating-point summation and products
    - `two_sum`, `fast_two_sum`, `sum_naive`, `sum_kahan`, `DoubleWord`
    - `two_product`, `determinant_2x2`, `determinant_kahan`
- Method comparison
    - `compare_single_vector_methods`, `compare_block_methods`

Plotting helpers live in `errorcontrol.plot` and are not imported here, so
matplotlib is only loaded on demand.

Example
-------
>>> import numpy as np, errorcontrol as ec
>>> A = np.diag([1.0, 2.0, 3.0, 10.0])
>>> res = ec.power_method(A, np.ones(4), verbose=False)
>>> round(res.eigenvalue, 4)
10.0
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from .bounds import (
    bauer_fike_bounds,
    gershgorin_discs,
    kato_temple_bounds,
    residual_norms,
    temple_interval,
)
from .comparison import (
    compare_block_methods,
    compare_single_vector_methods,
    gapped_diagonal_problem,
    noisy_inverse_diagonal,
)
from .exceptions import ConvergenceWarning
from .floating_point import (
    DoubleWord,
    determinant_2x2,
    determinant_kahan,
    fast_two_sum,
    generate_unit_sum,
    sum_double_word,
    sum_kahan,
    sum_naive,
    sum_neumaier,
    two_product,
    two_sum,
)
from .minimisation import (
    lobpcg,
    lobpcg_scipy,
    lopcg,
    preconditioned_gradient_descent,
)

# ---------------------------------------------------------------------
# Re-export the high-level functions users are expected to call.
# Each of these names is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .power import (
    inverse_power_method,
    power_method,
    power_method_rate,
    rayleigh_quotient,
    rayleigh_quotient_iteration,
    shift_invert_operator,
    shift_invert_power_method,
)
from .qr import householder_qr, ortho_mgs, ortho_qr, qr, random_hermitian
from .results import EigenpairResult, SubspaceResult
from .spectral import (
    galerkin_eigenvalues,
    gaussian_well,
    plane_wave_cos_hamiltonian,
    schrodinger_matrix,
    sine_basis,
    weyl_residuals,
    weyl_sequence,
)
from .subspace import (
    projected_subspace_iteration,
    rayleigh_ritz,
    subspace_iteration,
    subspace_rates,
)
from .utils import scale_tol

__all__ = [
    "power_method",
    "inverse_power_method",
    "shift_invert_power_method",
    "shift_invert_operator",
    "rayleigh_quotient",
    "rayleigh_quotient_iteration",
    "power_method_rate",
    "subspace_iteration",
    "projected_subspace_iteration",
    "rayleigh_ritz",
    "subspace_rates",
    "preconditioned_gradient_descent",
    "lopcg",
    "lobpcg",
    "lobpcg_scipy",
    "qr",
    "householder_qr",
    "ortho_qr",
    "ortho_mgs",
    "random_hermitian",
    "EigenpairResult",
    "SubspaceResult",
    "ConvergenceWarning",
    "residual_norms",
    "gershgorin_discs",
    "bauer_fike_bounds",
    "kato_temple_bounds",
    "temple_interval",
    "sine_basis",
    "gaussian_well",
    "schrodinger_matrix",
    "galerkin_eigenvalues",
    "plane_wave_cos_hamiltonian",
    "weyl_sequence",
    "weyl_residuals",
    "fast_two_sum",
    "two_sum",
    "sum_naive",
    "sum_kahan",
    "sum_neumaier",
    "sum_double_word",
    "DoubleWord",
    "generate_unit_sum",
    "two_product",
    "determinant_2x2",
    "determinant_kahan",
    "gapped_diagonal_problem",
    "noisy_inverse_diagonal",
    "compare_single_vector_methods",
    "compare_block_methods",
    "scale_tol",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show errorcontrol”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except PackageNotFoundError:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
