# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest
from scipy.integrate import quad

from errorcontrol.spectral import (
    galerkin_eigenvalues,
    gaussian_well,
    plane_wave_cos_hamiltonian,
    schrodinger_matrix,
    sine_basis,
    weyl_residuals,
    weyl_sequence,
)

logger = logging.getLogger(__name__)


@pytest.mark.parametrize("m, n", [(1, 1), (1, 2), (3, 3), (2, 5)])
def test_sine_basis_orthonormal(m, n):
    value, _ = quad(lambda x: sine_basis(x, m) * sine_basis(x, n), 0.0, np.pi)
    assert value == pytest.approx(1.0 if m == n else 0.0, abs=1e-10)


def test_gaussian_well_shape():
    assert gaussian_well(np.pi / 2) == pytest.approx(-1000.0)
    assert abs(gaussian_well(0.0)) < 1e-10


def test_free_particle_matrix_is_diagonal():
    H = schrodinger_matrix(4, potential=lambda x: 0.0 * x)
    np.testing.assert_allclose(H, np.diag([0.5, 2.0, 4.5, 8.0]), atol=1e-12)


def test_constant_potential_shifts_spectrum():
    H = schrodinger_matrix(5, potential=lambda x: 3.0 + 0.0 * x)
    np.testing.assert_allclose(H, np.diag(np.arange(1, 6) ** 2 / 2 + 3.0), atol=1e-8)


def test_schrodinger_matrix_symmetric():
    H = schrodinger_matrix(6)
    np.testing.assert_array_equal(H, H.T)


def test_schrodinger_matrix_invalid_size():
    with pytest.raises(ValueError):
        schrodinger_matrix(0)


def test_galerkin_eigenvalues_decrease_with_basis():
    sizes = [2, 4, 6, 8, 10]
    table = galerkin_eigenvalues(sizes)
    logger.debug("lowest Galerkin eigenvalues: %s", table[0])

    assert table.shape == (10, 5)
    # NaN padding below each column
    for j, n in enumerate(sizes):
        assert not np.any(np.isnan(table[:n, j]))
        assert np.all(np.isnan(table[n:, j]))
    # Courant-Fischer: each eigenvalue is non-increasing in the basis size
    for i in range(table.shape[0]):
        row = table[i][~np.isnan(table[i])]
        assert np.all(np.diff(row) <= 1e-9)
    # the deep well binds
    assert table[0, -1] < 0


def test_galerkin_eigenvalues_invalid_sizes():
    with pytest.raises(ValueError):
        galerkin_eigenvalues([])


def test_plane_wave_cos_hamiltonian():
    H = plane_wave_cos_hamiltonian(2.0).toarray()
    assert H.shape == (5, 5)
    np.testing.assert_allclose(np.diag(H), [2.0, 0.5, 0.0, 0.5, 2.0])
    np.testing.assert_allclose(np.diag(H, 1), 0.5)
    np.testing.assert_allclose(H, H.T)


def test_plane_wave_lowest_eigenvalue_converges_from_above():
    lowest = [
        np.linalg.eigvalsh(plane_wave_cos_hamiltonian(Ecut).toarray())[0]
        for Ecut in (0.5, 2.0, 8.0, 32.0)
    ]
    assert np.all(np.diff(lowest) <= 1e-12)


def test_plane_wave_negative_cutoff():
    with pytest.raises(ValueError):
        plane_wave_cos_hamiltonian(-1.0)


def test_weyl_sequence_normalised():
    x, phi = weyl_sequence(1.0, scales=(1, 2, 4))
    dx = x[1] - x[0]
    np.testing.assert_allclose(np.sum(np.abs(phi) ** 2, axis=1) * dx, 1.0)


def test_weyl_residuals_decay():
    scales = (1, 2, 4, 8, 16)
    residuals, overlaps = weyl_residuals(1.0, scales=scales)
    assert np.all(np.diff(residuals) < 0)
    # ‖(H - k²/2) φ_n‖ → k / (√2 n)
    assert residuals[-1] * scales[-1] == pytest.approx(1 / np.sqrt(2), rel=1e-2)
    # weak convergence to zero
    assert np.all(np.diff(overlaps) < 0)
    assert overlaps[-1] < 0.5 * overlaps[0]


def test_weyl_sequence_invalid_scales():
    with pytest.raises(ValueError):
        weyl_sequence(1.0, scales=(1, 0))
