# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import matplotlib.pyplot as plt
import numpy as np
import pytest

from errorcontrol.bounds import gershgorin_discs
from errorcontrol.plot import (
    plot_error_bounds,
    plot_galerkin_eigenvalues,
    plot_residual_history,
)
from errorcontrol.power import power_method, power_method_rate
from errorcontrol.spectral import galerkin_eigenvalues
from errorcontrol.subspace import projected_subspace_iteration


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_plot_residual_history_single(make_figures):
    d = np.array([1.0, 2.0, 4.0, 8.0])
    res = power_method(np.diag(d), np.ones(4), verbose=False)
    fig, ax = plt.subplots()
    out = plot_residual_history(
        res, ax=ax, expected_rate=power_method_rate(d), label="power method"
    )
    assert out is ax
    # data line plus the expected-rate line
    assert len(ax.get_lines()) == 2
    np.testing.assert_allclose(ax.get_lines()[0].get_ydata(), res.residual_history)
    assert ax.get_yscale() == "log"
    if make_figures:
        fig.savefig("residual_history.png")


def test_plot_residual_history_block_uses_current_axes():
    A = np.diag([10.0, 5.0, 1.0, 0.5])
    res = projected_subspace_iteration(A, seed=0, verbose=False)
    fig, ax = plt.subplots()
    out = plot_residual_history(res, label="projected")
    assert out is ax
    assert len(ax.get_lines()) == 2
    labels = [line.get_label() for line in ax.get_lines()]
    assert labels == ["projected λ1", "projected λ2"]


def test_plot_galerkin_eigenvalues(make_figures):
    sizes = [2, 4, 6]
    table = galerkin_eigenvalues(sizes)
    fig, ax = plt.subplots()
    plot_galerkin_eigenvalues(sizes, table, reference=[0.0], ax=ax)
    # one line per eigenvalue index plus the reference
    assert len(ax.get_lines()) == 6 + 1
    # the last eigenvalue only exists for the largest basis
    np.testing.assert_allclose(ax.get_lines()[5].get_xdata(), [6])
    if make_figures:
        fig.savefig("galerkin_eigenvalues.png")


def test_plot_galerkin_eigenvalues_shape_mismatch():
    with pytest.raises(ValueError):
        plot_galerkin_eigenvalues([2, 4], np.zeros((4, 3)))


def test_plot_error_bounds(make_figures):
    rng = np.random.default_rng(0)
    E = 0.05 * rng.standard_normal((5, 5))
    M = np.diag(np.arange(1.0, 6.0)) + 0.5 * (E + E.T)
    lam, X = np.linalg.eigh(M + 1e-2 * np.eye(5)[::-1])
    fig, ax = plt.subplots()
    plot_error_bounds(M, lam, X, ax=ax)
    # every Gershgorin and Bauer-Fike circle is drawn
    assert len(ax.patches) >= 2 * 5
    centres, _ = gershgorin_discs(M)
    assert len(centres) == 5
    if make_figures:
        fig.savefig("error_bounds.png")
