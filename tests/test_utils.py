# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest
import scipy.sparse as sp

from errorcontrol.results import EigenpairResult, SubspaceResult
from errorcontrol.utils import (
    EPS,
    as_operator,
    as_preconditioner,
    check_maxiter,
    scale_tol,
    start_block,
    start_vector,
)


def test_scale_tol():
    assert scale_tol(np.eye(3)) == EPS
    assert scale_tol(100 * np.ones((2, 2))) == pytest.approx(200 * EPS)


@pytest.mark.parametrize("A", [np.eye(3), sp.identity(3, format="csr")])
def test_as_operator(A):
    op = as_operator(A)
    np.testing.assert_allclose(op @ np.arange(3.0), np.arange(3.0))


def test_as_operator_non_square():
    with pytest.raises(ValueError):
        as_operator(np.ones((2, 3)))


def test_as_preconditioner_variants():
    v = np.array([1.0, 2.0, 3.0])
    np.testing.assert_allclose(as_preconditioner(None, 3) @ v, v)
    diagonal = as_preconditioner(np.array([2.0, 1.0, 0.5]), 3)
    np.testing.assert_allclose(diagonal @ v, [2.0, 2.0, 1.5])
    np.testing.assert_allclose(as_preconditioner(2 * np.eye(3), 3) @ v, 2 * v)
    with pytest.raises(ValueError):
        as_preconditioner(np.eye(2), 3)


def test_start_vector_seeded():
    np.testing.assert_array_equal(start_vector(5, seed=3), start_vector(5, seed=3))
    with pytest.raises(ValueError):
        start_vector(3, np.zeros(3))


def test_start_block():
    X = start_block(6, 2, seed=0)
    assert X.shape == (6, 2)
    X0 = np.ones((6, 3))
    Y = start_block(6, X0=X0)
    assert Y.shape == (6, 3)
    assert Y is not X0
    with pytest.raises(ValueError):
        start_block(6, X0=np.ones(6))


def test_check_maxiter():
    check_maxiter(1)
    with pytest.raises(ValueError):
        check_maxiter(0)


def test_result_properties():
    r = EigenpairResult(
        2.0, np.ones(2), True, np.array([1.0, 2.0]), np.array([0.5, 1e-7])
    )
    assert r.iterations == 2
    assert r.residual_norm == pytest.approx(1e-7)
    s = SubspaceResult(
        np.array([1.0, 2.0]),
        np.eye(2),
        False,
        np.ones((3, 2)),
        np.array([[1.0, 1.0], [0.1, 0.2], [1e-3, 2e-3]]),
    )
    assert s.iterations == 3
    assert s.residual_norm == pytest.approx(2e-3)


def test_identity_preconditioner_complex():
    v = np.array([1.0 + 2.0j, -1.0j, 3.0])
    P = as_preconditioner(None, 3)
    assert P.shape == (3, 3)
    np.testing.assert_allclose(P @ v, v)
    np.testing.assert_allclose(P @ np.eye(3), np.eye(3))
