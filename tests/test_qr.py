# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from errorcontrol.qr import householder_qr, ortho_mgs, ortho_qr, qr, random_hermitian

TEST_ITERATIONS = 20
logger = logging.getLogger(__name__)


def test_qr_reconstructs():
    rng = np.random.default_rng(0)
    for i in range(TEST_ITERATIONS):
        logger.debug("==============================")
        A = rng.standard_normal((30, 8))
        for reorth in (False, True):
            Q, R = qr(A, reorth=reorth)
            np.testing.assert_allclose(Q @ R, A, atol=1e-10)
            assert np.allclose(np.tril(R, -1), 0.0)


def test_orthogonality_qr():
    V = np.random.randn(100, 10)
    Q, _ = qr(V, reorth=True)
    identity = Q.T @ Q
    assert np.allclose(identity, np.eye(10), atol=1e-10)


def test_orthogonality_householder_qr():
    V = np.random.randn(100, 10)
    Q, _ = householder_qr(V)
    identity = Q.T @ Q
    assert np.allclose(identity, np.eye(10), atol=1e-10)


def test_householder_qr_reconstructs_complex():
    rng = np.random.default_rng(1)
    A = rng.standard_normal((12, 5)) + 1j * rng.standard_normal((12, 5))
    Q, R = householder_qr(A)
    np.testing.assert_allclose(Q @ R, A, atol=1e-10)
    np.testing.assert_allclose(Q.conj().T @ Q, np.eye(5), atol=1e-10)


def test_qr_dependent_columns_raises():
    A = np.array([[1.0, 2.0], [1.0, 2.0], [0.0, 0.0]])
    with pytest.raises(ValueError):
        qr(A)


def test_householder_rank_deficient_still_orthonormal():
    rng = np.random.default_rng(2)
    x = rng.standard_normal(10)
    X = np.column_stack([x, 2 * x, np.zeros(10), rng.standard_normal(10)])
    Q = ortho_qr(X)
    assert Q.shape == (10, 4)
    np.testing.assert_allclose(Q.T @ Q, np.eye(4), atol=1e-10)
    # the first column spans x
    assert abs(Q[:, 0] @ x) == pytest.approx(np.linalg.norm(x))


def test_householder_wide_raises():
    with pytest.raises(ValueError):
        householder_qr(np.ones((2, 3)))


def test_ortho_vector_becomes_column():
    Q = ortho_qr(np.array([3.0, 4.0]))
    assert Q.shape == (2, 1)
    assert abs(Q[0, 0]) == pytest.approx(0.6)


def test_ortho_mgs_matches_span():
    rng = np.random.default_rng(3)
    X = rng.standard_normal((15, 3))
    Q1 = ortho_qr(X)
    Q2 = ortho_mgs(X)
    # same subspace: projectors agree
    np.testing.assert_allclose(Q1 @ Q1.T, Q2 @ Q2.T, atol=1e-10)


def test_random_hermitian_spectrum():
    eigenvalues = np.array([-2.0, 0.5, 1.0, 3.0, 7.0])
    A = random_hermitian(5, eigenvalues, seed=0)
    np.testing.assert_array_equal(A, A.T)
    np.testing.assert_allclose(np.linalg.eigvalsh(A), eigenvalues, atol=1e-12)


def test_random_hermitian_shape_mismatch():
    with pytest.raises(ValueError):
        random_hermitian(4, [1.0, 2.0])
