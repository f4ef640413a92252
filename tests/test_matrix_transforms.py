"""Tests for Cholesky, covariance and correlation matrix transforms."""

from __future__ import annotations

import math

import numpy as np
import pytest

from param_stream.core import LogJacobian
from param_stream.transforms import checks, matrix


def test_cholesky_factor_constrain_fills_rows_with_exp_diagonal() -> None:
    """Diagonal entries should be exponentiated raw values."""

    lp = LogJacobian()

    L = matrix.cholesky_factor_constrain(np.array([0.0, 0.5, math.log(2.0)]), 2, 2, lp)

    np.testing.assert_allclose(L, [[1.0, 0.0], [0.5, 2.0]])
    assert lp.value == pytest.approx(math.log(2.0))


def test_cholesky_factor_constrain_reads_full_rows_below_square_block() -> None:
    """Rows past the square block should be read as-is."""

    L = matrix.cholesky_factor_constrain(np.array([0.0, 0.5, 0.0, -3.0, 7.0]), 3, 2)

    np.testing.assert_allclose(L, [[1.0, 0.0], [0.5, 1.0], [-3.0, 7.0]])
    checks.check_cholesky_factor(L)


def test_cholesky_factor_constrain_checks_raw_length() -> None:
    """Raw runs of the wrong length should be rejected."""

    with pytest.raises(ValueError, match="expects 3"):
        matrix.cholesky_factor_constrain(np.zeros(4), 2, 2)


def test_cholesky_corr_constrain_two_by_two() -> None:
    """A 2x2 correlation factor has one free correlation."""

    lp = LogJacobian()
    z = math.tanh(0.3)

    L = matrix.cholesky_corr_constrain(np.array([0.3]), 2, lp)

    np.testing.assert_allclose(L, [[1.0, 0.0], [z, math.sqrt(1.0 - z * z)]])
    assert lp.value == pytest.approx(math.log(1.0 - z * z))


def test_cholesky_corr_constrain_has_unit_rows() -> None:
    """Every row of a correlation factor should have unit length."""

    L = matrix.cholesky_corr_constrain(np.array([0.3, -1.1, 2.0, 0.4, -0.2, 0.9]), 4)

    checks.check_cholesky_factor_corr(L)


def test_cov_matrix_constrain_builds_l_l_transpose() -> None:
    """Covariance matrices should be ``L @ L.T`` with an exp diagonal."""

    lp = LogJacobian()

    S = matrix.cov_matrix_constrain(np.array([math.log(2.0), 0.5, 0.0]), 2, lp)

    np.testing.assert_allclose(S, [[4.0, 1.0], [1.0, 1.25]])
    assert lp.value == pytest.approx(5.0 * math.log(2.0))


def test_corr_matrix_constrain_two_by_two() -> None:
    """A 2x2 correlation matrix carries ``tanh`` of its raw value."""

    lp = LogJacobian()
    z = math.tanh(0.3)

    R = matrix.corr_matrix_constrain(np.array([0.3]), 2, lp)

    np.testing.assert_allclose(R, [[1.0, z], [z, 1.0]])
    assert lp.value == pytest.approx(math.log(1.0 - z * z))


def test_corr_matrix_constrain_is_valid_correlation_matrix() -> None:
    """Larger correlation matrices should pass the correlation check."""

    R = matrix.corr_matrix_constrain(np.array([0.5, -0.3, 1.2, 0.1, 0.0, -2.0]), 4)

    checks.check_corr_matrix(R)


def test_read_corr_l_jacobian_uses_column_weights() -> None:
    """The CPC Jacobian should weight the leading CPCs by ``K - k - 1``."""

    lp = LogJacobian()
    cpcs = np.array([0.1, 0.2, 0.3])

    matrix.read_corr_L(cpcs, 3, lp)

    assert lp.value == pytest.approx(0.5 * (math.log1p(-(0.1**2)) + math.log1p(-(0.2**2))))


def test_zero_sized_covariance_and_correlation_are_empty() -> None:
    """Size-0 covariance and correlation matrices consume nothing."""

    lp = LogJacobian()

    assert matrix.cov_matrix_constrain(np.zeros(0), 0, lp).shape == (0, 0)
    assert matrix.corr_matrix_constrain(np.zeros(0), 0, lp).shape == (0, 0)
    assert lp.value == 0.0


def test_matrix_free_transforms_invert_constrain() -> None:
    """Each inverse should recover the raw values."""

    raw3 = np.array([0.2, -0.7, 1.1])
    raw6 = np.array([0.2, -0.7, 1.1, 0.3, -0.4, 0.05])

    np.testing.assert_allclose(matrix.cholesky_corr_free(matrix.cholesky_corr_constrain(raw3, 3)), raw3)
    np.testing.assert_allclose(matrix.corr_matrix_free(matrix.corr_matrix_constrain(raw3, 3)), raw3, atol=1e-10)
    np.testing.assert_allclose(matrix.cov_matrix_free(matrix.cov_matrix_constrain(raw6, 3)), raw6, atol=1e-10)
    np.testing.assert_allclose(matrix.cholesky_factor_free(matrix.cholesky_factor_constrain(raw6, 3, 3)), raw6)


def _numerical_log_abs_det(fn, x: np.ndarray, eps: float = 1e-6) -> float:
    columns = []
    for index in range(x.size):
        step = np.zeros_like(x)
        step[index] = eps
        columns.append((fn(x + step) - fn(x - step)) / (2.0 * eps))
    sign, logdet = np.linalg.slogdet(np.column_stack(columns))
    assert sign != 0.0
    return float(logdet)


def test_cholesky_corr_jacobian_matches_finite_differences() -> None:
    """The accumulated term should be the log-det of raw -> strictly-lower entries."""

    raw = np.array([0.4, -0.9, 0.3, 1.2, -0.5, 0.7])
    lp = LogJacobian()

    matrix.cholesky_corr_constrain(raw, 4, lp)
    expected = _numerical_log_abs_det(
        lambda y: matrix.cholesky_corr_constrain(y, 4)[np.tril_indices(4, -1)],
        raw,
    )

    assert lp.value == pytest.approx(expected, abs=1e-6)


def test_cov_matrix_jacobian_matches_finite_differences() -> None:
    """The accumulated term should be the log-det of raw -> lower triangle of S."""

    raw = np.array([0.3, 0.5, -0.2, -1.0, 0.8, 0.1])
    lp = LogJacobian()

    matrix.cov_matrix_constrain(raw, 3, lp)
    expected = _numerical_log_abs_det(
        lambda x: matrix.cov_matrix_constrain(x, 3)[np.tril_indices(3)],
        raw,
    )

    assert lp.value == pytest.approx(expected, abs=1e-6)


def test_cholesky_corr_constrain_saturated_cpc_gives_negative_infinite_jacobian() -> None:
    """A CPC that rounds to one should yield a finite factor and ``-inf``."""

    lp = LogJacobian()

    L = matrix.cholesky_corr_constrain(np.array([0.0, 20.0, 0.0]), 3, lp)

    assert np.all(np.isfinite(L))
    np.testing.assert_allclose(L[2], [1.0, 0.0, 0.0])
    assert lp.value == -math.inf


def test_read_corr_l_saturated_cpc_gives_negative_infinite_jacobian() -> None:
    """Unit CPCs should not break the column recursion."""

    lp = LogJacobian()

    L = matrix.read_corr_L(np.array([1.0, 0.0, 0.0]), 3, lp)

    np.testing.assert_allclose(L, [[1.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    assert lp.value == -math.inf
