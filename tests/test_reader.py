"""Tests for the named-operation parameter reader."""

from __future__ import annotations

import math

import numpy as np
import pytest

from param_stream import ParameterReader
from param_stream.core import (
    ConstraintViolation,
    InconsistentBounds,
    InvalidShape,
    InvalidTransformParameter,
    LogJacobian,
    OutOfData,
)


def test_matrix_read_is_column_major() -> None:
    """``matrix(2, 3)`` over ``1..6`` should have columns (1,2), (3,4), (5,6)."""

    reader = ParameterReader([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

    value = reader.matrix(2, 3)

    np.testing.assert_array_equal(value, [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]])
    assert reader.available() == 0


@pytest.mark.parametrize(("n", "m"), [(3, 4), (1, 5), (4, 1)])
def test_matrix_element_is_raw_index_i_plus_j_times_n(n: int, m: int) -> None:
    """Element ``(i, j)`` should come from raw position ``i + j * n``."""

    raw = np.arange(n * m, dtype=float)
    value = ParameterReader(raw).matrix(n, m)

    for i in range(n):
        for j in range(m):
            assert value[i, j] == raw[i + j * n]


def test_zero_size_containers_are_no_ops() -> None:
    """Empty vectors and matrices should consume nothing."""

    reader = ParameterReader([1.0])

    assert reader.vector(0).shape == (0,)
    assert reader.row_vector(0).shape == (0,)
    assert reader.matrix(3, 0).shape == (3, 0)
    assert reader.matrix(0, 3).shape == (0, 3)
    assert reader.available() == 1


def test_zero_size_unit_vector_and_simplex_are_invalid() -> None:
    """Unit vectors and simplexes need at least one element."""

    reader = ParameterReader([1.0, 2.0])

    with pytest.raises(InvalidShape):
        reader.unit_vector(0)
    with pytest.raises(InvalidShape):
        reader.simplex_constrain(0)
    assert reader.available() == 2


def test_exhausted_reader_raises_out_of_data() -> None:
    """Reads past the end should fail without advancing."""

    reader = ParameterReader([1.0])
    reader.scalar()

    with pytest.raises(OutOfData):
        reader.scalar()
    with pytest.raises(OutOfData):
        reader.scalar_pos_constrain()
    assert reader.available() == 0


@pytest.mark.parametrize("k", [1, 2, 5])
def test_simplex_constrain_consumes_k_minus_one(k: int) -> None:
    """Simplex reads should consume ``k - 1`` reals and sum to one."""

    reader = ParameterReader(np.linspace(-1.0, 1.0, k + 2))

    value = reader.simplex_constrain(k, LogJacobian())

    assert value.shape == (k,)
    assert np.all(value >= 0.0)
    assert float(np.sum(value)) == pytest.approx(1.0)
    assert reader.available() == 3


def test_validate_fails_where_constrain_succeeds() -> None:
    """A raw value below a bound fails validation but constrains fine."""

    with pytest.raises(ConstraintViolation):
        ParameterReader([-1.0]).scalar_lb(0.0)

    value = ParameterReader([-1.0]).scalar_lb_constrain(0.0)
    assert value == pytest.approx(math.exp(-1.0))


def test_jacobian_accumulation_does_not_change_value() -> None:
    """``lp`` should only observe the transform, not alter it."""

    raw = [0.75]
    lp = LogJacobian()

    without = ParameterReader(raw).scalar_pos_constrain()
    with_lp = ParameterReader(raw).scalar_pos_constrain(lp)

    assert without == with_lp
    assert lp.value == pytest.approx(0.75)


def test_integer_lub_consumes_before_reporting_inconsistent_bounds() -> None:
    """Inconsistent bounds should be reported after the integer is consumed."""

    reader = ParameterReader([], [4, 7])

    with pytest.raises(InconsistentBounds):
        reader.integer_lub(5, 3)
    assert reader.available_i() == 1
    assert reader.integer() == 7


def test_integer_bounds() -> None:
    """Integer bound checks should accept and reject as documented."""

    reader = ParameterReader([], [3, 3, 3, 3, 3])

    assert reader.integer_lb(3) == 3
    assert reader.integer_ub_constrain(3, LogJacobian()) == 3
    assert reader.integer_lub(0, 10) == 3
    with pytest.raises(ConstraintViolation):
        reader.integer_lb(4)
    with pytest.raises(ConstraintViolation):
        reader.integer_ub(2)
    assert reader.available_i() == 0


def test_consumption_is_sum_of_documented_counts() -> None:
    """A sequence of reads should consume exactly the documented totals."""

    reader = ParameterReader(np.full(40, 0.5), [1, 2])
    lp = LogJacobian()

    reader.scalar_lub_constrain(0.0, 1.0, lp)  # 1
    reader.vector_lb_constrain(0.0, 3, lp)  # 3
    reader.simplex_constrain(4, lp)  # 3
    reader.cov_matrix_constrain(3, lp)  # 6
    reader.corr_matrix_constrain(3, lp)  # 3
    reader.cholesky_factor_corr_constrain(3, lp)  # 3
    reader.cholesky_factor_cov_constrain(4, 2, lp)  # 3 + 4
    reader.unit_vector_constrain(2, lp)  # 2
    reader.integer()
    reader.integer_lb_constrain(0, lp)

    assert reader.available() == 40 - (1 + 3 + 3 + 6 + 3 + 3 + 7 + 2)
    assert reader.available_i() == 0


def test_real_array_returns_plain_floats() -> None:
    """``real_array`` should return a list of Python floats."""

    reader = ParameterReader([1.0, 2.0, 3.0])

    values = reader.real_array(2)

    assert values == [1.0, 2.0]
    assert all(isinstance(value, float) for value in values)
    assert reader.available() == 1


def test_unconstrained_constrain_twins_leave_accumulator_untouched() -> None:
    """Identity reads should add nothing to ``lp``."""

    reader = ParameterReader([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0])
    lp = LogJacobian()

    assert reader.scalar_constrain(lp) == 1.0
    np.testing.assert_array_equal(reader.vector_constrain(2, lp), [2.0, 3.0])
    np.testing.assert_array_equal(reader.row_vector_constrain(1, lp), [4.0])
    np.testing.assert_array_equal(reader.matrix_constrain(1, 2, lp), [[5.0, 6.0]])
    assert lp.value == 0.0
    assert reader.available() == 1


def test_scalar_validate_reads() -> None:
    """Validate-only scalar reads should return values within their sets."""

    reader = ParameterReader([2.0, 0.5, 0.5, -0.5, 3.0, 1.5, 4.0])

    assert reader.scalar_pos() == 2.0
    assert reader.prob() == 0.5
    assert reader.corr() == 0.5
    assert reader.corr() == -0.5
    assert reader.scalar_ub(3.0) == 3.0
    assert reader.scalar_lub(1.0, 2.0) == 1.5
    assert reader.scalar_offset_multiplier(100.0, 10.0) == 4.0


def test_scalar_lub_validate_checks_bounds_first() -> None:
    """Inconsistent bounds should win over a range failure."""

    reader = ParameterReader([10.0])

    with pytest.raises(InconsistentBounds):
        reader.scalar_lub(2.0, 1.0)
    assert reader.available() == 0


def test_scalar_constrain_reads() -> None:
    """Constraining scalar reads should apply their transforms."""

    reader = ParameterReader([0.0, 0.0, 0.0, 0.0, 2.0])
    lp = LogJacobian()

    assert reader.scalar_ub_constrain(1.0, lp) == pytest.approx(0.0)
    assert reader.scalar_lub_constrain(-1.0, 1.0, lp) == pytest.approx(0.0)
    assert reader.prob_constrain(lp) == pytest.approx(0.5)
    assert reader.corr_constrain(lp) == pytest.approx(0.0)
    assert reader.scalar_offset_multiplier_constrain(1.0, 3.0, lp) == pytest.approx(7.0)
    assert lp.value == pytest.approx(3.0 * math.log(0.5) + math.log(3.0))


def test_offset_multiplier_constrain_rejects_bad_multiplier() -> None:
    """Non-positive multipliers should be rejected."""

    with pytest.raises(InvalidTransformParameter):
        ParameterReader([1.0]).scalar_offset_multiplier_constrain(0.0, -2.0)


def test_structured_validate_reads() -> None:
    """Validate-only structured reads should consume constrained sizes."""

    reader = ParameterReader(
        [
            0.6, 0.8,  # unit vector
            0.1, 0.9,  # simplex
            -1.0, 2.0,  # ordered
            0.0, 1.0,  # positive ordered
            1.0, 0.5, 0.0, 2.0,  # cholesky factor cov, column-major
            1.0, 0.6, 0.0, 0.8,  # cholesky factor corr
            2.0, 0.5, 0.5, 1.0,  # cov matrix
            1.0, 0.3, 0.3, 1.0,  # corr matrix
        ]
    )

    np.testing.assert_allclose(reader.unit_vector(2), [0.6, 0.8])
    np.testing.assert_allclose(reader.simplex(2), [0.1, 0.9])
    np.testing.assert_allclose(reader.ordered(2), [-1.0, 2.0])
    np.testing.assert_allclose(reader.positive_ordered(2), [0.0, 1.0])
    np.testing.assert_allclose(reader.cholesky_factor_cov(2, 2), [[1.0, 0.0], [0.5, 2.0]])
    np.testing.assert_allclose(reader.cholesky_factor_corr(2), [[1.0, 0.0], [0.6, 0.8]])
    np.testing.assert_allclose(reader.cov_matrix(2), [[2.0, 0.5], [0.5, 1.0]])
    np.testing.assert_allclose(reader.corr_matrix(2), [[1.0, 0.3], [0.3, 1.0]])
    assert reader.available() == 0


def test_structured_validate_failures() -> None:
    """Invalid structured values should raise ``ConstraintViolation``."""

    with pytest.raises(ConstraintViolation):
        ParameterReader([0.5, 0.6]).simplex(2)
    with pytest.raises(ConstraintViolation):
        ParameterReader([2.0, 1.0]).ordered(2)
    with pytest.raises(ConstraintViolation):
        ParameterReader([1.0, 2.0, 2.0, 1.0]).cov_matrix(2)
    with pytest.raises(ConstraintViolation):
        ParameterReader([1.0, 0.0, 0.5, 1.0]).cholesky_factor_cov(2, 2)


def test_cholesky_factor_cov_requires_at_least_as_many_rows_as_columns() -> None:
    """Wide Cholesky factors are invalid shapes."""

    reader = ParameterReader(np.zeros(10))

    with pytest.raises(InvalidShape):
        reader.cholesky_factor_cov_constrain(2, 3)
    with pytest.raises(InvalidShape):
        reader.cholesky_factor_corr_constrain(0)
    assert reader.available() == 10


def test_zero_size_cov_and_corr_matrices_are_empty() -> None:
    """Size-0 covariance and correlation matrices consume nothing."""

    reader = ParameterReader([1.0])

    assert reader.cov_matrix_constrain(0).shape == (0, 0)
    assert reader.corr_matrix(0).shape == (0, 0)
    assert reader.available() == 1


def test_elementwise_container_reads() -> None:
    """Container bound reads should apply the scalar rule to each element."""

    reader = ParameterReader([1.0, 2.0, 0.0, 0.0, 0.0, 0.0, 0.5, 0.5, 0.0, 0.0])
    lp = LogJacobian()

    np.testing.assert_array_equal(reader.vector_lb(1.0, 2), [1.0, 2.0])
    np.testing.assert_allclose(reader.row_vector_ub_constrain(1.0, 2, lp), [0.0, 0.0])
    np.testing.assert_allclose(reader.matrix_lub_constrain(0.0, 4.0, 1, 2, lp), [[2.0, 2.0]])
    np.testing.assert_array_equal(reader.vector_lub(0.0, 1.0, 2), [0.5, 0.5])
    np.testing.assert_allclose(reader.row_vector_offset_multiplier_constrain(1.0, 2.0, 2, lp), [1.0, 1.0])
    assert reader.available() == 0
    assert lp.value == pytest.approx(2.0 * (math.log(4.0) + 2.0 * math.log(0.5)) + 2.0 * math.log(2.0))


def test_elementwise_container_validate_failure() -> None:
    """One bad element should fail the whole container read."""

    with pytest.raises(ConstraintViolation):
        ParameterReader([1.0, 5.0, 2.0, 3.0]).matrix_ub(4.0, 2, 2)
    with pytest.raises(ConstraintViolation):
        ParameterReader([0.5, 1.5]).row_vector_lub(0.0, 1.0, 2)


def test_correlation_reads_with_saturated_raw_values() -> None:
    """Raw values large enough to saturate ``tanh`` should still decode."""

    lp = LogJacobian()
    L = ParameterReader([0.0, 20.0, 0.0]).cholesky_factor_corr_constrain(3, lp)

    assert np.all(np.isfinite(L))
    assert lp.value == -math.inf

    lp = LogJacobian()
    R = ParameterReader([20.0, 0.0, 0.0]).corr_matrix_constrain(3, lp)

    assert np.all(np.isfinite(R))
    np.testing.assert_allclose(np.diag(R), [1.0, 1.0, 1.0])
    assert lp.value == -math.inf
