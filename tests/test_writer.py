"""Tests for encoding values into flat buffers."""

from __future__ import annotations

import numpy as np
import pytest

from param_stream import ParameterReader, ParameterWriter
from param_stream.core import (
    Bounded,
    CholeskyFactorCorr,
    CholeskyFactorCov,
    ConstraintViolation,
    CorrelationMatrix,
    CovarianceMatrix,
    IntegerShape,
    LowerBound,
    MatrixShape,
    OffsetMultiplier,
    Positive,
    Probability,
    ScalarShape,
    Simplex,
    SparseShape,
    UnitVector,
    VectorShape,
)


def test_write_positive_scalar_uses_log() -> None:
    """Encoding a positive scalar should store its log."""

    writer = ParameterWriter()

    writer.write(ScalarShape(), Positive(), 1.0)

    np.testing.assert_allclose(writer.reals(), [0.0])


def test_written_buffer_decodes_back_to_values() -> None:
    """Reading a written buffer in the same order should recover the values."""

    simplex = np.array([0.1, 0.2, 0.7])
    cov = np.array([[2.0, 0.3, 0.1], [0.3, 1.0, -0.2], [0.1, -0.2, 1.5]])
    corr = np.array([[1.0, 0.4], [0.4, 1.0]])
    chol = np.array([[1.5, 0.0], [0.2, 0.7], [-1.0, 3.0]])
    chol_corr = np.array([[1.0, 0.0], [0.6, 0.8]])
    bounded = np.array([[0.1, 0.9], [0.5, 0.25]])

    writer = ParameterWriter()
    writer.write(IntegerShape(), LowerBound(0), 3)
    writer.write(ScalarShape(), Probability(), 0.3)
    writer.write(VectorShape(3), Simplex(), simplex)
    writer.write(MatrixShape(3, 3), CovarianceMatrix(), cov)
    writer.write(MatrixShape(2, 2), CorrelationMatrix(), corr)
    writer.write(MatrixShape(3, 2), CholeskyFactorCov(), chol)
    writer.write(MatrixShape(2, 2), CholeskyFactorCorr(), chol_corr)
    writer.write(MatrixShape(2, 2), Bounded(0.0, 1.0), bounded)
    writer.write(VectorShape(2), UnitVector(), np.array([0.6, 0.8]))

    reader = ParameterReader(writer.reals(), writer.ints())
    assert reader.integer_lb_constrain(0) == 3
    assert reader.prob_constrain() == pytest.approx(0.3)
    np.testing.assert_allclose(reader.simplex_constrain(3), simplex)
    np.testing.assert_allclose(reader.cov_matrix_constrain(3), cov)
    np.testing.assert_allclose(reader.corr_matrix_constrain(2), corr)
    np.testing.assert_allclose(reader.cholesky_factor_cov_constrain(3, 2), chol)
    np.testing.assert_allclose(reader.cholesky_factor_corr_constrain(2), chol_corr)
    np.testing.assert_allclose(reader.matrix_lub_constrain(0.0, 1.0, 2, 2), bounded)
    np.testing.assert_allclose(reader.unit_vector_constrain(2), [0.6, 0.8])
    assert reader.available() == 0


def test_write_constrained_lays_out_validate_reads() -> None:
    """Constrained layouts should read back through validate-only reads."""

    writer = ParameterWriter()
    matrix = np.array([[1.0, 2.0], [3.0, 4.0]])

    writer.write_constrained(MatrixShape(2, 2), Positive(), matrix)
    writer.write_constrained(ScalarShape(), OffsetMultiplier(1.0, 2.0), 5.0)

    np.testing.assert_array_equal(writer.reals(), [1.0, 3.0, 2.0, 4.0, 5.0])
    reader = ParameterReader(writer.reals())
    np.testing.assert_array_equal(reader.matrix(2, 2), matrix)


def test_write_rejects_values_outside_constraint() -> None:
    """Encoding should fail on values the decoder could never produce."""

    writer = ParameterWriter()

    with pytest.raises(ConstraintViolation):
        writer.write(VectorShape(2), Simplex(), np.array([0.5, 0.6]))
    with pytest.raises(ConstraintViolation):
        writer.write_constrained(ScalarShape(), Positive(), -1.0)
    with pytest.raises(ConstraintViolation):
        writer.write(IntegerShape(), LowerBound(5), 3)
    assert writer.reals().shape == (0,)
    assert writer.ints().shape == (0,)


def test_write_rejects_wrong_layout() -> None:
    """Values must match the declared shape."""

    writer = ParameterWriter()

    with pytest.raises(ValueError):
        writer.write(VectorShape(3), Simplex(), np.array([0.5, 0.5]))
    with pytest.raises(ValueError):
        writer.write(MatrixShape(3, 3), CovarianceMatrix(), np.eye(2))


def test_write_sparse_matrix_round_trip() -> None:
    """Sparse values should be written at their coordinates."""

    shape = SparseShape.from_coordinates([0, 1], [1, 0], 2, 2)
    dense = np.array([[0.0, 2.0], [3.0, 0.0]])

    writer = ParameterWriter()
    writer.write(shape, LowerBound(1.0), dense)

    value = ParameterReader(writer.reals()).sparse_matrix_lb_constrain(1.0, [0, 1], [1, 0], 2, 2)
    np.testing.assert_allclose(value.toarray(), dense)


def test_writer_requires_inverse_transforms() -> None:
    """Libraries without inverses cannot encode."""

    with pytest.raises(TypeError, match="inverse"):
        ParameterWriter(transforms=object())


def test_writer_rejects_non_integral_integers() -> None:
    """Fractional integers should fail instead of being truncated."""

    writer = ParameterWriter()

    with pytest.raises(ValueError, match="must be an integer"):
        writer.write(IntegerShape(), None, 2.7)
    with pytest.raises(ValueError, match="must be an integer"):
        writer.write_constrained(IntegerShape(), LowerBound(0.0), 2.7)
    with pytest.raises(ValueError, match="must be an integer"):
        writer.integer(2.7)
    writer.integer(np.int32(4))

    np.testing.assert_array_equal(writer.ints(), [4])
