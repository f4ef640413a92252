"""Tests for unit-vector, simplex and ordered transforms."""

from __future__ import annotations

import math

import numpy as np
import pytest

from param_stream.core import ConstraintViolation, LogJacobian
from param_stream.transforms import vector


def test_unit_vector_constrain_normalizes() -> None:
    """Unit vectors should be the raw vector over its norm."""

    lp = LogJacobian()

    value = vector.unit_vector_constrain(np.array([3.0, 4.0]), lp)

    np.testing.assert_allclose(value, [0.6, 0.8])
    assert lp.value == pytest.approx(-12.5)


def test_unit_vector_constrain_rejects_zero_norm() -> None:
    """The zero vector has no direction."""

    with pytest.raises(ConstraintViolation, match="norm"):
        vector.unit_vector_constrain(np.zeros(3))


def test_simplex_constrain_maps_zero_to_uniform() -> None:
    """Zero input should give the uniform simplex."""

    lp = LogJacobian()

    value = vector.simplex_constrain(np.zeros(3), lp)

    np.testing.assert_allclose(value, [0.25, 0.25, 0.25, 0.25])
    assert lp.value == pytest.approx(-8.0 * math.log(2.0))


def test_simplex_constrain_of_empty_input_is_single_point() -> None:
    """A 1-simplex needs no raw values."""

    np.testing.assert_allclose(vector.simplex_constrain(np.zeros(0)), [1.0])


def test_simplex_constrain_stays_on_simplex_for_extreme_inputs() -> None:
    """Outputs should be non-negative and sum to one."""

    value = vector.simplex_constrain(np.array([25.0, -30.0, 4.0, 0.1]))

    assert value.shape == (5,)
    assert np.all(value >= 0.0)
    assert float(np.sum(value)) == pytest.approx(1.0)


def test_simplex_jacobian_matches_finite_differences() -> None:
    """The accumulated term should be the log-det of raw -> leading K - 1 weights."""

    raw = np.array([0.7, -1.3, 0.2])
    lp = LogJacobian()

    vector.simplex_constrain(raw, lp)
    columns = []
    for index in range(raw.size):
        step = np.zeros_like(raw)
        step[index] = 1e-6
        columns.append((vector.simplex_constrain(raw + step)[:-1] - vector.simplex_constrain(raw - step)[:-1]) / 2e-6)
    _, expected = np.linalg.slogdet(np.column_stack(columns))

    assert lp.value == pytest.approx(expected, abs=1e-6)


def test_ordered_constrain_accumulates_exponentials() -> None:
    """Ordered vectors should add ``exp`` increments after the first element."""

    lp = LogJacobian()

    value = vector.ordered_constrain(np.array([1.0, 0.0, math.log(2.0)]), lp)

    np.testing.assert_allclose(value, [1.0, 2.0, 4.0])
    assert lp.value == pytest.approx(math.log(2.0))


def test_positive_ordered_constrain_is_cumulative_exp() -> None:
    """Positive-ordered vectors should be cumulative sums of ``exp``."""

    lp = LogJacobian()

    value = vector.positive_ordered_constrain(np.array([0.0, 0.0, 1.0]), lp)

    np.testing.assert_allclose(value, [1.0, 2.0, 2.0 + math.e])
    assert lp.value == pytest.approx(1.0)


def test_vector_free_transforms_invert_constrain() -> None:
    """Each inverse should recover the raw vector."""

    raw = np.array([0.4, -1.2, 2.0])

    np.testing.assert_allclose(vector.simplex_free(vector.simplex_constrain(raw)), raw)
    np.testing.assert_allclose(vector.ordered_free(vector.ordered_constrain(raw)), raw)
    np.testing.assert_allclose(vector.positive_ordered_free(vector.positive_ordered_constrain(raw)), raw)


def test_unit_vector_free_returns_the_unit_vector() -> None:
    """Unit vectors are their own unconstrained representation."""

    value = np.array([0.6, 0.8])

    np.testing.assert_allclose(vector.unit_vector_free(value), value)
    with pytest.raises(ConstraintViolation):
        vector.unit_vector_free(np.array([1.0, 1.0]))
