"""Tests for scalar constraining transforms and their inverses."""

from __future__ import annotations

import math

import pytest

from param_stream.core import ConstraintViolation, InconsistentBounds, InvalidTransformParameter, LogJacobian
from param_stream.transforms import scalar


def test_positive_constrain_adds_raw_value_to_log_jacobian() -> None:
    """``exp`` has log-derivative equal to its argument."""

    lp = LogJacobian()

    value = scalar.positive_constrain(0.5, lp)

    assert value == pytest.approx(math.exp(0.5))
    assert lp.value == pytest.approx(0.5)


def test_constrain_without_accumulator_matches_value() -> None:
    """Passing no accumulator should not change the transformed value."""

    assert scalar.lb_constrain(-1.0, 2.0) == pytest.approx(scalar.lb_constrain(-1.0, 2.0, LogJacobian()))


def test_lb_and_ub_constrain_shift_exponential() -> None:
    """One-sided bounds should use shifted exponentials."""

    lp = LogJacobian()

    assert scalar.lb_constrain(0.0, 3.0, lp) == pytest.approx(4.0)
    assert scalar.ub_constrain(0.0, 3.0, lp) == pytest.approx(2.0)
    assert lp.value == pytest.approx(0.0)


def test_infinite_bounds_reduce_to_identity() -> None:
    """Infinite bounds should leave the value and Jacobian untouched."""

    lp = LogJacobian()

    assert scalar.lb_constrain(1.25, -math.inf, lp) == 1.25
    assert scalar.ub_constrain(1.25, math.inf, lp) == 1.25
    assert scalar.lub_constrain(1.25, -math.inf, math.inf, lp) == 1.25
    assert lp.value == 0.0


def test_lub_constrain_maps_zero_to_midpoint() -> None:
    """The logistic interval transform should send 0 to the midpoint."""

    lp = LogJacobian()

    value = scalar.lub_constrain(0.0, 2.0, 4.0, lp)

    assert value == pytest.approx(3.0)
    assert lp.value == pytest.approx(math.log(2.0) + 2.0 * math.log(0.5))


def test_lub_constrain_with_one_infinite_bound_uses_one_sided_transform() -> None:
    """Half-open intervals should fall back to the one-sided transform."""

    assert scalar.lub_constrain(0.0, 1.0, math.inf) == pytest.approx(2.0)
    assert scalar.lub_constrain(0.0, -math.inf, 1.0) == pytest.approx(0.0)


def test_lub_constrain_rejects_empty_interval() -> None:
    """Interval transforms need ``lb < ub``."""

    with pytest.raises(InconsistentBounds):
        scalar.lub_constrain(0.0, 1.0, 1.0)
    with pytest.raises(InconsistentBounds):
        scalar.lub_constrain(0.0, 2.0, 1.0)


def test_offset_multiplier_constrain_is_affine() -> None:
    """Affine transform should add ``log(multiplier)``."""

    lp = LogJacobian()

    assert scalar.offset_multiplier_constrain(2.0, 1.0, 3.0, lp) == pytest.approx(7.0)
    assert lp.value == pytest.approx(math.log(3.0))


@pytest.mark.parametrize(("offset", "multiplier"), [(0.0, 0.0), (0.0, -1.0), (math.inf, 1.0), (0.0, math.nan)])
def test_offset_multiplier_rejects_invalid_parameters(offset: float, multiplier: float) -> None:
    """Offsets must be finite and multipliers positive and finite."""

    with pytest.raises(InvalidTransformParameter):
        scalar.offset_multiplier_constrain(1.0, offset, multiplier)


def test_prob_and_corr_constrain_at_zero() -> None:
    """Zero should map to the centre of each interval."""

    lp = LogJacobian()

    assert scalar.prob_constrain(0.0, lp) == pytest.approx(0.5)
    assert lp.value == pytest.approx(2.0 * math.log(0.5))

    lp.reset()
    assert scalar.corr_constrain(0.0, lp) == pytest.approx(0.0)
    assert lp.value == pytest.approx(0.0)


def test_corr_constrain_jacobian_is_log_one_minus_square() -> None:
    """The tanh Jacobian should be ``log(1 - tanh(x)^2)``."""

    lp = LogJacobian()

    value = scalar.corr_constrain(0.7, lp)

    assert value == pytest.approx(math.tanh(0.7))
    assert lp.value == pytest.approx(math.log(1.0 - math.tanh(0.7) ** 2))


def test_free_transforms_invert_constrain() -> None:
    """Each inverse should recover the unconstrained value."""

    x = 0.3
    assert scalar.positive_free(scalar.positive_constrain(x)) == pytest.approx(x)
    assert scalar.lb_free(scalar.lb_constrain(x, -2.0), -2.0) == pytest.approx(x)
    assert scalar.ub_free(scalar.ub_constrain(x, 5.0), 5.0) == pytest.approx(x)
    assert scalar.lub_free(scalar.lub_constrain(x, -1.0, 4.0), -1.0, 4.0) == pytest.approx(x)
    assert scalar.offset_multiplier_free(scalar.offset_multiplier_constrain(x, 1.0, 2.0), 1.0, 2.0) == pytest.approx(x)
    assert scalar.prob_free(scalar.prob_constrain(x)) == pytest.approx(x)
    assert scalar.corr_free(scalar.corr_constrain(x)) == pytest.approx(x)


def test_free_transforms_check_their_input() -> None:
    """Inverses should reject values outside the constraint set."""

    with pytest.raises(ConstraintViolation):
        scalar.positive_free(-1.0)
    with pytest.raises(ConstraintViolation):
        scalar.prob_free(1.5)
    with pytest.raises(ConstraintViolation):
        scalar.lb_free(0.0, 1.0)
