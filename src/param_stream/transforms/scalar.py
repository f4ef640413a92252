"""Scalar change-of-variables transforms.

Each ``*_constrain`` function maps an unconstrained real onto its constraint
set and, when given a :class:`~param_stream.core.accumulator.LogJacobian`,
adds the log absolute derivative of the map. Each ``*_free`` function is the
inverse and validates its input first.
"""

from __future__ import annotations

import math

import numpy as np
from scipy.special import expit, log_expit, logit

from param_stream.core.accumulator import LogJacobian
from param_stream.core.errors import InconsistentBounds, InvalidTransformParameter

from .checks import (
    check_bounded,
    check_correlation,
    check_greater_or_equal,
    check_less_or_equal,
    check_positive,
    check_probability,
)


def positive_constrain(x: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(0, inf)`` with ``exp``."""

    if lp is not None:
        lp.add(x)
    return float(np.exp(x))


def positive_free(y: float) -> float:
    """Invert :func:`positive_constrain` with ``log``."""

    check_positive(y)
    return float(np.log(y))


def lb_constrain(x: float, lb: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(lb, inf)`` with ``exp(x) + lb``.

    A lower bound of ``-inf`` leaves ``x`` unchanged.
    """

    if lb == -math.inf:
        return float(x)
    if lp is not None:
        lp.add(x)
    return float(np.exp(x) + lb)


def lb_free(y: float, lb: float) -> float:
    """Invert :func:`lb_constrain`; identity when ``lb`` is ``-inf``."""

    if lb == -math.inf:
        return float(y)
    check_greater_or_equal(y, lb)
    return float(np.log(y - lb))


def ub_constrain(x: float, ub: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(-inf, ub)`` with ``ub - exp(x)``.

    An upper bound of ``+inf`` leaves ``x`` unchanged.
    """

    if ub == math.inf:
        return float(x)
    if lp is not None:
        lp.add(x)
    return float(ub - np.exp(x))


def ub_free(y: float, ub: float) -> float:
    """Invert :func:`ub_constrain`; identity when ``ub`` is ``inf``."""

    if ub == math.inf:
        return float(y)
    check_less_or_equal(y, ub)
    return float(np.log(ub - y))


def _require_interval(lb: float, ub: float) -> None:
    if not lb < ub:
        raise InconsistentBounds(
            lb,
            ub,
            f"lower bound must be less than upper bound for an interval transform; got lb={lb!r}, ub={ub!r}",
        )


def lub_constrain(x: float, lb: float, ub: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(lb, ub)`` with a scaled logistic function.

    Infinite bounds reduce the transform to :func:`lb_constrain`,
    :func:`ub_constrain` or the identity.

    Raises
    ------
    InconsistentBounds
        If ``lb >= ub``.
    """

    _require_interval(lb, ub)
    if lb == -math.inf and ub == math.inf:
        return float(x)
    if lb == -math.inf:
        return ub_constrain(x, ub, lp)
    if ub == math.inf:
        return lb_constrain(x, lb, lp)

    diff = ub - lb
    if lp is not None:
        lp.add(math.log(diff) + log_expit(x) + log_expit(-x))
    return float(diff * expit(x) + lb)


def lub_free(y: float, lb: float, ub: float) -> float:
    """Invert :func:`lub_constrain`, degrading to one-sided inverses for infinite bounds."""

    _require_interval(lb, ub)
    if lb == -math.inf and ub == math.inf:
        return float(y)
    if lb == -math.inf:
        return ub_free(y, ub)
    if ub == math.inf:
        return lb_free(y, lb)
    check_bounded(y, lb, ub)
    return float(logit((y - lb) / (ub - lb)))


def _require_affine(offset: float, multiplier: float) -> None:
    if not math.isfinite(offset):
        raise InvalidTransformParameter(f"offset must be finite; got {offset!r}")
    if not (math.isfinite(multiplier) and multiplier > 0):
        raise InvalidTransformParameter(f"multiplier must be positive and finite; got {multiplier!r}")


def offset_multiplier_constrain(
    x: float,
    offset: float,
    multiplier: float,
    lp: LogJacobian | None = None,
) -> float:
    """Map ``x`` to ``offset + multiplier * x``.

    Raises
    ------
    InvalidTransformParameter
        If ``offset`` is not finite or ``multiplier`` is not positive and
        finite.
    """

    _require_affine(offset, multiplier)
    if lp is not None:
        lp.add(math.log(multiplier))
    return float(offset + multiplier * x)


def offset_multiplier_free(y: float, offset: float, multiplier: float) -> float:
    """Invert :func:`offset_multiplier_constrain`."""

    _require_affine(offset, multiplier)
    return float((y - offset) / multiplier)


def prob_constrain(x: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(0, 1)`` with the logistic function."""

    if lp is not None:
        lp.add(log_expit(x) + log_expit(-x))
    return float(expit(x))


def prob_free(y: float) -> float:
    """Invert :func:`prob_constrain` with ``logit``."""

    check_probability(y)
    return float(logit(y))


def corr_constrain(x: float, lp: LogJacobian | None = None) -> float:
    """Map onto ``(-1, 1)`` with ``tanh``."""

    value = math.tanh(x)
    if lp is not None:
        lp.add(math.log1p(-(value * value)) if abs(value) < 1.0 else -math.inf)
    return float(value)


def corr_free(y: float) -> float:
    """Invert :func:`corr_constrain` with ``arctanh``."""

    check_correlation(y)
    return float(np.arctanh(y))


__all__ = [
    "corr_constrain",
    "corr_free",
    "lb_constrain",
    "lb_free",
    "lub_constrain",
    "lub_free",
    "offset_multiplier_constrain",
    "offset_multiplier_free",
    "positive_constrain",
    "positive_free",
    "prob_constrain",
    "prob_free",
    "ub_constrain",
    "ub_free",
]
