"""Vector transforms: unit vectors, simplexes, ordered vectors."""

from __future__ import annotations

import numpy as np
from scipy.special import expit, logit

from param_stream.core.accumulator import LogJacobian
from param_stream.core.errors import ConstraintViolation

from .checks import (
    CONSTRAINT_TOLERANCE,
    check_ordered,
    check_positive_ordered,
    check_simplex,
    check_unit_vector,
)


def unit_vector_constrain(y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
    """Project ``y`` onto the unit sphere.

    The Jacobian term ``-0.5 * ||y||^2`` corresponds to a standard normal
    density on the unconstrained vector, which keeps the radial direction
    identified.

    Raises
    ------
    ConstraintViolation
        If ``y`` has zero or non-finite norm.
    """

    y = np.asarray(y, dtype=float)
    squared_norm = float(np.dot(y, y))
    if not (np.isfinite(squared_norm) and squared_norm > 0.0):
        raise ConstraintViolation(
            "unit_vector",
            y,
            f"unconstrained norm must be positive and finite; got squared norm {squared_norm}",
        )
    if lp is not None:
        lp.add(-0.5 * squared_norm)
    return y / np.sqrt(squared_norm)


def unit_vector_free(x: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> np.ndarray:
    """Return a checked unit vector; any point on the ray is a valid preimage."""

    check_unit_vector(x, tolerance=tolerance)
    return np.array(x, dtype=float)


def simplex_constrain(y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
    """Map ``K - 1`` reals onto a ``K``-simplex by stick breaking.

    Each break point is shifted by ``log(K - k - 1)`` so that ``y = 0`` maps
    to the uniform simplex.

    Parameters
    ----------
    y : numpy.ndarray
        Unconstrained vector of length ``K - 1``.
    lp : LogJacobian | None, optional
        Accumulator for the log-Jacobian.

    Returns
    -------
    numpy.ndarray
        Simplex of length ``K``.
    """

    y = np.asarray(y, dtype=float)
    n = y.shape[0]
    x = np.empty(n + 1, dtype=float)
    stick_length = 1.0
    log_jacobian = 0.0
    for k in range(n):
        adjusted = y[k] - np.log(n - k)
        x[k] = stick_length * expit(adjusted)
        if lp is not None:
            log_jacobian += np.log(stick_length)
            log_jacobian -= np.logaddexp(0.0, -adjusted)
            log_jacobian -= np.logaddexp(0.0, adjusted)
        stick_length -= x[k]
    x[n] = stick_length
    if lp is not None:
        lp.add(log_jacobian)
    return x


def simplex_free(x: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> np.ndarray:
    """Invert :func:`simplex_constrain`."""

    check_simplex(x, tolerance=tolerance)
    x = np.asarray(x, dtype=float)
    n = x.shape[0] - 1
    y = np.empty(n, dtype=float)
    stick_length = x[n]
    for k in range(n - 1, -1, -1):
        stick_length += x[k]
        y[k] = logit(x[k] / stick_length) + np.log(n - k)
    return y


def ordered_constrain(y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
    """Map onto strictly increasing vectors: ``x[0] = y[0]``, ``x[k] = x[k-1] + exp(y[k])``."""

    y = np.asarray(y, dtype=float)
    if y.size == 0:
        return np.zeros(0, dtype=float)
    increments = np.concatenate(([y[0]], np.exp(y[1:])))
    if lp is not None:
        lp.add(float(np.sum(y[1:])))
    return np.cumsum(increments)


def ordered_free(x: np.ndarray) -> np.ndarray:
    """Invert :func:`ordered_constrain` through logs of successive gaps."""

    check_ordered(x)
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return np.zeros(0, dtype=float)
    return np.concatenate(([x[0]], np.log(np.diff(x))))


def positive_ordered_constrain(y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
    """Map onto increasing positive vectors: cumulative sums of ``exp(y)``."""

    y = np.asarray(y, dtype=float)
    if y.size == 0:
        return np.zeros(0, dtype=float)
    if lp is not None:
        lp.add(float(np.sum(y)))
    return np.cumsum(np.exp(y))


def positive_ordered_free(x: np.ndarray) -> np.ndarray:
    """Invert :func:`positive_ordered_constrain`."""

    check_positive_ordered(x)
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return np.zeros(0, dtype=float)
    return np.log(np.concatenate(([x[0]], np.diff(x))))


__all__ = [
    "ordered_constrain",
    "ordered_free",
    "positive_ordered_constrain",
    "positive_ordered_free",
    "simplex_constrain",
    "simplex_free",
    "unit_vector_constrain",
    "unit_vector_free",
]
