"""Protocol contracts for pluggable transform libraries.

The decoder depends only on these signatures. A transform library maps raw
values onto constraint sets (optionally accumulating a log-Jacobian), checks
already-constrained values, and, for encoding, maps constrained values back
to raw values.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from param_stream.core.accumulator import LogJacobian


@runtime_checkable
class TransformLibrary(Protocol):
    """Constraining transforms and validity checks used when decoding.

    Notes
    -----
    Scalar methods receive one raw value at a time; the decoder applies them
    element by element, in column-major order, for container shapes. Checks
    raise :class:`~param_stream.core.errors.ConstraintViolation` on failure.
    """

    def positive_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        """Map onto the positive reals."""

    def lb_constrain(self, x: float, lb: float, lp: LogJacobian | None = None) -> float:
        """Map onto reals above ``lb``."""

    def ub_constrain(self, x: float, ub: float, lp: LogJacobian | None = None) -> float:
        """Map onto reals below ``ub``."""

    def lub_constrain(self, x: float, lb: float, ub: float, lp: LogJacobian | None = None) -> float:
        """Map onto the interval ``(lb, ub)``."""

    def offset_multiplier_constrain(
        self,
        x: float,
        offset: float,
        multiplier: float,
        lp: LogJacobian | None = None,
    ) -> float:
        """Apply ``offset + multiplier * x``."""

    def prob_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        """Map onto ``(0, 1)``."""

    def corr_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        """Map onto ``(-1, 1)``."""

    def unit_vector_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        """Map ``k`` reals onto the unit sphere in ``k`` dimensions."""

    def simplex_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        """Map ``k - 1`` reals onto a ``k``-simplex."""

    def ordered_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        """Map ``k`` reals onto a strictly increasing vector."""

    def positive_ordered_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        """Map ``k`` reals onto a strictly increasing positive vector."""

    def cholesky_factor_constrain(
        self,
        x: np.ndarray,
        n_rows: int,
        n_cols: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Build an ``n_rows x n_cols`` Cholesky factor."""

    def cholesky_corr_constrain(self, y: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Build a ``k x k`` Cholesky factor of a correlation matrix."""

    def cov_matrix_constrain(self, x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Build a ``k x k`` covariance matrix."""

    def corr_matrix_constrain(self, x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Build a ``k x k`` correlation matrix."""

    def check_positive(self, x: float) -> None:
        """Require ``x > 0``."""

    def check_greater_or_equal(self, x: float, lb: float) -> None:
        """Require ``x >= lb``."""

    def check_less_or_equal(self, x: float, ub: float) -> None:
        """Require ``x <= ub``."""

    def check_bounded(self, x: float, lb: float, ub: float) -> None:
        """Require ``lb <= ub`` then ``lb <= x <= ub``."""

    def check_probability(self, x: float) -> None:
        """Require ``0 <= x <= 1``."""

    def check_correlation(self, x: float) -> None:
        """Require ``-1 <= x <= 1``."""

    def check_unit_vector(self, y: np.ndarray) -> None:
        """Require unit Euclidean length."""

    def check_simplex(self, y: np.ndarray) -> None:
        """Require non-negative elements summing to one."""

    def check_ordered(self, y: np.ndarray) -> None:
        """Require strictly increasing elements."""

    def check_positive_ordered(self, y: np.ndarray) -> None:
        """Require non-negative, strictly increasing elements."""

    def check_cholesky_factor(self, L: np.ndarray) -> None:
        """Require a valid Cholesky factor."""

    def check_cholesky_factor_corr(self, L: np.ndarray) -> None:
        """Require a valid Cholesky factor of a correlation matrix."""

    def check_cov_matrix(self, A: np.ndarray) -> None:
        """Require a symmetric positive-definite matrix."""

    def check_corr_matrix(self, A: np.ndarray) -> None:
        """Require a correlation matrix."""


@runtime_checkable
class FreeTransformLibrary(Protocol):
    """Inverse transforms used when encoding constrained values."""

    def positive_free(self, y: float) -> float:
        """Invert the positive transform."""

    def lb_free(self, y: float, lb: float) -> float:
        """Invert the lower-bound transform."""

    def ub_free(self, y: float, ub: float) -> float:
        """Invert the upper-bound transform."""

    def lub_free(self, y: float, lb: float, ub: float) -> float:
        """Invert the interval transform."""

    def offset_multiplier_free(self, y: float, offset: float, multiplier: float) -> float:
        """Invert the affine transform."""

    def prob_free(self, y: float) -> float:
        """Invert the probability transform."""

    def corr_free(self, y: float) -> float:
        """Invert the correlation transform."""

    def unit_vector_free(self, x: np.ndarray) -> np.ndarray:
        """Invert the unit-vector transform."""

    def simplex_free(self, x: np.ndarray) -> np.ndarray:
        """Invert the simplex transform."""

    def ordered_free(self, x: np.ndarray) -> np.ndarray:
        """Invert the ordered transform."""

    def positive_ordered_free(self, x: np.ndarray) -> np.ndarray:
        """Invert the positive-ordered transform."""

    def cholesky_factor_free(self, L: np.ndarray) -> np.ndarray:
        """Invert the Cholesky-factor transform."""

    def cholesky_corr_free(self, L: np.ndarray) -> np.ndarray:
        """Invert the Cholesky-correlation transform."""

    def cov_matrix_free(self, S: np.ndarray) -> np.ndarray:
        """Invert the covariance-matrix transform."""

    def corr_matrix_free(self, R: np.ndarray) -> np.ndarray:
        """Invert the correlation-matrix transform."""


__all__ = ["FreeTransformLibrary", "TransformLibrary"]
