"""Default NumPy/SciPy transform library."""

from __future__ import annotations

import numpy as np

from param_stream.core.accumulator import LogJacobian

from . import checks, matrix, scalar, vector


class DefaultTransformLibrary:
    """Bundle of the built-in transforms, checks and inverse transforms.

    Parameters
    ----------
    tolerance : float, optional
        Absolute tolerance for floating-point equalities in checks (unit
        norm, unit sum, unit diagonal, symmetry). Defaults to ``1e-8``.

    Notes
    -----
    Implements both :class:`~param_stream.transforms.contracts.TransformLibrary`
    and :class:`~param_stream.transforms.contracts.FreeTransformLibrary`.
    Subclass and override single methods to swap one transform.
    """

    def __init__(self, *, tolerance: float = checks.CONSTRAINT_TOLERANCE) -> None:
        if not tolerance >= 0.0:
            raise ValueError(f"tolerance must be >= 0; got {tolerance!r}")
        self._tolerance = float(tolerance)

    @property
    def tolerance(self) -> float:
        """Absolute tolerance used by the equality checks."""

        return self._tolerance

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tolerance={self._tolerance!r})"

    # Scalar transforms.

    def positive_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        return scalar.positive_constrain(x, lp)

    def lb_constrain(self, x: float, lb: float, lp: LogJacobian | None = None) -> float:
        return scalar.lb_constrain(x, lb, lp)

    def ub_constrain(self, x: float, ub: float, lp: LogJacobian | None = None) -> float:
        return scalar.ub_constrain(x, ub, lp)

    def lub_constrain(self, x: float, lb: float, ub: float, lp: LogJacobian | None = None) -> float:
        return scalar.lub_constrain(x, lb, ub, lp)

    def offset_multiplier_constrain(
        self,
        x: float,
        offset: float,
        multiplier: float,
        lp: LogJacobian | None = None,
    ) -> float:
        return scalar.offset_multiplier_constrain(x, offset, multiplier, lp)

    def prob_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        return scalar.prob_constrain(x, lp)

    def corr_constrain(self, x: float, lp: LogJacobian | None = None) -> float:
        return scalar.corr_constrain(x, lp)

    # Structured transforms.

    def unit_vector_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        return vector.unit_vector_constrain(y, lp)

    def simplex_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        return vector.simplex_constrain(y, lp)

    def ordered_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        return vector.ordered_constrain(y, lp)

    def positive_ordered_constrain(self, y: np.ndarray, lp: LogJacobian | None = None) -> np.ndarray:
        return vector.positive_ordered_constrain(y, lp)

    def cholesky_factor_constrain(
        self,
        x: np.ndarray,
        n_rows: int,
        n_cols: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        return matrix.cholesky_factor_constrain(x, n_rows, n_cols, lp)

    def cholesky_corr_constrain(self, y: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        return matrix.cholesky_corr_constrain(y, k, lp)

    def cov_matrix_constrain(self, x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        return matrix.cov_matrix_constrain(x, k, lp)

    def corr_matrix_constrain(self, x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        return matrix.corr_matrix_constrain(x, k, lp)

    # Checks.

    def check_positive(self, x: float) -> None:
        checks.check_positive(x)

    def check_greater_or_equal(self, x: float, lb: float) -> None:
        checks.check_greater_or_equal(x, lb)

    def check_less_or_equal(self, x: float, ub: float) -> None:
        checks.check_less_or_equal(x, ub)

    def check_bounded(self, x: float, lb: float, ub: float) -> None:
        checks.check_bounded(x, lb, ub)

    def check_probability(self, x: float) -> None:
        checks.check_probability(x)

    def check_correlation(self, x: float) -> None:
        checks.check_correlation(x)

    def check_unit_vector(self, y: np.ndarray) -> None:
        checks.check_unit_vector(y, tolerance=self._tolerance)

    def check_simplex(self, y: np.ndarray) -> None:
        checks.check_simplex(y, tolerance=self._tolerance)

    def check_ordered(self, y: np.ndarray) -> None:
        checks.check_ordered(y)

    def check_positive_ordered(self, y: np.ndarray) -> None:
        checks.check_positive_ordered(y)

    def check_cholesky_factor(self, L: np.ndarray) -> None:
        checks.check_cholesky_factor(L)

    def check_cholesky_factor_corr(self, L: np.ndarray) -> None:
        checks.check_cholesky_factor_corr(L, tolerance=self._tolerance)

    def check_cov_matrix(self, A: np.ndarray) -> None:
        checks.check_cov_matrix(A, tolerance=self._tolerance)

    def check_corr_matrix(self, A: np.ndarray) -> None:
        checks.check_corr_matrix(A, tolerance=self._tolerance)

    # Inverse transforms.

    def positive_free(self, y: float) -> float:
        return scalar.positive_free(y)

    def lb_free(self, y: float, lb: float) -> float:
        return scalar.lb_free(y, lb)

    def ub_free(self, y: float, ub: float) -> float:
        return scalar.ub_free(y, ub)

    def lub_free(self, y: float, lb: float, ub: float) -> float:
        return scalar.lub_free(y, lb, ub)

    def offset_multiplier_free(self, y: float, offset: float, multiplier: float) -> float:
        return scalar.offset_multiplier_free(y, offset, multiplier)

    def prob_free(self, y: float) -> float:
        return scalar.prob_free(y)

    def corr_free(self, y: float) -> float:
        return scalar.corr_free(y)

    def unit_vector_free(self, x: np.ndarray) -> np.ndarray:
        return vector.unit_vector_free(x, tolerance=self._tolerance)

    def simplex_free(self, x: np.ndarray) -> np.ndarray:
        return vector.simplex_free(x, tolerance=self._tolerance)

    def ordered_free(self, x: np.ndarray) -> np.ndarray:
        return vector.ordered_free(x)

    def positive_ordered_free(self, x: np.ndarray) -> np.ndarray:
        return vector.positive_ordered_free(x)

    def cholesky_factor_free(self, L: np.ndarray) -> np.ndarray:
        return matrix.cholesky_factor_free(L)

    def cholesky_corr_free(self, L: np.ndarray) -> np.ndarray:
        return matrix.cholesky_corr_free(L, tolerance=self._tolerance)

    def cov_matrix_free(self, S: np.ndarray) -> np.ndarray:
        return matrix.cov_matrix_free(S, tolerance=self._tolerance)

    def corr_matrix_free(self, R: np.ndarray) -> np.ndarray:
        return matrix.corr_matrix_free(R, tolerance=self._tolerance)


DEFAULT_TRANSFORMS = DefaultTransformLibrary()


__all__ = ["DEFAULT_TRANSFORMS", "DefaultTransformLibrary"]
