"""Validity predicates for constrained values.

Every check raises :class:`~param_stream.core.errors.ConstraintViolation` on
failure and returns ``None`` otherwise. Comparisons are written so that NaN
fails them. Floating-point equalities (unit norm, unit sum, unit diagonal,
symmetry) are tested against an absolute tolerance.
"""

from __future__ import annotations

import numpy as np

from param_stream.core.errors import ConstraintViolation, InconsistentBounds

CONSTRAINT_TOLERANCE = 1e-8


def check_positive(x: float) -> None:
    """Require ``x > 0``."""

    if not x > 0:
        raise ConstraintViolation("positive", x, f"is {x}, but must be positive")


def check_greater_or_equal(x: float, lb: float, *, kind: str = "lower_bound") -> None:
    """Require ``x >= lb``."""

    if not x >= lb:
        raise ConstraintViolation(kind, x, f"is {x}, but must be greater than or equal to {lb}")


def check_less_or_equal(x: float, ub: float, *, kind: str = "upper_bound") -> None:
    """Require ``x <= ub``."""

    if not x <= ub:
        raise ConstraintViolation(kind, x, f"is {x}, but must be less than or equal to {ub}")


def check_bounded(x: float, lb: float, ub: float, *, kind: str = "bounded") -> None:
    """Require ``lb <= x <= ub``.

    Checks run in a fixed order and the first failure wins: bound
    consistency, then the lower bound, then the upper bound.

    Raises
    ------
    InconsistentBounds
        If ``lb > ub``.
    ConstraintViolation
        If ``x`` lies outside ``[lb, ub]``.
    """

    if not lb <= ub:
        raise InconsistentBounds(lb, ub)
    check_greater_or_equal(x, lb, kind=kind)
    check_less_or_equal(x, ub, kind=kind)


def check_probability(x: float) -> None:
    """Require ``0 <= x <= 1``."""

    check_bounded(x, 0.0, 1.0, kind="probability")


def check_correlation(x: float) -> None:
    """Require ``-1 <= x <= 1``."""

    check_bounded(x, -1.0, 1.0, kind="correlation")


def check_unit_vector(y: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> None:
    """Require a non-empty vector with squared norm within ``tolerance`` of 1."""

    y = np.asarray(y, dtype=float)
    if y.size == 0:
        raise ConstraintViolation("unit_vector", y, "is empty, but a unit vector needs at least one element")
    squared_norm = float(np.dot(y, y))
    if not abs(1.0 - squared_norm) <= tolerance:
        raise ConstraintViolation(
            "unit_vector",
            y,
            f"is not a valid unit vector; the sum of squares is {squared_norm}, but should be 1",
        )


def check_simplex(y: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> None:
    """Require a non-empty, non-negative vector summing to 1 within ``tolerance``."""

    y = np.asarray(y, dtype=float)
    if y.size == 0:
        raise ConstraintViolation("simplex", y, "is empty, but a simplex needs at least one element")
    total = float(np.sum(y))
    if not abs(1.0 - total) <= tolerance:
        raise ConstraintViolation("simplex", y, f"is not a valid simplex; sum = {total}, but should be 1")
    for index, value in enumerate(y):
        if not value >= 0.0:
            raise ConstraintViolation(
                "simplex",
                y,
                f"is not a valid simplex; element {index} is {value}, but should be >= 0",
            )


def check_ordered(y: np.ndarray, *, kind: str = "ordered") -> None:
    """Require strictly increasing elements."""

    y = np.asarray(y, dtype=float)
    for index in range(1, y.size):
        if not y[index] > y[index - 1]:
            raise ConstraintViolation(
                kind,
                y,
                f"is not a valid ordered vector; element {index} is {y[index]}, "
                f"but should be greater than the previous element, {y[index - 1]}",
            )


def check_positive_ordered(y: np.ndarray) -> None:
    """Require a non-negative first element and strictly increasing elements."""

    y = np.asarray(y, dtype=float)
    if y.size == 0:
        return
    if not y[0] >= 0.0:
        raise ConstraintViolation(
            "positive_ordered",
            y,
            f"is not a valid positive_ordered vector; element 0 is {y[0]}, but should be >= 0",
        )
    check_ordered(y, kind="positive_ordered")


def check_cholesky_factor(L: np.ndarray, *, kind: str = "cholesky_factor_cov") -> None:
    """Require a lower-triangular matrix with positive diagonal and ``rows >= cols``."""

    L = np.asarray(L, dtype=float)
    if L.ndim != 2:
        raise ConstraintViolation(kind, L, f"must be a matrix; got {L.ndim} dimensions")
    n_rows, n_cols = L.shape
    if n_rows < n_cols:
        raise ConstraintViolation(kind, L, f"has {n_rows} rows, but needs at least {n_cols} (its columns)")
    upper = np.triu(L, k=1)
    if np.any(upper != 0.0):
        row, col = (int(i) for i in np.argwhere(upper != 0.0)[0])
        raise ConstraintViolation(
            kind,
            L,
            f"is not lower triangular; element ({row}, {col}) is {L[row, col]}",
        )
    for index in range(n_cols):
        if not L[index, index] > 0.0:
            raise ConstraintViolation(
                kind,
                L,
                f"has non-positive diagonal element ({index}, {index}) = {L[index, index]}",
            )


def check_cholesky_factor_corr(L: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> None:
    """Require a square Cholesky factor whose rows have unit length."""

    L = np.asarray(L, dtype=float)
    if L.ndim != 2 or L.shape[0] != L.shape[1]:
        raise ConstraintViolation("cholesky_factor_corr", L, f"must be square; got shape {L.shape}")
    check_cholesky_factor(L, kind="cholesky_factor_corr")
    for index in range(L.shape[0]):
        squared_norm = float(np.dot(L[index], L[index]))
        if not abs(1.0 - squared_norm) <= tolerance:
            raise ConstraintViolation(
                "cholesky_factor_corr",
                L,
                f"row {index} has squared norm {squared_norm}, but should be 1",
            )


def check_symmetric(
    A: np.ndarray,
    *,
    kind: str = "cov_matrix",
    tolerance: float = CONSTRAINT_TOLERANCE,
) -> None:
    """Require a square matrix equal to its transpose within ``tolerance``."""

    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ConstraintViolation(kind, A, f"must be square; got shape {A.shape}")
    gap = np.abs(A - A.T)
    if not np.all(gap <= tolerance):
        row, col = (int(i) for i in np.argwhere(~(gap <= tolerance))[0])
        raise ConstraintViolation(
            kind,
            A,
            f"is not symmetric; element ({row}, {col}) is {A[row, col]}, "
            f"but ({col}, {row}) is {A[col, row]}",
        )


def check_pos_definite(
    A: np.ndarray,
    *,
    kind: str = "cov_matrix",
    tolerance: float = CONSTRAINT_TOLERANCE,
) -> None:
    """Require a symmetric, NaN-free, positive-definite matrix."""

    A = np.asarray(A, dtype=float)
    check_symmetric(A, kind=kind, tolerance=tolerance)
    if A.size == 0:
        return
    if np.any(np.isnan(A)):
        raise ConstraintViolation(kind, A, "contains NaN")
    try:
        np.linalg.cholesky(A)
    except np.linalg.LinAlgError as exc:
        raise ConstraintViolation(kind, A, "is not positive definite") from exc


def check_cov_matrix(A: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> None:
    """Require a covariance matrix (symmetric positive definite)."""

    check_pos_definite(A, kind="cov_matrix", tolerance=tolerance)


def check_corr_matrix(A: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> None:
    """Require a correlation matrix (unit diagonal, symmetric positive definite)."""

    A = np.asarray(A, dtype=float)
    check_symmetric(A, kind="corr_matrix", tolerance=tolerance)
    for index in range(A.shape[0]):
        if not abs(1.0 - A[index, index]) <= tolerance:
            raise ConstraintViolation(
                "corr_matrix",
                A,
                f"is not a valid correlation matrix; diagonal element {index} is {A[index, index]}, "
                "but should be 1",
            )
    check_pos_definite(A, kind="corr_matrix", tolerance=tolerance)


__all__ = [
    "CONSTRAINT_TOLERANCE",
    "check_bounded",
    "check_cholesky_factor",
    "check_cholesky_factor_corr",
    "check_corr_matrix",
    "check_correlation",
    "check_cov_matrix",
    "check_greater_or_equal",
    "check_less_or_equal",
    "check_ordered",
    "check_pos_definite",
    "check_positive",
    "check_positive_ordered",
    "check_probability",
    "check_simplex",
    "check_symmetric",
    "check_unit_vector",
]
