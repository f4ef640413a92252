"""Constraint kinds and the raw-value consumption law.

Each constraint kind is a small immutable tag carrying its own parameters.
Combined with a :mod:`~param_stream.core.shapes` tag it fully determines how
many raw values a read consumes in each mode:

* validate-only reads consume the constrained element count,
* constraining reads consume the unconstrained element count, which is
  smaller for simplexes, correlation and covariance structures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .errors import InvalidShape
from .shapes import (
    IntegerShape,
    MatrixShape,
    Shape,
    VectorShape,
    constrained_size,
    shape_name,
)


@dataclass(frozen=True, slots=True)
class Unconstrained:
    """Identity constraint: values are used as read."""

    name: ClassVar[str] = "unconstrained"


@dataclass(frozen=True, slots=True)
class Positive:
    """Strictly positive reals."""

    name: ClassVar[str] = "positive"


@dataclass(frozen=True, slots=True)
class LowerBound:
    """Values greater than or equal to ``lb``."""

    lb: float
    name: ClassVar[str] = "lower_bound"


@dataclass(frozen=True, slots=True)
class UpperBound:
    """Values less than or equal to ``ub``."""

    ub: float
    name: ClassVar[str] = "upper_bound"


@dataclass(frozen=True, slots=True)
class Bounded:
    """Values in the closed interval ``[lb, ub]``.

    Notes
    -----
    ``lb <= ub`` is not enforced at construction. Reads consume their raw
    value before checking the bounds, so the read position stays the same
    whether or not the bounds are consistent.
    """

    lb: float
    ub: float
    name: ClassVar[str] = "bounded"


@dataclass(frozen=True, slots=True)
class OffsetMultiplier:
    """Affine reparameterization ``offset + multiplier * x``."""

    offset: float = 0.0
    multiplier: float = 1.0
    name: ClassVar[str] = "offset_multiplier"


@dataclass(frozen=True, slots=True)
class Probability:
    """Values in ``[0, 1]``."""

    name: ClassVar[str] = "probability"


@dataclass(frozen=True, slots=True)
class Correlation:
    """Values in ``[-1, 1]``."""

    name: ClassVar[str] = "correlation"


@dataclass(frozen=True, slots=True)
class UnitVector:
    """Vectors of unit Euclidean length."""

    name: ClassVar[str] = "unit_vector"


@dataclass(frozen=True, slots=True)
class Simplex:
    """Non-negative vectors summing to one."""

    name: ClassVar[str] = "simplex"


@dataclass(frozen=True, slots=True)
class Ordered:
    """Strictly increasing vectors."""

    name: ClassVar[str] = "ordered"


@dataclass(frozen=True, slots=True)
class PositiveOrdered:
    """Strictly increasing vectors with a non-negative first element."""

    name: ClassVar[str] = "positive_ordered"


@dataclass(frozen=True, slots=True)
class CovarianceMatrix:
    """Symmetric positive-definite matrices."""

    name: ClassVar[str] = "cov_matrix"


@dataclass(frozen=True, slots=True)
class CorrelationMatrix:
    """Symmetric positive-definite matrices with unit diagonal."""

    name: ClassVar[str] = "corr_matrix"


@dataclass(frozen=True, slots=True)
class CholeskyFactorCov:
    """Lower-triangular factors with positive diagonal, ``n_rows >= n_cols``."""

    name: ClassVar[str] = "cholesky_factor_cov"


@dataclass(frozen=True, slots=True)
class CholeskyFactorCorr:
    """Cholesky factors of correlation matrices."""

    name: ClassVar[str] = "cholesky_factor_corr"


ConstraintKind = Union[
    Unconstrained,
    Positive,
    LowerBound,
    UpperBound,
    Bounded,
    OffsetMultiplier,
    Probability,
    Correlation,
    UnitVector,
    Simplex,
    Ordered,
    PositiveOrdered,
    CovarianceMatrix,
    CorrelationMatrix,
    CholeskyFactorCov,
    CholeskyFactorCorr,
]

ELEMENTWISE_KINDS: tuple[type, ...] = (
    Unconstrained,
    Positive,
    LowerBound,
    UpperBound,
    Bounded,
    OffsetMultiplier,
    Probability,
    Correlation,
)
INTEGER_KINDS: tuple[type, ...] = (Unconstrained, LowerBound, UpperBound, Bounded)
VECTOR_KINDS: tuple[type, ...] = (UnitVector, Simplex, Ordered, PositiveOrdered)
SQUARE_MATRIX_KINDS: tuple[type, ...] = (CovarianceMatrix, CorrelationMatrix, CholeskyFactorCorr)


def is_elementwise(kind: ConstraintKind) -> bool:
    """Return whether ``kind`` applies independently to every element."""

    return isinstance(kind, ELEMENTWISE_KINDS)


def check_combination(shape: Shape, kind: ConstraintKind) -> None:
    """Validate that ``kind`` can be read into ``shape``.

    Parameters
    ----------
    shape : Shape
        Requested shape.
    kind : ConstraintKind
        Requested constraint kind.

    Raises
    ------
    InvalidShape
        If the pairing is unsupported or a shape parameter that must be
        non-zero is zero.
    """

    label = f"{kind.name} cannot be read as {shape_name(shape)}"
    if isinstance(shape, IntegerShape):
        if not isinstance(kind, INTEGER_KINDS):
            raise InvalidShape(label)
        return

    if is_elementwise(kind):
        return

    if isinstance(kind, VECTOR_KINDS):
        if not isinstance(shape, VectorShape):
            raise InvalidShape(label)
        if isinstance(kind, UnitVector) and shape.size == 0:
            raise InvalidShape("unit vectors cannot be size 0")
        if isinstance(kind, Simplex) and shape.size == 0:
            raise InvalidShape("simplexes cannot be size 0")
        return

    if not isinstance(shape, MatrixShape):
        raise InvalidShape(label)

    if isinstance(kind, CholeskyFactorCov):
        if shape.n_rows == 0 or shape.n_cols == 0:
            raise InvalidShape("cholesky factors cannot be size 0")
        if shape.n_rows < shape.n_cols:
            raise InvalidShape(
                "cholesky_factor_cov requires n_rows >= n_cols; "
                f"got {shape.n_rows}x{shape.n_cols}"
            )
        return

    if isinstance(kind, SQUARE_MATRIX_KINDS):
        if not shape.is_square:
            raise InvalidShape(f"{kind.name} requires a square matrix; got {shape_name(shape)}")
        if isinstance(kind, CholeskyFactorCorr) and shape.n_rows == 0:
            raise InvalidShape("cholesky factors cannot be size 0")
        return

    raise TypeError(f"unsupported constraint kind {kind!r}")


def unconstrained_size(shape: Shape, kind: ConstraintKind) -> int:
    """Return the number of raw reals a constraining read consumes.

    Parameters
    ----------
    shape : Shape
        Requested shape.
    kind : ConstraintKind
        Requested constraint kind.

    Returns
    -------
    int
        Raw real count. Integer reads consume no reals.

    Raises
    ------
    InvalidShape
        If the shape/kind pairing is invalid.

    Examples
    --------
    >>> unconstrained_size(VectorShape(4), Simplex())
    3
    >>> unconstrained_size(MatrixShape(3, 3), CovarianceMatrix())
    6
    """

    check_combination(shape, kind)
    if is_elementwise(kind) or isinstance(shape, IntegerShape):
        return constrained_size(shape)
    if isinstance(kind, Simplex):
        return shape.size - 1
    if isinstance(kind, (UnitVector, Ordered, PositiveOrdered)):
        return shape.size

    n, m = shape.n_rows, shape.n_cols
    if isinstance(kind, CholeskyFactorCov):
        return (m * (m + 1)) // 2 + (n - m) * m
    if isinstance(kind, CholeskyFactorCorr):
        return (n * (n - 1)) // 2
    if isinstance(kind, CovarianceMatrix):
        return n + (n * (n - 1)) // 2
    if isinstance(kind, CorrelationMatrix):
        return (n * (n - 1)) // 2
    raise TypeError(f"unsupported constraint kind {kind!r}")


def validated_size(shape: Shape, kind: ConstraintKind) -> int:
    """Return the number of raw reals a validate-only read consumes."""

    check_combination(shape, kind)
    return constrained_size(shape)


__all__ = [
    "Bounded",
    "CholeskyFactorCorr",
    "CholeskyFactorCov",
    "ConstraintKind",
    "Correlation",
    "CorrelationMatrix",
    "CovarianceMatrix",
    "ELEMENTWISE_KINDS",
    "INTEGER_KINDS",
    "LowerBound",
    "OffsetMultiplier",
    "Ordered",
    "Positive",
    "PositiveOrdered",
    "Probability",
    "Simplex",
    "Unconstrained",
    "UnitVector",
    "UpperBound",
    "check_combination",
    "is_elementwise",
    "unconstrained_size",
    "validated_size",
]
