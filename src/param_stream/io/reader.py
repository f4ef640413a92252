"""Named read operations over a flat parameter buffer.

:class:`ParameterReader` is the surface model code calls, one method per
(shape, constraint) pairing it commonly needs. Every method is a thin call
into :func:`~param_stream.io.dispatch.decode`:

* a method without suffix reads constrained values and checks them,
* a ``*_constrain`` method reads unconstrained values and transforms them,
  adding to ``lp`` when an accumulator is passed.

Container variants of the elementwise bounds (``vector_lb``,
``matrix_lub_constrain``, ...) apply the scalar rule to every element in
column-major order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from scipy import sparse

from param_stream.core.accumulator import LogJacobian
from param_stream.core.constraints import (
    Bounded,
    CholeskyFactorCorr,
    CholeskyFactorCov,
    ConstraintKind,
    Correlation,
    CorrelationMatrix,
    CovarianceMatrix,
    LowerBound,
    OffsetMultiplier,
    Ordered,
    Positive,
    PositiveOrdered,
    Probability,
    Simplex,
    UnitVector,
    UpperBound,
)
from param_stream.core.shapes import (
    IntegerShape,
    MatrixShape,
    RowVectorShape,
    ScalarShape,
    Shape,
    SparseShape,
    VectorShape,
)
from param_stream.transforms.contracts import TransformLibrary
from param_stream.transforms.library import DEFAULT_TRANSFORMS

from .cursor import BufferCursor
from .dispatch import decode

_SCALAR = ScalarShape()
_INTEGER = IntegerShape()


def _sparse(rows: Sequence[int], cols: Sequence[int], n: int, m: int) -> SparseShape:
    return SparseShape.from_coordinates(rows, cols, n, m)


class ParameterReader:
    """Decode typed, constrained values from flat real and integer buffers.

    Parameters
    ----------
    reals : Sequence[float] | numpy.ndarray
        Flat real buffer.
    ints : Sequence[int] | numpy.ndarray, optional
        Flat integer buffer.
    transforms : TransformLibrary | None, optional
        Transform library; defaults to the built-in library.

    Notes
    -----
    Reads are not idempotent: every call consumes values, and the same call
    repeated returns the next value. The order of calls must match the order
    in which the buffer was written.

    Examples
    --------
    >>> reader = ParameterReader([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    >>> reader.matrix(2, 3)[:, 1]
    array([3., 4.])
    """

    def __init__(
        self,
        reals: Sequence[float] | np.ndarray,
        ints: Sequence[int] | np.ndarray = (),
        *,
        transforms: TransformLibrary | None = None,
    ) -> None:
        self._cursor = BufferCursor(reals, ints)
        self._transforms = transforms if transforms is not None else DEFAULT_TRANSFORMS

    @property
    def cursor(self) -> BufferCursor:
        """Underlying cursor over both buffers."""

        return self._cursor

    @property
    def transforms(self) -> TransformLibrary:
        """Transform library used by every read."""

        return self._transforms

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cursor!r})"

    def available(self) -> int:
        """Return the number of reals left to read."""

        return self._cursor.available()

    def available_i(self) -> int:
        """Return the number of integers left to read."""

        return self._cursor.available_i()

    # Generic entry points.

    def read(self, shape: Shape, kind: ConstraintKind | None = None) -> Any:
        """Read constrained values of ``shape`` and check them against ``kind``."""

        return decode(self._cursor, shape, kind, mode="validate", transforms=self._transforms)

    def read_constrain(
        self,
        shape: Shape,
        kind: ConstraintKind | None = None,
        lp: LogJacobian | None = None,
    ) -> Any:
        """Read unconstrained values of ``shape`` and transform them by ``kind``."""

        return decode(self._cursor, shape, kind, mode="constrain", lp=lp, transforms=self._transforms)

    # Unconstrained primitives.

    def integer(self) -> int:
        """Read one unconstrained integer."""

        return self._cursor.next_integer()

    def integer_constrain(self, lp: LogJacobian | None = None) -> int:
        """Same as :meth:`integer`; integers are never transformed."""

        return self._cursor.next_integer()

    def scalar(self) -> float:
        """Read one unconstrained real."""

        return self._cursor.next_scalar()

    def scalar_constrain(self, lp: LogJacobian | None = None) -> float:
        """Same as :meth:`scalar`; the identity adds nothing to ``lp``."""

        return self._cursor.next_scalar()

    def real_array(self, m: int) -> list[float]:
        """Read ``m`` reals into a plain list."""

        return [float(value) for value in self._cursor.next_scalars(m)]

    def vector(self, m: int) -> np.ndarray:
        """Read a length-``m`` column vector."""

        return self.read(VectorShape(m))

    def vector_constrain(self, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Same as :meth:`vector`; the identity adds nothing to ``lp``."""

        return self.read_constrain(VectorShape(m), lp=lp)

    def row_vector(self, m: int) -> np.ndarray:
        """Read a length-``m`` row vector."""

        return self.read(RowVectorShape(m))

    def row_vector_constrain(self, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Same as :meth:`row_vector`; the identity adds nothing to ``lp``."""

        return self.read_constrain(RowVectorShape(m), lp=lp)

    def matrix(self, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix stored column-major."""

        return self.read(MatrixShape(n, m))

    def matrix_constrain(self, n: int, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Same as :meth:`matrix`; the identity adds nothing to ``lp``."""

        return self.read_constrain(MatrixShape(n, m), lp=lp)

    def sparse_matrix(self, rows: Sequence[int], cols: Sequence[int], n: int, m: int) -> sparse.csc_matrix:
        """Read one real per ``(rows[i], cols[i])`` coordinate into an ``n x m`` matrix."""

        return self.read(_sparse(rows, cols, n, m))

    def sparse_matrix_constrain(
        self,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> sparse.csc_matrix:
        """Same as :meth:`sparse_matrix`; the identity adds nothing to ``lp``."""

        return self.read_constrain(_sparse(rows, cols, n, m), lp=lp)

    # Bounded integers.

    def integer_lb(self, lb: int) -> int:
        """Read an integer and require ``value >= lb``."""

        return self.read(_INTEGER, LowerBound(lb))

    def integer_lb_constrain(self, lb: int, lp: LogJacobian | None = None) -> int:
        """Same as :meth:`integer_lb`; ``lp`` is never touched."""

        return self.integer_lb(lb)

    def integer_ub(self, ub: int) -> int:
        """Read an integer and require ``value <= ub``."""

        return self.read(_INTEGER, UpperBound(ub))

    def integer_ub_constrain(self, ub: int, lp: LogJacobian | None = None) -> int:
        """Same as :meth:`integer_ub`; ``lp`` is never touched."""

        return self.integer_ub(ub)

    def integer_lub(self, lb: int, ub: int) -> int:
        """Read an integer and require ``lb <= value <= ub``.

        The integer is consumed even when the bounds are inconsistent.
        """

        return self.read(_INTEGER, Bounded(lb, ub))

    def integer_lub_constrain(self, lb: int, ub: int, lp: LogJacobian | None = None) -> int:
        """Same as :meth:`integer_lub`; ``lp`` is never touched."""

        return self.integer_lub(lb, ub)

    # Constrained scalars.

    def scalar_pos(self) -> float:
        """Read a real and require ``value > 0``."""

        return self.read(_SCALAR, Positive())

    def scalar_pos_constrain(self, lp: LogJacobian | None = None) -> float:
        """Read a real and map it through ``exp``."""

        return self.read_constrain(_SCALAR, Positive(), lp)

    def scalar_lb(self, lb: float) -> float:
        """Read a real and require ``value >= lb``."""

        return self.read(_SCALAR, LowerBound(lb))

    def scalar_lb_constrain(self, lb: float, lp: LogJacobian | None = None) -> float:
        """Read a real and map it onto ``[lb, inf)`` as ``lb + exp(x)``."""

        return self.read_constrain(_SCALAR, LowerBound(lb), lp)

    def scalar_ub(self, ub: float) -> float:
        """Read a real and require ``value <= ub``."""

        return self.read(_SCALAR, UpperBound(ub))

    def scalar_ub_constrain(self, ub: float, lp: LogJacobian | None = None) -> float:
        """Read a real and map it onto ``(-inf, ub]`` as ``ub - exp(x)``."""

        return self.read_constrain(_SCALAR, UpperBound(ub), lp)

    def scalar_lub(self, lb: float, ub: float) -> float:
        """Read a real and require ``lb <= value <= ub``."""

        return self.read(_SCALAR, Bounded(lb, ub))

    def scalar_lub_constrain(self, lb: float, ub: float, lp: LogJacobian | None = None) -> float:
        """Read a real and map it into ``(lb, ub)`` with the logistic transform."""

        return self.read_constrain(_SCALAR, Bounded(lb, ub), lp)

    def scalar_offset_multiplier(self, offset: float, multiplier: float) -> float:
        """Read a scalar already on the offset/multiplier scale; nothing is checked."""

        return self.read(_SCALAR, OffsetMultiplier(offset, multiplier))

    def scalar_offset_multiplier_constrain(
        self,
        offset: float,
        multiplier: float,
        lp: LogJacobian | None = None,
    ) -> float:
        """Read a real ``x`` and return ``offset + multiplier * x``."""

        return self.read_constrain(_SCALAR, OffsetMultiplier(offset, multiplier), lp)

    def prob(self) -> float:
        """Read a real and require it to lie in ``[0, 1]``."""

        return self.read(_SCALAR, Probability())

    def prob_constrain(self, lp: LogJacobian | None = None) -> float:
        """Read a real and map it into ``(0, 1)`` with ``expit``."""

        return self.read_constrain(_SCALAR, Probability(), lp)

    def corr(self) -> float:
        """Read a real and require it to lie in ``[-1, 1]``."""

        return self.read(_SCALAR, Correlation())

    def corr_constrain(self, lp: LogJacobian | None = None) -> float:
        """Read a real and map it into ``(-1, 1)`` with ``tanh``."""

        return self.read_constrain(_SCALAR, Correlation(), lp)

    # Structured vectors and matrices.

    def unit_vector(self, k: int) -> np.ndarray:
        """Read ``k`` reals and require unit Euclidean norm."""

        return self.read(VectorShape(k), UnitVector())

    def unit_vector_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k`` reals and normalize them."""

        return self.read_constrain(VectorShape(k), UnitVector(), lp)

    def simplex(self, k: int) -> np.ndarray:
        """Read ``k`` reals and require them to be non-negative and sum to one."""

        return self.read(VectorShape(k), Simplex())

    def simplex_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k - 1`` reals and map them onto a ``k``-simplex."""

        return self.read_constrain(VectorShape(k), Simplex(), lp)

    def ordered(self, k: int) -> np.ndarray:
        """Read ``k`` reals and require them to be strictly increasing."""

        return self.read(VectorShape(k), Ordered())

    def ordered_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k`` reals into a strictly increasing vector."""

        return self.read_constrain(VectorShape(k), Ordered(), lp)

    def positive_ordered(self, k: int) -> np.ndarray:
        """Read ``k`` reals and require them to be non-negative and strictly increasing."""

        return self.read(VectorShape(k), PositiveOrdered())

    def positive_ordered_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k`` reals into a positive, strictly increasing vector."""

        return self.read_constrain(VectorShape(k), PositiveOrdered(), lp)

    def cholesky_factor_cov(self, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix and require it to be a Cholesky factor."""

        return self.read(MatrixShape(n, m), CholeskyFactorCov())

    def cholesky_factor_cov_constrain(self, n: int, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``m(m+1)/2 + (n-m)m`` reals into an ``n x m`` Cholesky factor."""

        return self.read_constrain(MatrixShape(n, m), CholeskyFactorCov(), lp)

    def cholesky_factor_corr(self, k: int) -> np.ndarray:
        """Read a ``k x k`` matrix and require it to be a correlation Cholesky factor."""

        return self.read(MatrixShape(k, k), CholeskyFactorCorr())

    def cholesky_factor_corr_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k(k-1)/2`` reals into a ``k x k`` correlation Cholesky factor."""

        return self.read_constrain(MatrixShape(k, k), CholeskyFactorCorr(), lp)

    def cov_matrix(self, k: int) -> np.ndarray:
        """Read a ``k x k`` matrix and require it to be symmetric positive definite."""

        return self.read(MatrixShape(k, k), CovarianceMatrix())

    def cov_matrix_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k + k(k-1)/2`` reals into a ``k x k`` covariance matrix."""

        return self.read_constrain(MatrixShape(k, k), CovarianceMatrix(), lp)

    def corr_matrix(self, k: int) -> np.ndarray:
        """Read a ``k x k`` matrix and require it to be a correlation matrix."""

        return self.read(MatrixShape(k, k), CorrelationMatrix())

    def corr_matrix_constrain(self, k: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read ``k(k-1)/2`` reals into a ``k x k`` correlation matrix."""

        return self.read_constrain(MatrixShape(k, k), CorrelationMatrix(), lp)

    # Lower-bounded containers.

    def vector_lb(self, lb: float, m: int) -> np.ndarray:
        """Read a length-``m`` vector and require every element to be ``>= lb``."""

        return self.read(VectorShape(m), LowerBound(lb))

    def vector_lb_constrain(self, lb: float, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read a length-``m`` vector and map every element onto ``[lb, inf)``."""

        return self.read_constrain(VectorShape(m), LowerBound(lb), lp)

    def row_vector_lb(self, lb: float, m: int) -> np.ndarray:
        """Read a length-``m`` row vector and require every element to be ``>= lb``."""

        return self.read(RowVectorShape(m), LowerBound(lb))

    def row_vector_lb_constrain(self, lb: float, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read a length-``m`` row vector and map every element onto ``[lb, inf)``."""

        return self.read_constrain(RowVectorShape(m), LowerBound(lb), lp)

    def matrix_lb(self, lb: float, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix and require every element to be ``>= lb``."""

        return self.read(MatrixShape(n, m), LowerBound(lb))

    def matrix_lb_constrain(self, lb: float, n: int, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read an ``n x m`` matrix and map every element onto ``[lb, inf)``."""

        return self.read_constrain(MatrixShape(n, m), LowerBound(lb), lp)

    def sparse_matrix_lb(
        self,
        lb: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and require every element to be ``>= lb``."""

        return self.read(_sparse(rows, cols, n, m), LowerBound(lb))

    def sparse_matrix_lb_constrain(
        self,
        lb: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and map every element onto ``[lb, inf)``."""

        return self.read_constrain(_sparse(rows, cols, n, m), LowerBound(lb), lp)

    # Upper-bounded containers.

    def vector_ub(self, ub: float, m: int) -> np.ndarray:
        """Read a length-``m`` vector and require every element to be ``<= ub``."""

        return self.read(VectorShape(m), UpperBound(ub))

    def vector_ub_constrain(self, ub: float, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read a length-``m`` vector and map every element onto ``(-inf, ub]``."""

        return self.read_constrain(VectorShape(m), UpperBound(ub), lp)

    def row_vector_ub(self, ub: float, m: int) -> np.ndarray:
        """Read a length-``m`` row vector and require every element to be ``<= ub``."""

        return self.read(RowVectorShape(m), UpperBound(ub))

    def row_vector_ub_constrain(self, ub: float, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read a length-``m`` row vector and map every element onto ``(-inf, ub]``."""

        return self.read_constrain(RowVectorShape(m), UpperBound(ub), lp)

    def matrix_ub(self, ub: float, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix and require every element to be ``<= ub``."""

        return self.read(MatrixShape(n, m), UpperBound(ub))

    def matrix_ub_constrain(self, ub: float, n: int, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read an ``n x m`` matrix and map every element onto ``(-inf, ub]``."""

        return self.read_constrain(MatrixShape(n, m), UpperBound(ub), lp)

    def sparse_matrix_ub(
        self,
        ub: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and require every element to be ``<= ub``."""

        return self.read(_sparse(rows, cols, n, m), UpperBound(ub))

    def sparse_matrix_ub_constrain(
        self,
        ub: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and map every element onto ``(-inf, ub]``."""

        return self.read_constrain(_sparse(rows, cols, n, m), UpperBound(ub), lp)

    # Interval-bounded containers.

    def vector_lub(self, lb: float, ub: float, m: int) -> np.ndarray:
        """Read a length-``m`` vector and require every element to lie in ``[lb, ub]``."""

        return self.read(VectorShape(m), Bounded(lb, ub))

    def vector_lub_constrain(self, lb: float, ub: float, m: int, lp: LogJacobian | None = None) -> np.ndarray:
        """Read a length-``m`` vector and map every element into ``(lb, ub)``."""

        return self.read_constrain(VectorShape(m), Bounded(lb, ub), lp)

    def row_vector_lub(self, lb: float, ub: float, m: int) -> np.ndarray:
        """Read a length-``m`` row vector and require every element to lie in ``[lb, ub]``."""

        return self.read(RowVectorShape(m), Bounded(lb, ub))

    def row_vector_lub_constrain(
        self,
        lb: float,
        ub: float,
        m: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Read a length-``m`` row vector and map every element into ``(lb, ub)``."""

        return self.read_constrain(RowVectorShape(m), Bounded(lb, ub), lp)

    def matrix_lub(self, lb: float, ub: float, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix and require every element to lie in ``[lb, ub]``."""

        return self.read(MatrixShape(n, m), Bounded(lb, ub))

    def matrix_lub_constrain(
        self,
        lb: float,
        ub: float,
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Read an ``n x m`` matrix and map every element into ``(lb, ub)``."""

        return self.read_constrain(MatrixShape(n, m), Bounded(lb, ub), lp)

    def sparse_matrix_lub(
        self,
        lb: float,
        ub: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and require every element to lie in ``[lb, ub]``."""

        return self.read(_sparse(rows, cols, n, m), Bounded(lb, ub))

    def sparse_matrix_lub_constrain(
        self,
        lb: float,
        ub: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and map every element into ``(lb, ub)``."""

        return self.read_constrain(_sparse(rows, cols, n, m), Bounded(lb, ub), lp)

    # Offset/multiplier containers.

    def vector_offset_multiplier(self, offset: float, multiplier: float, m: int) -> np.ndarray:
        """Read a length-``m`` vector already on the offset/multiplier scale."""

        return self.read(VectorShape(m), OffsetMultiplier(offset, multiplier))

    def vector_offset_multiplier_constrain(
        self,
        offset: float,
        multiplier: float,
        m: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Read a length-``m`` vector and apply ``offset + multiplier * x`` elementwise."""

        return self.read_constrain(VectorShape(m), OffsetMultiplier(offset, multiplier), lp)

    def row_vector_offset_multiplier(self, offset: float, multiplier: float, m: int) -> np.ndarray:
        """Read a length-``m`` row vector already on the offset/multiplier scale."""

        return self.read(RowVectorShape(m), OffsetMultiplier(offset, multiplier))

    def row_vector_offset_multiplier_constrain(
        self,
        offset: float,
        multiplier: float,
        m: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Read a length-``m`` row vector and apply ``offset + multiplier * x`` elementwise."""

        return self.read_constrain(RowVectorShape(m), OffsetMultiplier(offset, multiplier), lp)

    def matrix_offset_multiplier(self, offset: float, multiplier: float, n: int, m: int) -> np.ndarray:
        """Read an ``n x m`` matrix already on the offset/multiplier scale."""

        return self.read(MatrixShape(n, m), OffsetMultiplier(offset, multiplier))

    def matrix_offset_multiplier_constrain(
        self,
        offset: float,
        multiplier: float,
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> np.ndarray:
        """Read an ``n x m`` matrix and apply ``offset + multiplier * x`` elementwise."""

        return self.read_constrain(MatrixShape(n, m), OffsetMultiplier(offset, multiplier), lp)

    def sparse_matrix_offset_multiplier(
        self,
        offset: float,
        multiplier: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix already on the offset/multiplier scale."""

        return self.read(_sparse(rows, cols, n, m), OffsetMultiplier(offset, multiplier))

    def sparse_matrix_offset_multiplier_constrain(
        self,
        offset: float,
        multiplier: float,
        rows: Sequence[int],
        cols: Sequence[int],
        n: int,
        m: int,
        lp: LogJacobian | None = None,
    ) -> sparse.csc_matrix:
        """Read a sparse ``n x m`` matrix and apply ``offset + multiplier * x`` elementwise."""

        return self.read_constrain(_sparse(rows, cols, n, m), OffsetMultiplier(offset, multiplier), lp)


__all__ = ["ParameterReader"]
