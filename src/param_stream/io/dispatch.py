"""Generic decode entry point: one read for any shape and constraint kind.

A read proceeds in a fixed order:

1. the shape/kind pairing is validated (``InvalidShape`` before consuming),
2. the required raw run is taken from the cursor in one bounds-checked step
   (``OutOfData`` leaves the cursor untouched),
3. the run is either checked as an already-constrained value (validate mode)
   or passed through the constraining transform (constrain mode).

Because the run is consumed before any check, a failed check still leaves
the cursor advanced by exactly the documented amount.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Literal

import numpy as np

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
    Unconstrained,
    UnitVector,
    UpperBound,
    check_combination,
    is_elementwise,
    unconstrained_size,
)
from param_stream.core.shapes import IntegerShape, Shape, constrained_size
from param_stream.transforms.contracts import TransformLibrary
from param_stream.transforms.library import DEFAULT_TRANSFORMS

from .assembler import assemble, flatten
from .cursor import BufferCursor

DecodeMode = Literal["validate", "constrain"]
DECODE_MODES: tuple[DecodeMode, ...] = ("validate", "constrain")


def decode(
    cursor: BufferCursor,
    shape: Shape,
    kind: ConstraintKind | None = None,
    *,
    mode: DecodeMode = "constrain",
    lp: LogJacobian | None = None,
    transforms: TransformLibrary | None = None,
) -> Any:
    """Read one value of ``shape`` under constraint ``kind``.

    Parameters
    ----------
    cursor : BufferCursor
        Read position over the flat buffers; advanced by this call.
    shape : Shape
        Requested container shape.
    kind : ConstraintKind | None, optional
        Constraint kind. ``None`` means :class:`Unconstrained`.
    mode : {"validate", "constrain"}, optional
        ``"validate"`` reads constrained values directly and checks them.
        ``"constrain"`` reads unconstrained values and transforms them.
    lp : LogJacobian | None, optional
        Log-Jacobian accumulator for constrain mode. Must be ``None`` in
        validate mode. Integer reads never touch it.
    transforms : TransformLibrary | None, optional
        Transform library. Defaults to the built-in library.

    Returns
    -------
    Any
        ``int`` for integer reads, ``float`` for scalars, 1-D arrays for
        vectors, 2-D arrays for matrices, ``scipy.sparse.csc_matrix`` for
        sparse matrices.

    Raises
    ------
    InvalidShape
        If the pairing is unsupported, before anything is consumed.
    OutOfData
        If the buffer holds too few values, before anything is consumed.
    ConstraintViolation
        If a validate-mode value fails its check.
    InconsistentBounds
        If an interval has ``lb > ub`` (``lb >= ub`` for the transform).
    """

    if mode not in DECODE_MODES:
        raise ValueError(f"mode must be one of {DECODE_MODES}; got {mode!r}")
    if mode == "validate" and lp is not None:
        raise ValueError("validate-only reads do not accept a log-Jacobian accumulator")

    kind = kind if kind is not None else Unconstrained()
    library = transforms if transforms is not None else DEFAULT_TRANSFORMS
    check_combination(shape, kind)

    if isinstance(shape, IntegerShape):
        return _decode_integer(cursor, kind, library)

    if is_elementwise(kind):
        run = cursor.next_scalars(constrained_size(shape))
        element = (
            _element_check(kind, library)
            if mode == "validate"
            else _element_transform(kind, library, lp)
        )
        return assemble(shape, np.asarray([element(value) for value in run], dtype=float))

    if mode == "validate":
        value = assemble(shape, cursor.next_scalars(constrained_size(shape)))
        _structured_check(kind, library)(value)
        return value

    raw = cursor.next_scalars(unconstrained_size(shape, kind))
    return _structured_transform(kind, shape, library, raw, lp)


def check_value(
    shape: Shape,
    kind: ConstraintKind | None,
    value: Any,
    *,
    transforms: TransformLibrary | None = None,
) -> None:
    """Check an already-assembled value of ``shape`` against ``kind``.

    Applies the same predicates as a validate-mode :func:`decode` without
    touching any buffer.

    Raises
    ------
    InvalidShape
        If the pairing is unsupported.
    ValueError
        If ``value`` does not have the layout of ``shape``.
    ConstraintViolation
        If ``value`` fails its check.
    """

    kind = kind if kind is not None else Unconstrained()
    library = transforms if transforms is not None else DEFAULT_TRANSFORMS
    check_combination(shape, kind)
    if isinstance(shape, IntegerShape):
        _check_integer(as_integer(value), kind, library)
        return
    run = flatten(shape, value)
    if is_elementwise(kind):
        element = _element_check(kind, library)
        for item in run:
            element(item)
        return
    _structured_check(kind, library)(assemble(shape, run))


def as_integer(value: Any) -> int:
    """Return ``value`` as a Python ``int`` without truncating.

    Accepts anything implementing ``__index__`` (``int``, numpy integers) and
    rejects floats and ``bool``.
    """

    if isinstance(value, (bool, np.bool_)):
        raise ValueError(f"integer value must be an integer; got {value!r}")
    try:
        return operator.index(value)
    except TypeError as exc:
        raise ValueError(f"integer value must be an integer; got {value!r}") from exc


def _decode_integer(cursor: BufferCursor, kind: ConstraintKind, library: TransformLibrary) -> int:
    return _check_integer(cursor.next_integer(), kind, library)


def _check_integer(value: int, kind: ConstraintKind, library: TransformLibrary) -> int:
    if isinstance(kind, LowerBound):
        library.check_greater_or_equal(value, kind.lb)
    elif isinstance(kind, UpperBound):
        library.check_less_or_equal(value, kind.ub)
    elif isinstance(kind, Bounded):
        library.check_bounded(value, kind.lb, kind.ub)
    return value


def _identity(value: float) -> float:
    return float(value)


def _element_check(kind: ConstraintKind, library: TransformLibrary) -> Callable[[float], float]:
    """Return a per-element check that passes the value through."""

    def checked(check: Callable[[float], None]) -> Callable[[float], float]:
        def run(value: float) -> float:
            check(value)
            return float(value)

        return run

    if isinstance(kind, (Unconstrained, OffsetMultiplier)):
        return _identity
    if isinstance(kind, Positive):
        return checked(library.check_positive)
    if isinstance(kind, LowerBound):
        return checked(lambda value: library.check_greater_or_equal(value, kind.lb))
    if isinstance(kind, UpperBound):
        return checked(lambda value: library.check_less_or_equal(value, kind.ub))
    if isinstance(kind, Bounded):
        return checked(lambda value: library.check_bounded(value, kind.lb, kind.ub))
    if isinstance(kind, Probability):
        return checked(library.check_probability)
    if isinstance(kind, Correlation):
        return checked(library.check_correlation)
    raise TypeError(f"{kind!r} is not an elementwise constraint")


def _element_transform(
    kind: ConstraintKind,
    library: TransformLibrary,
    lp: LogJacobian | None,
) -> Callable[[float], float]:
    if isinstance(kind, Unconstrained):
        return _identity
    if isinstance(kind, Positive):
        return lambda value: library.positive_constrain(value, lp)
    if isinstance(kind, LowerBound):
        return lambda value: library.lb_constrain(value, kind.lb, lp)
    if isinstance(kind, UpperBound):
        return lambda value: library.ub_constrain(value, kind.ub, lp)
    if isinstance(kind, Bounded):
        return lambda value: library.lub_constrain(value, kind.lb, kind.ub, lp)
    if isinstance(kind, OffsetMultiplier):
        return lambda value: library.offset_multiplier_constrain(value, kind.offset, kind.multiplier, lp)
    if isinstance(kind, Probability):
        return lambda value: library.prob_constrain(value, lp)
    if isinstance(kind, Correlation):
        return lambda value: library.corr_constrain(value, lp)
    raise TypeError(f"{kind!r} is not an elementwise constraint")


def _structured_check(kind: ConstraintKind, library: TransformLibrary) -> Callable[[Any], None]:
    if isinstance(kind, UnitVector):
        return library.check_unit_vector
    if isinstance(kind, Simplex):
        return library.check_simplex
    if isinstance(kind, Ordered):
        return library.check_ordered
    if isinstance(kind, PositiveOrdered):
        return library.check_positive_ordered
    if isinstance(kind, CholeskyFactorCov):
        return library.check_cholesky_factor
    if isinstance(kind, CholeskyFactorCorr):
        return library.check_cholesky_factor_corr
    if isinstance(kind, CovarianceMatrix):
        return library.check_cov_matrix
    if isinstance(kind, CorrelationMatrix):
        return library.check_corr_matrix
    raise TypeError(f"unsupported constraint kind {kind!r}")


def _structured_transform(
    kind: ConstraintKind,
    shape: Shape,
    library: TransformLibrary,
    raw: np.ndarray,
    lp: LogJacobian | None,
) -> np.ndarray:
    if isinstance(kind, UnitVector):
        return library.unit_vector_constrain(raw, lp)
    if isinstance(kind, Simplex):
        return library.simplex_constrain(raw, lp)
    if isinstance(kind, Ordered):
        return library.ordered_constrain(raw, lp)
    if isinstance(kind, PositiveOrdered):
        return library.positive_ordered_constrain(raw, lp)
    if isinstance(kind, CholeskyFactorCov):
        return library.cholesky_factor_constrain(raw, shape.n_rows, shape.n_cols, lp)
    if isinstance(kind, CholeskyFactorCorr):
        return library.cholesky_corr_constrain(raw, shape.n_rows, lp)
    if isinstance(kind, CovarianceMatrix):
        return library.cov_matrix_constrain(raw, shape.n_rows, lp)
    if isinstance(kind, CorrelationMatrix):
        return library.corr_matrix_constrain(raw, shape.n_rows, lp)
    raise TypeError(f"unsupported constraint kind {kind!r}")


__all__ = ["DECODE_MODES", "DecodeMode", "as_integer", "check_value", "decode"]
