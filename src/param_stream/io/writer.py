"""Encode typed, constrained values into flat real and integer buffers.

:class:`ParameterWriter` is the inverse of
:class:`~param_stream.io.reader.ParameterReader`. Values written with
:meth:`ParameterWriter.write` are laid out so that the matching
``*_constrain`` reads return them (within floating tolerance); values written
with :meth:`ParameterWriter.write_constrained` are laid out for the matching
validate-only reads.
"""

from __future__ import annotations

from typing import Any

import numpy as np

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
from param_stream.core.shapes import IntegerShape, Shape
from param_stream.transforms.contracts import FreeTransformLibrary, TransformLibrary
from param_stream.transforms.library import DEFAULT_TRANSFORMS

from .assembler import flatten
from .dispatch import as_integer, check_value


class ParameterWriter:
    """Accumulate flat buffers from typed values.

    Parameters
    ----------
    transforms : object | None, optional
        Library implementing both
        :class:`~param_stream.transforms.contracts.TransformLibrary` and
        :class:`~param_stream.transforms.contracts.FreeTransformLibrary`.
        Defaults to the built-in library.

    Examples
    --------
    >>> writer = ParameterWriter()
    >>> writer.write(ScalarShape(), Positive(), 1.0)
    >>> writer.reals()
    array([0.])
    """

    def __init__(self, *, transforms: Any | None = None) -> None:
        library = transforms if transforms is not None else DEFAULT_TRANSFORMS
        if not isinstance(library, FreeTransformLibrary):
            raise TypeError(f"transforms must provide inverse transforms; got {type(library).__name__}")
        if not isinstance(library, TransformLibrary):
            raise TypeError(f"transforms must provide checks; got {type(library).__name__}")
        self._transforms = library
        self._reals: list[float] = []
        self._ints: list[int] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(reals={len(self._reals)}, ints={len(self._ints)})"

    def reals(self) -> np.ndarray:
        """Return a copy of the real buffer written so far."""

        return np.asarray(self._reals, dtype=float)

    def ints(self) -> np.ndarray:
        """Return a copy of the integer buffer written so far."""

        return np.asarray(self._ints, dtype=np.int64)

    def integer(self, value: int) -> None:
        """Append one raw integer; non-integral values raise ``ValueError``."""

        self._ints.append(as_integer(value))

    def write(self, shape: Shape, kind: ConstraintKind | None, value: Any) -> None:
        """Append the unconstrained representation of ``value``.

        Parameters
        ----------
        shape : Shape
            Shape of ``value``.
        kind : ConstraintKind | None
            Constraint the value satisfies. ``None`` means unconstrained.
        value : Any
            Constrained value, laid out as the reader returns it.

        Raises
        ------
        ConstraintViolation
            If ``value`` is outside the constraint set.
        InvalidShape
            If the shape/kind pairing is unsupported.
        """

        kind = kind if kind is not None else Unconstrained()
        check_combination(shape, kind)
        if isinstance(shape, IntegerShape):
            check_value(shape, kind, value, transforms=self._transforms)
            self.integer(value)
            return

        if is_elementwise(kind):
            free = self._element_free(kind)
            raw = [free(float(item)) for item in flatten(shape, value)]
        else:
            flatten(shape, value)
            raw = list(self._structured_free(kind, np.asarray(value, dtype=float)))

        expected = unconstrained_size(shape, kind)
        if len(raw) != expected:
            raise ValueError(f"{kind.name} value encodes to {len(raw)} reals; expected {expected}")
        self._reals.extend(float(item) for item in raw)

    def write_constrained(self, shape: Shape, kind: ConstraintKind | None, value: Any) -> None:
        """Append ``value`` as-is, after checking it against ``kind``."""

        check_value(shape, kind, value, transforms=self._transforms)
        if isinstance(shape, IntegerShape):
            self.integer(value)
            return
        self._reals.extend(float(item) for item in flatten(shape, value))

    def _element_free(self, kind: ConstraintKind):
        library = self._transforms
        if isinstance(kind, Unconstrained):
            return float
        if isinstance(kind, Positive):
            return library.positive_free
        if isinstance(kind, LowerBound):
            return lambda value: library.lb_free(value, kind.lb)
        if isinstance(kind, UpperBound):
            return lambda value: library.ub_free(value, kind.ub)
        if isinstance(kind, Bounded):
            return lambda value: library.lub_free(value, kind.lb, kind.ub)
        if isinstance(kind, OffsetMultiplier):
            return lambda value: library.offset_multiplier_free(value, kind.offset, kind.multiplier)
        if isinstance(kind, Probability):
            return library.prob_free
        if isinstance(kind, Correlation):
            return library.corr_free
        raise TypeError(f"{kind!r} is not an elementwise constraint")

    def _structured_free(self, kind: ConstraintKind, value: np.ndarray) -> np.ndarray:
        library = self._transforms
        if isinstance(kind, UnitVector):
            return library.unit_vector_free(value)
        if isinstance(kind, Simplex):
            return library.simplex_free(value)
        if isinstance(kind, Ordered):
            return library.ordered_free(value)
        if isinstance(kind, PositiveOrdered):
            return library.positive_ordered_free(value)
        if isinstance(kind, CholeskyFactorCov):
            return library.cholesky_factor_free(value)
        if isinstance(kind, CholeskyFactorCorr):
            return library.cholesky_corr_free(value)
        if isinstance(kind, CovarianceMatrix):
            return library.cov_matrix_free(value)
        if isinstance(kind, CorrelationMatrix):
            return library.corr_matrix_free(value)
        raise TypeError(f"unsupported constraint kind {kind!r}")


__all__ = ["ParameterWriter"]
