"""Shape tags for values decoded from flat buffers.

A shape describes the container a read produces and, together with a
constraint kind, how many raw values the read consumes. Dense matrices are
always laid out column-major in the flat buffer. Sparse matrices take their
coordinates from the caller and consume one raw value per coordinate pair.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import operator
from typing import Union

from .errors import InvalidShape


def _require_size(value: int, *, field_name: str) -> None:
    if isinstance(value, bool):
        raise InvalidShape(f"{field_name} must be an integer; got {value!r}")
    try:
        operator.index(value)
    except TypeError as exc:
        raise InvalidShape(f"{field_name} must be an integer; got {value!r}") from exc
    if value < 0:
        raise InvalidShape(f"{field_name} must be >= 0; got {value}")


@dataclass(frozen=True, slots=True)
class IntegerShape:
    """One integer read from the integer buffer."""


@dataclass(frozen=True, slots=True)
class ScalarShape:
    """One real scalar."""


@dataclass(frozen=True, slots=True)
class VectorShape:
    """Column vector of ``size`` elements."""

    size: int

    def __post_init__(self) -> None:
        _require_size(self.size, field_name="size")


@dataclass(frozen=True, slots=True)
class RowVectorShape:
    """Row vector of ``size`` elements."""

    size: int

    def __post_init__(self) -> None:
        _require_size(self.size, field_name="size")


@dataclass(frozen=True, slots=True)
class MatrixShape:
    """Dense ``n_rows x n_cols`` matrix read in column-major order."""

    n_rows: int
    n_cols: int

    def __post_init__(self) -> None:
        _require_size(self.n_rows, field_name="n_rows")
        _require_size(self.n_cols, field_name="n_cols")

    @property
    def is_square(self) -> bool:
        """Whether the matrix has as many rows as columns."""

        return self.n_rows == self.n_cols


@dataclass(frozen=True, slots=True)
class SparseShape:
    """Sparse ``n_rows x n_cols`` matrix with caller-supplied coordinates.

    Parameters
    ----------
    row_indices : tuple[int, ...]
        Zero-based row index of each stored entry.
    col_indices : tuple[int, ...]
        Zero-based column index of each stored entry.
    n_rows : int
        Number of rows.
    n_cols : int
        Number of columns.

    Raises
    ------
    InvalidShape
        If coordinate lists differ in length or, for a non-empty matrix, a
        coordinate falls outside the matrix.

    Notes
    -----
    Entries are read in the order the coordinates are listed, not in
    column-major order. A matrix with a zero dimension stores nothing and
    consumes nothing regardless of the coordinates supplied.
    """

    row_indices: tuple[int, ...]
    col_indices: tuple[int, ...]
    n_rows: int
    n_cols: int

    def __post_init__(self) -> None:
        _require_size(self.n_rows, field_name="n_rows")
        _require_size(self.n_cols, field_name="n_cols")
        object.__setattr__(self, "row_indices", tuple(int(i) for i in self.row_indices))
        object.__setattr__(self, "col_indices", tuple(int(j) for j in self.col_indices))
        if len(self.row_indices) != len(self.col_indices):
            raise InvalidShape(
                "row_indices and col_indices must have the same length; "
                f"got {len(self.row_indices)} and {len(self.col_indices)}"
            )
        if self.is_empty:
            return
        for i, j in zip(self.row_indices, self.col_indices):
            if not (0 <= i < self.n_rows and 0 <= j < self.n_cols):
                raise InvalidShape(
                    f"coordinate ({i}, {j}) is outside a {self.n_rows}x{self.n_cols} matrix"
                )

    @classmethod
    def from_coordinates(
        cls,
        row_indices: Sequence[int],
        col_indices: Sequence[int],
        n_rows: int,
        n_cols: int,
    ) -> SparseShape:
        """Build a sparse shape from any integer sequences."""

        return cls(tuple(row_indices), tuple(col_indices), n_rows, n_cols)

    @property
    def is_empty(self) -> bool:
        """Whether either dimension is zero."""

        return self.n_rows == 0 or self.n_cols == 0

    @property
    def nnz(self) -> int:
        """Number of stored entries, zero when the matrix is empty."""

        return 0 if self.is_empty else len(self.row_indices)


Shape = Union[IntegerShape, ScalarShape, VectorShape, RowVectorShape, MatrixShape, SparseShape]
RealShape = Union[ScalarShape, VectorShape, RowVectorShape, MatrixShape, SparseShape]


def constrained_size(shape: Shape) -> int:
    """Return the number of real elements a value of ``shape`` holds.

    Parameters
    ----------
    shape : Shape
        Shape tag.

    Returns
    -------
    int
        Element count; ``0`` for :class:`IntegerShape`, which reads from the
        integer buffer instead.
    """

    if isinstance(shape, IntegerShape):
        return 0
    if isinstance(shape, ScalarShape):
        return 1
    if isinstance(shape, (VectorShape, RowVectorShape)):
        return shape.size
    if isinstance(shape, MatrixShape):
        return shape.n_rows * shape.n_cols
    if isinstance(shape, SparseShape):
        return shape.nnz
    raise TypeError(f"unsupported shape {shape!r}")


def integer_size(shape: Shape) -> int:
    """Return the number of integers a read of ``shape`` consumes."""

    return 1 if isinstance(shape, IntegerShape) else 0


def shape_name(shape: Shape) -> str:
    """Return a short label used in error messages and config files."""

    if isinstance(shape, IntegerShape):
        return "integer"
    if isinstance(shape, ScalarShape):
        return "scalar"
    if isinstance(shape, VectorShape):
        return f"vector[{shape.size}]"
    if isinstance(shape, RowVectorShape):
        return f"row_vector[{shape.size}]"
    if isinstance(shape, MatrixShape):
        return f"matrix[{shape.n_rows}, {shape.n_cols}]"
    if isinstance(shape, SparseShape):
        return f"sparse_matrix[{shape.n_rows}, {shape.n_cols}; nnz={len(shape.row_indices)}]"
    raise TypeError(f"unsupported shape {shape!r}")


__all__ = [
    "IntegerShape",
    "MatrixShape",
    "RealShape",
    "RowVectorShape",
    "ScalarShape",
    "Shape",
    "SparseShape",
    "VectorShape",
    "constrained_size",
    "integer_size",
    "shape_name",
]
