"""Shape assembly: turn contiguous raw runs into vectors and matrices.

Dense matrices use column-major layout: the first ``n_rows`` raw values fill
column 0 top to bottom, the next ``n_rows`` fill column 1, and so on. Sparse
matrices take one raw value per caller-supplied coordinate, in coordinate
order, and sum values that share a coordinate.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from scipy import sparse

from param_stream.core.shapes import (
    MatrixShape,
    RealShape,
    RowVectorShape,
    ScalarShape,
    SparseShape,
    VectorShape,
    constrained_size,
)

from .cursor import BufferCursor


def read_vector(cursor: BufferCursor, size: int) -> np.ndarray:
    """Read a column vector of ``size`` reals."""

    return cursor.next_scalars(size)


def read_row_vector(cursor: BufferCursor, size: int) -> np.ndarray:
    """Read a row vector of ``size`` reals."""

    return cursor.next_scalars(size)


def read_matrix(cursor: BufferCursor, n_rows: int, n_cols: int) -> np.ndarray:
    """Read an ``n_rows x n_cols`` matrix stored column-major.

    Examples
    --------
    Reading ``matrix(2, 3)`` from ``[1, 2, 3, 4, 5, 6]`` yields columns
    ``(1, 2)``, ``(3, 4)`` and ``(5, 6)``.
    """

    shape = MatrixShape(n_rows, n_cols)
    return assemble(shape, cursor.next_scalars(constrained_size(shape)))


def read_sparse_matrix(cursor: BufferCursor, shape: SparseShape) -> sparse.csc_matrix:
    """Read one value per coordinate of ``shape`` into a sparse matrix."""

    return assemble(shape, cursor.next_scalars(shape.nnz))


def assemble(shape: RealShape, run: np.ndarray) -> Any:
    """Arrange a raw run into the container ``shape`` describes.

    Parameters
    ----------
    shape : RealShape
        Target shape.
    run : numpy.ndarray
        Exactly ``constrained_size(shape)`` values in buffer order.

    Returns
    -------
    float | numpy.ndarray | scipy.sparse.csc_matrix
        Scalar, 1-D array (vectors and row vectors), 2-D array or sparse
        matrix.
    """

    expected = constrained_size(shape)
    if run.shape[0] != expected:
        raise ValueError(f"expected {expected} values for assembly; got {run.shape[0]}")

    if isinstance(shape, ScalarShape):
        return float(run[0])
    if isinstance(shape, (VectorShape, RowVectorShape)):
        return run
    if isinstance(shape, MatrixShape):
        return run.reshape((shape.n_rows, shape.n_cols), order="F")
    if isinstance(shape, SparseShape):
        if shape.is_empty:
            return sparse.csc_matrix((shape.n_rows, shape.n_cols), dtype=float)
        triplets = (run, (np.asarray(shape.row_indices, dtype=np.int64), np.asarray(shape.col_indices, dtype=np.int64)))
        return sparse.coo_matrix(triplets, shape=(shape.n_rows, shape.n_cols)).tocsc()
    raise TypeError(f"unsupported shape {shape!r}")


def flatten(shape: RealShape, value: Any) -> np.ndarray:
    """Inverse of :func:`assemble`: lay ``value`` out in buffer order.

    Sparse values are read back at the coordinates listed in ``shape``; when
    a coordinate is listed more than once, the first listing carries the
    stored value and later listings carry zero, so that re-assembly sums to
    the same matrix.
    """

    if isinstance(shape, ScalarShape):
        return np.asarray([float(value)], dtype=float)
    if isinstance(shape, (VectorShape, RowVectorShape)):
        array = np.asarray(value, dtype=float).reshape(-1)
        _require_length(array, shape)
        return array
    if isinstance(shape, MatrixShape):
        array = np.asarray(value, dtype=float)
        if array.shape != (shape.n_rows, shape.n_cols):
            raise ValueError(
                f"expected matrix of shape {(shape.n_rows, shape.n_cols)}; got {array.shape}"
            )
        return array.reshape(-1, order="F")
    if isinstance(shape, SparseShape):
        if shape.is_empty:
            return np.zeros(0, dtype=float)
        dense = value.toarray() if sparse.issparse(value) else np.asarray(value, dtype=float)
        if dense.shape != (shape.n_rows, shape.n_cols):
            raise ValueError(
                f"expected sparse matrix of shape {(shape.n_rows, shape.n_cols)}; got {dense.shape}"
            )
        seen: set[tuple[int, int]] = set()
        out = np.zeros(shape.nnz, dtype=float)
        for index, coordinate in enumerate(zip(shape.row_indices, shape.col_indices)):
            if coordinate in seen:
                continue
            seen.add(coordinate)
            out[index] = dense[coordinate]
        return out
    raise TypeError(f"unsupported shape {shape!r}")


def _require_length(array: np.ndarray, shape: VectorShape | RowVectorShape) -> None:
    if array.shape[0] != shape.size:
        raise ValueError(f"expected {shape.size} values; got {array.shape[0]}")


__all__ = [
    "assemble",
    "flatten",
    "read_matrix",
    "read_row_vector",
    "read_sparse_matrix",
    "read_vector",
]
