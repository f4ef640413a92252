"""Matrix transforms: Cholesky factors, covariance and correlation matrices.

Correlation structures are built from canonical partial correlations (CPCs),
each obtained from one unconstrained real through ``tanh``. Cholesky
correlation factors consume CPCs row by row; correlation matrices consume
them column by column.
"""

from __future__ import annotations

import math

import numpy as np

from param_stream.core.accumulator import LogJacobian

from . import scalar
from .checks import (
    CONSTRAINT_TOLERANCE,
    check_cholesky_factor,
    check_cholesky_factor_corr,
    check_corr_matrix,
    check_cov_matrix,
)


def _require_length(x: np.ndarray, expected: int, *, name: str) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    if x.shape != (expected,):
        raise ValueError(f"{name} expects {expected} unconstrained values; got {x.shape[0] if x.ndim else 0}")
    return x


def _log1m(x: float) -> float:
    return math.log1p(-x) if x < 1.0 else -math.inf


def _tanh_cpcs(y: np.ndarray, lp: LogJacobian | None) -> np.ndarray:
    return np.asarray([scalar.corr_constrain(value, lp) for value in y], dtype=float)


def cholesky_factor_constrain(
    x: np.ndarray,
    n_rows: int,
    n_cols: int,
    lp: LogJacobian | None = None,
) -> np.ndarray:
    """Build an ``n_rows x n_cols`` Cholesky factor from unconstrained values.

    The first ``n_cols`` rows are filled row by row: ``r`` below-diagonal
    values followed by the log of the diagonal. The remaining rows are read
    whole.

    Parameters
    ----------
    x : numpy.ndarray
        ``n_cols * (n_cols + 1) / 2 + (n_rows - n_cols) * n_cols`` values.
    n_rows, n_cols : int
        Factor shape with ``n_rows >= n_cols``.
    lp : LogJacobian | None, optional
        Accumulator; receives the sum of the raw diagonal values.
    """

    if n_rows < n_cols:
        raise ValueError(f"cholesky factor needs n_rows >= n_cols; got {n_rows}x{n_cols}")
    x = _require_length(
        x,
        (n_cols * (n_cols + 1)) // 2 + (n_rows - n_cols) * n_cols,
        name="cholesky_factor_constrain",
    )
    L = np.zeros((n_rows, n_cols), dtype=float)
    pos = 0
    log_jacobian = 0.0
    for row in range(n_cols):
        L[row, :row] = x[pos : pos + row]
        pos += row
        log_jacobian += x[pos]
        L[row, row] = np.exp(x[pos])
        pos += 1
    for row in range(n_cols, n_rows):
        L[row, :] = x[pos : pos + n_cols]
        pos += n_cols
    if lp is not None:
        lp.add(log_jacobian)
    return L


def cholesky_factor_free(L: np.ndarray) -> np.ndarray:
    """Invert :func:`cholesky_factor_constrain`."""

    check_cholesky_factor(L)
    L = np.asarray(L, dtype=float)
    n_rows, n_cols = L.shape
    pieces: list[np.ndarray] = []
    for row in range(n_cols):
        pieces.append(L[row, :row])
        pieces.append(np.log(L[row, row : row + 1]))
    for row in range(n_cols, n_rows):
        pieces.append(L[row, :])
    return np.concatenate(pieces) if pieces else np.zeros(0, dtype=float)


def cholesky_corr_constrain(y: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
    """Build a ``k x k`` Cholesky factor of a correlation matrix.

    Parameters
    ----------
    y : numpy.ndarray
        ``k * (k - 1) / 2`` unconstrained values, consumed row by row below
        the diagonal.
    k : int
        Matrix dimension.
    lp : LogJacobian | None, optional
        Accumulator for the log-Jacobian.
    """

    y = _require_length(y, (k * (k - 1)) // 2, name="cholesky_corr_constrain")
    z = _tanh_cpcs(y, lp)
    L = np.zeros((k, k), dtype=float)
    if k == 0:
        return L
    L[0, 0] = 1.0
    pos = 0
    log_jacobian = 0.0
    for row in range(1, k):
        L[row, 0] = z[pos]
        pos += 1
        sum_sqs = L[row, 0] ** 2
        for col in range(1, row):
            log_jacobian += 0.5 * _log1m(sum_sqs)
            L[row, col] = z[pos] * math.sqrt(max(1.0 - sum_sqs, 0.0))
            pos += 1
            sum_sqs += L[row, col] ** 2
        L[row, row] = math.sqrt(max(1.0 - sum_sqs, 0.0))
    if lp is not None:
        lp.add(log_jacobian)
    return L


def cholesky_corr_free(L: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> np.ndarray:
    """Invert :func:`cholesky_corr_constrain`."""

    check_cholesky_factor_corr(L, tolerance=tolerance)
    L = np.asarray(L, dtype=float)
    k = L.shape[0]
    z: list[float] = []
    for row in range(1, k):
        z.append(L[row, 0])
        sum_sqs = L[row, 0] ** 2
        for col in range(1, row):
            z.append(L[row, col] / math.sqrt(1.0 - sum_sqs))
            sum_sqs += L[row, col] ** 2
    return np.asarray([scalar.corr_free(value) for value in z], dtype=float)


def cov_matrix_constrain(x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
    """Build a ``k x k`` covariance matrix ``L @ L.T``.

    ``L`` is filled row by row with ``exp`` on the diagonal. The Jacobian
    covers both the exponential and the ``L -> L L^T`` map.
    """

    x = _require_length(x, k + (k * (k - 1)) // 2, name="cov_matrix_constrain")
    L = np.zeros((k, k), dtype=float)
    pos = 0
    for row in range(k):
        L[row, :row] = x[pos : pos + row]
        pos += row
        L[row, row] = np.exp(x[pos])
        pos += 1
    if lp is not None:
        log_jacobian = k * math.log(2.0)
        for index in range(k):
            log_jacobian += (k - index + 1) * math.log(L[index, index])
        lp.add(log_jacobian)
    return L @ L.T


def cov_matrix_free(S: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> np.ndarray:
    """Invert :func:`cov_matrix_constrain`."""

    check_cov_matrix(S, tolerance=tolerance)
    S = np.asarray(S, dtype=float)
    k = S.shape[0]
    if k == 0:
        return np.zeros(0, dtype=float)
    L = np.linalg.cholesky(S)
    pieces: list[np.ndarray] = []
    for row in range(k):
        pieces.append(L[row, :row])
        pieces.append(np.log(L[row, row : row + 1]))
    return np.concatenate(pieces)


def read_corr_L(cpcs: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
    """Assemble the Cholesky factor of a correlation matrix from CPCs.

    CPCs are consumed column by column below the diagonal. With ``lp``, adds
    the Jacobian of the CPC-to-correlation-matrix map.
    """

    cpcs = np.asarray(cpcs, dtype=float)
    if k == 0:
        return np.zeros((0, 0), dtype=float)
    if k == 1:
        return np.ones((1, 1), dtype=float)

    if lp is not None:
        log_jacobian = 0.0
        position = 0
        for col in range(1, k - 1):
            for _ in range(col + 1, k + 1):
                log_jacobian += (k - col - 1) * _log1m(cpcs[position] ** 2)
                position += 1
        lp.add(0.5 * log_jacobian)

    L = np.zeros((k, k), dtype=float)
    acc = np.ones(k - 1, dtype=float)
    L[0, 0] = 1.0
    pull = k - 1
    position = 0
    temp = cpcs[:pull]
    L[1:, 0] = temp
    acc -= temp**2
    for col in range(1, k - 1):
        position += pull
        pull = k - 1 - col
        temp = cpcs[position : position + pull]
        L[col, col] = math.sqrt(max(acc[col - 1], 0.0))
        L[col + 1 :, col] = temp * np.sqrt(np.clip(acc[col:], 0.0, None))
        acc[col:] *= 1.0 - temp**2
    L[k - 1, k - 1] = math.sqrt(max(acc[k - 2], 0.0))
    return L


def corr_matrix_constrain(x: np.ndarray, k: int, lp: LogJacobian | None = None) -> np.ndarray:
    """Build a ``k x k`` correlation matrix from ``k * (k - 1) / 2`` reals."""

    x = _require_length(x, (k * (k - 1)) // 2, name="corr_matrix_constrain")
    L = read_corr_L(_tanh_cpcs(x, lp), k, lp)
    return L @ L.T


def corr_matrix_free(R: np.ndarray, *, tolerance: float = CONSTRAINT_TOLERANCE) -> np.ndarray:
    """Invert :func:`corr_matrix_constrain` through the CPCs of ``R``."""

    check_corr_matrix(R, tolerance=tolerance)
    R = np.asarray(R, dtype=float)
    k = R.shape[0]
    if k < 2:
        return np.zeros(0, dtype=float)
    L = np.linalg.cholesky(R)
    acc = np.ones(k - 1, dtype=float)
    cpcs: list[np.ndarray] = []
    for col in range(k - 1):
        temp = L[col + 1 :, col] / np.sqrt(acc[col:])
        cpcs.append(temp)
        acc[col:] *= 1.0 - temp**2
    values = np.clip(np.concatenate(cpcs), -1.0, 1.0)
    return np.asarray([scalar.corr_free(value) for value in values], dtype=float)


__all__ = [
    "cholesky_corr_constrain",
    "cholesky_corr_free",
    "cholesky_factor_constrain",
    "cholesky_factor_free",
    "corr_matrix_constrain",
    "corr_matrix_free",
    "cov_matrix_constrain",
    "cov_matrix_free",
    "read_corr_L",
]
