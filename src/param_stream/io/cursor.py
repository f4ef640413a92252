"""Sequential cursors over caller-owned flat real and integer buffers."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from param_stream.core.errors import InvalidShape, OutOfData


class BufferCursor:
    """Two forward-only read positions over a real and an integer buffer.

    Parameters
    ----------
    reals : Sequence[float] | numpy.ndarray
        Flat real values. NumPy arrays are referenced, not copied.
    ints : Sequence[int] | numpy.ndarray, optional
        Flat integer values.

    Notes
    -----
    Positions only ever advance, and only after a read has been checked
    against the remaining length. A failed read leaves both positions where
    they were. Each decode session owns its own cursor.
    """

    __slots__ = ("_reals", "_ints", "_real_pos", "_int_pos")

    def __init__(
        self,
        reals: Sequence[float] | np.ndarray,
        ints: Sequence[int] | np.ndarray = (),
    ) -> None:
        real_array = np.asarray(reals)
        if real_array.ndim != 1:
            raise ValueError(f"reals must be one-dimensional; got shape {real_array.shape}")
        if real_array.dtype.kind not in "fiu":
            real_array = real_array.astype(float)

        int_array = np.asarray(ints)
        if int_array.size == 0:
            int_array = np.zeros(0, dtype=np.int64)
        if int_array.ndim != 1:
            raise ValueError(f"ints must be one-dimensional; got shape {int_array.shape}")
        if int_array.dtype.kind not in "iu":
            raise ValueError(f"ints must hold integers; got dtype {int_array.dtype}")

        self._reals = real_array
        self._ints = int_array
        self._real_pos = 0
        self._int_pos = 0

    @property
    def real_position(self) -> int:
        """Number of reals consumed so far."""

        return self._real_pos

    @property
    def int_position(self) -> int:
        """Number of integers consumed so far."""

        return self._int_pos

    def available(self) -> int:
        """Return the number of reals left to read."""

        return int(self._reals.shape[0]) - self._real_pos

    def available_i(self) -> int:
        """Return the number of integers left to read."""

        return int(self._ints.shape[0]) - self._int_pos

    def next_integer(self) -> int:
        """Consume and return the next integer.

        Raises
        ------
        OutOfData
            If the integer buffer is exhausted.
        """

        if self.available_i() < 1:
            raise OutOfData("integers", requested=1, available=self.available_i())
        value = int(self._ints[self._int_pos])
        self._int_pos += 1
        return value

    def next_scalar(self) -> float:
        """Consume and return the next real.

        Raises
        ------
        OutOfData
            If the real buffer is exhausted.
        """

        if self.available() < 1:
            raise OutOfData("scalars", requested=1, available=self.available())
        value = float(self._reals[self._real_pos])
        self._real_pos += 1
        return value

    def next_scalars(self, n: int) -> np.ndarray:
        """Consume the next ``n`` reals and return them as a fresh array.

        Parameters
        ----------
        n : int
            Number of reals to consume. ``0`` returns an empty array.

        Returns
        -------
        numpy.ndarray
            Float array of length ``n``, owned by the caller.

        Raises
        ------
        InvalidShape
            If ``n`` is negative.
        OutOfData
            If fewer than ``n`` reals remain.
        """

        n = int(n)
        if n < 0:
            raise InvalidShape(f"cannot read a negative number of scalars ({n})")
        if n > self.available():
            raise OutOfData("scalars", requested=n, available=self.available())
        start = self._real_pos
        run = np.array(self._reals[start : start + n], dtype=float)
        self._real_pos = start + n
        return run

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(reals={self._real_pos}/{self._reals.shape[0]}, "
            f"ints={self._int_pos}/{self._ints.shape[0]})"
        )


__all__ = ["BufferCursor"]
