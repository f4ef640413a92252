"""Mutable log-Jacobian accumulator threaded through constraining reads."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class LogJacobian:
    """Running sum of log-absolute Jacobian determinants.

    Parameters
    ----------
    value : float, optional
        Current accumulated value. Defaults to ``0.0``.

    Notes
    -----
    The accumulator is passed by reference into transforms. Reads without an
    accumulator never touch it, so one instance may be shared by every read of
    a single decode but must not be shared between concurrent decodes.
    """

    value: float = 0.0

    def add(self, amount: float) -> None:
        """Add one log-Jacobian term."""

        self.value += float(amount)

    def reset(self) -> float:
        """Reset to zero and return the previous value."""

        previous = self.value
        self.value = 0.0
        return previous


__all__ = ["LogJacobian"]
