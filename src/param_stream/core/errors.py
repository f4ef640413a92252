"""Error taxonomy for flat-buffer decoding.

Every failure raised while decoding a flat parameter buffer derives from
:class:`DecodeError`, itself a :class:`ValueError`, so callers that only care
about "the buffer did not match the requested layout" can catch one type.
Errors are terminal for the current call; nothing is retried internally.
"""

from __future__ import annotations

from typing import Any


class DecodeError(ValueError):
    """Base class for all decode failures."""


class OutOfData(DecodeError):
    """A read requested more values than remain in a buffer.

    Parameters
    ----------
    buffer : str
        Buffer name, ``"reals"`` or ``"ints"``.
    requested : int
        Number of values requested.
    available : int
        Number of values left in the buffer.
    """

    def __init__(self, buffer: str, *, requested: int, available: int) -> None:
        self.buffer = buffer
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(
            f"no more {buffer} to read: requested {self.requested}, "
            f"{self.available} available"
        )


class InvalidShape(DecodeError):
    """A shape parameter is invalid for the requested constraint kind."""


class ConstraintViolation(DecodeError):
    """A validate-only read produced a value outside its constraint set.

    Parameters
    ----------
    kind : str
        Constraint kind name, for example ``"lower_bound"`` or ``"simplex"``.
    value : Any
        Offending value as read from the buffer.
    message : str
        Human-readable description of the violated predicate.
    """

    def __init__(self, kind: str, value: Any, message: str) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"{kind}: {message}")


class InconsistentBounds(DecodeError):
    """An interval constraint was given a lower bound above its upper bound."""

    def __init__(self, lb: Any, ub: Any, message: str | None = None) -> None:
        self.lb = lb
        self.ub = ub
        super().__init__(
            message
            if message is not None
            else f"lower bound must be less than or equal to upper bound; got lb={lb!r}, ub={ub!r}"
        )


class InvalidTransformParameter(DecodeError):
    """A transform parameter (offset, multiplier) is outside its domain."""


__all__ = [
    "ConstraintViolation",
    "DecodeError",
    "InconsistentBounds",
    "InvalidShape",
    "InvalidTransformParameter",
    "OutOfData",
]
