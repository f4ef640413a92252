"""Top-level package for ``param_stream``.

Decodes model parameters from a flat stream of reals and integers:

1. a :class:`~param_stream.io.cursor.BufferCursor` hands out contiguous runs,
2. shapes arrange runs into scalars, vectors and (sparse) matrices,
3. constraint kinds either check the values as read or map unconstrained
   values onto their constraint set, accumulating the log-Jacobian.

Use :class:`~param_stream.io.reader.ParameterReader` for call-by-call reads,
or a :class:`~param_stream.plan.spec.DecodePlan` to decode a whole named
layout at once.
"""

from .core import (
    ConstraintViolation,
    DecodeError,
    InconsistentBounds,
    InvalidShape,
    InvalidTransformParameter,
    LogJacobian,
    OutOfData,
)
from .io import ParameterReader, ParameterWriter, decode
from .plan import DecodePlan, ParameterSpec, load_plan, plan_from_config, save_plan

__all__ = [
    "ConstraintViolation",
    "DecodeError",
    "DecodePlan",
    "InconsistentBounds",
    "InvalidShape",
    "InvalidTransformParameter",
    "LogJacobian",
    "OutOfData",
    "ParameterReader",
    "ParameterSpec",
    "ParameterWriter",
    "decode",
    "load_plan",
    "plan_from_config",
    "save_plan",
]
