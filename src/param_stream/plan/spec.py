"""Declarative decode plans: an ordered list of named, typed parameters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
import warnings

import numpy as np

from param_stream.core.accumulator import LogJacobian
from param_stream.core.constraints import (
    ConstraintKind,
    Unconstrained,
    check_combination,
    unconstrained_size,
    validated_size,
)
from param_stream.core.shapes import Shape, integer_size
from param_stream.io.reader import ParameterReader
from param_stream.io.writer import ParameterWriter
from param_stream.transforms.library import DEFAULT_TRANSFORMS


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One named parameter of a decode plan.

    Parameters
    ----------
    name : str
        Parameter name; unique within a plan.
    shape : Shape
        Container shape.
    constraint : ConstraintKind
        Constraint kind. Defaults to :class:`Unconstrained`.

    Raises
    ------
    InvalidShape
        If ``constraint`` cannot be read as ``shape``.
    """

    name: str
    shape: Shape
    constraint: ConstraintKind = field(default_factory=Unconstrained)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"parameter name must be a non-empty string; got {self.name!r}")
        check_combination(self.shape, self.constraint)

    @property
    def num_unconstrained(self) -> int:
        """Reals consumed by a constraining read."""

        return unconstrained_size(self.shape, self.constraint)

    @property
    def num_constrained(self) -> int:
        """Reals consumed by a validating read."""

        return validated_size(self.shape, self.constraint)

    @property
    def num_integers(self) -> int:
        """Integers consumed by either read."""

        return integer_size(self.shape)


@dataclass(frozen=True, slots=True)
class DecodePlan:
    """Ordered parameter layout shared by decoding and encoding.

    Parameters
    ----------
    parameters : tuple[ParameterSpec, ...]
        Parameters in buffer order.
    transforms : Any
        Transform library used for every read and write.

    Notes
    -----
    Parameters are decoded in declaration order; a buffer written by
    :meth:`encode` decodes back to the same values with :meth:`decode`.
    """

    parameters: tuple[ParameterSpec, ...]
    transforms: Any = DEFAULT_TRANSFORMS

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        seen: set[str] = set()
        for spec in self.parameters:
            if not isinstance(spec, ParameterSpec):
                raise TypeError(f"parameters must be ParameterSpec instances; got {type(spec).__name__}")
            if spec.name in seen:
                raise ValueError(f"duplicate parameter name {spec.name!r}")
            seen.add(spec.name)

    def names(self) -> tuple[str, ...]:
        """Parameter names in buffer order."""

        return tuple(spec.name for spec in self.parameters)

    def num_unconstrained(self) -> int:
        """Number of reals :meth:`decode` consumes."""

        return sum(spec.num_unconstrained for spec in self.parameters)

    def num_constrained(self) -> int:
        """Number of reals :meth:`validate` consumes."""

        return sum(spec.num_constrained for spec in self.parameters)

    def num_integers(self) -> int:
        """Number of integers :meth:`decode` and :meth:`validate` consume."""

        return sum(spec.num_integers for spec in self.parameters)

    def decode(
        self,
        reals: Sequence[float] | np.ndarray,
        ints: Sequence[int] | np.ndarray = (),
        *,
        lp: LogJacobian | None = None,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Decode unconstrained buffers into constrained values.

        Parameters
        ----------
        reals, ints : array-like
            Flat unconstrained buffers.
        lp : LogJacobian | None, optional
            Accumulator receiving the log-Jacobian of every transform.
        strict : bool, optional
            If ``True``, unread trailing values raise ``ValueError``;
            otherwise they emit a ``UserWarning``.

        Returns
        -------
        dict[str, Any]
            Values keyed by parameter name, in declaration order.
        """

        reader = ParameterReader(reals, ints, transforms=self.transforms)
        values = {spec.name: reader.read_constrain(spec.shape, spec.constraint, lp) for spec in self.parameters}
        _check_exhausted(reader, strict=strict)
        return values

    def validate(
        self,
        reals: Sequence[float] | np.ndarray,
        ints: Sequence[int] | np.ndarray = (),
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Read constrained buffers and check every value."""

        reader = ParameterReader(reals, ints, transforms=self.transforms)
        values = {spec.name: reader.read(spec.shape, spec.constraint) for spec in self.parameters}
        _check_exhausted(reader, strict=strict)
        return values

    def encode(self, values: Mapping[str, Any]) -> tuple[np.ndarray, np.ndarray]:
        """Encode constrained values into ``(reals, ints)`` unconstrained buffers."""

        writer = ParameterWriter(transforms=self.transforms)
        for spec in self.parameters:
            writer.write(spec.shape, spec.constraint, _lookup(values, spec.name))
        return writer.reals(), writer.ints()

    def encode_constrained(self, values: Mapping[str, Any]) -> tuple[np.ndarray, np.ndarray]:
        """Lay out constrained values as :meth:`validate` expects them."""

        writer = ParameterWriter(transforms=self.transforms)
        for spec in self.parameters:
            writer.write_constrained(spec.shape, spec.constraint, _lookup(values, spec.name))
        return writer.reals(), writer.ints()


def _lookup(values: Mapping[str, Any], name: str) -> Any:
    if name not in values:
        raise ValueError(f"values is missing parameter {name!r}")
    return values[name]


def _check_exhausted(reader: ParameterReader, *, strict: bool) -> None:
    remaining_reals = reader.available()
    remaining_ints = reader.available_i()
    if remaining_reals == 0 and remaining_ints == 0:
        return
    message = f"decode plan left {remaining_reals} reals and {remaining_ints} integers unread"
    if strict:
        raise ValueError(message)
    warnings.warn(message, UserWarning, stacklevel=3)


__all__ = ["DecodePlan", "ParameterSpec"]
