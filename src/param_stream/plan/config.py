"""Config-driven decode plans.

A plan config is a mapping of the form::

    tolerance: 1.0e-8          # optional
    parameters:
      - name: mu
        shape: scalar
      - name: sigma
        shape: scalar
        constraint: {type: lower_bound, lb: 0.0}
      - name: theta
        shape: {type: vector, size: 3}
        constraint: simplex

Shapes and constraints are written either as a bare type name or as a
mapping with a ``type`` key and the type's parameters. Bounds may be
``null``, meaning unbounded on that side.
"""

from __future__ import annotations

from collections.abc import Mapping
import math
from pathlib import Path
from typing import Any

from param_stream.core.config_loading import dump_config_mapping, load_config_mapping
from param_stream.core.config_validation import (
    coerce_bound,
    coerce_non_empty_str,
    coerce_size,
    require_mapping,
    require_sequence,
    validate_allowed_keys,
    validate_required_keys,
)
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
)
from param_stream.core.shapes import (
    IntegerShape,
    MatrixShape,
    RowVectorShape,
    ScalarShape,
    Shape,
    SparseShape,
    VectorShape,
)
from param_stream.transforms.library import DefaultTransformLibrary

from .spec import DecodePlan, ParameterSpec

_PARAMETERLESS_KINDS: dict[str, type] = {
    kind.name: kind
    for kind in (
        Unconstrained,
        Positive,
        Probability,
        Correlation,
        UnitVector,
        Simplex,
        Ordered,
        PositiveOrdered,
        CovarianceMatrix,
        CorrelationMatrix,
        CholeskyFactorCov,
        CholeskyFactorCorr,
    )
}
_SHAPE_KEYS: dict[str, tuple[str, ...]] = {
    "integer": (),
    "scalar": (),
    "vector": ("size",),
    "row_vector": ("size",),
    "matrix": ("n_rows", "n_cols"),
    "sparse_matrix": ("n_rows", "n_cols", "row_indices", "col_indices"),
}
_BOUND_KEYS: dict[str, tuple[str, ...]] = {
    LowerBound.name: ("lb",),
    UpperBound.name: ("ub",),
    Bounded.name: ("lb", "ub"),
    OffsetMultiplier.name: ("offset", "multiplier"),
}
CONSTRAINT_TYPES: tuple[str, ...] = tuple(sorted((*_PARAMETERLESS_KINDS, *_BOUND_KEYS)))
SHAPE_TYPES: tuple[str, ...] = tuple(_SHAPE_KEYS)


def shape_from_config(raw: Any, *, field_name: str = "shape") -> Shape:
    """Parse a shape entry.

    Parameters
    ----------
    raw : str | Mapping[str, Any]
        Bare type name (``"scalar"``, ``"integer"``) or mapping with
        ``type`` and the shape's dimensions.
    field_name : str, optional
        Dotted path used in error messages.

    Returns
    -------
    Shape
        Parsed shape.

    Raises
    ------
    ValueError
        If the type is unknown or dimensions are missing or invalid.
    """

    if isinstance(raw, str):
        raw = {"type": raw}
    mapping = require_mapping(raw, field_name=field_name)
    type_name = coerce_non_empty_str(mapping.get("type"), field_name=f"{field_name}.type")
    if type_name not in _SHAPE_KEYS:
        raise ValueError(f"{field_name}.type must be one of {SHAPE_TYPES}; got {type_name!r}")

    keys = _SHAPE_KEYS[type_name]
    validate_allowed_keys(mapping, field_name=field_name, allowed_keys=("type", *keys))
    validate_required_keys(mapping, field_name=field_name, required_keys=keys)

    if type_name == "integer":
        return IntegerShape()
    if type_name == "scalar":
        return ScalarShape()
    if type_name == "vector":
        return VectorShape(coerce_size(mapping["size"], field_name=f"{field_name}.size"))
    if type_name == "row_vector":
        return RowVectorShape(coerce_size(mapping["size"], field_name=f"{field_name}.size"))

    n_rows = coerce_size(mapping["n_rows"], field_name=f"{field_name}.n_rows")
    n_cols = coerce_size(mapping["n_cols"], field_name=f"{field_name}.n_cols")
    if type_name == "matrix":
        return MatrixShape(n_rows, n_cols)

    rows = require_sequence(mapping["row_indices"], field_name=f"{field_name}.row_indices")
    cols = require_sequence(mapping["col_indices"], field_name=f"{field_name}.col_indices")
    return SparseShape.from_coordinates(
        [coerce_size(value, field_name=f"{field_name}.row_indices[{index}]") for index, value in enumerate(rows)],
        [coerce_size(value, field_name=f"{field_name}.col_indices[{index}]") for index, value in enumerate(cols)],
        n_rows,
        n_cols,
    )


def constraint_from_config(raw: Any, *, field_name: str = "constraint") -> ConstraintKind:
    """Parse a constraint entry.

    ``None`` means unconstrained. Bounded kinds take their bounds as keys;
    a missing or ``null`` bound is infinite.
    """

    if raw is None:
        return Unconstrained()
    if isinstance(raw, str):
        raw = {"type": raw}
    mapping = require_mapping(raw, field_name=field_name)
    type_name = coerce_non_empty_str(mapping.get("type"), field_name=f"{field_name}.type")

    if type_name in _PARAMETERLESS_KINDS:
        validate_allowed_keys(mapping, field_name=field_name, allowed_keys=("type",))
        return _PARAMETERLESS_KINDS[type_name]()
    if type_name not in _BOUND_KEYS:
        raise ValueError(f"{field_name}.type must be one of {CONSTRAINT_TYPES}; got {type_name!r}")

    validate_allowed_keys(mapping, field_name=field_name, allowed_keys=("type", *_BOUND_KEYS[type_name]))
    if type_name == LowerBound.name:
        return LowerBound(coerce_bound(mapping.get("lb"), field_name=f"{field_name}.lb", default=-math.inf))
    if type_name == UpperBound.name:
        return UpperBound(coerce_bound(mapping.get("ub"), field_name=f"{field_name}.ub", default=math.inf))
    if type_name == Bounded.name:
        return Bounded(
            coerce_bound(mapping.get("lb"), field_name=f"{field_name}.lb", default=-math.inf),
            coerce_bound(mapping.get("ub"), field_name=f"{field_name}.ub", default=math.inf),
        )
    return OffsetMultiplier(
        coerce_bound(mapping.get("offset"), field_name=f"{field_name}.offset", default=0.0),
        coerce_bound(mapping.get("multiplier"), field_name=f"{field_name}.multiplier", default=1.0),
    )


def parameter_from_config(raw: Any, *, field_name: str = "parameter") -> ParameterSpec:
    """Parse one ``{name, shape, constraint}`` entry."""

    mapping = require_mapping(raw, field_name=field_name)
    validate_allowed_keys(mapping, field_name=field_name, allowed_keys=("name", "shape", "constraint"))
    validate_required_keys(mapping, field_name=field_name, required_keys=("name", "shape"))
    return ParameterSpec(
        name=coerce_non_empty_str(mapping["name"], field_name=f"{field_name}.name"),
        shape=shape_from_config(mapping["shape"], field_name=f"{field_name}.shape"),
        constraint=constraint_from_config(mapping.get("constraint"), field_name=f"{field_name}.constraint"),
    )


def plan_from_config(config: Mapping[str, Any]) -> DecodePlan:
    """Build a :class:`DecodePlan` from a config mapping.

    Parameters
    ----------
    config : Mapping[str, Any]
        Mapping with ``parameters`` (array) and optional ``tolerance``.

    Returns
    -------
    DecodePlan
        Plan with parameters in config order.

    Raises
    ------
    ValueError
        If any section is malformed or a parameter name repeats.
    """

    root = require_mapping(config, field_name="config")
    validate_allowed_keys(root, field_name="config", allowed_keys=("parameters", "tolerance"))
    validate_required_keys(root, field_name="config", required_keys=("parameters",))

    entries = require_sequence(root["parameters"], field_name="config.parameters")
    parameters = tuple(
        parameter_from_config(entry, field_name=f"config.parameters[{index}]")
        for index, entry in enumerate(entries)
    )

    tolerance_raw = root.get("tolerance")
    if tolerance_raw is None:
        return DecodePlan(parameters)
    tolerance = coerce_bound(tolerance_raw, field_name="config.tolerance", default=0.0)
    if tolerance < 0.0:
        raise ValueError("config.tolerance must be >= 0")
    return DecodePlan(parameters, transforms=DefaultTransformLibrary(tolerance=tolerance))


def load_plan(path: str | Path) -> DecodePlan:
    """Load a JSON/YAML plan config and build its :class:`DecodePlan`."""

    return plan_from_config(load_config_mapping(path))


def save_plan(plan: DecodePlan, path: str | Path) -> Path:
    """Write ``plan`` to a JSON/YAML file that :func:`load_plan` reads back."""

    return dump_config_mapping(plan_to_config(plan), path)


def shape_to_config(shape: Shape) -> dict[str, Any]:
    """Serialize a shape to its config mapping."""

    if isinstance(shape, IntegerShape):
        return {"type": "integer"}
    if isinstance(shape, ScalarShape):
        return {"type": "scalar"}
    if isinstance(shape, VectorShape):
        return {"type": "vector", "size": shape.size}
    if isinstance(shape, RowVectorShape):
        return {"type": "row_vector", "size": shape.size}
    if isinstance(shape, MatrixShape):
        return {"type": "matrix", "n_rows": shape.n_rows, "n_cols": shape.n_cols}
    if isinstance(shape, SparseShape):
        return {
            "type": "sparse_matrix",
            "n_rows": shape.n_rows,
            "n_cols": shape.n_cols,
            "row_indices": list(shape.row_indices),
            "col_indices": list(shape.col_indices),
        }
    raise TypeError(f"unsupported shape {shape!r}")


def _bound_to_config(value: float) -> float | None:
    return None if math.isinf(value) else float(value)


def constraint_to_config(kind: ConstraintKind) -> dict[str, Any]:
    """Serialize a constraint kind to its config mapping."""

    if isinstance(kind, LowerBound):
        return {"type": kind.name, "lb": _bound_to_config(kind.lb)}
    if isinstance(kind, UpperBound):
        return {"type": kind.name, "ub": _bound_to_config(kind.ub)}
    if isinstance(kind, Bounded):
        return {"type": kind.name, "lb": _bound_to_config(kind.lb), "ub": _bound_to_config(kind.ub)}
    if isinstance(kind, OffsetMultiplier):
        return {"type": kind.name, "offset": float(kind.offset), "multiplier": float(kind.multiplier)}
    return {"type": kind.name}


def plan_to_config(plan: DecodePlan) -> dict[str, Any]:
    """Serialize a plan to a JSON/YAML-ready mapping.

    The tolerance is written only when the plan's transform library exposes
    one.
    """

    out: dict[str, Any] = {
        "parameters": [
            {
                "name": spec.name,
                "shape": shape_to_config(spec.shape),
                "constraint": constraint_to_config(spec.constraint),
            }
            for spec in plan.parameters
        ]
    }
    tolerance = getattr(plan.transforms, "tolerance", None)
    if tolerance is not None:
        out["tolerance"] = float(tolerance)
    return out


__all__ = [
    "CONSTRAINT_TYPES",
    "SHAPE_TYPES",
    "constraint_from_config",
    "constraint_to_config",
    "load_plan",
    "parameter_from_config",
    "plan_from_config",
    "plan_to_config",
    "save_plan",
    "shape_from_config",
    "shape_to_config",
]
