"""Strict validation helpers for declarative decode-plan configs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import math
from typing import Any


def validate_allowed_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    allowed_keys: Iterable[str],
) -> None:
    """Reject keys that a config section does not understand.

    Parameters
    ----------
    mapping : Mapping[str, Any]
        Config section to validate.
    field_name : str
        Dotted path of the section, used in error messages.
    allowed_keys : Iterable[str]
        Key names accepted in ``mapping``.

    Raises
    ------
    ValueError
        If unknown keys are present.
    """

    allowed = set(str(key) for key in allowed_keys)
    unknown = sorted(str(key) for key in mapping if str(key) not in allowed)
    if unknown:
        raise ValueError(f"{field_name} has unknown keys: {unknown}")


def validate_required_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    required_keys: Iterable[str],
) -> None:
    """Reject config sections that omit required keys.

    Raises
    ------
    ValueError
        If required keys are missing.
    """

    required = set(str(key) for key in required_keys)
    missing = sorted(key for key in required if key not in mapping)
    if missing:
        raise ValueError(f"{field_name} is missing required keys: {missing}")


def require_mapping(raw: Any, *, field_name: str) -> dict[str, Any]:
    """Require an object-valued config entry."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"{field_name} must be an object")
    return dict(raw)


def require_sequence(raw: Any, *, field_name: str) -> list[Any]:
    """Require an array-valued config entry."""

    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{field_name} must be an array")
    return list(raw)


def coerce_non_empty_str(raw: Any, *, field_name: str) -> str:
    """Coerce a non-empty, stripped string."""

    if raw is None:
        raise ValueError(f"{field_name} must be a non-empty string")

    value = str(raw).strip()
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


def coerce_size(raw: Any, *, field_name: str) -> int:
    """Coerce a non-negative integer dimension."""

    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be a non-negative integer")
    if raw < 0:
        raise ValueError(f"{field_name} must be a non-negative integer")
    return int(raw)


def coerce_bound(raw: Any, *, field_name: str, default: float) -> float:
    """Coerce a numeric bound, mapping ``None`` to ``default``.

    YAML/JSON have no infinity literal, so an omitted or ``null`` bound means
    "unbounded on this side".
    """

    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{field_name} must be a number or null")
    value = float(raw)
    if math.isnan(value):
        raise ValueError(f"{field_name} must not be NaN")
    return value


__all__ = [
    "coerce_bound",
    "coerce_non_empty_str",
    "coerce_size",
    "require_mapping",
    "require_sequence",
    "validate_allowed_keys",
    "validate_required_keys",
]
