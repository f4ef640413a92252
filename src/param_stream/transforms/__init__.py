"""Constraining transforms, their inverses and validity checks."""

from .checks import CONSTRAINT_TOLERANCE
from .contracts import FreeTransformLibrary, TransformLibrary
from .library import DEFAULT_TRANSFORMS, DefaultTransformLibrary

__all__ = [
    "CONSTRAINT_TOLERANCE",
    "DEFAULT_TRANSFORMS",
    "DefaultTransformLibrary",
    "FreeTransformLibrary",
    "TransformLibrary",
]
