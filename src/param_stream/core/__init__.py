"""Shapes, constraint kinds, errors and config helpers shared by every layer."""

from .accumulator import LogJacobian
from .config_loading import SUPPORTED_CONFIG_SUFFIXES, dump_config_mapping, load_config_mapping
from .constraints import (
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
    check_combination,
    unconstrained_size,
    validated_size,
)
from .errors import (
    ConstraintViolation,
    DecodeError,
    InconsistentBounds,
    InvalidShape,
    InvalidTransformParameter,
    OutOfData,
)
from .shapes import (
    IntegerShape,
    MatrixShape,
    RowVectorShape,
    ScalarShape,
    Shape,
    SparseShape,
    VectorShape,
    constrained_size,
)

__all__ = [
    "Bounded",
    "CholeskyFactorCorr",
    "CholeskyFactorCov",
    "ConstraintKind",
    "ConstraintViolation",
    "Correlation",
    "CorrelationMatrix",
    "CovarianceMatrix",
    "DecodeError",
    "InconsistentBounds",
    "IntegerShape",
    "InvalidShape",
    "InvalidTransformParameter",
    "LogJacobian",
    "LowerBound",
    "MatrixShape",
    "OffsetMultiplier",
    "Ordered",
    "OutOfData",
    "Positive",
    "PositiveOrdered",
    "Probability",
    "RowVectorShape",
    "SUPPORTED_CONFIG_SUFFIXES",
    "ScalarShape",
    "Shape",
    "Simplex",
    "SparseShape",
    "Unconstrained",
    "UnitVector",
    "UpperBound",
    "VectorShape",
    "check_combination",
    "constrained_size",
    "dump_config_mapping",
    "load_config_mapping",
    "unconstrained_size",
    "validated_size",
]
