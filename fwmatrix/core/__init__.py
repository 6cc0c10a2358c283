"""Core infrastructure: errors and logging."""

from fwmatrix.core.errors import (
    AmbiguousIncludeError,
    ConfigError,
    EmptyExcludeError,
    FwMatrixError,
    MatrixDefinitionError,
    MatrixResolutionError,
    MissingTargetError,
    UnknownAxisError,
)


__all__ = [
    "AmbiguousIncludeError",
    "ConfigError",
    "EmptyExcludeError",
    "FwMatrixError",
    "MatrixDefinitionError",
    "MatrixResolutionError",
    "MissingTargetError",
    "UnknownAxisError",
]
