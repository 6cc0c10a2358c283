"""fwmatrix - firmware CI build matrix resolver."""

from importlib.metadata import PackageNotFoundError, distribution

from .core.errors import FwMatrixError
from .matrix import MatrixDefinition, MatrixResolver, ResolvedJob


try:
    __version__ = distribution(__package__ or "fwmatrix").version
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "FwMatrixError",
    "MatrixDefinition",
    "MatrixResolver",
    "ResolvedJob",
    "__version__",
]
