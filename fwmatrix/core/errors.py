"""Exception hierarchy for fwmatrix.

Every error raised while loading or resolving a build matrix derives from
:class:`FwMatrixError`. Resolution never degrades to a partial job list: the
first configuration problem aborts the whole run.
"""

from collections.abc import Mapping
from typing import Any


class FwMatrixError(Exception):
    """Base class for all fwmatrix errors."""


class ConfigError(FwMatrixError):
    """Error in fwmatrix settings or input files."""


class MatrixDefinitionError(ConfigError):
    """Matrix definition file is missing, unreadable or malformed."""

    def __init__(self, message: str, path: Any = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class MatrixResolutionError(FwMatrixError):
    """Error raised while resolving a matrix into build jobs."""


class UnknownAxisError(MatrixResolutionError):
    """A rule or query references an axis that was never declared."""

    def __init__(self, axis: str, known: tuple[str, ...] | None = None) -> None:
        self.axis = axis
        self.known = known or ()
        message = f"Unknown axis '{axis}'"
        if self.known:
            message += f" (declared axes: {', '.join(self.known)})"
        super().__init__(message)


class MissingTargetError(MatrixResolutionError):
    """A job reached feature composition without a target triple."""

    def __init__(self, job_values: Mapping[str, str], attribute: str = "target") -> None:
        self.job_values = dict(job_values)
        self.attribute = attribute
        rendered = ", ".join(f"{k}={v}" for k, v in self.job_values.items())
        super().__init__(
            f"Job ({rendered or 'no axis values'}) has no '{attribute}' attribute"
        )


class AmbiguousIncludeError(MatrixResolutionError):
    """An include rule names no declared axis and would match every job."""

    def __init__(self, rule: Mapping[str, Any]) -> None:
        self.rule = dict(rule)
        super().__init__(
            f"Include rule {self.rule} does not name any matrix axis; "
            "refusing to merge it into every job"
        )


class EmptyExcludeError(MatrixResolutionError):
    """An exclude rule names no axis and would remove every job."""

    def __init__(self) -> None:
        super().__init__(
            "Exclude rule does not name any matrix axis; "
            "refusing to remove every job"
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
