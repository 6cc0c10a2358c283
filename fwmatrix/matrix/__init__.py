"""Build matrix resolution: expansion, include/exclude rules, features."""

from fwmatrix.matrix.exclude_filter import ExcludeFilter
from fwmatrix.matrix.expander import CartesianExpander
from fwmatrix.matrix.feature_composer import FeatureComposer
from fwmatrix.matrix.include_merger import IncludeMerger
from fwmatrix.matrix.invocation import BuildInvocation, InvocationPlanner
from fwmatrix.matrix.loader import load_matrix_definition
from fwmatrix.matrix.models import (
    Axis,
    AxisSet,
    ExcludeRule,
    IncludeRule,
    Job,
    MatchedExisting,
    MatrixConfig,
    MatrixDefinition,
    NoMatch,
    ResolvedJob,
)
from fwmatrix.matrix.resolver import MatrixResolver, create_matrix_resolver


__all__: list[str] = [
    # Models
    "Axis",
    "AxisSet",
    "ExcludeRule",
    "IncludeRule",
    "Job",
    "MatchedExisting",
    "MatrixConfig",
    "MatrixDefinition",
    "NoMatch",
    "ResolvedJob",
    # Pipeline stages
    "CartesianExpander",
    "ExcludeFilter",
    "FeatureComposer",
    "IncludeMerger",
    "MatrixResolver",
    # Invocation planning
    "BuildInvocation",
    "InvocationPlanner",
    # Factory functions
    "create_matrix_resolver",
    "load_matrix_definition",
]
