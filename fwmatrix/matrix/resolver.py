"""Build matrix resolver following the GitHub Actions matrix pattern."""

import logging
from pathlib import Path

from fwmatrix.config.settings import MatrixSettings
from fwmatrix.matrix.exclude_filter import ExcludeFilter, matches
from fwmatrix.matrix.expander import CartesianExpander
from fwmatrix.matrix.feature_composer import FeatureComposer
from fwmatrix.matrix.include_merger import IncludeMerger
from fwmatrix.matrix.loader import load_matrix_definition
from fwmatrix.matrix.models import MatrixDefinition, ResolvedJob


class MatrixResolver:
    """Resolve a matrix definition into the list of jobs to build.

    Pipeline: cartesian expansion, include merging, exclusion, then feature
    composition. Any error aborts the whole resolution; a partial job list is
    never returned.
    """

    def __init__(
        self,
        settings: MatrixSettings | None = None,
        expander: CartesianExpander | None = None,
        merger: IncludeMerger | None = None,
    ) -> None:
        self.settings = settings or MatrixSettings()
        self.expander = expander or CartesianExpander()
        self.merger = merger or IncludeMerger()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve(self, definition: MatrixDefinition) -> list[ResolvedJob]:
        """Resolve ``definition`` into resolved jobs.

        Args:
            definition: Validated matrix definition

        Returns:
            list[ResolvedJob]: Jobs in cartesian order, include-added jobs last

        Raises:
            UnknownAxisError: If a rule names an undeclared axis
            AmbiguousIncludeError: If an include rule names no axis
            MissingTargetError: If a surviving job has no target
        """
        axis_set = definition.axis_set

        base = self.expander.expand(axis_set)
        merged = self.merger.merge(base, definition.include)
        survivors = ExcludeFilter(axis_set).filter(merged, definition.exclude)

        composer = FeatureComposer.from_settings(
            axis_set, self.settings, definition.routing_attributes
        )
        resolved = composer.compose_all(survivors)

        if definition.allow_failure:
            resolved = [
                job.model_copy(update={"allow_failure": True})
                if any(matches(source, rule) for rule in definition.allow_failure)
                else job
                for source, job in zip(survivors, resolved, strict=True)
            ]

        self.logger.info(
            "Resolved %d jobs (%d base, %d after include, %d after exclude)",
            len(resolved),
            len(base),
            len(merged),
            len(survivors),
        )
        return resolved

    def resolve_from_file(self, path: Path, job_id: str | None = None) -> list[ResolvedJob]:
        """Load ``path`` and resolve it.

        Raises:
            MatrixDefinitionError: If the file cannot be loaded
        """
        self.logger.debug("Resolving matrix from %s", path)
        return self.resolve(load_matrix_definition(path, job_id))


def create_matrix_resolver(settings: MatrixSettings | None = None) -> MatrixResolver:
    """Create matrix resolver instance.

    Returns:
        MatrixResolver: New matrix resolver
    """
    return MatrixResolver(settings=settings)
