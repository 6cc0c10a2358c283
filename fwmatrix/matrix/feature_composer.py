"""Rendering of jobs into feature-flag strings and target descriptors."""

import logging
from collections.abc import Iterable, Sequence

from fwmatrix.config.settings import MatrixSettings
from fwmatrix.core.errors import MissingTargetError
from fwmatrix.matrix.models import AxisSet, Job, ResolvedJob


logger = logging.getLogger(__name__)

DEFAULT_ROUTING_ATTRIBUTES = frozenset({"target", "espname"})


class FeatureComposer:
    """Turn surviving jobs into resolved jobs.

    The feature string lists axis values in declaration order followed by the
    values of non-routing attributes in insertion order. Empty values are
    skipped so the string never holds an empty segment.
    """

    def __init__(
        self,
        axis_names: Sequence[str],
        separator: str = ",",
        routing_attributes: Iterable[str] = DEFAULT_ROUTING_ATTRIBUTES,
        target_attribute: str = "target",
        vendor_alias_attribute: str = "espname",
        bootloader_attribute: str = "boot",
    ) -> None:
        self.axis_names = tuple(axis_names)
        self.separator = separator
        self.target_attribute = target_attribute
        self.vendor_alias_attribute = vendor_alias_attribute
        self.bootloader_attribute = bootloader_attribute
        self.routing_attributes = frozenset(
            [*routing_attributes, target_attribute, vendor_alias_attribute]
        )

    @classmethod
    def from_settings(
        cls,
        axis_set: AxisSet,
        settings: MatrixSettings,
        extra_routing_attributes: Iterable[str] = (),
    ) -> "FeatureComposer":
        return cls(
            axis_names=axis_set.names,
            separator=settings.feature_separator,
            routing_attributes=[
                *settings.all_routing_attributes,
                *extra_routing_attributes,
            ],
            target_attribute=settings.target_attribute,
            vendor_alias_attribute=settings.vendor_alias_attribute,
            bootloader_attribute=settings.bootloader_attribute,
        )

    def feature_flags(self, job: Job) -> list[str]:
        flags = [job.values[axis] for axis in self.axis_names if job.values.get(axis)]
        flags.extend(
            value
            for name, value in job.attributes.items()
            if name not in self.routing_attributes and value
        )
        return flags

    def compose(self, job: Job) -> ResolvedJob:
        """Render one job.

        Raises:
            MissingTargetError: If the job has no target attribute
        """
        target = job.attributes.get(self.target_attribute)
        if not target:
            raise MissingTargetError(job.values, self.target_attribute)

        return ResolvedJob(
            values={
                axis: job.values[axis] for axis in self.axis_names if axis in job.values
            },
            attributes=dict(job.attributes),
            features=self.separator.join(self.feature_flags(job)),
            target_triple=target,
            vendor_alias=job.attributes.get(self.vendor_alias_attribute) or None,
            bootloader_id=job.attributes.get(self.bootloader_attribute) or None,
        )

    def compose_all(self, jobs: Sequence[Job]) -> list[ResolvedJob]:
        """Render every job, failing before anything is returned.

        Raises:
            MissingTargetError: For the first job without a target
        """
        resolved = [self.compose(job) for job in jobs]
        logger.debug("Composed %d resolved jobs", len(resolved))
        return resolved
