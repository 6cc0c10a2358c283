"""Exclusion of jobs by partial axis assignment."""

import logging
from collections.abc import Sequence

from fwmatrix.matrix.models import AxisSet, ExcludeRule, Job


logger = logging.getLogger(__name__)


def matches(job: Job, rule: ExcludeRule) -> bool:
    """Partial-key match of ``rule`` against ``job``.

    Every axis named by the rule must be set on the job with an equal value;
    axes the rule does not name are wildcards. A job with a named axis unset
    never matches.
    """
    return job.matches(rule.values)


class ExcludeFilter:
    """Drop every job matched by at least one exclude rule."""

    def __init__(self, axis_set: AxisSet | None = None) -> None:
        self.axis_set = axis_set

    def filter(self, jobs: Sequence[Job], rules: Sequence[ExcludeRule]) -> list[Job]:
        """Return the jobs no rule matches, in their original order.

        Raises:
            UnknownAxisError: If an axis set was given and a rule names an
                axis outside it
        """
        if self.axis_set is not None:
            for rule in rules:
                self.axis_set.require(rule.values)

        kept = [job for job in jobs if not any(matches(job, rule) for rule in rules)]

        if len(kept) != len(jobs):
            logger.debug(
                "Excluded %d of %d jobs using %d rules",
                len(jobs) - len(kept),
                len(jobs),
                len(rules),
            )
        return kept
