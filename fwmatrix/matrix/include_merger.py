"""Application of include rules to the base job list.

An include rule either extends every job that already carries its axis
values or, when no job does, becomes a job of its own. This mirrors the
``strategy.matrix.include`` behaviour of GitHub Actions workflows.
"""

import logging
from collections.abc import Sequence

from fwmatrix.core.errors import AmbiguousIncludeError
from fwmatrix.matrix.models import (
    IncludeRule,
    Job,
    MatchedExisting,
    MergeDecision,
    NoMatch,
)


logger = logging.getLogger(__name__)


class IncludeMerger:
    """Merge include rules into jobs in declaration order."""

    def classify(self, rule: IncludeRule, jobs: Sequence[Job]) -> MergeDecision:
        """Decide whether ``rule`` extends existing jobs or adds a new one.

        Args:
            rule: Include rule to classify
            jobs: Jobs resolved so far

        Returns:
            MatchedExisting with the indices of every matching job, or NoMatch

        Raises:
            AmbiguousIncludeError: If the rule names no axis
        """
        if not rule.values:
            raise AmbiguousIncludeError(rule.as_entry())

        indices = tuple(i for i, job in enumerate(jobs) if job.matches(rule.values))
        if indices:
            return MatchedExisting(indices)
        return NoMatch()

    def merge(self, jobs: Sequence[Job], rules: Sequence[IncludeRule]) -> list[Job]:
        """Apply ``rules`` to ``jobs`` and return the merged job list.

        The input jobs are copied, never modified. Matched jobs keep their
        position; new jobs are appended in rule order. Later rules overwrite
        attributes set by earlier ones.
        """
        merged = [job.copy() for job in jobs]
        appended = 0

        for position, rule in enumerate(rules):
            decision = self.classify(rule, merged)

            if isinstance(decision, MatchedExisting):
                for index in decision.indices:
                    merged[index].attributes.update(rule.attributes)
                logger.debug(
                    "Include rule %d merged into %d jobs",
                    position,
                    len(decision.indices),
                )
            else:
                merged.append(
                    Job(values=dict(rule.values), attributes=dict(rule.attributes))
                )
                appended += 1
                logger.debug("Include rule %d added a new job", position)

        logger.debug(
            "Applied %d include rules: %d jobs, %d new",
            len(rules),
            len(merged),
            appended,
        )
        return merged
